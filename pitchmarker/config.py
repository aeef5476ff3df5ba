"""
Configuration management for Pitch Marker
"""

import copy
from pathlib import Path
from typing import Any, Dict, Optional

import yaml


DEFAULT_CONFIG = {
    "navigation": {
        "min_threshold_m": 2.0
    },
    "gps": {
        "excellent_accuracy_m": 5.0,
        "good_accuracy_m": 10.0
    },
    "storage": {
        "sites_file": "data/pitch_marker_sites.json",
        "marked_pitches_file": "data/marked_pitches.json"
    },
    "diagram": {
        "width": 440,
        "height": 320,
        "margin": 40,
        "background": [34, 110, 34],
        "line_color": [255, 255, 255],
        "marker_radius": 10
    },
    "logging": {
        "level": "INFO",
        "log_dir": "logs",
        "log_to_file": False
    }
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override into base (in place)."""
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        else:
            base[key] = value
    return base


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from a YAML file on top of the defaults.

    Args:
        path: Optional path to a YAML file. Missing files are ignored.

    Returns:
        A new configuration dictionary
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    if path is None or not Path(path).exists():
        return config

    with open(path, 'r') as f:
        overrides = yaml.safe_load(f) or {}

    if not isinstance(overrides, dict):
        raise ValueError(f"Config file {path} must contain a mapping")

    return _merge(config, overrides)


def save_config(config: Dict[str, Any], path: str):
    """Write a configuration dictionary to YAML."""
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        yaml.safe_dump(config, f, default_flow_style=False, sort_keys=False)
