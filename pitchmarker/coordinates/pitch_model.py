"""Pitch configurations with standard youth and senior dimensions."""

from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Dict

import numpy as np
import yaml

YARDS_TO_METERS = 0.9144


@dataclass(frozen=True)
class PitchConfig:
    """Pitch dimensions in yards. A goal area of 0 means the pitch has none."""

    name: str
    length: float
    width: float
    penalty_area_length: float
    penalty_area_width: float
    goal_area_length: float = 0.0
    goal_area_width: float = 0.0
    penalty_spot_distance: float = 0.0
    center_circle_radius: float = 0.0

    def __post_init__(self):
        if self.length <= 0 or self.width <= 0:
            raise ValueError(f"{self.name}: pitch dimensions must be positive")
        if self.penalty_area_length < 0 or self.penalty_area_width < 0:
            raise ValueError(f"{self.name}: penalty area cannot be negative")
        if self.goal_area_length < 0 or self.goal_area_width < 0:
            raise ValueError(f"{self.name}: goal area cannot be negative")
        if self.has_goal_area:
            if self.goal_area_length > self.penalty_area_length:
                raise ValueError(f"{self.name}: goal area deeper than penalty area")
            if self.goal_area_width > self.penalty_area_width:
                raise ValueError(f"{self.name}: goal area wider than penalty area")

    @property
    def has_goal_area(self) -> bool:
        return self.goal_area_length > 0 and self.goal_area_width > 0

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


PITCH_CONFIGS: Dict[str, PitchConfig] = {
    '5v5': PitchConfig(
        name='5v5 Mini Soccer',
        length=40, width=30,
        penalty_area_length=9, penalty_area_width=16,
        penalty_spot_distance=6.5, center_circle_radius=3
    ),
    '7v7': PitchConfig(
        name='7v7 Mini Soccer',
        length=60, width=40,
        penalty_area_length=10, penalty_area_width=18,
        penalty_spot_distance=8, center_circle_radius=6
    ),
    '9v9': PitchConfig(
        name='9v9 Youth',
        length=80, width=50,
        penalty_area_length=13, penalty_area_width=32,
        goal_area_length=4, goal_area_width=14,
        penalty_spot_distance=9, center_circle_radius=8
    ),
    '11v11-u13': PitchConfig(
        name='11v11 U13-U14',
        length=90, width=55,
        penalty_area_length=14, penalty_area_width=35,
        goal_area_length=5, goal_area_width=16,
        penalty_spot_distance=12, center_circle_radius=10
    ),
    '11v11-u15': PitchConfig(
        name='11v11 U15-U16',
        length=100, width=60,
        penalty_area_length=18, penalty_area_width=44,
        goal_area_length=6, goal_area_width=20,
        penalty_spot_distance=12, center_circle_radius=10
    ),
    '11v11-senior': PitchConfig(
        name='11v11 Senior',
        length=110, width=70,
        penalty_area_length=18, penalty_area_width=44,
        goal_area_length=6, goal_area_width=20,
        penalty_spot_distance=12, center_circle_radius=10
    ),
}


def get_pitch_config(size: str, configs: Dict[str, PitchConfig] = None) -> PitchConfig:
    """Look up a pitch configuration by size key."""
    configs = PITCH_CONFIGS if configs is None else configs
    try:
        return configs[size]
    except KeyError:
        raise ValueError(
            f"Unknown pitch size: {size}. Valid sizes: {list(configs.keys())}"
        ) from None


def load_pitch_configs(path: str) -> Dict[str, PitchConfig]:
    """
    Load extra pitch sizes from a YAML mapping of size key -> dimensions.

    The built-in sizes are included; entries in the file override them.
    """
    with open(Path(path), 'r') as f:
        raw = yaml.safe_load(f) or {}

    configs = dict(PITCH_CONFIGS)
    for size, dims in raw.items():
        configs[str(size)] = PitchConfig(**dims)
    return configs


class PitchModel:
    """Pitch landmarks in local meters, origin at the pitch center."""

    def __init__(self, config: PitchConfig):
        self.config = config
        self.length = config.length * YARDS_TO_METERS
        self.width = config.width * YARDS_TO_METERS
        self.half_length = self.length / 2
        self.half_width = self.width / 2

        self.dimensions = self._create_dimensions()
        self.landmarks = self._create_landmarks()

    def _create_dimensions(self) -> Dict[str, float]:
        """Box and marking dimensions converted to meters."""
        c = self.config
        return {
            'length': self.length,
            'width': self.width,
            'penalty_area_length': c.penalty_area_length * YARDS_TO_METERS,
            'penalty_area_width': c.penalty_area_width * YARDS_TO_METERS,
            'goal_area_length': c.goal_area_length * YARDS_TO_METERS,
            'goal_area_width': c.goal_area_width * YARDS_TO_METERS,
            'center_circle_radius': c.center_circle_radius * YARDS_TO_METERS,
            'penalty_spot_distance': c.penalty_spot_distance * YARDS_TO_METERS,
        }

    def _create_landmarks(self) -> Dict[str, np.ndarray]:
        spot = self.dimensions['penalty_spot_distance']
        return {
            'center': np.array([0.0, 0.0]),
            'corners': np.array([
                [-self.half_length, -self.half_width],
                [self.half_length, -self.half_width],
                [self.half_length, self.half_width],
                [-self.half_length, self.half_width]
            ]),
            'penalty_spots': np.array([
                [-self.half_length + spot, 0.0],
                [self.half_length - spot, 0.0]
            ])
        }

    def box(self, depth: float, width: float, side: str) -> np.ndarray:
        """Corners of a box on the left or right goal line, in meters."""
        x_goal = -self.half_length if side == 'left' else self.half_length
        x_inner = x_goal + depth if side == 'left' else x_goal - depth
        return np.array([
            [x_goal, -width / 2],
            [x_inner, -width / 2],
            [x_inner, width / 2],
            [x_goal, width / 2]
        ])

    def get_pitch_boundaries(self) -> np.ndarray:
        """Get pitch boundary corners."""
        return self.landmarks['corners']
