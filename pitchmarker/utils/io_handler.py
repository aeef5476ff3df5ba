"""I/O handling for JSON records and diagram images."""

import cv2
import json
import numpy as np
from pathlib import Path
from typing import Any


class JSONWriter:
    """Write and read JSON records."""

    @staticmethod
    def save_results(output: Any, output_path: str, indent: int = 2):
        """Save results to JSON file."""
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, 'w') as f:
            json.dump(output, f, indent=indent)

    @staticmethod
    def load_results(input_path: str, default: Any = None) -> Any:
        """Load results from JSON file, or default if it does not exist."""
        if not Path(input_path).exists():
            return default
        with open(input_path, 'r') as f:
            return json.load(f)


def save_image(image: np.ndarray, output_path: str):
    """Save image to file."""
    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    cv2.imwrite(output_path, image)
