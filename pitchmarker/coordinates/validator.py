"""Geometry validation for pitches placed on the ground."""

import numpy as np
from typing import Sequence, Tuple

from pitchmarker.coordinates.pitch_model import PitchConfig, YARDS_TO_METERS
from pitchmarker.coordinates.projection import GeoPoint, to_offset
from pitchmarker.navigation.geodesy import distance


class PitchValidator:
    """Check that placed corners form the configured rectangle."""

    def __init__(self, rel_tolerance: float = 0.002, angle_tolerance_deg: float = 0.5):
        self.rel_tolerance = rel_tolerance
        self.angle_tolerance_deg = angle_tolerance_deg

    def side_lengths(self, corners: Sequence[GeoPoint]) -> np.ndarray:
        """Great-circle lengths of sides 0-1, 1-2, 2-3, 3-0 in meters."""
        return np.array([
            distance(corners[i], corners[(i + 1) % 4]) for i in range(4)
        ])

    def corner_angles(self, corners: Sequence[GeoPoint]) -> np.ndarray:
        """Interior angle at each corner in degrees."""
        origin = corners[0]
        pts = np.array([to_offset(origin, c) for c in corners])
        angles = []
        for i in range(4):
            v1 = pts[i - 1] - pts[i]
            v2 = pts[(i + 1) % 4] - pts[i]
            cos_angle = np.dot(v1, v2) / (np.linalg.norm(v1) * np.linalg.norm(v2))
            angles.append(np.degrees(np.arccos(np.clip(cos_angle, -1.0, 1.0))))
        return np.array(angles)

    def validate_corners(self, corners: Sequence[GeoPoint],
                         config: PitchConfig) -> Tuple[bool, str]:
        """Validate corner count, side lengths and right angles."""
        if corners is None:
            return False, "Corners are None"

        if len(corners) != 4:
            return False, f"Invalid corner count: {len(corners)}"

        length_m = config.length * YARDS_TO_METERS
        width_m = config.width * YARDS_TO_METERS
        expected = np.array([length_m, width_m, length_m, width_m])
        errors = np.abs(self.side_lengths(corners) - expected) / expected
        if np.any(errors > self.rel_tolerance):
            return False, f"Side length off by {errors.max() * 100:.2f}%"

        angles = self.corner_angles(corners)
        if np.any(np.abs(angles - 90.0) > self.angle_tolerance_deg):
            return False, "Corners are not square"

        return True, "Valid"

    def is_within_pitch(self, point: GeoPoint, corners: Sequence[GeoPoint]) -> bool:
        """Check if a point lies inside (or on) the pitch outline."""
        origin = corners[0]
        p = np.array(to_offset(origin, point))
        pts = np.array([to_offset(origin, c) for c in corners])
        signs = []
        for i in range(4):
            edge = pts[(i + 1) % 4] - pts[i]
            rel = p - pts[i]
            signs.append(edge[0] * rel[1] - edge[1] * rel[0])
        signs = np.array(signs)
        return bool(np.all(signs >= -1e-9) or np.all(signs <= 1e-9))
