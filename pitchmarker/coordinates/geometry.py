"""Pitch geometry engine: pitch corners and box corners on the ground."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Sequence, Tuple, Union

import numpy as np

from pitchmarker.coordinates.pitch_model import PitchConfig, YARDS_TO_METERS
from pitchmarker.coordinates.projection import GeoPoint, from_offset, midpoint

logger = logging.getLogger(__name__)

# Always [bottom-left, bottom-right, top-right, top-left].
PitchCorners = Tuple[GeoPoint, GeoPoint, GeoPoint, GeoPoint]

MAX_ROTATION = 359


class CornerRole(Enum):
    BOTTOM_LEFT = 'bottom-left'
    BOTTOM_RIGHT = 'bottom-right'
    TOP_RIGHT = 'top-right'
    TOP_LEFT = 'top-left'

    @property
    def index(self) -> int:
        """Position of this corner in PitchCorners."""
        return _ROLE_ORDER.index(self)

    @property
    def center_offset(self) -> Tuple[float, float]:
        """(length, width) multipliers from this corner to the center."""
        return _CENTER_OFFSETS[self]

    @classmethod
    def parse(cls, value: Union[str, 'CornerRole']) -> 'CornerRole':
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ValueError(
                f"Unknown corner role: {value}. Valid roles: {[r.value for r in cls]}"
            ) from None


_ROLE_ORDER = [
    CornerRole.BOTTOM_LEFT,
    CornerRole.BOTTOM_RIGHT,
    CornerRole.TOP_RIGHT,
    CornerRole.TOP_LEFT,
]

_CENTER_OFFSETS = {
    CornerRole.BOTTOM_LEFT: (0.5, 0.5),
    CornerRole.BOTTOM_RIGHT: (-0.5, 0.5),
    CornerRole.TOP_RIGHT: (-0.5, -0.5),
    CornerRole.TOP_LEFT: (0.5, -0.5),
}


@dataclass(frozen=True)
class CenterAnchor:
    """Pitch positioned by its geometric center."""

    point: GeoPoint


@dataclass(frozen=True)
class CornerAnchor:
    """Pitch positioned by one locked corner."""

    point: GeoPoint
    role: CornerRole = CornerRole.BOTTOM_LEFT


Anchor = Union[CenterAnchor, CornerAnchor]


@dataclass(frozen=True)
class BoxCorners:
    """Corners of the left and right boxes, each as (bottom, top)."""

    left: Tuple[GeoPoint, GeoPoint]
    right: Tuple[GeoPoint, GeoPoint]


def clamp_rotation(value: Any) -> int:
    """Coerce any rotation input to an integer in [0, 359]."""
    try:
        rotation = int(float(value))
    except (TypeError, ValueError, OverflowError):
        logger.debug("Invalid rotation %r, using 0", value)
        return 0
    return max(0, min(MAX_ROTATION, rotation))


def _rotation_matrix(rotation_degrees: float) -> np.ndarray:
    theta = np.radians(rotation_degrees)
    return np.array([
        [np.cos(theta), -np.sin(theta)],
        [np.sin(theta), np.cos(theta)]
    ])


def _rotate(offsets: np.ndarray, rotation_degrees: float) -> np.ndarray:
    """Rotate (N, 2) meter offsets about the origin."""
    return offsets @ _rotation_matrix(rotation_degrees).T


def _check_corners(corners: Sequence[GeoPoint]):
    if len(corners) != 4:
        raise ValueError(f"Expected 4 pitch corners, got {len(corners)}")


def calculate_pitch_corners(center: GeoPoint, config: PitchConfig,
                            rotation_degrees: float) -> PitchCorners:
    """
    Calculate the four pitch corners around a center point.

    Args:
        center: Geometric center of the pitch
        config: Pitch dimensions (yards)
        rotation_degrees: Pitch rotation in degrees

    Returns:
        Corners in the order bottom-left, bottom-right, top-right, top-left
    """
    rotation_degrees = clamp_rotation(rotation_degrees)
    half_length = config.length * YARDS_TO_METERS / 2
    half_width = config.width * YARDS_TO_METERS / 2

    offsets = np.array([
        [-half_length, -half_width],
        [half_length, -half_width],
        [half_length, half_width],
        [-half_length, half_width]
    ])
    rotated = _rotate(offsets, rotation_degrees)

    return tuple(from_offset(center, float(dx), float(dy)) for dx, dy in rotated)


def calculate_center_from_corner(corner: GeoPoint, config: PitchConfig,
                                 rotation_degrees: float,
                                 role: Union[str, CornerRole]) -> GeoPoint:
    """
    Calculate the pitch center from one known corner.

    Args:
        corner: Position of the corner
        config: Pitch dimensions (yards)
        rotation_degrees: Pitch rotation in degrees
        role: Which corner the position represents

    Returns:
        The pitch center
    """
    rotation_degrees = clamp_rotation(rotation_degrees)
    role = CornerRole.parse(role)
    length_mult, width_mult = role.center_offset
    offset = np.array([[
        config.length * YARDS_TO_METERS * length_mult,
        config.width * YARDS_TO_METERS * width_mult
    ]])
    dx, dy = _rotate(offset, rotation_degrees)[0]
    return from_offset(corner, float(dx), float(dy))


def calculate_box_corners(corners: Sequence[GeoPoint], depth_yards: float,
                          width_yards: float, rotation_degrees: float) -> BoxCorners:
    """
    Calculate the corners of a box inset from each goal line.

    Each box is centered on its goal line, reaches depth_yards into the
    pitch and spans width_yards along the goal line. Bottom corners lie on
    the side of the bottom touchline.
    """
    _check_corners(corners)
    rotation_degrees = clamp_rotation(rotation_degrees)
    depth = depth_yards * YARDS_TO_METERS
    half_width = width_yards * YARDS_TO_METERS / 2

    # Unit vectors along the length (towards the right goal) and the width
    # (towards the top touchline) after rotation.
    along_length, along_width = _rotate(np.eye(2), rotation_degrees)

    left_goal = midpoint(corners[0], corners[3])
    right_goal = midpoint(corners[1], corners[2])

    def _offset(origin: GeoPoint, inward: float, side: float) -> GeoPoint:
        dx, dy = inward * along_length + side * along_width
        return from_offset(origin, float(dx), float(dy))

    return BoxCorners(
        left=(_offset(left_goal, depth, -half_width),
              _offset(left_goal, depth, half_width)),
        right=(_offset(right_goal, -depth, -half_width),
               _offset(right_goal, -depth, half_width)),
    )


def resolve_center(anchor: Anchor, config: PitchConfig,
                   rotation_degrees: float) -> GeoPoint:
    """Center implied by any anchor."""
    if isinstance(anchor, CenterAnchor):
        return anchor.point
    if isinstance(anchor, CornerAnchor):
        return calculate_center_from_corner(anchor.point, config,
                                            rotation_degrees, anchor.role)
    raise TypeError(f"Unsupported anchor: {anchor!r}")


def to_center_anchor(anchor: Anchor, config: PitchConfig,
                     rotation_degrees: float) -> CenterAnchor:
    """Switch to center mode without moving the pitch."""
    return CenterAnchor(resolve_center(anchor, config, rotation_degrees))


def to_corner_anchor(anchor: Anchor, config: PitchConfig,
                     rotation_degrees: float,
                     role: Union[str, CornerRole]) -> CornerAnchor:
    """Switch to corner mode on the given role without moving the pitch."""
    role = CornerRole.parse(role)
    center = resolve_center(anchor, config, rotation_degrees)
    corners = calculate_pitch_corners(center, config, rotation_degrees)
    return CornerAnchor(point=corners[role.index], role=role)
