"""Pitch context: which pitch, where it is anchored and how it is rotated."""

from dataclasses import dataclass, replace
from typing import Optional, Tuple, Union

from pitchmarker.coordinates.geometry import (
    Anchor,
    CenterAnchor,
    CornerAnchor,
    CornerRole,
    PitchCorners,
    calculate_pitch_corners,
    clamp_rotation,
    resolve_center,
    to_center_anchor,
    to_corner_anchor,
)
from pitchmarker.coordinates.pitch_model import PitchConfig
from pitchmarker.coordinates.projection import GeoPoint
from pitchmarker.navigation.waypoints import Waypoint, generate_waypoints


@dataclass(frozen=True)
class PitchContext:
    """
    Immutable pitch placement.

    Every operation returns a new context. Geometry queries return None
    while no pitch or anchor has been set.
    """

    config: Optional[PitchConfig] = None
    anchor: Optional[Anchor] = None
    rotation: int = 0

    def __post_init__(self):
        object.__setattr__(self, 'rotation', clamp_rotation(self.rotation))

    @property
    def is_ready(self) -> bool:
        return self.config is not None and self.anchor is not None

    @property
    def is_corner_locked(self) -> bool:
        return isinstance(self.anchor, CornerAnchor)

    @property
    def pitch_name(self) -> Optional[str]:
        return self.config.name if self.config else None

    def with_config(self, config: PitchConfig) -> 'PitchContext':
        """Select a pitch size, keeping the current center."""
        if self.is_ready and self.is_corner_locked:
            center = self.center()
            return replace(self, config=config, anchor=CenterAnchor(center))
        return replace(self, config=config)

    def with_rotation(self, rotation: Union[int, float, str]) -> 'PitchContext':
        return replace(self, rotation=clamp_rotation(rotation))

    def with_center(self, center: GeoPoint) -> 'PitchContext':
        """Place the pitch by its center (drops any corner lock)."""
        return replace(self, anchor=CenterAnchor(center))

    def lock_corner(self, point: Optional[GeoPoint] = None,
                    role: Union[str, CornerRole] = CornerRole.BOTTOM_LEFT) -> 'PitchContext':
        """
        Switch to corner mode.

        With a point (usually the live GPS fix) that corner is pinned to the
        point. Without one the corner implied by the current placement is
        captured so the pitch does not move.
        """
        role = CornerRole.parse(role)
        if point is not None:
            return replace(self, anchor=CornerAnchor(point, role))
        if not self.is_ready:
            return self
        return replace(self, anchor=to_corner_anchor(self.anchor, self.config,
                                                     self.rotation, role))

    def unlock_corner(self) -> 'PitchContext':
        """Back to center mode, keeping the pitch where it is."""
        if not self.is_ready or not self.is_corner_locked:
            return self
        return replace(self, anchor=to_center_anchor(self.anchor, self.config,
                                                     self.rotation))

    def with_corner_role(self, role: Union[str, CornerRole]) -> 'PitchContext':
        """Re-interpret the locked point as a different corner."""
        role = CornerRole.parse(role)
        if not self.is_corner_locked:
            return self
        return replace(self, anchor=CornerAnchor(self.anchor.point, role))

    def track_fix(self, point: GeoPoint) -> 'PitchContext':
        """Follow a live position while a corner is locked."""
        if not self.is_corner_locked:
            return self
        return replace(self, anchor=CornerAnchor(point, self.anchor.role))

    def center(self) -> Optional[GeoPoint]:
        if not self.is_ready:
            return None
        return resolve_center(self.anchor, self.config, self.rotation)

    def corners(self) -> Optional[PitchCorners]:
        if not self.is_ready:
            return None
        return calculate_pitch_corners(self.center(), self.config, self.rotation)

    def waypoints(self) -> Optional[Tuple[Waypoint, ...]]:
        corners = self.corners()
        if corners is None:
            return None
        return generate_waypoints(corners, self.config, self.rotation)
