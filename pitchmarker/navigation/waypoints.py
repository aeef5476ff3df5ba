"""Waypoint generation from pitch corners."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple

from pitchmarker.coordinates.geometry import PitchCorners, calculate_box_corners, clamp_rotation
from pitchmarker.coordinates.pitch_model import PitchConfig
from pitchmarker.coordinates.projection import GeoPoint, midpoint


class WaypointType(Enum):
    CORNER = 'corner'
    HALFWAY = 'halfway'
    PENALTY = 'penalty'
    GOAL = 'goal'


@dataclass(frozen=True)
class Waypoint:
    """A named point to walk to. The name is its identity."""

    name: str
    type: WaypointType
    lat: float
    lng: float

    @property
    def point(self) -> GeoPoint:
        return GeoPoint(self.lat, self.lng)

    def to_dict(self) -> dict:
        return {
            'name': self.name,
            'type': self.type.value,
            'lat': self.lat,
            'lng': self.lng,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Waypoint':
        return cls(
            name=data['name'],
            type=WaypointType(data['type']),
            lat=float(data['lat']),
            lng=float(data['lng']),
        )


CORNER_NAMES = (
    'Corner 1 (Bottom-Left)',
    'Corner 2 (Bottom-Right)',
    'Corner 3 (Top-Right)',
    'Corner 4 (Top-Left)',
)

DIAGRAM_LABELS: Dict[str, str] = {
    'Corner 1 (Bottom-Left)': '1',
    'Corner 2 (Bottom-Right)': '2',
    'Corner 3 (Top-Right)': '3',
    'Corner 4 (Top-Left)': '4',
    'Halfway Line (Bottom)': 'H1',
    'Halfway Line (Top)': 'H2',
    'Left Penalty Area (Bottom)': 'P1',
    'Left Penalty Area (Top)': 'P2',
    'Right Penalty Area (Bottom)': 'P3',
    'Right Penalty Area (Top)': 'P4',
    'Left Goal Area (Bottom)': 'G1',
    'Left Goal Area (Top)': 'G2',
    'Right Goal Area (Bottom)': 'G3',
    'Right Goal Area (Top)': 'G4',
}


def _waypoint(name: str, wp_type: WaypointType, point: GeoPoint) -> Waypoint:
    return Waypoint(name=name, type=wp_type, lat=point.lat, lng=point.lng)


def _box_waypoints(corners: PitchCorners, depth: float, width: float,
                   rotation: float, label: str,
                   wp_type: WaypointType) -> Tuple[Waypoint, ...]:
    box = calculate_box_corners(corners, depth, width, rotation)
    return (
        _waypoint(f'Left {label} (Bottom)', wp_type, box.left[0]),
        _waypoint(f'Left {label} (Top)', wp_type, box.left[1]),
        _waypoint(f'Right {label} (Bottom)', wp_type, box.right[0]),
        _waypoint(f'Right {label} (Top)', wp_type, box.right[1]),
    )


def generate_waypoints(corners: PitchCorners, config: PitchConfig,
                       rotation: float) -> Tuple[Waypoint, ...]:
    """
    Build the ordered list of points to mark.

    Order: the four corners, both halfway line ends, the penalty area
    corners and, when the pitch has one, the goal area corners. Same inputs
    always give the same names in the same order.

    Args:
        corners: Pitch corners (bottom-left, bottom-right, top-right, top-left)
        config: Pitch dimensions
        rotation: Pitch rotation in degrees

    Returns:
        10 waypoints, or 14 when the pitch has a goal area
    """
    if len(corners) != 4:
        raise ValueError(f"Expected 4 pitch corners, got {len(corners)}")

    rotation = clamp_rotation(rotation)
    points = [
        _waypoint(name, WaypointType.CORNER, corner)
        for name, corner in zip(CORNER_NAMES, corners)
    ]

    # Halfway line ends sit on the touchlines.
    points.append(_waypoint('Halfway Line (Bottom)', WaypointType.HALFWAY,
                            midpoint(corners[0], corners[1])))
    points.append(_waypoint('Halfway Line (Top)', WaypointType.HALFWAY,
                            midpoint(corners[2], corners[3])))

    points.extend(_box_waypoints(corners, config.penalty_area_length,
                                 config.penalty_area_width, rotation,
                                 'Penalty Area', WaypointType.PENALTY))

    if config.has_goal_area:
        points.extend(_box_waypoints(corners, config.goal_area_length,
                                     config.goal_area_width, rotation,
                                     'Goal Area', WaypointType.GOAL))

    return tuple(points)


def diagram_label(waypoint: Waypoint) -> str:
    """Short label used on pitch diagrams."""
    return DIAGRAM_LABELS.get(waypoint.name, '?')
