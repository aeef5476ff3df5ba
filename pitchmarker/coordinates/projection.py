"""Local tangent-plane projection between lat/lng and meter offsets.

Equirectangular flat-earth approximation. Good for the few hundred meters a
pitch spans; do not use it for long-range navigation.
"""

import math
from dataclasses import dataclass
from typing import Tuple

METERS_PER_DEGREE = 111320.0


@dataclass(frozen=True)
class GeoPoint:
    """Geodetic point in degrees."""

    lat: float
    lng: float

    def is_close(self, other: 'GeoPoint', eps: float = 1e-9) -> bool:
        return abs(self.lat - other.lat) <= eps and abs(self.lng - other.lng) <= eps

    def to_lng_lat(self) -> Tuple[float, float]:
        """GeoJSON coordinate order."""
        return (self.lng, self.lat)

    def to_dict(self) -> dict:
        return {'lat': self.lat, 'lng': self.lng}

    @classmethod
    def from_dict(cls, data: dict) -> 'GeoPoint':
        return cls(lat=float(data['lat']), lng=float(data['lng']))


def _meters_per_degree_lng(lat: float) -> float:
    return METERS_PER_DEGREE * math.cos(math.radians(lat))


def from_offset(origin: GeoPoint, dx: float, dy: float) -> GeoPoint:
    """
    Move origin by dx meters east and dy meters north.

    Args:
        origin: Reference point
        dx: East offset in meters
        dy: North offset in meters

    Returns:
        The offset point
    """
    return GeoPoint(
        lat=origin.lat + dy / METERS_PER_DEGREE,
        lng=origin.lng + dx / _meters_per_degree_lng(origin.lat)
    )


def to_offset(origin: GeoPoint, point: GeoPoint) -> Tuple[float, float]:
    """Inverse of from_offset: (dx, dy) in meters from origin to point."""
    dx = (point.lng - origin.lng) * _meters_per_degree_lng(origin.lat)
    dy = (point.lat - origin.lat) * METERS_PER_DEGREE
    return dx, dy


def midpoint(p1: GeoPoint, p2: GeoPoint) -> GeoPoint:
    """Coordinate-wise midpoint; exact enough at pitch scale."""
    return GeoPoint(lat=(p1.lat + p2.lat) / 2, lng=(p1.lng + p2.lng) / 2)
