"""
geodesy.py: Great-circle distance and bearing between GPS coordinates.
"""

from math import radians, degrees, sin, cos, sqrt, atan2
from typing import Optional

from pitchmarker.coordinates.projection import GeoPoint

EARTH_RADIUS_M = 6_371_000


def distance(p1: GeoPoint, p2: GeoPoint) -> float:
    """
    Returns horizontal distance in meters between two GPS coordinates.
    """
    phi1, phi2 = radians(p1.lat), radians(p2.lat)
    dphi = radians(p2.lat - p1.lat)
    dlam = radians(p2.lng - p1.lng)
    a = sin(dphi / 2) ** 2 + cos(phi1) * cos(phi2) * sin(dlam / 2) ** 2
    return EARTH_RADIUS_M * 2 * atan2(sqrt(a), sqrt(1 - a))


def bearing(p1: GeoPoint, p2: GeoPoint) -> float:
    """
    Initial great-circle bearing from p1 to p2 in degrees [0, 360).
    Coincident points give 0.
    """
    phi1, phi2 = radians(p1.lat), radians(p2.lat)
    dlam = radians(p2.lng - p1.lng)
    y = sin(dlam) * cos(phi2)
    x = cos(phi1) * sin(phi2) - sin(phi1) * cos(phi2) * cos(dlam)
    return (degrees(atan2(y, x)) + 360) % 360


def relative_bearing(target_bearing: float, heading: Optional[float]) -> float:
    """Arrow rotation for a compass: target bearing relative to heading."""
    return (target_bearing - (heading or 0.0)) % 360
