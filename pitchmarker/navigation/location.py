"""
location.py: Location fixes and the push source that delivers them.

A LocationProvider pushes fixes to one handler per subscription. Cancelling a
subscription stops delivery immediately; a provider failure is reported to
the error handler and never raised to the caller.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional

from pitchmarker.coordinates.projection import GeoPoint

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LocationFix:
    lat: float
    lng: float
    accuracy: float                     # meters, 1 sigma
    heading: Optional[float] = None     # degrees from north, None if unknown
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def point(self) -> GeoPoint:
        return GeoPoint(self.lat, self.lng)

    def to_dict(self) -> dict:
        return {
            "lat": self.lat,
            "lng": self.lng,
            "accuracy": self.accuracy,
            "heading": self.heading,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "LocationFix":
        return cls(
            lat=float(data["lat"]),
            lng=float(data["lng"]),
            accuracy=float(data["accuracy"]),
            heading=data.get("heading"),
            timestamp=datetime.fromisoformat(data["timestamp"]),
        )


class GpsQuality(Enum):
    NO_FIX    = "no-fix"
    FAIR      = "fair"
    GOOD      = "good"
    EXCELLENT = "excellent"


def gps_quality(fix: Optional[LocationFix], excellent_m: float = 5.0,
                good_m: float = 10.0) -> GpsQuality:
    if fix is None:
        return GpsQuality.NO_FIX
    if fix.accuracy < excellent_m:
        return GpsQuality.EXCELLENT
    if fix.accuracy < good_m:
        return GpsQuality.GOOD
    return GpsQuality.FAIR


FixHandler = Callable[[LocationFix], None]
ErrorHandler = Callable[[Exception], None]


class LocationSubscription:
    """Handle returned by LocationProvider.subscribe."""

    def __init__(self, provider: "LocationProvider", on_fix: FixHandler,
                 on_error: Optional[ErrorHandler] = None):
        self._provider = provider
        self._on_fix = on_fix
        self._on_error = on_error
        self.active = True

    def deliver(self, fix: LocationFix):
        if self.active:
            self._on_fix(fix)

    def deliver_error(self, error: Exception):
        if self.active and self._on_error is not None:
            self._on_error(error)

    def cancel(self):
        if not self.active:
            return
        self.active = False
        self._provider._remove(self)


class LocationProvider:
    """Abstract push source of location fixes."""

    def subscribe(self, on_fix: FixHandler,
                  on_error: Optional[ErrorHandler] = None) -> LocationSubscription:
        raise NotImplementedError

    def _remove(self, subscription: LocationSubscription):
        raise NotImplementedError


class LocationFeed(LocationProvider):
    """
    In-memory provider. Whoever owns the GPS (a device bridge, a replay
    file, a test) calls push() and fail().
    """

    def __init__(self):
        self._subscriptions: List[LocationSubscription] = []
        self.last_fix: Optional[LocationFix] = None

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def subscribe(self, on_fix: FixHandler,
                  on_error: Optional[ErrorHandler] = None) -> LocationSubscription:
        sub = LocationSubscription(self, on_fix, on_error)
        self._subscriptions.append(sub)
        logger.debug("Location subscription added (%d active)", len(self._subscriptions))
        return sub

    def _remove(self, subscription: LocationSubscription):
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)
            logger.debug("Location subscription removed (%d active)",
                         len(self._subscriptions))

    def push(self, fix: LocationFix):
        self.last_fix = fix
        for sub in list(self._subscriptions):
            sub.deliver(fix)

    def fail(self, error: Exception):
        logger.warning("Location provider error: %s", error)
        for sub in list(self._subscriptions):
            sub.deliver_error(error)
