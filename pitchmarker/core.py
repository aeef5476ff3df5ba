"""
Pitch Marker Core
Foreground control flow: position a pitch, then walk its waypoints
"""

import logging
from datetime import datetime
from typing import Any, AsyncIterator, Dict, List, Optional, Union

from pitchmarker.config import DEFAULT_CONFIG
from pitchmarker.coordinates.context import PitchContext
from pitchmarker.coordinates.geometry import CornerRole, PitchCorners
from pitchmarker.coordinates.pitch_model import PitchConfig
from pitchmarker.coordinates.projection import GeoPoint
from pitchmarker.navigation import session as nav
from pitchmarker.navigation.location import (
    GpsQuality,
    LocationFix,
    LocationProvider,
    LocationSubscription,
    gps_quality,
)
from pitchmarker.navigation.session import (
    MarkingSummary,
    NavigationPhase,
    NavigationReading,
    NavigationSession,
    WaypointStatus,
)
from pitchmarker.sites.store import SiteStore
from pitchmarker.utils.metrics import MarkingMetrics

logger = logging.getLogger(__name__)


class MarkingController:
    """
    Owns the one pitch context, the one navigation session, the latest
    location fix and at most one location subscription.
    """

    def __init__(self, provider: LocationProvider, config: Dict[str, Any] = None,
                 store: Optional[SiteStore] = None,
                 context: Optional[PitchContext] = None):
        """
        Initialize the controller

        Args:
            provider: Source of location fixes
            config: Configuration dictionary (optional)
            store: Where finished markings are saved (optional)
            context: Initial pitch placement (optional)
        """
        self.config = config or DEFAULT_CONFIG
        self.provider = provider
        self.store = store
        self.context = context or PitchContext()
        self.session: Optional[NavigationSession] = None
        self.current_location: Optional[LocationFix] = None
        self.reading: Optional[NavigationReading] = None
        self._subscription: Optional[LocationSubscription] = None
        self._generation = 0

        self.min_threshold = self.config['navigation']['min_threshold_m']

    # =====================================================================
    # SUBSCRIPTION
    # =====================================================================

    @property
    def is_subscribed(self) -> bool:
        return self._subscription is not None and self._subscription.active

    def _subscribe(self):
        self._unsubscribe()
        self._generation += 1
        self._subscription = self.provider.subscribe(self.handle_fix, self.handle_error)
        logger.info("Location tracking started")

    def _unsubscribe(self):
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None
            self._generation += 1
            logger.info("Location tracking stopped")

    def start_tracking(self):
        """Track location while positioning the pitch (corner lock)."""
        self._subscribe()

    def stop_tracking(self):
        self._unsubscribe()

    async def follow(self, fixes: AsyncIterator[LocationFix]):
        """
        Feed fixes from an async stream until the stream ends or the
        subscription it started under is replaced or torn down.
        """
        generation = self._generation
        async for fix in fixes:
            if generation != self._generation or not self.is_subscribed:
                break
            self.handle_fix(fix)

    # =====================================================================
    # LOCATION EVENTS
    # =====================================================================

    def handle_fix(self, fix: LocationFix):
        self.current_location = fix
        if self.session is None and self.context.is_corner_locked:
            self.context = self.context.track_fix(fix.point)
        self._refresh()

    def handle_error(self, error: Exception):
        logger.warning("No GPS fix: %s", error)
        self.current_location = None
        self._refresh()

    def _refresh(self):
        if self.session is None:
            self.reading = None
            return
        self.reading = nav.evaluate_fix(self.session, self.current_location,
                                        self.min_threshold)

    @property
    def gps_quality(self) -> GpsQuality:
        gps = self.config['gps']
        return gps_quality(self.current_location, gps['excellent_accuracy_m'],
                           gps['good_accuracy_m'])

    # =====================================================================
    # POSITIONING
    # =====================================================================

    def select_pitch(self, config: PitchConfig, center: Optional[GeoPoint] = None):
        self.context = self.context.with_config(config)
        if center is not None:
            self.context = self.context.with_center(center)

    def set_center(self, center: GeoPoint):
        self.context = self.context.with_center(center)

    def set_rotation(self, rotation: Union[int, float, str]):
        self.context = self.context.with_rotation(rotation)

    def lock_corner(self, role: Union[str, CornerRole] = CornerRole.BOTTOM_LEFT):
        """Pin a corner to the current fix, or to where it is now without one."""
        point = self.current_location.point if self.current_location else None
        before = self.context.anchor
        self.context = self.context.lock_corner(point, role)
        if self.context.anchor != before:
            logger.info("Corner lock on %s", CornerRole.parse(role).value)

    def set_corner_role(self, role: Union[str, CornerRole]):
        self.context = self.context.with_corner_role(role)

    def unlock_corner(self):
        self.context = self.context.unlock_corner()

    @property
    def corners(self) -> Optional[PitchCorners]:
        return self.context.corners()

    # =====================================================================
    # MARKING
    # =====================================================================

    def begin(self) -> bool:
        """Lock the pitch position and start walking its waypoints."""
        waypoints = self.context.waypoints()
        if waypoints is None:
            logger.warning("Cannot begin marking: pitch is not positioned")
            return False

        self.session = nav.begin(waypoints)
        self._subscribe()
        self._refresh()
        logger.info("Marking %s: %d waypoints", self.context.pitch_name, len(waypoints))
        return True

    def switch_pitch(self, context: PitchContext) -> bool:
        """Replace the pitch being marked. Progress on the old one is lost."""
        self.exit()
        self.context = context
        return self.begin()

    def navigate_to(self, index: int):
        if self.session is None:
            return
        self.session = nav.navigate_to_waypoint(self.session, index)
        self._refresh()

    @property
    def can_mark(self) -> bool:
        if self.session is None:
            return False
        return nav.proximity_gate(self.current_location, self.session.current_waypoint,
                                  self.min_threshold)

    def mark(self, now: Optional[datetime] = None) -> bool:
        """Mark the current waypoint at the latest fix, if close enough."""
        if self.session is None:
            return False
        before = len(self.session.marked_points)
        self.session = nav.mark_current_point(self.session, self.current_location,
                                              now, self.min_threshold)
        self._refresh()
        return len(self.session.marked_points) > before

    @property
    def is_complete(self) -> bool:
        return self.session is not None and self.session.phase == NavigationPhase.COMPLETED

    def statuses(self) -> List[WaypointStatus]:
        if self.session is None:
            return []
        return nav.waypoint_statuses(self.session)

    def finish(self, now: Optional[datetime] = None) -> Optional[MarkingSummary]:
        """Hand the finished marking to the store and end the session."""
        if self.session is None:
            return None
        self.session, summary = nav.finish(self.session, self.context.pitch_name,
                                           self.context.rotation, now)
        if summary is None:
            logger.warning("Cannot finish: %d of %d points marked",
                           nav.completed_count(self.session),
                           len(self.session.waypoints))
            return None

        stats = MarkingMetrics.summarize(summary.marked_points)
        logger.info("Pitch marked: %d points, average accuracy %.1fm",
                    stats['points'], stats['average_accuracy'])
        try:
            if self.store is not None:
                self.store.save_summary(summary)
        finally:
            self._end_session()
        return summary

    def exit(self):
        """Abandon marking. Progress is discarded."""
        if self.session is not None:
            logger.info("Marking exited with %d points marked",
                        len(self.session.marked_points))
        self._end_session()

    def _end_session(self):
        self._unsubscribe()
        self.session = None
        self.reading = None
