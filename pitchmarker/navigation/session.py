"""
session.py: Waypoint navigation state machine.

  PENDING → ACTIVE → COMPLETED → FINISHED

A NavigationSession is an immutable value. Every transition takes a session
and returns a new one; calls that are not allowed in the current phase (or
that fail the proximity gate) return the session unchanged.
"""

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Sequence, Set, Tuple

from pitchmarker.navigation.geodesy import bearing, distance, relative_bearing
from pitchmarker.navigation.location import LocationFix
from pitchmarker.navigation.waypoints import Waypoint

logger = logging.getLogger(__name__)

MIN_THRESHOLD_M = 2.0


class NavigationPhase(Enum):
    PENDING   = "PENDING"
    ACTIVE    = "ACTIVE"
    COMPLETED = "COMPLETED"
    FINISHED  = "FINISHED"


_ALLOWED: Dict[NavigationPhase, Set[NavigationPhase]] = {
    NavigationPhase.PENDING:   {NavigationPhase.ACTIVE},
    NavigationPhase.ACTIVE:    {NavigationPhase.COMPLETED},
    NavigationPhase.COMPLETED: {NavigationPhase.FINISHED},
    NavigationPhase.FINISHED:  set(),
}


class WaypointStatus(Enum):
    COMPLETED  = "completed"
    CURRENT    = "current"
    INCOMPLETE = "incomplete"


@dataclass(frozen=True)
class MarkedPoint:
    waypoint: Waypoint
    actual_location: LocationFix
    timestamp: datetime

    def to_dict(self) -> dict:
        return {
            "waypoint": self.waypoint.to_dict(),
            "actualLocation": self.actual_location.to_dict(),
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class MarkingSummary:
    pitch_name: str
    rotation: int
    marked_points: Tuple[MarkedPoint, ...]
    completed_at: datetime

    @property
    def average_accuracy(self) -> Optional[float]:
        if not self.marked_points:
            return None
        total = sum(mp.actual_location.accuracy for mp in self.marked_points)
        return total / len(self.marked_points)

    def to_dict(self) -> dict:
        return {
            "pitch": self.pitch_name,
            "rotation": self.rotation,
            "markedPoints": [mp.to_dict() for mp in self.marked_points],
            "completedAt": self.completed_at.isoformat(),
        }


@dataclass(frozen=True)
class NavigationSession:
    waypoints: Tuple[Waypoint, ...] = ()
    marked_points: Tuple[MarkedPoint, ...] = ()
    current_index: int = 0
    phase: NavigationPhase = NavigationPhase.PENDING

    @property
    def current_waypoint(self) -> Optional[Waypoint]:
        if self.phase != NavigationPhase.ACTIVE:
            return None
        if 0 <= self.current_index < len(self.waypoints):
            return self.waypoints[self.current_index]
        return None

    @property
    def marked_names(self) -> Set[str]:
        return {mp.waypoint.name for mp in self.marked_points}


@dataclass(frozen=True)
class NavigationReading:
    """What the user sees for one location fix."""

    target: Waypoint
    distance_m: float
    bearing_deg: float
    relative_bearing_deg: float
    accuracy_m: float
    threshold_m: float
    can_mark: bool

    @property
    def instruction(self) -> str:
        if self.can_mark:
            return "You're close enough! Mark this point."
        return (f"Walk towards the arrow until distance is less than "
                f"{self.threshold_m:.1f}m")


def _transition(session: NavigationSession, to: NavigationPhase,
                **changes) -> NavigationSession:
    if to not in _ALLOWED[session.phase]:
        raise ValueError(f"Illegal transition {session.phase.name} → {to.name}")
    logger.info("Navigation %s → %s", session.phase.name, to.name)
    return replace(session, phase=to, **changes)


# =====================================================================
# PROXIMITY GATE
# =====================================================================

def marking_threshold(accuracy: float, min_threshold: float = MIN_THRESHOLD_M) -> float:
    """Required closeness in meters: the GPS accuracy, never below the floor."""
    return max(min_threshold, accuracy)


def proximity_gate(fix: Optional[LocationFix], waypoint: Optional[Waypoint],
                   min_threshold: float = MIN_THRESHOLD_M) -> bool:
    if fix is None or waypoint is None:
        return False
    d = distance(fix.point, waypoint.point)
    return d < marking_threshold(fix.accuracy, min_threshold)


# =====================================================================
# QUERIES
# =====================================================================

def is_marked(session: NavigationSession, name: str) -> bool:
    return name in session.marked_names


def completed_count(session: NavigationSession) -> int:
    """Waypoints with a mark. Marks whose name matches no waypoint are ignored."""
    marked = session.marked_names
    return sum(1 for wp in session.waypoints if wp.name in marked)


def orphaned_marks(session: NavigationSession) -> List[MarkedPoint]:
    names = {wp.name for wp in session.waypoints}
    return [mp for mp in session.marked_points if mp.waypoint.name not in names]


def waypoint_statuses(session: NavigationSession) -> List[WaypointStatus]:
    marked = session.marked_names
    statuses = []
    for i, wp in enumerate(session.waypoints):
        if wp.name in marked:
            statuses.append(WaypointStatus.COMPLETED)
        elif i == session.current_index and session.phase == NavigationPhase.ACTIVE:
            statuses.append(WaypointStatus.CURRENT)
        else:
            statuses.append(WaypointStatus.INCOMPLETE)
    return statuses


def evaluate_fix(session: NavigationSession, fix: Optional[LocationFix],
                 min_threshold: float = MIN_THRESHOLD_M) -> Optional[NavigationReading]:
    """
    React to one location fix. Pure: the latest fix fully replaces any
    earlier reading. None when there is no fix or nothing to walk to.
    """
    target = session.current_waypoint
    if fix is None or target is None:
        return None

    d = distance(fix.point, target.point)
    b = bearing(fix.point, target.point)
    threshold = marking_threshold(fix.accuracy, min_threshold)
    return NavigationReading(
        target=target,
        distance_m=d,
        bearing_deg=b,
        relative_bearing_deg=relative_bearing(b, fix.heading),
        accuracy_m=fix.accuracy,
        threshold_m=threshold,
        can_mark=d < threshold,
    )


# =====================================================================
# TRANSITIONS
# =====================================================================

def _next_unmarked(waypoints: Sequence[Waypoint], marked: Set[str],
                   after: int) -> Optional[int]:
    """
    First unmarked index after `after`. Only when everything ahead is marked
    does it fall back to the lowest unmarked index; None when all are marked.
    """
    for i in range(after + 1, len(waypoints)):
        if waypoints[i].name not in marked:
            return i
    for i in range(0, after):
        if waypoints[i].name not in marked:
            return i
    return None


def begin(waypoints: Sequence[Waypoint]) -> NavigationSession:
    if not waypoints:
        raise ValueError("Cannot begin marking without waypoints")
    names = [wp.name for wp in waypoints]
    if len(set(names)) != len(names):
        raise ValueError("Waypoint names must be unique")
    return _transition(NavigationSession(), NavigationPhase.ACTIVE,
                       waypoints=tuple(waypoints), marked_points=(),
                       current_index=0)


def navigate_to_waypoint(session: NavigationSession, index: int) -> NavigationSession:
    if session.phase != NavigationPhase.ACTIVE:
        return session
    if not 0 <= index < len(session.waypoints):
        return session
    if is_marked(session, session.waypoints[index].name):
        return session
    return replace(session, current_index=index)


def mark_current_point(session: NavigationSession, fix: Optional[LocationFix],
                       now: Optional[datetime] = None,
                       min_threshold: float = MIN_THRESHOLD_M) -> NavigationSession:
    """
    Record the current waypoint as marked at the fix, then move on to the
    first unmarked waypoint after it. Marked waypoints are never revisited.
    """
    target = session.current_waypoint
    if target is None or not proximity_gate(fix, target, min_threshold):
        return session

    mark = MarkedPoint(waypoint=target, actual_location=fix,
                       timestamp=now or datetime.now())
    marked_points = session.marked_points + (mark,)
    marked = {mp.waypoint.name for mp in marked_points}
    logger.info("Marked %s (accuracy %.1fm)", target.name, fix.accuracy)

    next_index = _next_unmarked(session.waypoints, marked, session.current_index)
    if next_index is not None:
        return replace(session, marked_points=marked_points, current_index=next_index)

    return _transition(session, NavigationPhase.COMPLETED,
                       marked_points=marked_points,
                       current_index=len(session.waypoints))


def finish(session: NavigationSession, pitch_name: str, rotation: int,
           now: Optional[datetime] = None) -> Tuple[NavigationSession, Optional[MarkingSummary]]:
    if session.phase != NavigationPhase.COMPLETED:
        return session, None
    summary = MarkingSummary(
        pitch_name=pitch_name,
        rotation=rotation,
        marked_points=session.marked_points,
        completed_at=now or datetime.now(),
    )
    return _transition(session, NavigationPhase.FINISHED), summary
