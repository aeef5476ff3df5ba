"""Tests for waypoint generation and the marking session."""

import math
from dataclasses import replace
from datetime import datetime

import pytest
import numpy as np
from pitchmarker.coordinates.geometry import calculate_pitch_corners
from pitchmarker.coordinates.pitch_model import PITCH_CONFIGS
from pitchmarker.coordinates.projection import GeoPoint
from pitchmarker.navigation import session as nav
from pitchmarker.navigation.geodesy import EARTH_RADIUS_M, bearing, distance, relative_bearing
from pitchmarker.navigation.location import LocationFix
from pitchmarker.navigation.session import (
    MarkedPoint,
    NavigationPhase,
    NavigationSession,
    WaypointStatus,
)
from pitchmarker.navigation.waypoints import (
    Waypoint,
    WaypointType,
    diagram_label,
    generate_waypoints,
)

CENTER = GeoPoint(51.5, -0.1)
NOW = datetime(2024, 5, 4, 10, 30)


def _north_of(point, meters):
    """Point exactly `meters` due north along the meridian."""
    return GeoPoint(point.lat + math.degrees(meters / EARTH_RADIUS_M), point.lng)


def _fix_at(point, accuracy=1.0, heading=None):
    return LocationFix(point.lat, point.lng, accuracy, heading, NOW)


def _waypoints(n=3):
    return tuple(
        Waypoint(f'WP{i}', WaypointType.CORNER, 51.5 + i * 0.001, -0.1)
        for i in range(n)
    )


class TestGeodesy:
    """Test great-circle distance and bearing."""

    def test_distance_to_self(self):
        """Test zero distance."""
        assert distance(CENTER, CENTER) == 0.0

    def test_distance_symmetric(self):
        """Test distance is symmetric."""
        other = GeoPoint(51.503, -0.097)
        assert np.isclose(distance(CENTER, other), distance(other, CENTER))

    def test_known_distance(self):
        """Test 0.0009 degrees of latitude is about 100 m."""
        d = distance(GeoPoint(51.5, -0.1), GeoPoint(51.5009, -0.1))
        assert abs(d - 100.0) < 1.0

    def test_bearing_north_and_east(self):
        """Test cardinal bearings."""
        assert np.isclose(bearing(CENTER, GeoPoint(51.501, -0.1)), 0.0)
        assert abs(bearing(CENTER, GeoPoint(51.5, -0.099)) - 90.0) < 0.01
        assert abs(bearing(CENTER, GeoPoint(51.499, -0.1)) - 180.0) < 1e-9
        assert abs(bearing(CENTER, GeoPoint(51.5, -0.101)) - 270.0) < 0.01

    def test_bearing_range(self):
        """Test bearings are normalized to [0, 360)."""
        for lat, lng in [(51.501, -0.101), (51.499, -0.101), (51.499, -0.099)]:
            b = bearing(CENTER, GeoPoint(lat, lng))
            assert 0.0 <= b < 360.0

    def test_relative_bearing(self):
        """Test bearing relative to the device heading."""
        assert relative_bearing(90.0, 30.0) == 60.0
        assert relative_bearing(10.0, 350.0) == 20.0
        assert relative_bearing(45.0, None) == 45.0


class TestWaypoints:
    """Test waypoint generation."""

    def test_count_without_goal_area(self):
        """Test pitches without a goal area give 10 waypoints."""
        cfg = PITCH_CONFIGS['5v5']
        wps = generate_waypoints(calculate_pitch_corners(CENTER, cfg, 0), cfg, 0)
        assert len(wps) == 10

    def test_count_with_goal_area(self):
        """Test pitches with a goal area give 14 waypoints."""
        cfg = PITCH_CONFIGS['9v9']
        wps = generate_waypoints(calculate_pitch_corners(CENTER, cfg, 0), cfg, 0)
        assert len(wps) == 14

    def test_order_and_names(self):
        """Test the fixed waypoint order."""
        cfg = PITCH_CONFIGS['11v11-senior']
        wps = generate_waypoints(calculate_pitch_corners(CENTER, cfg, 20), cfg, 20)
        assert [wp.name for wp in wps] == [
            'Corner 1 (Bottom-Left)',
            'Corner 2 (Bottom-Right)',
            'Corner 3 (Top-Right)',
            'Corner 4 (Top-Left)',
            'Halfway Line (Bottom)',
            'Halfway Line (Top)',
            'Left Penalty Area (Bottom)',
            'Left Penalty Area (Top)',
            'Right Penalty Area (Bottom)',
            'Right Penalty Area (Top)',
            'Left Goal Area (Bottom)',
            'Left Goal Area (Top)',
            'Right Goal Area (Bottom)',
            'Right Goal Area (Top)',
        ]
        assert [wp.type for wp in wps[:6]] == [WaypointType.CORNER] * 4 + [WaypointType.HALFWAY] * 2
        assert {wp.type for wp in wps[10:]} == {WaypointType.GOAL}

    def test_names_unique(self):
        """Test every waypoint name is unique."""
        for cfg in PITCH_CONFIGS.values():
            wps = generate_waypoints(calculate_pitch_corners(CENTER, cfg, 0), cfg, 0)
            assert len({wp.name for wp in wps}) == len(wps)

    def test_deterministic(self):
        """Test same input gives the same waypoints."""
        cfg = PITCH_CONFIGS['9v9']
        corners = calculate_pitch_corners(CENTER, cfg, 77)
        assert generate_waypoints(corners, cfg, 77) == generate_waypoints(corners, cfg, 77)

    def test_corners_and_halfway(self):
        """Test corner and halfway positions."""
        cfg = PITCH_CONFIGS['7v7']
        corners = calculate_pitch_corners(CENTER, cfg, 0)
        wps = generate_waypoints(corners, cfg, 0)
        assert wps[0].point == corners[0]
        assert np.isclose(wps[4].lng, CENTER.lng)
        assert np.isclose(wps[4].lat, corners[0].lat)
        assert np.isclose(wps[5].lat, corners[3].lat)

    def test_requires_four_corners(self):
        """Test generation fails on a partial corner set."""
        with pytest.raises(ValueError):
            generate_waypoints((CENTER,) * 3, PITCH_CONFIGS['5v5'], 0)

    def test_diagram_labels(self):
        """Test short diagram labels."""
        cfg = PITCH_CONFIGS['9v9']
        wps = generate_waypoints(calculate_pitch_corners(CENTER, cfg, 0), cfg, 0)
        assert [diagram_label(wp) for wp in wps] == [
            '1', '2', '3', '4', 'H1', 'H2',
            'P1', 'P2', 'P3', 'P4', 'G1', 'G2', 'G3', 'G4',
        ]
        assert diagram_label(Waypoint('Flag', WaypointType.CORNER, 0, 0)) == '?'

    def test_dict_roundtrip(self):
        """Test waypoint serialization."""
        wp = _waypoints(1)[0]
        assert Waypoint.from_dict(wp.to_dict()) == wp


class TestProximityGate:
    """Test the marking threshold."""

    def test_threshold_floor(self):
        """Test the 2 m floor."""
        assert nav.marking_threshold(0.5) == 2.0
        assert nav.marking_threshold(6.0) == 6.0

    def test_gate_at_floor(self):
        """Test 1.9 m passes and 2.1 m fails with good accuracy."""
        wp = _waypoints(1)[0]
        assert nav.proximity_gate(_fix_at(_north_of(wp.point, 1.9)), wp)
        assert not nav.proximity_gate(_fix_at(_north_of(wp.point, 2.1)), wp)

    def test_gate_widens_with_accuracy(self):
        """Test a poor fix allows marking further away."""
        wp = _waypoints(1)[0]
        fix = _fix_at(_north_of(wp.point, 7.0), accuracy=8.0)
        assert nav.proximity_gate(fix, wp)
        assert not nav.proximity_gate(_fix_at(_north_of(wp.point, 7.0), accuracy=6.0), wp)

    def test_gate_without_fix_or_target(self):
        """Test the gate is closed without a fix or a target."""
        wp = _waypoints(1)[0]
        assert not nav.proximity_gate(None, wp)
        assert not nav.proximity_gate(_fix_at(wp.point), None)


class TestSession:
    """Test the marking state machine."""

    def test_begin(self):
        """Test a new session starts on the first waypoint."""
        s = nav.begin(_waypoints())
        assert s.phase == NavigationPhase.ACTIVE
        assert s.current_index == 0
        assert s.current_waypoint.name == 'WP0'
        assert s.marked_points == ()

    def test_begin_requires_waypoints(self):
        """Test an empty waypoint list is rejected."""
        with pytest.raises(ValueError):
            nav.begin([])

    def test_begin_requires_unique_names(self):
        """Test duplicate names are rejected."""
        wp = _waypoints(1)[0]
        with pytest.raises(ValueError):
            nav.begin([wp, wp])

    def test_pending_session_has_no_target(self):
        """Test a fresh session is idle."""
        s = NavigationSession(waypoints=_waypoints())
        assert s.current_waypoint is None
        assert nav.mark_current_point(s, _fix_at(s.waypoints[0].point)) is s

    def test_mark_advances(self):
        """Test marking moves to the next waypoint."""
        wps = _waypoints()
        s = nav.mark_current_point(nav.begin(wps), _fix_at(wps[0].point), NOW)
        assert s.current_index == 1
        assert len(s.marked_points) == 1
        assert s.marked_points[0].waypoint == wps[0]
        assert s.marked_points[0].timestamp == NOW

    def test_mark_too_far_is_noop(self):
        """Test marking outside the gate leaves the session unchanged."""
        wps = _waypoints()
        s = nav.begin(wps)
        assert nav.mark_current_point(s, _fix_at(_north_of(wps[0].point, 5.0))) is s
        assert nav.mark_current_point(s, None) is s

    def test_skip_ahead_then_wrap(self):
        """Test skipping forward then returning to the skipped waypoint."""
        wps = _waypoints()
        s = nav.begin(wps)
        s = nav.mark_current_point(s, _fix_at(wps[0].point), NOW)
        s = nav.navigate_to_waypoint(s, 2)
        assert s.current_index == 2

        s = nav.mark_current_point(s, _fix_at(wps[2].point), NOW)
        assert s.phase == NavigationPhase.ACTIVE
        assert s.current_index == 1

        s = nav.mark_current_point(s, _fix_at(wps[1].point), NOW)
        assert s.phase == NavigationPhase.COMPLETED
        assert s.current_index == 3
        assert s.current_waypoint is None
        assert nav.completed_count(s) == 3

    def test_scan_prefers_forward(self):
        """Test the next target is the first unmarked waypoint ahead."""
        wps = _waypoints(5)
        s = nav.navigate_to_waypoint(nav.begin(wps), 2)
        s = nav.mark_current_point(s, _fix_at(wps[2].point), NOW)
        assert s.current_index == 3

    def test_navigate_to_marked_is_noop(self):
        """Test marked waypoints cannot be re-selected."""
        wps = _waypoints()
        s = nav.mark_current_point(nav.begin(wps), _fix_at(wps[0].point), NOW)
        assert nav.navigate_to_waypoint(s, 0) is s

    def test_navigate_out_of_range_is_noop(self):
        """Test out of range selection is ignored."""
        s = nav.begin(_waypoints())
        assert nav.navigate_to_waypoint(s, 3) is s
        assert nav.navigate_to_waypoint(s, -1) is s

    def test_transitions_return_new_sessions(self):
        """Test sessions are not modified in place."""
        wps = _waypoints()
        s = nav.begin(wps)
        nav.mark_current_point(s, _fix_at(wps[0].point), NOW)
        assert s.marked_points == ()
        assert s.current_index == 0

    def test_completed_session_rejects_marking(self):
        """Test nothing moves after completion."""
        wps = _waypoints(1)
        s = nav.mark_current_point(nav.begin(wps), _fix_at(wps[0].point), NOW)
        assert s.phase == NavigationPhase.COMPLETED
        assert nav.mark_current_point(s, _fix_at(wps[0].point)) is s
        assert nav.navigate_to_waypoint(s, 0) is s

    def test_finish(self):
        """Test finishing a completed session produces a summary."""
        wps = _waypoints(2)
        s = nav.begin(wps)
        for wp in wps:
            s = nav.mark_current_point(s, _fix_at(wp.point, accuracy=3.0), NOW)

        finished, summary = nav.finish(s, '5v5 Mini Soccer', 30, NOW)
        assert finished.phase == NavigationPhase.FINISHED
        assert summary.pitch_name == '5v5 Mini Soccer'
        assert summary.rotation == 30
        assert len(summary.marked_points) == 2
        assert summary.average_accuracy == 3.0
        assert summary.completed_at == NOW

    def test_finish_incomplete(self):
        """Test finishing early returns no summary."""
        s = nav.begin(_waypoints())
        finished, summary = nav.finish(s, 'x', 0)
        assert finished is s
        assert summary is None

    def test_summary_dict(self):
        """Test the persisted summary layout."""
        wps = _waypoints(1)
        s = nav.mark_current_point(nav.begin(wps), _fix_at(wps[0].point), NOW)
        _, summary = nav.finish(s, '7v7 Mini Soccer', 0, NOW)
        data = summary.to_dict()

        assert data['pitch'] == '7v7 Mini Soccer'
        assert data['completedAt'] == NOW.isoformat()
        assert data['markedPoints'][0]['waypoint']['name'] == 'WP0'
        assert data['markedPoints'][0]['actualLocation']['accuracy'] == 1.0

    def test_orphaned_marks_not_counted(self):
        """Test marks for unknown waypoints are ignored by progress."""
        wps = _waypoints()
        ghost = Waypoint('Ghost', WaypointType.CORNER, 0.0, 0.0)
        s = replace(nav.begin(wps), marked_points=(
            MarkedPoint(ghost, _fix_at(ghost.point), NOW),
        ))
        assert nav.completed_count(s) == 0
        assert [mp.waypoint.name for mp in nav.orphaned_marks(s)] == ['Ghost']

    def test_statuses(self):
        """Test per-waypoint status."""
        wps = _waypoints()
        s = nav.mark_current_point(nav.begin(wps), _fix_at(wps[0].point), NOW)
        assert nav.waypoint_statuses(s) == [
            WaypointStatus.COMPLETED,
            WaypointStatus.CURRENT,
            WaypointStatus.INCOMPLETE,
        ]

    def test_no_current_status_after_completion(self):
        """Test completed sessions show no current waypoint."""
        wps = _waypoints(2)
        s = nav.begin(wps)
        for wp in wps:
            s = nav.mark_current_point(s, _fix_at(wp.point), NOW)
        assert nav.waypoint_statuses(s) == [WaypointStatus.COMPLETED] * 2


class TestEvaluateFix:
    """Test the per-fix navigation reading."""

    def test_far_reading(self):
        """Test distance, bearing and instruction when far away."""
        wps = _waypoints()
        s = nav.begin(wps)
        here = _north_of(wps[0].point, -50.0)
        reading = nav.evaluate_fix(s, _fix_at(here, accuracy=4.0, heading=90.0))

        assert reading.target == wps[0]
        assert np.isclose(reading.distance_m, 50.0, atol=1e-6)
        assert np.isclose(reading.bearing_deg, 0.0, atol=1e-6)
        assert np.isclose(reading.relative_bearing_deg, 270.0, atol=1e-6)
        assert reading.threshold_m == 4.0
        assert not reading.can_mark
        assert reading.instruction == "Walk towards the arrow until distance is less than 4.0m"

    def test_close_reading(self):
        """Test the reading when marking is allowed."""
        wps = _waypoints()
        reading = nav.evaluate_fix(nav.begin(wps), _fix_at(_north_of(wps[0].point, 1.0)))
        assert reading.can_mark
        assert reading.threshold_m == 2.0
        assert reading.instruction == "You're close enough! Mark this point."

    def test_no_reading_without_fix(self):
        """Test no reading without a fix."""
        assert nav.evaluate_fix(nav.begin(_waypoints()), None) is None
