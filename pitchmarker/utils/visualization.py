"""Pitch diagram rendering for the marking screen."""

import cv2
import numpy as np
from typing import Any, Dict, List, Optional, Sequence, Tuple

from pitchmarker.config import DEFAULT_CONFIG
from pitchmarker.coordinates.pitch_model import PitchConfig, PitchModel
from pitchmarker.navigation.session import WaypointStatus
from pitchmarker.navigation.waypoints import Waypoint, diagram_label

# BGR
STATUS_COLORS = {
    WaypointStatus.COMPLETED: (60, 200, 60),
    WaypointStatus.CURRENT: (0, 165, 255),
    WaypointStatus.INCOMPLETE: (170, 170, 170),
}


def waypoint_positions(model: PitchModel) -> Dict[str, Tuple[float, float]]:
    """Unrotated pitch-frame position (meters) of every named waypoint."""
    hl, hw = model.half_length, model.half_width
    d = model.dimensions
    positions = {
        'Corner 1 (Bottom-Left)': (-hl, -hw),
        'Corner 2 (Bottom-Right)': (hl, -hw),
        'Corner 3 (Top-Right)': (hl, hw),
        'Corner 4 (Top-Left)': (-hl, hw),
        'Halfway Line (Bottom)': (0.0, -hw),
        'Halfway Line (Top)': (0.0, hw),
    }
    boxes = [('Penalty Area', d['penalty_area_length'], d['penalty_area_width'])]
    if model.config.has_goal_area:
        boxes.append(('Goal Area', d['goal_area_length'], d['goal_area_width']))
    for label, depth, width in boxes:
        for side in ('left', 'right'):
            corners = model.box(depth, width, side)
            name = f'{side.capitalize()} {label}'
            positions[f'{name} (Bottom)'] = tuple(corners[1])
            positions[f'{name} (Top)'] = tuple(corners[2])
    return positions


class DiagramCanvas:
    """Maps pitch-frame meters onto image pixels, bottom touchline at the bottom."""

    def __init__(self, model: PitchModel, width: int, height: int, margin: int):
        self.model = model
        self.width = width
        self.height = height
        self.margin = margin
        self.scale = min((width - 2 * margin) / model.length,
                         (height - 2 * margin) / model.width)

    def to_pixel(self, x: float, y: float) -> Tuple[int, int]:
        cx, cy = self.width / 2, self.height / 2
        return int(round(cx + x * self.scale)), int(round(cy - y * self.scale))

    def polygon(self, points: np.ndarray) -> np.ndarray:
        return np.array([self.to_pixel(x, y) for x, y in points], dtype=np.int32)


def render_pitch_diagram(config: PitchConfig, waypoints: Sequence[Waypoint] = (),
                         statuses: Sequence[WaypointStatus] = (),
                         settings: Optional[Dict[str, Any]] = None) -> np.ndarray:
    """
    Draw a schematic pitch with a status-coloured marker per waypoint.

    Args:
        config: Pitch dimensions
        waypoints: Ordered waypoints to show
        statuses: Status of each waypoint (same order)
        settings: Optional 'diagram' config section

    Returns:
        BGR image
    """
    s = dict(DEFAULT_CONFIG['diagram'])
    s.update(settings or {})

    model = PitchModel(config)
    canvas = DiagramCanvas(model, s['width'], s['height'], s['margin'])
    image = np.zeros((s['height'], s['width'], 3), dtype=np.uint8)
    image[:] = s['background']
    line = tuple(int(c) for c in s['line_color'])

    cv2.polylines(image, [canvas.polygon(model.get_pitch_boundaries())], True, line, 2)
    cv2.line(image, canvas.to_pixel(0, -model.half_width),
             canvas.to_pixel(0, model.half_width), line, 1)

    d = model.dimensions
    if d['center_circle_radius'] > 0:
        cv2.circle(image, canvas.to_pixel(0, 0),
                   int(round(d['center_circle_radius'] * canvas.scale)), line, 1)
    cv2.circle(image, canvas.to_pixel(0, 0), 2, line, -1)

    boxes = [(d['penalty_area_length'], d['penalty_area_width'])]
    if config.has_goal_area:
        boxes.append((d['goal_area_length'], d['goal_area_width']))
    for depth, width in boxes:
        for side in ('left', 'right'):
            cv2.polylines(image, [canvas.polygon(model.box(depth, width, side))],
                          True, line, 1)

    if d['penalty_spot_distance'] > 0:
        for x, y in model.landmarks['penalty_spots']:
            cv2.circle(image, canvas.to_pixel(x, y), 2, line, -1)

    _draw_markers(image, canvas, waypoints, statuses, s['marker_radius'])
    return image


def _draw_markers(image: np.ndarray, canvas: DiagramCanvas,
                  waypoints: Sequence[Waypoint], statuses: Sequence[WaypointStatus],
                  radius: int):
    positions = waypoint_positions(canvas.model)
    statuses: List[WaypointStatus] = list(statuses)
    statuses += [WaypointStatus.INCOMPLETE] * (len(waypoints) - len(statuses))

    for wp, status in zip(waypoints, statuses):
        if wp.name not in positions:
            continue
        center = canvas.to_pixel(*positions[wp.name])
        cv2.circle(image, center, radius, STATUS_COLORS[status], -1)
        cv2.circle(image, center, radius, (255, 255, 255), 1)

        label = diagram_label(wp)
        (tw, th), _ = cv2.getTextSize(label, cv2.FONT_HERSHEY_SIMPLEX, 0.35, 1)
        cv2.putText(image, label, (center[0] - tw // 2, center[1] + th // 2),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.35, (0, 0, 0), 1, cv2.LINE_AA)
