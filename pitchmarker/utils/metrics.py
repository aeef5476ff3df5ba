"""Marking accuracy metrics."""

import numpy as np
from typing import Dict, Sequence

from pitchmarker.navigation.geodesy import distance
from pitchmarker.navigation.session import MarkedPoint


class MarkingMetrics:
    """Summarize how closely marked points match their targets."""

    @staticmethod
    def placement_errors(marked_points: Sequence[MarkedPoint]) -> np.ndarray:
        """Distance in meters between each target and where it was marked."""
        return np.array([
            distance(mp.waypoint.point, mp.actual_location.point)
            for mp in marked_points
        ])

    @staticmethod
    def summarize(marked_points: Sequence[MarkedPoint]) -> Dict[str, float]:
        """Calculate accuracy and placement error statistics."""
        if not marked_points:
            return {
                'points': 0,
                'average_accuracy': 0.0,
                'mean_error': 0.0,
                'max_error': 0.0,
            }

        accuracies = np.array([mp.actual_location.accuracy for mp in marked_points])
        errors = MarkingMetrics.placement_errors(marked_points)
        return {
            'points': len(marked_points),
            'average_accuracy': float(np.mean(accuracies)),
            'mean_error': float(np.mean(errors)),
            'max_error': float(np.max(errors)),
        }
