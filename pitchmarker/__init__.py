"""
Pitch Marker

Places a sports pitch on real ground and guides a GPS user to each line-marking point.
"""

from .core import MarkingController

__all__ = ['MarkingController']
__version__ = '1.0.0'
