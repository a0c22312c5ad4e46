"""Spherical Geometry for Geo Queries

Points, caps and filter shapes consumed by the query parameter models.
"""

from .lat_lng import LatLng
from .spherical import Cap, angular_distance, destination
from .shape_container import ShapeContainer, ShapeType

__all__ = [
    'LatLng',
    'Cap',
    'angular_distance',
    'destination',
    'ShapeContainer',
    'ShapeType',
]
