"""Geo Query Parameters Module

Models how a geospatial search is expressed (near, contains, intersects),
converts its distance bounds between meters and radians, and derives the
tuning handed to a hierarchical cell coverer for index lookups.
"""

from .constants import (
    EARTH_RADIUS_METERS,
    MAX_DISTANCE_BETWEEN_POINTS,
    MAX_RADIANS_BETWEEN_POINTS,
    RAD_EPS,
)
from .geometry import Cap, LatLng, ShapeContainer, ShapeType
from .models import CoverTuning, CovererOptions, FilterType, SpatialQueryParams
from .covering import CellInterval, CoveringPlan, RegionCoverer, plan_covering, scan_intervals

__all__ = [
    # Constants
    'EARTH_RADIUS_METERS',
    'MAX_DISTANCE_BETWEEN_POINTS',
    'MAX_RADIANS_BETWEEN_POINTS',
    'RAD_EPS',
    # Geometry
    'Cap',
    'LatLng',
    'ShapeContainer',
    'ShapeType',
    # Models
    'CoverTuning',
    'CovererOptions',
    'FilterType',
    'SpatialQueryParams',
    # Covering
    'CellInterval',
    'CoveringPlan',
    'RegionCoverer',
    'plan_covering',
    'scan_intervals',
]

__version__ = "1.0.0"
