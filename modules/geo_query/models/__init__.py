"""Geo Query Data Models

This package contains the Pydantic models describing a geospatial search and
the tuning of the cell coverer used to build its index lookups.
"""

from .cover_tuning import CoverTuning, CovererOptions
from .query_params import FilterType, SpatialQueryParams

__all__ = ['CoverTuning', 'CovererOptions', 'FilterType', 'SpatialQueryParams']
