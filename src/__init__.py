"""
Geo Query Framework Core Package

This package contains the shared infrastructure of the geo query parameter
library: exception hierarchy, logging setup and configuration loading.
"""

from .exceptions import (
    GeoBaseException,
    GeoConfigurationError,
    GeoValidationError,
    GeoPreconditionError,
)

__version__ = "1.0.0"
__all__ = [
    'GeoBaseException',
    'GeoConfigurationError',
    'GeoValidationError',
    'GeoPreconditionError',
]
