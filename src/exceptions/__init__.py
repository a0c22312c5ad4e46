"""
Custom exceptions for the geo query parameter library.

This module provides domain-specific exception classes for error handling
and debugging throughout the system.
"""

from .custom_exceptions import (
    GeoBaseException,
    GeoConfigurationError,
    GeoValidationError,
    GeoPreconditionError,
)

__all__ = [
    "GeoBaseException",
    "GeoConfigurationError",
    "GeoValidationError",
    "GeoPreconditionError",
]
