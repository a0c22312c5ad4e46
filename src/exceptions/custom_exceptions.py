"""
Custom exception classes for the geo query parameter library.

This module defines domain-specific exceptions that separate trusted,
in-process construction failures from recoverable errors raised while
reading persisted or external data.
"""

from typing import Optional, Dict, Any


class GeoBaseException(Exception):
    """Base exception class for all geo query parameter exceptions."""
    
    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}
    
    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} (Context: {context_str})"
        return self.message


class GeoConfigurationError(GeoBaseException):
    """
    Exception raised when configuration loading fails.
    
    This exception is raised when:
    - Configuration files are missing or unreadable
    - Configuration files contain invalid JSON
    - A requested environment or section does not exist
    """
    pass


class GeoValidationError(GeoBaseException):
    """
    Exception raised when external data fails validation.
    
    This is the recoverable error of the library. It is raised when:
    - A persisted parameter document is missing keys or holds bad values
    - A GeoJSON document cannot be turned into a shape
    - A configuration section is structurally invalid
    """
    pass


class GeoPreconditionError(GeoBaseException):
    """
    Exception raised when a trusted caller breaks a construction invariant.
    
    Signals a programming or configuration error such as a non-positive
    cover cell count, an inverted level range or a filtered query without a
    filter shape. Callers are not expected to recover from it.
    
    Not derived from ValueError or AssertionError, so pydantic validators
    propagate it unchanged instead of folding it into a ValidationError.
    """
    pass
