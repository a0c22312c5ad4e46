"""
Utility modules for the geo query parameter library.

This module provides logging setup and the performance logging decorator
used throughout the system.
"""

from .logging_setup import (
    setup_logging,
    setup_logging_from_config,
    get_logger,
    log_performance,
)

__all__ = ["setup_logging", "setup_logging_from_config", "get_logger", "log_performance"]
