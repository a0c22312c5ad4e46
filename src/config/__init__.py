"""
Configuration management module for the geo query parameter library.

This module provides configuration loading and validation for
multi-environment deployments (development and production).
"""

from .config_loader import ConfigLoader

__all__ = ["ConfigLoader"]
