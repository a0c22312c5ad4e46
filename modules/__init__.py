"""Geo Query Modules

This package contains the feature modules built on the core framework in
``src``: the geo query parameter models, their spherical geometry and the
covering planner.
"""
