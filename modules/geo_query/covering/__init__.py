"""Covering Plans for Geo Queries

Bridges query parameters and an external cell-covering algorithm.
"""

from .region_coverer import CellInterval, CoveringPlan, RegionCoverer
from .cover_planner import cell_range, scan_intervals, plan_covering

__all__ = [
    'CellInterval',
    'CoveringPlan',
    'RegionCoverer',
    'cell_range',
    'scan_intervals',
    'plan_covering',
]
