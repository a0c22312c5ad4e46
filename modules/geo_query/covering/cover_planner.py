"""Cover Planner

Turns query parameters into the region and options handed to a
RegionCoverer, and the returned cells into index lookup intervals.
"""

import logging
from typing import Iterable, List

from src.exceptions import GeoValidationError
from src.utils import log_performance
from ..models.query_params import SpatialQueryParams
from .region_coverer import CellInterval, CoveringPlan, RegionCoverer

logger = logging.getLogger(__name__)


def cell_range(cell_id: int) -> CellInterval:
    """Leaf cell id range spanned by one cell.
    
    A cell id's lowest set bit marks its level, and every descendant leaf
    lies within ``cell_id +/- (lsb - 1)``.
    """
    if isinstance(cell_id, bool) or not isinstance(cell_id, int) or cell_id <= 0:
        raise GeoValidationError("Cell id must be a positive integer", {"cell_id": cell_id})
    lsb = cell_id & -cell_id
    return CellInterval(range_min=cell_id - (lsb - 1), range_max=cell_id + (lsb - 1))


def scan_intervals(cell_ids: Iterable[int]) -> List[CellInterval]:
    """Sorted lookup intervals for ``cell_ids`` with overlapping and adjacent
    ranges merged.
    
    Raises:
        GeoValidationError: If a cell id is not a positive integer
    """
    ranges = sorted((cell_range(cell_id) for cell_id in cell_ids),
                    key=lambda interval: interval.range_min)
    
    merged: List[CellInterval] = []
    for interval in ranges:
        # leaf ids are odd, so ranges two apart leave no leaf uncovered
        if merged and interval.range_min <= merged[-1].range_max + 2:
            last = merged[-1]
            if interval.range_max > last.range_max:
                merged[-1] = CellInterval(range_min=last.range_min, range_max=interval.range_max)
            continue
        merged.append(interval)
    return merged


@log_performance
def plan_covering(params: SpatialQueryParams, coverer: RegionCoverer) -> CoveringPlan:
    """Plan the index lookups of a query.
    
    Args:
        params: Query parameters; filtered queries cover the filter shape's
            bounding cap, near queries the cap of ``max_distance`` around origin
        coverer: Covering algorithm
        
    Returns:
        CoveringPlan with the region, options, cells and merged intervals
        
    Raises:
        GeoPreconditionError: If the query has no region to cover
        GeoValidationError: If the coverer returns malformed cell ids
    """
    region = params.covering_region()
    options = params.cover.to_options()
    
    cell_ids = list(coverer.get_covering(region, options))
    intervals = scan_intervals(cell_ids)
    
    if len(cell_ids) > options.max_cells:
        logger.debug(f"Coverer returned {len(cell_ids)} cells, above soft limit {options.max_cells}")
    logger.debug(f"Planned {len(intervals)} lookup intervals from {len(cell_ids)} cells")
    
    return CoveringPlan(region=region, options=options, cell_ids=cell_ids, intervals=intervals)
