"""Region Coverer Interface

Abstract contract for the external hierarchical cell-covering algorithm and
the data models describing a covering plan.
"""

from abc import ABC, abstractmethod
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from ..geometry.spherical import Cap
from ..models.cover_tuning import CovererOptions


class CellInterval(BaseModel):
    """Inclusive range of leaf cell ids scanned for one index lookup."""
    
    model_config = ConfigDict(frozen=True)
    
    range_min: int = Field(..., ge=1, description="First leaf cell id of the range")
    range_max: int = Field(..., ge=1, description="Last leaf cell id of the range")


class CoveringPlan(BaseModel):
    """Result of planning the index lookups of one query.
    
    Bundles the covered region, the options the coverer ran with, the cells it
    returned and the merged lookup intervals derived from them.
    """
    
    model_config = ConfigDict(frozen=True)
    
    region: Cap = Field(..., description="Region handed to the coverer")
    options: CovererOptions = Field(..., description="Coverer options derived from cover tuning")
    cell_ids: List[int] = Field(default_factory=list, description="Cell ids returned by the coverer")
    intervals: List[CellInterval] = Field(default_factory=list, description="Sorted, merged lookup intervals")
    
    def interval_count(self) -> int:
        return len(self.intervals)


class RegionCoverer(ABC):
    """Abstract base class for cell-covering algorithms.
    
    Implementations wrap a hierarchical spherical tessellation library and
    must return cells whose union contains the whole region, using no cell
    coarser than ``options.min_level`` nor finer than ``options.max_level``.
    ``options.max_cells`` is a soft limit.
    """
    
    @abstractmethod
    def get_covering(self, region: Cap, options: CovererOptions) -> List[int]:
        """Cover ``region`` with cells.
        
        Args:
            region: Cap to cover
            options: Cell budget and level range
            
        Returns:
            Cell ids, in any order
        """
        pass
