"""Cover Tuning Data Model

Tuning knobs bounding the work of the hierarchical cell-covering algorithm:
the soft cell budget and the range of cell levels it may use.
"""

import logging
from typing import Any, Dict, Mapping, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from src.exceptions import GeoPreconditionError, GeoValidationError
from ..constants import (
    DEFAULT_MAX_COVER_CELLS, DEFAULT_WORST_LEVEL, DEFAULT_BEST_LEVEL,
    QUERY_MAX_COVER_CELLS, QUERY_WORST_LEVEL, QUERY_BEST_LEVEL,
    MAX_CELL_LEVEL,
)

logger = logging.getLogger(__name__)

COVER_KEYS: Tuple[str, ...] = ("max_cover_cells", "worst_level", "best_level")


class CovererOptions(BaseModel):
    """Options structure consumed by a RegionCoverer."""

    model_config = ConfigDict(frozen=True)

    max_cells: int = Field(..., description="Soft limit on the number of cells")
    min_level: int = Field(..., description="Coarsest cell level")
    max_level: int = Field(..., description="Finest cell level")


class CoverTuning(BaseModel):
    """Validated parameters for the cell coverer.

    Construction checks ``max_cover_cells > 0``, ``0 < worst_level <
    best_level <= MAX_CELL_LEVEL`` and raises GeoPreconditionError when they
    do not hold. These values come from trusted configuration; untrusted
    documents go through ``from_persisted`` which reports the same problems
    as GeoValidationError.

    Attributes:
        max_cover_cells: Soft upper bound on cells emitted for one region
        worst_level: Least detailed level used in coverings
        best_level: Most detailed level used in coverings
    """

    model_config = ConfigDict(frozen=True)

    max_cover_cells: int = Field(DEFAULT_MAX_COVER_CELLS, description="Soft limit on cover cells")
    worst_level: int = Field(DEFAULT_WORST_LEVEL, description="Coarsest cell level")
    best_level: int = Field(DEFAULT_BEST_LEVEL, description="Finest cell level")

    @model_validator(mode="after")
    def check_preconditions(self) -> "CoverTuning":
        if not (self.max_cover_cells > 0 and self.worst_level > 0 and self.best_level > 0
                and self.worst_level < self.best_level
                and self.best_level <= MAX_CELL_LEVEL):
            raise GeoPreconditionError(
                "Invalid cover tuning",
                {
                    "max_cover_cells": self.max_cover_cells,
                    "worst_level": self.worst_level,
                    "best_level": self.best_level,
                }
            )
        return self

    @classmethod
    def for_query(cls) -> "CoverTuning":
        """Finer defaults used by near queries."""
        return cls(
            max_cover_cells=QUERY_MAX_COVER_CELLS,
            worst_level=QUERY_WORST_LEVEL,
            best_level=QUERY_BEST_LEVEL,
        )

    def to_options(self) -> CovererOptions:
        return CovererOptions(
            max_cells=self.max_cover_cells,
            min_level=self.worst_level,
            max_level=self.best_level,
        )

    def to_persisted(self) -> Dict[str, int]:
        return {
            "max_cover_cells": self.max_cover_cells,
            "worst_level": self.worst_level,
            "best_level": self.best_level,
        }

    @classmethod
    def from_persisted(cls, doc: Mapping[str, Any]) -> "CoverTuning":
        """Restore cover tuning from a persisted document.

        Only the three cover keys are read, so the same document may carry
        other settings.

        Args:
            doc: Document holding ``max_cover_cells``, ``worst_level`` and ``best_level``

        Returns:
            Validated CoverTuning

        Raises:
            GeoValidationError: If a key is missing, not an integer or out of range
        """
        if not isinstance(doc, Mapping):
            raise GeoValidationError("Cover document must be an object", {"value": doc})

        missing = [key for key in COVER_KEYS if key not in doc]
        if missing:
            logger.warning(f"Cover document is missing keys: {missing}")
            raise GeoValidationError("Cover document is missing keys", {"missing": missing})

        try:
            return cls.model_validate({key: doc[key] for key in COVER_KEYS}, strict=True)
        except ValidationError as e:
            logger.warning(f"Cover document has invalid values: {e.error_count()} error(s)")
            raise GeoValidationError(
                "Cover document has invalid values",
                {"errors": [error["loc"] for error in e.errors()]}
            ) from e
        except GeoPreconditionError as e:
            logger.warning(f"Cover document violates cover constraints: {e}")
            raise GeoValidationError(e.message, e.context) from e

    @classmethod
    def from_config(cls, config_loader, environment: str) -> "CoverTuning":
        """Build cover tuning from an environment's ``cover`` section."""
        return cls.from_persisted(config_loader.get_cover_config(environment))
