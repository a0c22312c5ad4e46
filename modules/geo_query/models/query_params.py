"""Spatial Query Parameters

Full description of one geospatial search: distance bounds, sort order,
optimizer hints, filter semantics and the embedded cover tuning. Derived
accessors convert the distance bounds to radians for the geometry layer.
"""

import logging
from enum import Enum
from typing import Any, Dict, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from src.exceptions import GeoPreconditionError, GeoValidationError
from ..constants import (
    EARTH_RADIUS_METERS, MAX_DISTANCE_BETWEEN_POINTS, MAX_RADIANS_BETWEEN_POINTS,
)
from ..geometry.lat_lng import LatLng
from ..geometry.shape_container import ShapeContainer
from ..geometry.spherical import Cap
from .cover_tuning import CoverTuning

logger = logging.getLogger(__name__)


class FilterType(str, Enum):
    """Spatial predicate applied against the filter shape."""
    # no filter, only useful on a near query
    NONE = "none"
    # geometry lies entirely within the shape, border included
    CONTAINS = "contains"
    # geometry intersects the shape
    INTERSECTS = "intersects"


# Scalar keys of the persisted document and their expected Python types
_SCALAR_KEYS = {
    "min_distance": (int, float),
    "min_inclusive": bool,
    "max_distance": (int, float),
    "max_inclusive": bool,
    "sorted": bool,
    "ascending": bool,
    "points_only": bool,
    "full_range": bool,
    "limit": int,
}


class SpatialQueryParams(BaseModel):
    """Parameters of a near, contains or intersects query.

    Instances are immutable; use ``model_copy`` or ``with_filter`` to derive
    a modified set. Construction raises GeoPreconditionError for negative
    distances or limit, and for a CONTAINS/INTERSECTS filter without a
    shape. ``min_distance <= max_distance`` is left to the caller.

    The hints ``points_only``, ``full_range`` and ``limit`` only steer how
    downstream execution scans the index; they never change the bounds
    computed here.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    # ============== Near query ==============

    min_distance: float = Field(0.0, description="Minimum distance from origin in meters")
    min_inclusive: bool = Field(False, description="Whether the minimum distance is inclusive")
    # may exceed half the earth circumference; the radian accessors clamp it
    max_distance: float = Field(MAX_DISTANCE_BETWEEN_POINTS, description="Maximum distance from origin in meters")
    max_inclusive: bool = Field(False, description="Whether the maximum distance is inclusive")
    sorted: bool = Field(False, description="Results must be sorted by distance to origin")
    ascending: bool = Field(True, description="Sort from closest to farthest")
    origin: LatLng = Field(default_factory=LatLng.invalid, description="Point distances are measured from")

    # ============== Hints ==============

    points_only: bool = Field(False, description="Index only contains points")
    full_range: bool = Field(False, description="The whole distance range will be scanned eventually")
    limit: int = Field(0, description="Expected LIMIT of the query, 0 for none")

    # ============== Filter ==============

    filter_type: FilterType = Field(FilterType.NONE, description="Spatial predicate")
    filter_shape: ShapeContainer = Field(default_factory=ShapeContainer.empty, description="Shape the predicate applies to")

    cover: CoverTuning = Field(default_factory=CoverTuning.for_query, description="Cover tuning for index lookups")

    @model_validator(mode="after")
    def check_preconditions(self) -> "SpatialQueryParams":
        if not self.min_distance >= 0 or not self.max_distance >= 0:
            raise GeoPreconditionError(
                "Distances must be non-negative",
                {"min_distance": self.min_distance, "max_distance": self.max_distance}
            )
        if self.limit < 0:
            raise GeoPreconditionError("Limit must be non-negative", {"limit": self.limit})
        if self.filter_type != FilterType.NONE and self.filter_shape.is_empty():
            raise GeoPreconditionError(
                "Filtered query requires a filter shape",
                {"filter_type": self.filter_type.value}
            )
        return self

    # ============== Derived bounds ==============

    def min_distance_rad(self) -> float:
        return min(self.min_distance / EARTH_RADIUS_METERS, MAX_RADIANS_BETWEEN_POINTS)

    def max_distance_rad(self) -> float:
        """Upper distance bound in radians.

        For CONTAINS and INTERSECTS queries the bound is further limited to
        the angular radius of the filter shape's bounding cap, since nothing
        outside that cap can match.

        Raises:
            GeoPreconditionError: If a filtered query has no filter shape
        """
        max_rad = min(self.max_distance / EARTH_RADIUS_METERS, MAX_RADIANS_BETWEEN_POINTS)
        if self.filter_type == FilterType.NONE:
            return max_rad

        if self.filter_shape.is_empty():
            raise GeoPreconditionError(
                "Filtered query requires a filter shape",
                {"filter_type": self.filter_type.value}
            )
        cap_rad = min(self.filter_shape.bounding_cap().radius, MAX_RADIANS_BETWEEN_POINTS)
        return min(max_rad, cap_rad)

    def is_near_query(self) -> bool:
        return self.origin.is_valid()

    def with_filter(self, filter_type: FilterType, shape: ShapeContainer) -> "SpatialQueryParams":
        """Return a copy restricted to ``shape``.

        Without an origin the shape's centroid becomes the origin, so sorted
        output orders results around the filter region.
        """
        origin = self.origin if self.origin.is_valid() else shape.centroid()
        return SpatialQueryParams(**{
            **dict(self),
            "filter_type": filter_type,
            "filter_shape": shape,
            "origin": origin,
        })

    def covering_region(self) -> Cap:
        """Region the cell coverer should cover for index lookups.

        Raises:
            GeoPreconditionError: If a pure near query has no valid origin
        """
        if self.filter_type != FilterType.NONE:
            return self.filter_shape.bounding_cap()
        if not self.origin.is_valid():
            raise GeoPreconditionError("Near query requires a valid origin")
        return Cap(center=self.origin, radius=self.max_distance_rad())

    # ============== Persistence ==============

    def to_persisted(self) -> Dict[str, Any]:
        doc: Dict[str, Any] = {
            "min_distance": self.min_distance,
            "min_inclusive": self.min_inclusive,
            "max_distance": self.max_distance,
            "max_inclusive": self.max_inclusive,
            "sorted": self.sorted,
            "ascending": self.ascending,
            "points_only": self.points_only,
            "full_range": self.full_range,
            "limit": self.limit,
            "filter_type": self.filter_type.value,
        }
        if self.origin.is_valid():
            doc["origin"] = self.origin.to_persisted()
        if not self.filter_shape.is_empty():
            doc["filter_shape"] = self.filter_shape.to_geojson()
        doc.update(self.cover.to_persisted())
        return doc

    @classmethod
    def from_persisted(cls, doc: Mapping[str, Any]) -> "SpatialQueryParams":
        """Restore query parameters from a persisted document.

        The three cover keys are required; every other key falls back to its
        default when absent.

        Raises:
            GeoValidationError: If the document is malformed
        """
        if not isinstance(doc, Mapping):
            raise GeoValidationError("Query document must be an object", {"value": doc})

        values: Dict[str, Any] = {"cover": CoverTuning.from_persisted(doc)}

        for key, expected in _SCALAR_KEYS.items():
            if key not in doc:
                continue
            value = doc[key]
            # bool is an int subclass but never a valid number here
            if not isinstance(value, expected) or (expected is not bool and isinstance(value, bool)):
                logger.warning(f"Query document has invalid '{key}': {value!r}")
                raise GeoValidationError(f"Invalid value for '{key}'", {key: value})
            values[key] = value

        if "filter_type" in doc:
            try:
                values["filter_type"] = FilterType(doc["filter_type"])
            except ValueError as e:
                raise GeoValidationError(
                    "Unknown filter type",
                    {"filter_type": doc["filter_type"]}
                ) from e
        if "origin" in doc:
            values["origin"] = LatLng.from_persisted(doc["origin"])
        if "filter_shape" in doc:
            values["filter_shape"] = ShapeContainer.from_geojson(doc["filter_shape"])

        try:
            params = cls(**values)
        except ValidationError as e:
            raise GeoValidationError(
                "Query document has invalid values",
                {"errors": [error["loc"] for error in e.errors()]}
            ) from e
        except GeoPreconditionError as e:
            logger.warning(f"Query document violates query constraints: {e}")
            raise GeoValidationError(e.message, e.context) from e

        logger.debug(f"Restored query params with filter {params.filter_type.value}")
        return params

    @classmethod
    def from_config(cls, config_loader, environment: str, **overrides: Any) -> "SpatialQueryParams":
        """Build query parameters from an environment's ``query`` section.

        Args:
            config_loader: ConfigLoader providing the configuration
            environment: Environment name
            **overrides: Field values replacing the configured ones

        Returns:
            Query parameters with overrides applied

        Raises:
            GeoValidationError: If the configuration or an override has an invalid type
            GeoPreconditionError: If an override breaks a query constraint
        """
        params = cls.from_persisted(config_loader.get_query_config(environment))
        if not overrides:
            return params
        try:
            return cls(**{**dict(params), **overrides})
        except ValidationError as e:
            logger.warning(f"Query overrides have invalid values: {e.error_count()} error(s)")
            raise GeoValidationError(
                "Query overrides have invalid values",
                {"errors": [error["loc"] for error in e.errors()]}
            ) from e

    def __str__(self) -> str:
        return (f"SpatialQueryParams(filter={self.filter_type.value}, origin={self.origin}, "
                f"distance=[{self.min_distance}, {self.max_distance}], "
                f"sorted={self.sorted}, limit={self.limit})")
