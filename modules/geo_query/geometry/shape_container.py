"""Shape Container

Tagged union over the shapes a filtered geo query can be evaluated against:
points, polylines, polygons, their multi variants and circles. Geometries
other than circles are held as shapely objects in (lng, lat) degree space
and their predicates are evaluated there; circles are exact spherical caps.
"""

import logging
import math
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union

import shapely
from shapely.errors import ShapelyError
from shapely.geometry import Point, Polygon, mapping, shape
from shapely.geometry.base import BaseGeometry

from src.exceptions import GeoPreconditionError, GeoValidationError
from ..constants import (
    EARTH_RADIUS_METERS, MAX_RADIANS_BETWEEN_POINTS,
    MIN_LATITUDE, MAX_LATITUDE, MIN_LONGITUDE, MAX_LONGITUDE,
)
from .lat_lng import LatLng
from .spherical import Cap, angular_distance, destination, mean_direction

logger = logging.getLogger(__name__)

# Edges are split to this length (degrees) before measuring bounds
SEGMENT_LENGTH_DEGREES = 1.0
CIRCLE_SEGMENTS = 64
CIRCLE_TYPE = "Circle"


class ShapeType(str, Enum):
    """Kind of shape held by a ShapeContainer."""
    EMPTY = "empty"
    POINT = "point"
    POLYLINE = "polyline"
    POLYGON = "polygon"
    CIRCLE = "circle"
    MULTI_POINT = "multi_point"
    MULTI_POLYLINE = "multi_polyline"
    MULTI_POLYGON = "multi_polygon"


_GEOMETRY_TYPES = {
    "Point": ShapeType.POINT,
    "LineString": ShapeType.POLYLINE,
    "Polygon": ShapeType.POLYGON,
    "MultiPoint": ShapeType.MULTI_POINT,
    "MultiLineString": ShapeType.MULTI_POLYLINE,
    "MultiPolygon": ShapeType.MULTI_POLYGON,
}

_AREA_TYPES = frozenset([ShapeType.POLYGON, ShapeType.MULTI_POLYGON, ShapeType.CIRCLE])


def _cap_to_polygon(cap: Cap) -> BaseGeometry:
    """Approximate a cap by a polygon in (lng, lat) space.

    Only meaningful for caps that neither enclose a pole nor cross the
    antimeridian.
    """
    if cap.radius == 0:
        return Point(cap.center.lng, cap.center.lat)
    ring = []
    for i in range(CIRCLE_SEGMENTS):
        vertex = destination(cap.center, 2 * math.pi * i / CIRCLE_SEGMENTS, cap.radius)
        ring.append((vertex.lng, vertex.lat))
    return Polygon(ring)


class ShapeContainer:
    """Filter shape exposing bounding cap, containment and intersection tests.

    Borders count as part of a shape, so ``contains`` holds for points on an
    edge (subject to floating point precision).

    Instances are immutable. An empty container stands for "no filter shape".
    """

    def __init__(self, geometry: Optional[BaseGeometry] = None, cap: Optional[Cap] = None):
        """Wrap a shapely geometry or a cap.

        Args:
            geometry: Non-empty, valid shapely geometry in (lng, lat) degrees
            cap: Spherical cap for circle shapes

        Raises:
            GeoPreconditionError: If both or an invalid geometry are given
        """
        if geometry is not None and cap is not None:
            raise GeoPreconditionError("A shape holds either a geometry or a cap, not both")

        self._geometry = geometry
        self._cap = cap
        self._bounding_cap: Optional[Cap] = None

        if cap is not None:
            self._shape_type = ShapeType.CIRCLE
        elif geometry is None:
            self._shape_type = ShapeType.EMPTY
        else:
            self._shape_type = self._classify(geometry)

    @staticmethod
    def _classify(geometry: BaseGeometry) -> ShapeType:
        shape_type = _GEOMETRY_TYPES.get(geometry.geom_type)
        if shape_type is None:
            raise GeoPreconditionError(
                "Unsupported geometry type",
                {"geom_type": geometry.geom_type}
            )
        if geometry.is_empty:
            raise GeoPreconditionError("Geometry is empty", {"geom_type": geometry.geom_type})
        if not geometry.is_valid:
            raise GeoPreconditionError(
                "Geometry is not valid",
                {"reason": shapely.is_valid_reason(geometry)}
            )

        min_lng, min_lat, max_lng, max_lat = geometry.bounds
        if (min_lng < MIN_LONGITUDE or max_lng > MAX_LONGITUDE
                or min_lat < MIN_LATITUDE or max_lat > MAX_LATITUDE):
            raise GeoPreconditionError(
                "Geometry coordinates out of range",
                {"bounds": geometry.bounds}
            )
        return shape_type

    # ---- construction helpers ----

    @classmethod
    def empty(cls) -> "ShapeContainer":
        return cls()

    @classmethod
    def from_geometry(cls, geometry: BaseGeometry) -> "ShapeContainer":
        return cls(geometry=geometry)

    @classmethod
    def from_point(cls, point: LatLng) -> "ShapeContainer":
        if not point.is_valid():
            raise GeoPreconditionError("Cannot build a point shape from an invalid point")
        return cls(geometry=Point(point.lng, point.lat))

    @classmethod
    def circle(cls, center: LatLng, radius_meters: float) -> "ShapeContainer":
        """Circle of ``radius_meters`` around ``center``, clamped to the whole sphere."""
        if not center.is_valid():
            raise GeoPreconditionError("Circle center is not a valid point", {"center": str(center)})
        if not radius_meters >= 0:
            raise GeoPreconditionError("Circle radius must be non-negative", {"radius": radius_meters})
        radius = min(radius_meters / EARTH_RADIUS_METERS, MAX_RADIANS_BETWEEN_POINTS)
        return cls(cap=Cap(center=center, radius=radius))

    @classmethod
    def from_geojson(cls, doc: Mapping[str, Any]) -> "ShapeContainer":
        """Build a shape from a GeoJSON geometry document.

        Besides the GeoJSON geometry types, ``{"type": "Circle", "coordinates":
        [lng, lat], "radius": meters}`` is accepted.

        Raises:
            GeoValidationError: If the document cannot be turned into a valid shape
        """
        if not isinstance(doc, Mapping):
            raise GeoValidationError("Shape document must be an object", {"value": doc})

        try:
            if doc.get("type") == CIRCLE_TYPE:
                return cls._circle_from_geojson(doc)
            return cls(geometry=shape(doc))
        except GeoPreconditionError as e:
            logger.warning(f"Rejected shape document: {e}")
            raise GeoValidationError(e.message, e.context) from e
        except (KeyError, IndexError, TypeError, ValueError, AttributeError, ShapelyError) as e:
            logger.warning(f"Unparseable shape document of type {doc.get('type')}: {e}")
            raise GeoValidationError(
                f"Invalid GeoJSON geometry: {str(e)}",
                {"type": doc.get("type")}
            ) from e

    @classmethod
    def _circle_from_geojson(cls, doc: Mapping[str, Any]) -> "ShapeContainer":
        coordinates = doc.get("coordinates")
        radius = doc.get("radius")
        if (not isinstance(coordinates, (list, tuple)) or len(coordinates) != 2
                or isinstance(radius, bool) or not isinstance(radius, (int, float))):
            raise GeoValidationError(
                "Circle needs [lng, lat] coordinates and a numeric radius",
                {"coordinates": coordinates, "radius": radius}
            )
        center = LatLng.from_persisted({"lat": coordinates[1], "lng": coordinates[0]})
        return cls.circle(center, float(radius))

    # ---- capability interface ----

    @property
    def shape_type(self) -> ShapeType:
        return self._shape_type

    def is_empty(self) -> bool:
        return self._shape_type == ShapeType.EMPTY

    def is_area_type(self) -> bool:
        return self._shape_type in _AREA_TYPES

    def bounding_cap(self) -> Cap:
        """Cap enclosing every point of the shape.

        Raises:
            GeoPreconditionError: If the shape is empty
        """
        if self._bounding_cap is None:
            if self.is_empty():
                raise GeoPreconditionError("An empty shape has no bounding cap")
            if self._cap is not None:
                self._bounding_cap = self._cap
            elif self._shape_type == ShapeType.POINT:
                self._bounding_cap = Cap(center=self._sample_points()[0], radius=0.0)
            elif self._shape_type == ShapeType.MULTI_POINT:
                self._bounding_cap = Cap.bounding(self._sample_points())
            else:
                self._bounding_cap = self._edge_bounding_cap()
        return self._bounding_cap

    def _edge_bounding_cap(self) -> Cap:
        # edge points lie within half a segment of a sample point
        cap = Cap.bounding(self._sample_points(), math.radians(SEGMENT_LENGTH_DEGREES / 2))
        if not self.is_area_type():
            return cap

        # a boundary cap beyond a hemisphere, or one that misses the interior,
        # does not bound the area
        parts = getattr(self._geometry, "geoms", [self._geometry])
        inside = [part.representative_point() for part in parts]
        if cap.radius > math.pi / 2 or not cap.contains_all(LatLng(lat=p.y, lng=p.x) for p in inside):
            logger.debug(f"Bounding cap of {self._shape_type.value} widened to the full sphere")
            return Cap.full()
        return cap

    def centroid(self) -> LatLng:
        if self.is_empty():
            raise GeoPreconditionError("An empty shape has no centroid")
        if self._cap is not None:
            return self._cap.center
        if self._shape_type in _AREA_TYPES:
            center = self._geometry.centroid
            return LatLng(lat=center.y, lng=center.x)
        return mean_direction(self._vertices())

    def distance_from_centroid(self, point: LatLng) -> float:
        """Great-circle distance in meters from the centroid to ``point``."""
        return angular_distance(self.centroid(), point) * EARTH_RADIUS_METERS

    def contains(self, other: Union[LatLng, "ShapeContainer"]) -> bool:
        if isinstance(other, LatLng):
            return self._contains_point(other)
        if self.is_empty() or other.is_empty():
            return False

        if self._cap is not None:
            if other._cap is not None:
                return self._cap.contains_cap(other._cap)
            return self._cap.contains_all(other._sample_points())
        if other._cap is not None:
            return self._geometry.covers(_cap_to_polygon(other._cap))
        return self._geometry.covers(other._geometry)

    def intersects(self, other: Union[LatLng, "ShapeContainer"]) -> bool:
        if isinstance(other, LatLng):
            return self._contains_point(other)
        if self.is_empty() or other.is_empty():
            return False

        if self._cap is not None and other._cap is not None:
            return self._cap.intersects(other._cap)
        if self._cap is not None:
            return other._intersects_cap(self._cap)
        if other._cap is not None:
            return self._intersects_cap(other._cap)
        return self._geometry.intersects(other._geometry)

    # ---- internals ----

    def _contains_point(self, point: LatLng) -> bool:
        if self.is_empty() or not point.is_valid():
            return False
        if self._cap is not None:
            return self._cap.contains(point)
        return self._geometry.covers(Point(point.lng, point.lat))

    def _intersects_cap(self, cap: Cap) -> bool:
        if not self.bounding_cap().intersects(cap):
            return False
        if self._contains_point(cap.center):
            return True
        if any(cap.contains(point) for point in self._sample_points()):
            return True
        return self._geometry.intersects(_cap_to_polygon(cap))

    def _vertices(self) -> List[LatLng]:
        return [LatLng(lat=float(lat), lng=float(lng))
                for lng, lat in shapely.get_coordinates(self._geometry)]

    def _sample_points(self) -> List[LatLng]:
        densified = shapely.segmentize(self._geometry, SEGMENT_LENGTH_DEGREES)
        return [LatLng(lat=float(lat), lng=float(lng))
                for lng, lat in shapely.get_coordinates(densified)]

    # ---- persistence ----

    def to_geojson(self) -> Dict[str, Any]:
        if self.is_empty():
            raise GeoPreconditionError("An empty shape cannot be persisted")
        if self._cap is not None:
            return {
                "type": CIRCLE_TYPE,
                "coordinates": [self._cap.center.lng, self._cap.center.lat],
                "radius": self._cap.radius_meters(),
            }
        return dict(mapping(self._geometry))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ShapeContainer):
            return NotImplemented
        if self._shape_type != other._shape_type:
            return False
        if self._cap is not None:
            return self._cap == other._cap
        if self._geometry is None:
            return True
        return self._geometry.equals_exact(other._geometry, 0.0)

    def __hash__(self) -> int:
        if self._cap is not None:
            return hash((self._shape_type, self._cap))
        if self._geometry is None:
            return hash(self._shape_type)
        return hash((self._shape_type, tuple(shapely.get_coordinates(self._geometry).ravel().tolist())))

    def __repr__(self) -> str:
        if self.is_empty():
            return "ShapeContainer(empty)"
        if self._cap is not None:
            return f"ShapeContainer(circle, center={self._cap.center}, radius={self._cap.radius})"
        return f"ShapeContainer({self._shape_type.value}, {self._geometry.wkt})"
