"""Spherical geometry helpers

Great-circle arithmetic on the unit sphere and the ``Cap`` region used as a
conservative bound for shapes and as the region handed to cell coverers.
"""

import math
from typing import Iterable, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field

from ..constants import EARTH_RADIUS_METERS, MAX_RADIANS_BETWEEN_POINTS, RAD_EPS
from .lat_lng import LatLng

Vector = Tuple[float, float, float]


def to_unit_vector(point: LatLng) -> Vector:
    lat, lng = point.lat_radians, point.lng_radians
    cos_lat = math.cos(lat)
    return (cos_lat * math.cos(lng), cos_lat * math.sin(lng), math.sin(lat))


def from_unit_vector(vector: Vector) -> LatLng:
    x, y, z = vector
    return LatLng.from_radians(math.atan2(z, math.hypot(x, y)), math.atan2(y, x))


def angular_distance(a: LatLng, b: LatLng) -> float:
    """Great-circle angle between two points in radians (haversine formula)."""
    lat1, lng1, lat2, lng2 = a.lat_radians, a.lng_radians, b.lat_radians, b.lng_radians
    dlat = lat2 - lat1
    dlng = lng2 - lng1
    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
    return 2 * math.asin(math.sqrt(min(1.0, h)))


def destination(origin: LatLng, bearing: float, distance: float) -> LatLng:
    """Point reached from ``origin`` along ``bearing`` after ``distance`` radians."""
    lat1, lng1 = origin.lat_radians, origin.lng_radians
    lat2 = math.asin(math.sin(lat1) * math.cos(distance)
                     + math.cos(lat1) * math.sin(distance) * math.cos(bearing))
    lng2 = lng1 + math.atan2(math.sin(bearing) * math.sin(distance) * math.cos(lat1),
                             math.cos(distance) - math.sin(lat1) * math.sin(lat2))
    # normalise to [-180, 180)
    lng2 = (lng2 + 3 * math.pi) % (2 * math.pi) - math.pi
    return LatLng.from_radians(lat2, lng2)


def mean_direction(points: Sequence[LatLng]) -> LatLng:
    """Normalised vector mean of ``points``; falls back to the first point
    when the vectors cancel out."""
    sx = sy = sz = 0.0
    for point in points:
        x, y, z = to_unit_vector(point)
        sx += x
        sy += y
        sz += z
    if math.sqrt(sx * sx + sy * sy + sz * sz) < RAD_EPS:
        return points[0]
    return from_unit_vector((sx, sy, sz))


class Cap(BaseModel):
    """Spherical cap: every point within ``radius`` radians of ``center``."""
    
    model_config = ConfigDict(frozen=True)
    
    center: LatLng = Field(..., description="Cap center")
    radius: float = Field(..., ge=0, le=MAX_RADIANS_BETWEEN_POINTS,
                          description="Angular radius in radians")
    
    @classmethod
    def full(cls) -> "Cap":
        return cls(center=LatLng(lat=0.0, lng=0.0), radius=MAX_RADIANS_BETWEEN_POINTS)
    
    @classmethod
    def bounding(cls, points: Sequence[LatLng], margin: float = 0.0) -> "Cap":
        """Smallest cap around the mean direction of ``points`` that holds all of
        them, widened by ``margin`` radians."""
        center = mean_direction(points)
        radius = max(angular_distance(center, point) for point in points)
        return cls(center=center, radius=min(radius + margin + RAD_EPS, MAX_RADIANS_BETWEEN_POINTS))
    
    def is_full(self) -> bool:
        return self.radius >= math.pi
    
    def radius_meters(self) -> float:
        return self.radius * EARTH_RADIUS_METERS
    
    def contains(self, point: LatLng) -> bool:
        return angular_distance(self.center, point) <= self.radius + RAD_EPS
    
    def contains_all(self, points: Iterable[LatLng]) -> bool:
        return all(self.contains(point) for point in points)
    
    def contains_cap(self, other: "Cap") -> bool:
        return angular_distance(self.center, other.center) + other.radius <= self.radius + RAD_EPS
    
    def intersects(self, other: "Cap") -> bool:
        return angular_distance(self.center, other.center) <= self.radius + other.radius + RAD_EPS
