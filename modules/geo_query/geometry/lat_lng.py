"""LatLng Data Model

Immutable spherical point in degrees with an explicit invalid state used for
"no origin" in near queries.
"""

import math
from typing import Any, Dict, Mapping

from pydantic import BaseModel, ConfigDict, Field

from src.exceptions import GeoValidationError
from ..constants import MIN_LATITUDE, MAX_LATITUDE, MIN_LONGITUDE, MAX_LONGITUDE

# Sentinel coordinates of the invalid point (pi, 2*pi radians)
INVALID_LATITUDE = 180.0
INVALID_LONGITUDE = 360.0


class LatLng(BaseModel):
    """Point on the sphere given by latitude and longitude in degrees.
    
    Instances are not range checked on construction so that the invalid
    sentinel stays representable; use ``is_valid`` before relying on one.
    """
    
    model_config = ConfigDict(frozen=True)
    
    lat: float = Field(..., description="Latitude in degrees")
    lng: float = Field(..., description="Longitude in degrees")
    
    @classmethod
    def invalid(cls) -> "LatLng":
        """Return the point that stands for "not present"."""
        return cls(lat=INVALID_LATITUDE, lng=INVALID_LONGITUDE)
    
    @classmethod
    def from_radians(cls, lat: float, lng: float) -> "LatLng":
        return cls(lat=math.degrees(lat), lng=math.degrees(lng))
    
    @property
    def lat_radians(self) -> float:
        return math.radians(self.lat)
    
    @property
    def lng_radians(self) -> float:
        return math.radians(self.lng)
    
    def is_valid(self) -> bool:
        """Check that both coordinates are finite and within range."""
        return (MIN_LATITUDE <= self.lat <= MAX_LATITUDE
                and MIN_LONGITUDE <= self.lng <= MAX_LONGITUDE)
    
    def to_persisted(self) -> Dict[str, float]:
        return {"lat": self.lat, "lng": self.lng}
    
    @classmethod
    def from_persisted(cls, doc: Mapping[str, Any]) -> "LatLng":
        """Restore a point from a ``{"lat": .., "lng": ..}`` document.
        
        Args:
            doc: Persisted point document
            
        Returns:
            A valid LatLng
            
        Raises:
            GeoValidationError: If keys are missing, non-numeric or out of range
        """
        if not isinstance(doc, Mapping):
            raise GeoValidationError("Point document must be an object", {"value": doc})
        
        missing = [key for key in ("lat", "lng") if key not in doc]
        if missing:
            raise GeoValidationError("Point document is missing keys", {"missing": missing})
        
        lat, lng = doc["lat"], doc["lng"]
        for name, value in (("lat", lat), ("lng", lng)):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise GeoValidationError(f"Point {name} must be a number", {name: value})
        
        point = cls(lat=float(lat), lng=float(lng))
        if not point.is_valid():
            raise GeoValidationError(
                "Point coordinates out of range",
                {"lat": point.lat, "lng": point.lng}
            )
        return point
    
    def __str__(self) -> str:
        if not self.is_valid():
            return "LatLng(invalid)"
        return f"LatLng(lat={self.lat}, lng={self.lng})"
