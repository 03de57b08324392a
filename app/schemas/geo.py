"""
Coordinate Type Definitions

Pydantic models for geographic coordinates shared by request locations,
provider places and transit stations.
"""

from pydantic import Field, field_validator

from app.schemas.base import CamelModel


class Coordinates(CamelModel):
    """
    Geographic coordinates (WGS84 latitude and longitude).
    """

    lat: float = Field(..., ge=-90.0, le=90.0, description="Latitude in decimal degrees")
    lng: float = Field(..., ge=-180.0, le=180.0, description="Longitude in decimal degrees")

    @field_validator("lat")
    @classmethod
    def validate_latitude(cls, v: float) -> float:
        """Ensure latitude is within valid range."""
        if not -90.0 <= v <= 90.0:
            raise ValueError("Latitude must be between -90 and 90 degrees")
        return v

    @field_validator("lng")
    @classmethod
    def validate_longitude(cls, v: float) -> float:
        """Ensure longitude is within valid range."""
        if not -180.0 <= v <= 180.0:
            raise ValueError("Longitude must be between -180 and 180 degrees")
        return v

    def __str__(self) -> str:
        return f"({self.lat}, {self.lng})"
