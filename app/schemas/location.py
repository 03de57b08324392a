"""
Location Schema

Pydantic models for request endpoints, provider places and transit stations.
"""

from typing import Optional

from pydantic import Field

from app.schemas.base import CamelModel
from app.schemas.geo import Coordinates


class Location(Coordinates):
    """A named request endpoint (origin or destination)."""

    name: str = Field(..., description="Display name of the place")

    def __str__(self) -> str:
        return f"{self.name} ({self.lat}, {self.lng})"


class Place(CamelModel):
    """A place reported by a provider; coordinates may be omitted."""

    name: str = ""
    coordinates: Optional[Coordinates] = None


class Station(CamelModel):
    """
    A transit boarding point returned by the nearby-station search.

    ``x`` is the longitude and ``y`` the latitude, matching provider order.
    """

    id: str
    name: str
    x: float = Field(..., description="Longitude")
    y: float = Field(..., description="Latitude")
    type: str = "station"
