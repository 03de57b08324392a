"""
Itinerary Schema

Pydantic models for public transport itineraries returned by the transit
provider.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from app.schemas.location import Place


class TransportMode(str, Enum):
    """Transport modes reported by the transit provider."""

    WALK = "WALK"
    BUS = "BUS"
    SUBWAY = "SUBWAY"
    EXPRESSBUS = "EXPRESSBUS"
    TRAIN = "TRAIN"
    AIRPLANE = "AIRPLANE"
    FERRY = "FERRY"


class ItineraryLeg(BaseModel):
    """A single segment of a transit itinerary."""

    mode: TransportMode
    duration: int = Field(..., description="Section duration in seconds")
    distance: float = Field(0.0, description="Distance in meters")
    from_place: Place
    to_place: Place
    route: Optional[str] = Field(None, description="Route name, e.g. bus number or line")
    route_color: Optional[str] = None
    service: Optional[int] = None
    stop_count: int = Field(0, description="Number of stops passed on this leg")


class Itinerary(BaseModel):
    """A complete transit journey proposed by the provider."""

    total_time: int = Field(..., description="Total duration in seconds")
    fare: int = Field(0, description="Total regular fare in KRW")
    transfer_count: int = 0
    path_type: Optional[int] = None
    total_walk_time: Optional[int] = Field(None, description="Walking time in seconds")
    total_distance: Optional[float] = Field(None, description="Total distance in meters")
    legs: List[ItineraryLeg] = []
