"""
Route Search Request/Response Schemas

Pydantic models for the route search API endpoint. Everything is serialised
with camelCase keys.
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import Field

from app.schemas.base import CamelModel
from app.schemas.itinary import TransportMode
from app.schemas.location import Location


class RouteSearchRequest(CamelModel):
    """Request schema for route search endpoint."""

    origin: Location = Field(..., description="Starting location")
    destination: Location = Field(..., description="Destination location")
    max_time_min: int = Field(..., gt=0, description="Total time budget in minutes")
    max_walk_min: int = Field(..., gt=0, description="Walking time budget in minutes")
    require_taxi: bool = Field(False, description="Only return routes that use a taxi")
    taxi_max_segments: int = Field(
        default=1,
        ge=0,
        description="0 disables mixed taxi/transit routes; any value >= 1 allows one taxi segment",
    )
    departure_time: Optional[datetime] = Field(
        None,
        description=(
            "Departure time (ISO format). " "Defaults to current time if not provided."
        ),
    )


class TransitStep(CamelModel):
    """One provider leg inside a transit leg."""

    mode: TransportMode
    from_: str = Field("", alias="from")
    to: str = ""
    duration: int = Field(0, description="Duration in seconds")
    distance: Optional[float] = None
    route: Optional[str] = None
    route_color: Optional[str] = None
    service: Optional[int] = None
    station_count: int = 0


class WalkDetails(CamelModel):
    distance: float = Field(..., description="Walking distance in meters")
    reason: Optional[str] = None


class TaxiDetails(CamelModel):
    distance: Optional[float] = Field(None, description="Driving distance in meters")
    duration: Optional[int] = Field(None, description="Driving duration in seconds")
    taxi_fare: int = 0
    toll_fare: int = 0


class TransitDetails(CamelModel):
    total_walk_m: float = 0.0
    bus_count: int = 0
    subway_count: int = 0
    path_type: Optional[int] = None
    steps: List[TransitStep] = []


class _LegBase(CamelModel):
    from_: str = Field(..., alias="from")
    to: str
    duration_min: int
    cost_krw: int
    arrival_time: Optional[datetime] = None


class WalkLeg(_LegBase):
    type: Literal["walk"] = "walk"
    details: WalkDetails


class TaxiLeg(_LegBase):
    type: Literal["taxi"] = "taxi"
    details: TaxiDetails


class TransitLeg(_LegBase):
    type: Literal["transit"] = "transit"
    details: TransitDetails


RouteLeg = Annotated[Union[WalkLeg, TaxiLeg, TransitLeg], Field(discriminator="type")]


class CandidateType(str, Enum):
    """Route candidate shapes."""

    TRANSIT_ONLY = "transit-only"
    TAXI_ONLY = "taxi-only"
    TAXI_TRANSIT = "taxi-transit"
    TRANSIT_TAXI = "transit-taxi"
    WALK_ONLY = "walk-only"


class RouteCandidate(CamelModel):
    """A complete origin-to-destination route with aggregate metrics."""

    id: str
    type: CandidateType
    total_time_min: int
    total_cost_krw: int
    walk_time_min: int
    has_taxi: bool
    legs: List[RouteLeg]
    slack_min: int = Field(..., description="max_time_min minus total_time_min")
    is_feasible: bool
    departure_time: Optional[datetime] = None
    arrival_time: Optional[datetime] = None


class RouteConstraints(CamelModel):
    max_time_min: int
    max_walk_min: int
    require_taxi: bool = False
    taxi_max_segments: int = 1


class DebugInfo(CamelModel):
    """Per-request provider and screening counters."""

    transit_called: bool = False
    transit_success: bool = False
    transit_itinerary_count: int = 0
    stations_near_origin: int = 0
    stations_near_dest: int = 0
    poi_radius: float = 0
    taxi_transit_attempts: int = 0
    transit_taxi_attempts: int = 0
    taxi_transit_generated: int = 0
    transit_taxi_generated: int = 0
    transit_key_set: bool = False


class RouteResponse(CamelModel):
    """Response schema for route search endpoint."""

    success: bool = True
    routes: List[RouteCandidate] = Field(..., description="Routes ordered best-first")
    count: int
    no_feasible_route: bool
    min_possible_time_min: Optional[int] = None
    min_possible_walk_min: Optional[int] = None
    constraints: RouteConstraints
    debug: Optional[DebugInfo] = None
