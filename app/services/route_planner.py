"""
Route Planner

Builds comparable multimodal route candidates between two points and hands
them to the selection step. Candidate shapes:

- walk-only when the endpoints are close enough to skip every provider
- transit-only from the transit provider's itineraries
- taxi-only from a point-to-point driving estimate
- taxi-transit: a short taxi ride to a station near the origin, then transit
- transit-taxi: transit to a station near the destination, then a short taxi

All state lives in a per-request ``PlanningContext``; the planner itself only
holds references to the provider adapters.
"""

import asyncio
import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Awaitable, Callable, List, Optional, Sequence

from app.core.config import settings
from app.schemas.driving import DrivingEta
from app.schemas.itinary import Itinerary, TransportMode
from app.schemas.location import Station
from app.schemas.routes import (
    CandidateType,
    DebugInfo,
    RouteCandidate,
    RouteConstraints,
    RouteResponse,
    RouteSearchRequest,
    TaxiDetails,
    TaxiLeg,
    TransitDetails,
    TransitLeg,
    TransitStep,
    WalkDetails,
    WalkLeg,
)
from app.services.mobility_service import MobilityService, mobility_service
from app.services.places_service import PlacesService, places_service
from app.services.route_selection import build_route_response
from app.services.station_screening import select_candidate_stations
from app.services.transit_service import TransitService, transit_service
from app.utils.geo import WALK_SPEED_M_PER_MIN, distance_meters, poi_search_radius, walk_time_min

logger = logging.getLogger(__name__)

WALK_ONLY_MAX_DISTANCE_M = 700
TAXI_PICKUP_BUFFER_MIN = 2
DROPOFF_TO_PLATFORM_BUFFER_MIN = 1
TAXI_BASE_FARE_KRW = 4800
TAXI_FARE_PER_KM_KRW = 1000
MAX_TRANSIT_ONLY_ITINERARIES = 5
MAX_MIXED_ITINERARIES = 3


class RouteProvidersUnavailableError(Exception):
    """Raised when no candidate could be built because every provider call failed."""


def fallback_taxi_fare(distance_m: float) -> int:
    """Flat base fare plus a per-km rate, used when the provider omits the fare."""
    return math.ceil(TAXI_BASE_FARE_KRW + (distance_m / 1000) * TAXI_FARE_PER_KM_KRW)


@dataclass
class TransitSummary:
    """Aggregate metrics of one itinerary."""

    time_min: int
    cost_krw: int
    walk_m: float
    bus_count: int
    subway_count: int
    walk_time_min: int
    path_type: Optional[int]
    steps: List[TransitStep]


def summarize_itinerary(itinerary: Itinerary) -> TransitSummary:
    walk_m = 0.0
    bus_count = 0
    subway_count = 0
    steps: List[TransitStep] = []

    for leg in itinerary.legs:
        if leg.mode == TransportMode.WALK:
            walk_m += leg.distance
        elif leg.mode == TransportMode.BUS:
            bus_count += 1
        elif leg.mode == TransportMode.SUBWAY:
            subway_count += 1

        steps.append(
            TransitStep(
                mode=leg.mode,
                from_=leg.from_place.name,
                to=leg.to_place.name,
                duration=leg.duration,
                distance=leg.distance,
                route=leg.route,
                route_color=leg.route_color,
                service=leg.service,
                station_count=leg.stop_count,
            )
        )

    return TransitSummary(
        time_min=math.ceil(itinerary.total_time / 60),
        cost_krw=itinerary.fare or 0,
        walk_m=walk_m,
        bus_count=bus_count,
        subway_count=subway_count,
        walk_time_min=walk_time_min(walk_m, subway_count, bus_count),
        path_type=itinerary.path_type,
        steps=steps,
    )


def transit_leg(summary: TransitSummary, from_name: str, to_name: str) -> TransitLeg:
    return TransitLeg(
        from_=from_name,
        to=to_name,
        duration_min=summary.time_min,
        cost_krw=summary.cost_krw,
        details=TransitDetails(
            total_walk_m=summary.walk_m,
            bus_count=summary.bus_count,
            subway_count=summary.subway_count,
            path_type=summary.path_type,
            steps=summary.steps,
        ),
    )


def taxi_leg(eta: DrivingEta, from_name: str, to_name: str) -> TaxiLeg:
    """Taxi leg with pickup buffer; cost is fare plus toll."""
    fare = eta.taxi_fare or fallback_taxi_fare(eta.distance_m)
    toll = eta.toll_fare or 0
    return TaxiLeg(
        from_=from_name,
        to=to_name,
        duration_min=math.ceil(eta.duration_sec / 60) + TAXI_PICKUP_BUFFER_MIN,
        cost_krw=fare + toll,
        details=TaxiDetails(
            distance=eta.distance_m,
            duration=eta.duration_sec,
            taxi_fare=fare,
            toll_fare=toll,
        ),
    )


def make_candidate(
    candidate_id: str,
    candidate_type: CandidateType,
    legs: list,
    walk_minutes: int,
    max_time_min: int,
    is_feasible: bool,
) -> RouteCandidate:
    """Assemble a candidate whose totals are derived from its legs."""
    total_time = sum(leg.duration_min for leg in legs)
    return RouteCandidate(
        id=candidate_id,
        type=candidate_type,
        total_time_min=total_time,
        total_cost_krw=sum(leg.cost_krw for leg in legs),
        walk_time_min=walk_minutes,
        has_taxi=any(leg.type == "taxi" for leg in legs),
        legs=legs,
        slack_min=max_time_min - total_time,
        is_feasible=is_feasible,
    )


@dataclass
class PlanningContext:
    """Mutable state for a single route search."""

    request: RouteSearchRequest
    departure_time: datetime
    candidates: List[RouteCandidate] = field(default_factory=list)
    debug: DebugInfo = field(default_factory=DebugInfo)
    transit_failed: bool = False
    taxi_failed: bool = False

    def within_budget(self, total_time: int, walk_minutes: int) -> bool:
        return total_time <= self.request.max_time_min and walk_minutes <= self.request.max_walk_min


class RoutePlanner:
    """
    Generates and ranks taxi/transit route candidates for one request at a time.
    """

    def __init__(
        self,
        transit: Optional[TransitService] = None,
        mobility: Optional[MobilityService] = None,
        places: Optional[PlacesService] = None,
        fanout_limit: Optional[int] = None,
    ):
        self._transit = transit or transit_service
        self._mobility = mobility or mobility_service
        self._places = places or places_service
        self._fanout_limit = max(1, fanout_limit or settings.STATION_FANOUT_LIMIT)

    async def find_optimal_routes(self, request: RouteSearchRequest) -> RouteResponse:
        """
        Search routes for ``request`` and return the ranked response.

        Raises:
            RouteProvidersUnavailableError: no candidate exists and both the
                transit search and the driving estimate failed
        """
        departure_time = request.departure_time or datetime.now(timezone.utc)
        if departure_time.tzinfo is None:
            departure_time = departure_time.replace(tzinfo=timezone.utc)

        ctx = PlanningContext(request=request, departure_time=departure_time)
        ctx.debug.transit_key_set = bool(getattr(self._transit, "has_api_key", False))

        await self._generate(ctx)

        if not ctx.candidates and ctx.transit_failed and ctx.taxi_failed:
            raise RouteProvidersUnavailableError(
                "Transit and driving providers are both unavailable"
            )

        logger.info(
            "Generated %d route candidates (taxi-transit=%d, transit-taxi=%d)",
            len(ctx.candidates),
            ctx.debug.taxi_transit_generated,
            ctx.debug.transit_taxi_generated,
        )

        constraints = RouteConstraints(
            max_time_min=request.max_time_min,
            max_walk_min=request.max_walk_min,
            require_taxi=request.require_taxi,
            taxi_max_segments=request.taxi_max_segments,
        )
        return build_route_response(
            ctx.candidates,
            constraints,
            departure_time,
            debug=ctx.debug if settings.INCLUDE_DEBUG_INFO else None,
        )

    async def _generate(self, ctx: PlanningContext) -> None:
        origin = ctx.request.origin
        destination = ctx.request.destination

        distance_m = distance_meters(origin, destination)
        if distance_m < WALK_ONLY_MAX_DISTANCE_M:
            ctx.candidates.append(self._walk_only_candidate(ctx, distance_m))
            return

        ctx.debug.transit_called = True
        itineraries, eta = await asyncio.gather(
            self._transit.search_itineraries(origin.lng, origin.lat, destination.lng, destination.lat),
            self._mobility.get_driving_eta(origin.lng, origin.lat, destination.lng, destination.lat),
        )

        self._add_transit_only(ctx, itineraries)
        self._add_taxi_only(ctx, eta)

        if ctx.request.taxi_max_segments >= 1:
            await self._add_mixed(ctx)

    def _walk_only_candidate(self, ctx: PlanningContext, distance_m: float) -> RouteCandidate:
        minutes = math.ceil(distance_m / WALK_SPEED_M_PER_MIN)
        leg = WalkLeg(
            from_=ctx.request.origin.name,
            to=ctx.request.destination.name,
            duration_min=minutes,
            cost_krw=0,
            details=WalkDetails(distance=distance_m, reason="short-distance"),
        )
        return make_candidate(
            "walk-only",
            CandidateType.WALK_ONLY,
            [leg],
            minutes,
            ctx.request.max_time_min,
            ctx.within_budget(minutes, minutes),
        )

    def _add_transit_only(self, ctx: PlanningContext, itineraries: Optional[List[Itinerary]]) -> None:
        if itineraries is None:
            ctx.transit_failed = True
            return
        if not itineraries:
            return

        ctx.debug.transit_success = True
        ctx.debug.transit_itinerary_count = len(itineraries)

        for idx, itinerary in enumerate(itineraries[:MAX_TRANSIT_ONLY_ITINERARIES]):
            summary = summarize_itinerary(itinerary)
            leg = transit_leg(summary, ctx.request.origin.name, ctx.request.destination.name)
            # kept even when infeasible, for the no-feasible-route fallback
            ctx.candidates.append(
                make_candidate(
                    f"transit-{summary.path_type or 0}-{idx}",
                    CandidateType.TRANSIT_ONLY,
                    [leg],
                    summary.walk_time_min,
                    ctx.request.max_time_min,
                    ctx.within_budget(summary.time_min, summary.walk_time_min),
                )
            )

    def _add_taxi_only(self, ctx: PlanningContext, eta: Optional[DrivingEta]) -> None:
        if eta is None:
            ctx.taxi_failed = True
            return

        leg = taxi_leg(eta, ctx.request.origin.name, ctx.request.destination.name)
        ctx.candidates.append(
            make_candidate(
                "taxi-only",
                CandidateType.TAXI_ONLY,
                [leg],
                0,
                ctx.request.max_time_min,
                leg.duration_min <= ctx.request.max_time_min,
            )
        )

    async def _add_mixed(self, ctx: PlanningContext) -> None:
        origin = ctx.request.origin
        destination = ctx.request.destination

        radius = poi_search_radius(ctx.request.max_walk_min)
        ctx.debug.poi_radius = radius

        stations_near_origin, stations_near_dest = await asyncio.gather(
            self._places.search_nearby_stations(origin.lng, origin.lat, radius),
            self._places.search_nearby_stations(destination.lng, destination.lat, radius),
        )
        ctx.debug.stations_near_origin = len(stations_near_origin)
        ctx.debug.stations_near_dest = len(stations_near_dest)

        taxi_transit, transit_taxi = await asyncio.gather(
            self._taxi_transit_candidates(ctx, stations_near_origin),
            self._transit_taxi_candidates(ctx, stations_near_dest),
        )
        ctx.candidates.extend(taxi_transit)
        ctx.candidates.extend(transit_taxi)

    async def _taxi_transit_candidates(
        self, ctx: PlanningContext, stations: List[Station]
    ) -> List[RouteCandidate]:
        if not stations:
            return []

        origin = ctx.request.origin
        etas = await self._mobility.get_batch_eta_to_destinations(origin.lng, origin.lat, stations)
        selected = select_candidate_stations(stations, etas)

        async def for_station(station: Station) -> List[RouteCandidate]:
            ctx.debug.taxi_transit_attempts += 1
            destination = ctx.request.destination

            eta = await self._mobility.get_driving_eta(origin.lng, origin.lat, station.x, station.y)
            if eta is None:
                return []
            itineraries = await self._transit.search_itineraries(
                station.x, station.y, destination.lng, destination.lat
            )
            if not itineraries:
                return []

            found: List[RouteCandidate] = []
            for idx, itinerary in enumerate(itineraries[:MAX_MIXED_ITINERARIES]):
                summary = summarize_itinerary(itinerary)
                candidate = self._mixed_candidate(
                    ctx,
                    f"taxi-transit-{station.id}-{summary.path_type or 0}-{idx}",
                    CandidateType.TAXI_TRANSIT,
                    [
                        taxi_leg(eta, origin.name, station.name),
                        transit_leg(summary, station.name, destination.name),
                    ],
                    summary,
                )
                if candidate is not None:
                    found.append(candidate)
            ctx.debug.taxi_transit_generated += len(found)
            return found

        return await self._fan_out(selected, for_station)

    async def _transit_taxi_candidates(
        self, ctx: PlanningContext, stations: List[Station]
    ) -> List[RouteCandidate]:
        if not stations:
            return []

        destination = ctx.request.destination
        etas = await self._mobility.get_batch_eta_from_origins(
            stations, destination.lng, destination.lat
        )
        selected = select_candidate_stations(stations, etas)

        async def for_station(station: Station) -> List[RouteCandidate]:
            ctx.debug.transit_taxi_attempts += 1
            origin = ctx.request.origin

            itineraries = await self._transit.search_itineraries(
                origin.lng, origin.lat, station.x, station.y
            )
            if not itineraries:
                return []
            eta = await self._mobility.get_driving_eta(
                station.x, station.y, destination.lng, destination.lat
            )
            if eta is None:
                return []

            found: List[RouteCandidate] = []
            for idx, itinerary in enumerate(itineraries[:MAX_MIXED_ITINERARIES]):
                summary = summarize_itinerary(itinerary)
                candidate = self._mixed_candidate(
                    ctx,
                    f"transit-taxi-{station.id}-{summary.path_type or 0}-{idx}",
                    CandidateType.TRANSIT_TAXI,
                    [
                        transit_leg(summary, origin.name, station.name),
                        taxi_leg(eta, station.name, destination.name),
                    ],
                    summary,
                )
                if candidate is not None:
                    found.append(candidate)
            ctx.debug.transit_taxi_generated += len(found)
            return found

        return await self._fan_out(selected, for_station)

    @staticmethod
    def _mixed_candidate(
        ctx: PlanningContext,
        candidate_id: str,
        candidate_type: CandidateType,
        legs: list,
        summary: TransitSummary,
    ) -> Optional[RouteCandidate]:
        """Build a mixed candidate, or None when it breaks either budget."""
        walk_minutes = summary.walk_time_min + DROPOFF_TO_PLATFORM_BUFFER_MIN
        total_time = sum(leg.duration_min for leg in legs)
        if not ctx.within_budget(total_time, walk_minutes):
            return None
        return make_candidate(
            candidate_id, candidate_type, legs, walk_minutes, ctx.request.max_time_min, True
        )

    async def _fan_out(
        self,
        stations: Sequence[Station],
        worker: Callable[[Station], Awaitable[List[RouteCandidate]]],
    ) -> List[RouteCandidate]:
        """
        Run ``worker`` for each station with bounded concurrency.

        A failure for one station is logged and skipped. Results keep the
        station order.
        """
        semaphore = asyncio.Semaphore(self._fanout_limit)

        async def run(station: Station) -> List[RouteCandidate]:
            async with semaphore:
                try:
                    return await worker(station)
                except Exception as e:  # pylint: disable=broad-except
                    logger.warning("Skipping station %s (%s): %s", station.name, station.id, str(e))
                    return []

        results = await asyncio.gather(*(run(station) for station in stations))
        return [candidate for batch in results for candidate in batch]


# Singleton instance for dependency injection
route_planner = RoutePlanner()
