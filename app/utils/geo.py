"""
Geo and time helpers used by the route planner.

Distances are in meters, durations in whole minutes unless noted.
"""

import math
from datetime import datetime, timedelta
from typing import Protocol

EARTH_RADIUS_KM = 6371.0

WALK_SPEED_M_PER_MIN = 70
SUBWAY_TRANSFER_WALK_MIN = 3
BUS_TRANSFER_WALK_MIN = 1

POI_RADIUS_MIN_M = 800
POI_RADIUS_MAX_M = 3000
POI_RADIUS_SLACK = 1.2


class _LatLng(Protocol):
    lat: float
    lng: float


def distance_meters(a: _LatLng, b: _LatLng) -> float:
    """Great-circle (haversine) distance between two points."""
    d_lat = math.radians(b.lat - a.lat)
    d_lng = math.radians(b.lng - a.lng)
    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(a.lat)) * math.cos(math.radians(b.lat)) * math.sin(d_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_KM * c * 1000


def walk_time_min(total_walk_m: float, subway_transfers: int = 0, bus_transfers: int = 0) -> int:
    """
    Estimate walking minutes for a transit itinerary.

    Provider walk distances leave out in-station transfer walking, so each
    subway and bus leg adds a fixed penalty on top of the outdoor walk.
    """
    outdoor_min = math.ceil(total_walk_m / WALK_SPEED_M_PER_MIN)
    return (
        outdoor_min
        + subway_transfers * SUBWAY_TRANSFER_WALK_MIN
        + bus_transfers * BUS_TRANSFER_WALK_MIN
    )


def poi_search_radius(max_walk_min: int) -> float:
    """Nearby-station search radius for a walking budget, clamped to [800, 3000] m."""
    base_radius = max_walk_min * WALK_SPEED_M_PER_MIN * POI_RADIUS_SLACK
    return max(POI_RADIUS_MIN_M, min(base_radius, POI_RADIUS_MAX_M))


def propagate_arrival_times(candidate, departure_time: datetime):
    """
    Stamp each leg of ``candidate`` with its arrival time.

    Legs are walked once in order, accumulating ``duration_min``. The
    candidate's own arrival time is the last leg's arrival, or the departure
    time when it has no legs. The candidate is modified in place and returned.
    """
    candidate.departure_time = departure_time
    current = departure_time
    for leg in candidate.legs:
        current = current + timedelta(minutes=leg.duration_min)
        leg.arrival_time = current
    candidate.arrival_time = current
    return candidate
