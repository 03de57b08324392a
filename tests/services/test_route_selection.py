"""
Unit tests for route selection and response building.
"""

from datetime import datetime, timezone

import pytest

from app.schemas.routes import (
    CandidateType,
    RouteConstraints,
    TaxiDetails,
    TaxiLeg,
    TransitDetails,
    TransitLeg,
)
from app.services.route_planner import make_candidate
from app.services.route_selection import (
    MAX_FALLBACK_ROUTES,
    MAX_FEASIBLE_ROUTES,
    build_route_response,
)

DEPARTURE = datetime(2026, 3, 2, 8, 0, tzinfo=timezone.utc)


def transit_candidate(candidate_id, cost, minutes, feasible=True, walk=5):
    leg = TransitLeg(
        from_="Origin",
        to="Destination",
        duration_min=minutes,
        cost_krw=cost,
        details=TransitDetails(),
    )
    return make_candidate(candidate_id, CandidateType.TRANSIT_ONLY, [leg], walk, 60, feasible)


def taxi_candidate(candidate_id, cost, minutes, feasible=True):
    leg = TaxiLeg(
        from_="Origin",
        to="Destination",
        duration_min=minutes,
        cost_krw=cost,
        details=TaxiDetails(taxi_fare=cost),
    )
    return make_candidate(candidate_id, CandidateType.TAXI_ONLY, [leg], 0, 60, feasible)


@pytest.fixture
def constraints():
    return RouteConstraints(max_time_min=60, max_walk_min=15)


def test_feasible_sorted_by_cost_then_time(constraints):
    candidates = [
        transit_candidate("c0", 500, 10),
        transit_candidate("c1", 300, 20),
        transit_candidate("c2", 300, 15),
    ]

    response = build_route_response(candidates, constraints, DEPARTURE)

    assert [r.id for r in response.routes] == ["c2", "c1", "c0"]
    assert response.no_feasible_route is False
    assert response.min_possible_time_min is None
    assert response.count == 3


def test_infeasible_candidates_excluded_when_feasible_exist(constraints):
    candidates = [
        transit_candidate("cheap-but-late", 100, 90, feasible=False),
        taxi_candidate("taxi", 15000, 25),
    ]

    response = build_route_response(candidates, constraints, DEPARTURE)

    assert [r.id for r in response.routes] == ["taxi"]


def test_feasible_truncated_to_top_routes(constraints):
    candidates = [transit_candidate(f"c{idx}", 1000 + idx, 30) for idx in range(14)]

    response = build_route_response(candidates, constraints, DEPARTURE)

    assert len(response.routes) == MAX_FEASIBLE_ROUTES
    assert response.count == 14
    assert response.routes[0].id == "c0"


def test_require_taxi_filters_feasible(constraints):
    constraints.require_taxi = True
    candidates = [
        transit_candidate("transit", 1400, 30),
        taxi_candidate("taxi", 15000, 25),
    ]

    response = build_route_response(candidates, constraints, DEPARTURE)

    assert [r.id for r in response.routes] == ["taxi"]
    assert all(r.has_taxi for r in response.routes)


def test_require_taxi_without_taxi_route_falls_back(constraints):
    constraints.require_taxi = True
    candidates = [
        transit_candidate("slow", 1400, 45),
        transit_candidate("fast", 1600, 35),
    ]

    response = build_route_response(candidates, constraints, DEPARTURE)

    assert response.no_feasible_route is True
    assert [r.id for r in response.routes] == ["fast", "slow"]


def test_fallback_sorted_by_time_with_hint(constraints):
    candidates = [
        transit_candidate("t1", 1400, 80, feasible=False, walk=12),
        taxi_candidate("taxi", 30000, 65, feasible=False),
        transit_candidate("t2", 1500, 70, feasible=False, walk=20),
    ]

    response = build_route_response(candidates, constraints, DEPARTURE)

    assert response.no_feasible_route is True
    assert [r.id for r in response.routes] == ["taxi", "t2", "t1"]
    assert response.min_possible_time_min == 65
    assert response.min_possible_walk_min == 0
    assert response.count == 3


def test_fallback_truncated(constraints):
    candidates = [transit_candidate(f"c{idx}", 1000, 90 + idx, feasible=False) for idx in range(8)]

    response = build_route_response(candidates, constraints, DEPARTURE)

    assert len(response.routes) == MAX_FALLBACK_ROUTES
    assert response.min_possible_time_min == 90


def test_empty_candidates(constraints):
    response = build_route_response([], constraints, DEPARTURE)

    assert response.routes == []
    assert response.no_feasible_route is True
    assert response.min_possible_time_min is None
    assert response.min_possible_walk_min is None


def test_arrival_times_attached(constraints):
    candidate = taxi_candidate("taxi", 15000, 25)

    response = build_route_response([candidate], constraints, DEPARTURE)

    route = response.routes[0]
    assert route.departure_time == DEPARTURE
    assert route.arrival_time == datetime(2026, 3, 2, 8, 25, tzinfo=timezone.utc)
