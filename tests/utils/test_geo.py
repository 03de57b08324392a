"""
Unit tests for geo and time helpers.
"""

from datetime import datetime, timezone

import pytest

from app.schemas.location import Location
from app.schemas.routes import CandidateType, TaxiDetails, TaxiLeg, WalkDetails, WalkLeg
from app.services.route_planner import make_candidate
from app.utils.geo import distance_meters, poi_search_radius, propagate_arrival_times, walk_time_min


def test_distance_identical_points_is_zero(gangnam):
    assert distance_meters(gangnam, gangnam) == 0


def test_distance_one_degree_latitude():
    a = Location(name="a", lat=0.0, lng=0.0)
    b = Location(name="b", lat=1.0, lng=0.0)

    assert distance_meters(a, b) == pytest.approx(111194.93, rel=1e-6)


def test_distance_is_symmetric(gangnam, jamsil):
    assert distance_meters(gangnam, jamsil) == pytest.approx(distance_meters(jamsil, gangnam))


def test_walk_time_adds_transfer_penalties():
    assert walk_time_min(1000, 1, 2) == 20


def test_walk_time_rounds_outdoor_walk_up():
    assert walk_time_min(650) == 10
    assert walk_time_min(0) == 0


@pytest.mark.parametrize(
    "max_walk_min, expected",
    [
        (15, 1260),
        (2, 800),
        (60, 3000),
    ],
)
def test_poi_search_radius_clamped(max_walk_min, expected):
    assert poi_search_radius(max_walk_min) == pytest.approx(expected)


def test_propagate_arrival_times():
    legs = [
        TaxiLeg(
            from_="A", to="B", duration_min=9, cost_krw=6000, details=TaxiDetails(taxi_fare=6000)
        ),
        WalkLeg(from_="B", to="C", duration_min=4, cost_krw=0, details=WalkDetails(distance=250)),
    ]
    candidate = make_candidate("c", CandidateType.TAXI_ONLY, legs, 4, 30, True)
    departure = datetime(2026, 3, 2, 8, 0, tzinfo=timezone.utc)

    propagate_arrival_times(candidate, departure)

    assert candidate.departure_time == departure
    assert candidate.legs[0].arrival_time == datetime(2026, 3, 2, 8, 9, tzinfo=timezone.utc)
    assert candidate.legs[1].arrival_time == datetime(2026, 3, 2, 8, 13, tzinfo=timezone.utc)
    assert candidate.arrival_time == candidate.legs[-1].arrival_time


def test_propagate_arrival_times_without_legs():
    candidate = make_candidate("empty", CandidateType.WALK_ONLY, [], 0, 10, True)
    departure = datetime(2026, 3, 2, 8, 0, tzinfo=timezone.utc)

    propagate_arrival_times(candidate, departure)

    assert candidate.arrival_time == departure
