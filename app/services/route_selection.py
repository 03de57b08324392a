"""
Route selection and response building.
"""

import logging
from datetime import datetime
from typing import List, Optional

from app.schemas.routes import DebugInfo, RouteCandidate, RouteConstraints, RouteResponse
from app.utils.geo import propagate_arrival_times

logger = logging.getLogger(__name__)

MAX_FEASIBLE_ROUTES = 10
MAX_FALLBACK_ROUTES = 5


def build_route_response(
    candidates: List[RouteCandidate],
    constraints: RouteConstraints,
    departure_time: datetime,
    debug: Optional[DebugInfo] = None,
) -> RouteResponse:
    """
    Rank candidates and package the response.

    Feasible candidates (restricted to taxi routes when required) are ordered
    by cost, then time. When none remain, every candidate is ordered by time
    and the fastest one is reported as the closest achievable option.
    """
    for candidate in candidates:
        propagate_arrival_times(candidate, departure_time)

    feasible = [c for c in candidates if c.is_feasible]
    if constraints.require_taxi:
        feasible = [c for c in feasible if c.has_taxi]

    if feasible:
        ranked = sorted(feasible, key=lambda c: (c.total_cost_krw, c.total_time_min))
        return RouteResponse(
            routes=ranked[:MAX_FEASIBLE_ROUTES],
            count=len(ranked),
            no_feasible_route=False,
            constraints=constraints,
            debug=debug,
        )

    ranked = sorted(candidates, key=lambda c: c.total_time_min)
    fastest = ranked[0] if ranked else None
    logger.info("No feasible route among %d candidates", len(ranked))

    return RouteResponse(
        routes=ranked[:MAX_FALLBACK_ROUTES],
        count=len(ranked),
        no_feasible_route=True,
        min_possible_time_min=fastest.total_time_min if fastest else None,
        min_possible_walk_min=fastest.walk_time_min if fastest else None,
        constraints=constraints,
        debug=debug,
    )
