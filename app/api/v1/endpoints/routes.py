"""
Routes API Endpoint

Provides REST API for budget-constrained taxi and transit route search.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.core.config import settings
from app.db.database import get_db
from app.schemas.routes import RouteResponse, RouteSearchRequest
from app.services.route_planner import RouteProvidersUnavailableError, route_planner
from app.services.search_history_service import search_history_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/search", response_model=RouteResponse)
async def search_routes(
    request: RouteSearchRequest,
    db: Session = Depends(get_db),
):
    """
    Find the cheapest routes that fit the time and walking budgets.

    Combines transit itineraries with at most one taxi segment. When no
    route fits, the fastest candidates are returned with
    ``noFeasibleRoute`` set instead of an error.

    Args:
        request: Origin, destination and budget constraints
        db: Database session used to record the search

    Returns:
        RouteResponse with routes ordered best-first

    Raises:
        HTTPException: 503 when no provider could be reached, 500 on unexpected errors
    """
    logger.info(
        "Route search request: origin=%s, destination=%s, max_time=%s, max_walk=%s, "
        "require_taxi=%s",
        request.origin,
        request.destination,
        request.max_time_min,
        request.max_walk_min,
        request.require_taxi,
    )

    try:
        response = await route_planner.find_optimal_routes(request)

    except RouteProvidersUnavailableError as e:
        logger.error("Route providers unavailable: %s", str(e))
        raise HTTPException(
            status_code=503,
            detail=f"Route providers unavailable: {str(e)}",
        ) from e

    except Exception as e:
        logger.exception("Unexpected error in route search")
        raise HTTPException(
            status_code=500,
            detail=f"An unexpected error occurred while searching for routes: {str(e)}",
        ) from e

    logger.info(
        "Route search finished: %d routes, no_feasible_route=%s",
        len(response.routes),
        response.no_feasible_route,
    )

    if settings.RECORD_SEARCHES:
        try:
            search_history_service.record_search(db, request, response)
        except Exception as e:  # pylint: disable=broad-except
            # History is best-effort; the search result still goes out
            logger.warning("Failed to record search: %s", str(e))
            db.rollback()

    return response
