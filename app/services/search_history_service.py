"""
Search history and favorite route service.

Stores route searches as RouteResponse-shaped records; the planner never
reads them back.
"""

from typing import List

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.models.search import FavoriteRoute, Search
from app.schemas.routes import RouteResponse, RouteSearchRequest
from app.schemas.search_history import FavoriteRouteCreate


class SearchHistoryService:
    """Service for recorded searches and favorite routes."""

    @staticmethod
    def record_search(db: Session, request: RouteSearchRequest, response: RouteResponse) -> Search:
        """
        Persist a completed search with its returned routes.

        Args:
            db: Database session
            request: The search request
            response: The response returned to the caller

        Returns:
            Created Search object
        """
        search = Search(
            origin_name=request.origin.name,
            origin_lat=request.origin.lat,
            origin_lng=request.origin.lng,
            destination_name=request.destination.name,
            destination_lat=request.destination.lat,
            destination_lng=request.destination.lng,
            max_time_min=request.max_time_min,
            max_walk_min=request.max_walk_min,
            result_routes=[
                route.model_dump(mode="json", by_alias=True) for route in response.routes
            ],
        )
        db.add(search)
        db.commit()
        db.refresh(search)

        return search

    @staticmethod
    def get_recent_searches(db: Session, limit: int = 20) -> List[Search]:
        """
        Get the most recent searches, newest first.
        """
        return (
            db.query(Search)
            .order_by(Search.searched_at.desc(), Search.id.desc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def get_favorites(db: Session) -> List[FavoriteRoute]:
        """
        Get all favorite routes, newest first.
        """
        return (
            db.query(FavoriteRoute)
            .order_by(FavoriteRoute.created_at.desc(), FavoriteRoute.id.desc())
            .all()
        )

    @staticmethod
    def create_favorite(db: Session, favorite_in: FavoriteRouteCreate) -> FavoriteRoute:
        """
        Save a favorite route.

        Raises:
            HTTPException: If the route name is blank
        """
        if not favorite_in.route_name.strip():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Route name cannot be empty",
            )

        favorite = FavoriteRoute(**favorite_in.model_dump())
        favorite.route_name = favorite_in.route_name.strip()
        db.add(favorite)
        db.commit()
        db.refresh(favorite)

        return favorite

    @staticmethod
    def delete_favorite(db: Session, favorite_id: int) -> bool:
        """
        Delete a favorite route.

        Raises:
            HTTPException: If the favorite does not exist
        """
        favorite = db.query(FavoriteRoute).filter(FavoriteRoute.id == favorite_id).first()

        if not favorite:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Favorite route not found",
            )

        db.delete(favorite)
        db.commit()

        return True


# Create a singleton instance
search_history_service = SearchHistoryService()
