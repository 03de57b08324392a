from typing import Any, List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.db.database import get_db
from app.schemas.search_history import FavoriteRouteCreate, FavoriteRouteResponse
from app.services.search_history_service import search_history_service

router = APIRouter()


@router.get("", response_model=List[FavoriteRouteResponse])
async def get_favorite_routes(db: Session = Depends(get_db)) -> Any:
    """
    Get all saved favorite routes.
    """
    return search_history_service.get_favorites(db)


@router.post("", response_model=FavoriteRouteResponse, status_code=201)
async def create_favorite_route(
    favorite_in: FavoriteRouteCreate,
    db: Session = Depends(get_db),
) -> Any:
    """
    Save an origin/destination pair with its budgets as a favorite.
    """
    return search_history_service.create_favorite(db, favorite_in)


@router.delete("/{favorite_id}", status_code=204)
async def delete_favorite_route(
    favorite_id: int,
    db: Session = Depends(get_db),
) -> None:
    """
    Delete a favorite route.
    """
    search_history_service.delete_favorite(db, favorite_id)
