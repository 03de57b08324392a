from fastapi import APIRouter

from app.api.v1.endpoints import favorites, health, routes, searches

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(routes.router, prefix="/routes", tags=["routes"])
api_router.include_router(searches.router, prefix="/searches", tags=["searches"])
api_router.include_router(favorites.router, prefix="/favorites", tags=["favorites"])
