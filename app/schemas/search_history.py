from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SearchRecordResponse(BaseModel):
    id: int
    origin_name: str
    origin_lat: float
    origin_lng: float
    destination_name: str
    destination_lat: float
    destination_lng: float
    max_time_min: int
    max_walk_min: int
    result_routes: List[Any] = []
    searched_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class FavoriteRouteBase(BaseModel):
    route_name: str
    origin_name: str
    origin_lat: float = Field(..., ge=-90, le=90)
    origin_lng: float = Field(..., ge=-180, le=180)
    destination_name: str
    destination_lat: float = Field(..., ge=-90, le=90)
    destination_lng: float = Field(..., ge=-180, le=180)
    max_time_min: int = Field(..., gt=0)
    max_walk_min: int = Field(..., gt=0)


class FavoriteRouteCreate(FavoriteRouteBase):
    pass


class FavoriteRouteResponse(FavoriteRouteBase):
    id: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
