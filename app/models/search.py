from sqlalchemy import JSON, Column, DateTime, Float, Integer, String
from sqlalchemy.sql import func

from app.db.database import Base


class Search(Base):
    __tablename__ = "searches"

    id = Column(Integer, primary_key=True, index=True)
    origin_name = Column(String, nullable=False)
    origin_lat = Column(Float, nullable=False)
    origin_lng = Column(Float, nullable=False)
    destination_name = Column(String, nullable=False)
    destination_lat = Column(Float, nullable=False)
    destination_lng = Column(Float, nullable=False)
    max_time_min = Column(Integer, nullable=False)
    max_walk_min = Column(Integer, nullable=False)
    result_routes = Column(JSON, nullable=False, default=list)
    searched_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)


class FavoriteRoute(Base):
    __tablename__ = "favorite_routes"

    id = Column(Integer, primary_key=True, index=True)
    route_name = Column(String, nullable=False)
    origin_name = Column(String, nullable=False)
    origin_lat = Column(Float, nullable=False)
    origin_lng = Column(Float, nullable=False)
    destination_name = Column(String, nullable=False)
    destination_lat = Column(Float, nullable=False)
    destination_lng = Column(Float, nullable=False)
    max_time_min = Column(Integer, nullable=False)
    max_walk_min = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
