"""
Driving ETA Schema

Results of the point-to-point and batch driving ETA provider.
"""

from typing import Optional

from pydantic import BaseModel, Field


class DrivingEta(BaseModel):
    """Point-to-point driving estimate."""

    duration_sec: int
    distance_m: float
    taxi_fare: Optional[int] = Field(None, description="Provider taxi fare in KRW")
    toll_fare: Optional[int] = Field(None, description="Provider toll fare in KRW")


class EtaResult(BaseModel):
    """One positional entry of a batch ETA response; empty when the provider had no route."""

    duration_sec: Optional[int] = None
    distance_m: Optional[float] = None
