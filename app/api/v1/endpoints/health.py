from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.db import database
from app.db.database import get_db
from app.schemas.health import HealthCheckResponse
from app.services.mobility_service import mobility_service
from app.services.transit_service import transit_service

router = APIRouter()


@router.get("/health")
async def health_check(db: Session = Depends(get_db)) -> HealthCheckResponse:
    """
    Health check endpoint that verifies:
    - Database connectivity
    - TMAP transit API credentials
    - Kakao API credentials

    Returns 200 if all services are healthy, 503 if any service is down.
    """
    database_health = database.health_check(db)
    transit_service_health = await transit_service.health_check()
    kakao_service_health = await mobility_service.health_check()

    overall_healthy = all(
        [database_health.healthy, transit_service_health.healthy, kakao_service_health.healthy]
    )

    response = HealthCheckResponse(
        service="neutjima-backend",
        version=settings.VERSION,
        timestamp=datetime.now(timezone.utc).isoformat(),
        healthy=overall_healthy,
        database=database_health,
        transit_service=transit_service_health,
        kakao_service=kakao_service_health,
    )

    if overall_healthy:
        return response
    raise HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=response.model_dump()
    )
