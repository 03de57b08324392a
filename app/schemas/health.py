from pydantic import BaseModel


class ServiceHealth(BaseModel):
    healthy: bool
    message: str


class HealthCheckResponse(BaseModel):
    service: str
    version: str
    timestamp: str
    healthy: bool
    database: ServiceHealth
    transit_service: ServiceHealth
    kakao_service: ServiceHealth
