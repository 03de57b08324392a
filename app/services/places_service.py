"""
Places Service

Nearby transit station search through the Kakao Local keyword API.

API Endpoint: https://dapi.kakao.com/v2/local/search/keyword.json
"""

import logging
from typing import Dict, List, Optional

from app.core.config import settings
from app.schemas.location import Station
from app.services.provider_base import ProviderDataError, ProviderError, ProviderService

logger = logging.getLogger(__name__)

KEYWORD_SEARCH_PATH = "/v2/local/search/keyword.json"

MAX_SEARCH_RADIUS_M = 20000


class PlacesService(ProviderService):
    """
    Service for keyword-matched station lookups around a point.
    """

    provider_name = "Kakao Local"

    def __init__(self, base_url: Optional[str] = None, api_key: Optional[str] = None):
        super().__init__(
            base_url=base_url or settings.KAKAO_LOCAL_API_URL,
            api_key=settings.KAKAO_REST_API_KEY if api_key is None else api_key,
        )

    def _auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"KakaoAK {self._api_key}"}

    async def search_nearby_stations(self, x: float, y: float, radius: float) -> List[Station]:
        """
        Find transit stations around a point.

        Args:
            x: Longitude of the search center
            y: Latitude of the search center
            radius: Search radius in meters, capped at 20000

        Returns:
            Up to STATION_SEARCH_SIZE stations; empty on any failure
        """
        if not self._api_key:
            logger.error("KAKAO_REST_API_KEY not set, skipping station search")
            return []

        radius_m = int(min(radius, MAX_SEARCH_RADIUS_M))
        params = {
            "query": settings.STATION_SEARCH_KEYWORD,
            "x": x,
            "y": y,
            "radius": radius_m,
            "size": settings.STATION_SEARCH_SIZE,
        }

        try:
            data = await self._request_json("GET", KEYWORD_SEARCH_PATH, params=params)
            stations = self._parse_stations(data)
        except ProviderError as e:
            logger.error("Kakao station search failed: %s", str(e))
            return []

        logger.info("Found %d stations near (%s, %s) within %dm", len(stations), x, y, radius_m)
        return stations

    def _parse_stations(self, data: Dict) -> List[Station]:
        try:
            documents = data.get("documents") or []
            return [
                Station(
                    id=str(doc["id"]),
                    name=doc["place_name"],
                    x=float(doc["x"]),
                    y=float(doc["y"]),
                )
                for doc in documents
            ]
        except (AttributeError, KeyError, ValueError, TypeError) as e:
            raise ProviderDataError(f"Invalid Kakao Local data: {str(e)}") from e


# Singleton instance for dependency injection
places_service = PlacesService()
