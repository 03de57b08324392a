"""
Mobility Service

Driving ETA and taxi fare estimates from the Kakao Mobility navigation API.

API Endpoint: https://apis-navi.kakaomobility.com
Documentation: https://developers.kakaomobility.com/docs/navi-api/directions/
"""

import logging
from typing import Dict, List, Optional, Sequence

from app.core.config import settings
from app.schemas.driving import DrivingEta, EtaResult
from app.schemas.location import Station
from app.services.provider_base import ProviderDataError, ProviderError, ProviderService

logger = logging.getLogger(__name__)

DIRECTIONS_PATH = "/v1/directions"
DESTINATIONS_PATH = "/v1/destinations/directions"
ORIGINS_PATH = "/v1/origins/directions"

# Provider limits for the multi-point endpoints
MAX_BATCH_POINTS = 30
BATCH_RADIUS_M = 10000


class MobilityService(ProviderService):
    """
    Service for Kakao Mobility point-to-point and batch driving ETAs.
    """

    provider_name = "Kakao Mobility"

    def __init__(self, base_url: Optional[str] = None, api_key: Optional[str] = None):
        super().__init__(
            base_url=base_url or settings.KAKAO_MOBILITY_API_URL,
            api_key=settings.KAKAO_REST_API_KEY if api_key is None else api_key,
        )

    def _auth_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"KakaoAK {self._api_key}",
            "Content-Type": "application/json",
        }

    async def get_driving_eta(
        self, origin_lng: float, origin_lat: float, dest_lng: float, dest_lat: float
    ) -> Optional[DrivingEta]:
        """
        Fetch a point-to-point driving estimate.

        Returns:
            DrivingEta, or None when the request failed or no route was found
        """
        params = {
            "origin": f"{origin_lng},{origin_lat}",
            "destination": f"{dest_lng},{dest_lat}",
            "priority": "RECOMMEND",
            "car_fuel": "GASOLINE",
            "car_hipass": "false",
            "alternatives": "false",
            "road_details": "false",
        }

        try:
            data = await self._request_json("GET", DIRECTIONS_PATH, params=params)
            return self._parse_directions(data)
        except ProviderError as e:
            logger.error("Kakao directions request failed: %s", str(e))
            return None

    async def get_batch_eta_to_destinations(
        self, origin_lng: float, origin_lat: float, destinations: Sequence[Station]
    ) -> Optional[List[EtaResult]]:
        """
        One-to-many driving ETAs from an origin to each station.

        Only the first 30 stations are sent. The result is positionally aligned
        with the stations that were sent.
        """
        if not destinations:
            return None

        points = list(destinations[:MAX_BATCH_POINTS])
        body = {
            "origin": {"x": str(origin_lng), "y": str(origin_lat)},
            "destinations": self._batch_points(points),
            "radius": BATCH_RADIUS_M,
            "priority": "RECOMMEND",
        }

        try:
            data = await self._request_json("POST", DESTINATIONS_PATH, json=body)
            return self._parse_batch(data, len(points))
        except ProviderError as e:
            logger.error("Kakao batch destinations request failed: %s", str(e))
            return None

    async def get_batch_eta_from_origins(
        self, origins: Sequence[Station], dest_lng: float, dest_lat: float
    ) -> Optional[List[EtaResult]]:
        """
        Many-to-one driving ETAs from each station to a destination.

        Mirror of ``get_batch_eta_to_destinations``.
        """
        if not origins:
            return None

        points = list(origins[:MAX_BATCH_POINTS])
        body = {
            "origins": self._batch_points(points),
            "destination": {"x": str(dest_lng), "y": str(dest_lat)},
            "radius": BATCH_RADIUS_M,
            "priority": "RECOMMEND",
        }

        try:
            data = await self._request_json("POST", ORIGINS_PATH, json=body)
            return self._parse_batch(data, len(points))
        except ProviderError as e:
            logger.error("Kakao batch origins request failed: %s", str(e))
            return None

    @staticmethod
    def _batch_points(stations: Sequence[Station]) -> List[Dict[str, str]]:
        # key carries the input position so results can be re-aligned
        return [
            {"key": str(idx), "x": str(station.x), "y": str(station.y)}
            for idx, station in enumerate(stations)
        ]

    def _parse_directions(self, data: Dict) -> Optional[DrivingEta]:
        """
        Parse the first route of a directions response.
        """
        try:
            routes = data.get("routes") or []
            if not routes:
                raise ProviderDataError("Kakao directions response has no routes")
            route = routes[0]
            summary = route.get("summary")
            if route.get("result_code", 0) != 0 or not summary:
                logger.info("Kakao directions found no route: %s", route.get("result_msg"))
                return None

            fare = summary.get("fare") or {}
            return DrivingEta(
                duration_sec=int(summary["duration"]),
                distance_m=float(summary["distance"]),
                taxi_fare=fare.get("taxi"),
                toll_fare=fare.get("toll"),
            )
        except (AttributeError, KeyError, ValueError, TypeError) as e:
            raise ProviderDataError(f"Invalid Kakao directions data: {str(e)}") from e

    def _parse_batch(self, data: Dict, size: int) -> List[EtaResult]:
        """
        Align batch routes with the request order; unmatched entries stay empty.
        """
        results = [EtaResult() for _ in range(size)]
        try:
            for position, route in enumerate(data.get("routes") or []):
                key = route.get("key")
                idx = int(key) if key is not None else position
                if not 0 <= idx < size:
                    continue
                summary = route.get("summary")
                if route.get("result_code", 0) != 0 or not summary:
                    continue
                results[idx] = EtaResult(
                    duration_sec=int(summary["duration"]),
                    distance_m=summary.get("distance"),
                )
        except (AttributeError, KeyError, ValueError, TypeError) as e:
            raise ProviderDataError(f"Invalid Kakao batch data: {str(e)}") from e
        return results


# Singleton instance for dependency injection
mobility_service = MobilityService()
