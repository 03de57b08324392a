"""
Transit Service

This service interfaces with the TMAP public transport routing API to fetch
ranked itineraries between two points.

API Endpoint: https://apis.openapi.sk.com/transit/routes
Documentation: https://transit.tmapmobility.com/docs/routes
"""

import logging
from typing import Dict, List, Optional

from app.core.config import settings
from app.schemas.geo import Coordinates
from app.schemas.itinary import Itinerary, ItineraryLeg, TransportMode
from app.schemas.location import Place
from app.services.provider_base import ProviderDataError, ProviderError, ProviderService

logger = logging.getLogger(__name__)

TRANSIT_ROUTES_PATH = "/transit/routes"


class TransitService(ProviderService):
    """
    Service for the TMAP transit itinerary API.
    """

    provider_name = "TMAP"

    def __init__(self, base_url: Optional[str] = None, api_key: Optional[str] = None):
        super().__init__(
            base_url=base_url or settings.TMAP_API_URL,
            api_key=settings.TMAP_API_KEY if api_key is None else api_key,
        )

    @property
    def has_api_key(self) -> bool:
        return bool(self._api_key)

    def _auth_headers(self) -> Dict[str, str]:
        return {
            "accept": "application/json",
            "appKey": self._api_key,
            "content-type": "application/json",
        }

    async def search_itineraries(
        self,
        origin_x: float,
        origin_y: float,
        dest_x: float,
        dest_y: float,
        count: Optional[int] = None,
    ) -> Optional[List[Itinerary]]:
        """
        Fetch provider-ranked itineraries between two points.

        Args:
            origin_x: Origin longitude
            origin_y: Origin latitude
            dest_x: Destination longitude
            dest_y: Destination latitude
            count: Number of itineraries to request (default from settings)

        Returns:
            List of Itinerary objects (empty when the provider found no route),
            or None when the request failed
        """
        body = {
            "startX": origin_x,
            "startY": origin_y,
            "endX": dest_x,
            "endY": dest_y,
            "count": count or settings.TMAP_ITINERARY_COUNT,
            "lang": 0,
            "format": "json",
        }

        try:
            data = await self._request_json("POST", TRANSIT_ROUTES_PATH, json=body)
            return self._parse_itineraries(data)
        except ProviderError as e:
            logger.error("TMAP transit search failed: %s", str(e))
            return None

    def _parse_itineraries(self, data: Dict) -> List[Itinerary]:
        """
        Parse the response body into a list of Itinerary objects.
        """
        if not isinstance(data, dict):
            raise ProviderDataError("TMAP response is not an object")

        try:
            plan = (data.get("metaData") or {}).get("plan") or {}
            if not plan:
                # TMAP answers 200 with a result block when no route exists
                result = data.get("result") or {}
                logger.info("TMAP returned no plan: %s", result.get("message", "unknown reason"))
                return []

            return [self._parse_itinerary(item) for item in plan.get("itineraries") or []]
        except (AttributeError, KeyError, ValueError, TypeError) as e:
            raise ProviderDataError(f"Invalid TMAP itinerary data: {str(e)}") from e

    def _parse_itinerary(self, data: Dict) -> Itinerary:
        """
        Parse a single itinerary.
        """
        fare = ((data.get("fare") or {}).get("regular") or {}).get("totalFare") or 0
        return Itinerary(
            total_time=int(data["totalTime"]),
            fare=int(fare),
            transfer_count=int(data.get("transferCount") or 0),
            path_type=data.get("pathType"),
            total_walk_time=data.get("totalWalkTime"),
            total_distance=data.get("totalDistance"),
            legs=[self._parse_leg(leg) for leg in data.get("legs") or []],
        )

    def _parse_leg(self, data: Dict) -> ItineraryLeg:
        """
        Parse a single leg.
        """
        stations = (data.get("passStopList") or {}).get("stations") or []
        return ItineraryLeg(
            mode=TransportMode(data["mode"]),
            duration=int(data.get("sectionTime") or 0),
            distance=float(data.get("distance") or 0),
            from_place=self._parse_place(data.get("start")),
            to_place=self._parse_place(data.get("end")),
            route=data.get("route"),
            route_color=data.get("routeColor"),
            service=data.get("service"),
            stop_count=len(stations),
        )

    def _parse_place(self, data: Optional[Dict]) -> Place:
        """
        Parse a leg endpoint; coordinates are optional in TMAP responses.
        """
        if not data:
            return Place()
        coordinates = None
        if data.get("lat") is not None and data.get("lon") is not None:
            coordinates = Coordinates(lat=float(data["lat"]), lng=float(data["lon"]))
        return Place(name=data.get("name") or "", coordinates=coordinates)


# Singleton instance for dependency injection
transit_service = TransitService()
