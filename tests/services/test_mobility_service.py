"""
Unit tests for the Kakao Mobility driving ETA service.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from app.schemas.driving import DrivingEta
from app.schemas.location import Station
from app.services.mobility_service import MAX_BATCH_POINTS, MobilityService


@pytest.fixture
def mobility_service():
    """Create a mobility service instance for testing."""
    return MobilityService(base_url="https://navi.test", api_key="test-key")


@pytest.fixture
def stations():
    return [
        Station(id="1", name="선릉역", x=127.0490, y=37.5045),
        Station(id="2", name="역삼역", x=127.0366, y=37.5006),
        Station(id="3", name="삼성역", x=127.0630, y=37.5088),
    ]


def mock_client_returning(response):
    client = MagicMock()
    client.request = AsyncMock(return_value=response)
    return client


@pytest.mark.asyncio
async def test_get_driving_eta_success(mobility_service):
    payload = {
        "routes": [
            {
                "result_code": 0,
                "result_msg": "길찾기 성공",
                "summary": {
                    "distance": 9120,
                    "duration": 1260,
                    "fare": {"taxi": 14200, "toll": 0},
                },
            }
        ]
    }
    with patch.object(mobility_service, "_get_client") as mock_get_client:
        client = mock_client_returning(httpx.Response(200, json=payload))
        mock_get_client.return_value = client

        eta = await mobility_service.get_driving_eta(127.0276, 37.4979, 127.1001, 37.5133)

        assert isinstance(eta, DrivingEta)
        assert eta.duration_sec == 1260
        assert eta.distance_m == 9120
        assert eta.taxi_fare == 14200
        assert eta.toll_fare == 0

        args, kwargs = client.request.call_args
        assert args == ("GET", "/v1/directions")
        assert kwargs["params"]["origin"] == "127.0276,37.4979"
        assert kwargs["params"]["destination"] == "127.1001,37.5133"


@pytest.mark.asyncio
async def test_get_driving_eta_without_fare(mobility_service):
    payload = {"routes": [{"result_code": 0, "summary": {"distance": 500, "duration": 120}}]}
    with patch.object(mobility_service, "_get_client") as mock_get_client:
        mock_get_client.return_value = mock_client_returning(httpx.Response(200, json=payload))

        eta = await mobility_service.get_driving_eta(127.0, 37.5, 127.01, 37.5)

        assert eta.duration_sec == 120
        assert eta.taxi_fare is None
        assert eta.toll_fare is None


@pytest.mark.asyncio
async def test_get_driving_eta_no_route(mobility_service):
    payload = {"routes": [{"result_code": 104, "result_msg": "출발지와 도착지가 5 m 이내로 설정된 경우 경로를 탐색할 수 없음"}]}
    with patch.object(mobility_service, "_get_client") as mock_get_client:
        mock_get_client.return_value = mock_client_returning(httpx.Response(200, json=payload))

        eta = await mobility_service.get_driving_eta(127.0, 37.5, 127.0, 37.5)

        assert eta is None


@pytest.mark.asyncio
async def test_get_driving_eta_unauthorized(mobility_service):
    with patch.object(mobility_service, "_get_client") as mock_get_client:
        mock_get_client.return_value = mock_client_returning(
            httpx.Response(401, json={"code": -401, "msg": "InvalidAccessToken"})
        )

        eta = await mobility_service.get_driving_eta(127.0, 37.5, 127.1, 37.6)

        assert eta is None


@pytest.mark.asyncio
async def test_get_driving_eta_timeout(mobility_service):
    with patch.object(mobility_service, "_get_client") as mock_get_client:
        client = MagicMock()
        client.request = AsyncMock(side_effect=httpx.ReadTimeout("timed out"))
        mock_get_client.return_value = client

        eta = await mobility_service.get_driving_eta(127.0, 37.5, 127.1, 37.6)

        assert eta is None


@pytest.mark.asyncio
async def test_batch_eta_aligned_by_key(mobility_service, stations):
    """Results come back in arbitrary order and are re-aligned to the input."""
    payload = {
        "routes": [
            {"key": "2", "result_code": 0, "summary": {"distance": 3100, "duration": 540}},
            {"key": "0", "result_code": 0, "summary": {"distance": 2400, "duration": 420}},
            {"key": "1", "result_code": 104, "result_msg": "no route"},
        ]
    }
    with patch.object(mobility_service, "_get_client") as mock_get_client:
        client = mock_client_returning(httpx.Response(200, json=payload))
        mock_get_client.return_value = client

        results = await mobility_service.get_batch_eta_to_destinations(127.0276, 37.4979, stations)

        assert len(results) == 3
        assert results[0].duration_sec == 420
        assert results[1].duration_sec is None
        assert results[2].duration_sec == 540

        args, kwargs = client.request.call_args
        assert args == ("POST", "/v1/destinations/directions")
        body = kwargs["json"]
        assert body["origin"] == {"x": "127.0276", "y": "37.4979"}
        assert [point["key"] for point in body["destinations"]] == ["0", "1", "2"]
        assert body["radius"] == 10000


@pytest.mark.asyncio
async def test_batch_eta_from_origins(mobility_service, stations):
    payload = {
        "routes": [
            {"key": "0", "result_code": 0, "summary": {"distance": 5000, "duration": 700}},
            {"key": "1", "result_code": 0, "summary": {"distance": 6000, "duration": 800}},
            {"key": "2", "result_code": 0, "summary": {"distance": 4000, "duration": 600}},
        ]
    }
    with patch.object(mobility_service, "_get_client") as mock_get_client:
        client = mock_client_returning(httpx.Response(200, json=payload))
        mock_get_client.return_value = client

        results = await mobility_service.get_batch_eta_from_origins(stations, 127.1001, 37.5133)

        assert [r.duration_sec for r in results] == [700, 800, 600]
        args, kwargs = client.request.call_args
        assert args == ("POST", "/v1/origins/directions")
        assert kwargs["json"]["destination"] == {"x": "127.1001", "y": "37.5133"}
        assert len(kwargs["json"]["origins"]) == 3


@pytest.mark.asyncio
async def test_batch_eta_empty_input(mobility_service):
    with patch.object(mobility_service, "_get_client") as mock_get_client:
        assert await mobility_service.get_batch_eta_to_destinations(127.0, 37.5, []) is None
        assert await mobility_service.get_batch_eta_from_origins([], 127.0, 37.5) is None
        mock_get_client.assert_not_called()


@pytest.mark.asyncio
async def test_batch_eta_capped(mobility_service):
    many = [Station(id=str(i), name=f"역{i}", x=127.0 + i * 0.001, y=37.5) for i in range(40)]
    with patch.object(mobility_service, "_get_client") as mock_get_client:
        client = mock_client_returning(httpx.Response(200, json={"routes": []}))
        mock_get_client.return_value = client

        results = await mobility_service.get_batch_eta_to_destinations(127.0, 37.5, many)

        assert len(results) == MAX_BATCH_POINTS
        assert all(r.duration_sec is None for r in results)
        _, kwargs = client.request.call_args
        assert len(kwargs["json"]["destinations"]) == MAX_BATCH_POINTS


@pytest.mark.asyncio
async def test_batch_eta_api_error(mobility_service, stations):
    with patch.object(mobility_service, "_get_client") as mock_get_client:
        mock_get_client.return_value = mock_client_returning(httpx.Response(500, text="error"))

        results = await mobility_service.get_batch_eta_from_origins(stations, 127.1, 37.5)

        assert results is None
