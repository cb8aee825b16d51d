from typing import Any, Dict, List, Tuple

import httpx
import pytest

from weather_mcp.config.settings import (
    HttpSettings,
    ServerSettings,
    TransportSettings,
)
from weather_mcp.services.http_client import NWSClient
from weather_mcp.services.weather_service import WeatherService

FORECAST_URL = "https://api.weather.gov/gridpoints/MTR/85,105/forecast"

ALERTS = {
    "features": [
        {
            "properties": {
                "event": "Wind Advisory",
                "areaDesc": "San Francisco Bay Shoreline",
                "severity": "Moderate",
                "status": "Actual",
                "headline": "Wind Advisory issued October 19 at 3:00AM PDT",
            }
        }
    ]
}

POINTS = {"properties": {"forecast": FORECAST_URL}}

FORECAST = {
    "properties": {
        "periods": [
            {
                "name": "Tonight",
                "temperature": 54,
                "temperatureUnit": "F",
                "windSpeed": "10 mph",
                "windDirection": "W",
                "shortForecast": "Mostly Clear",
            }
        ]
    }
}


class FakeNWS:
    """Canned api.weather.gov responses keyed by URL path."""

    def __init__(self):
        self.routes: Dict[str, Tuple[int, Any]] = {}
        self.requests: List[httpx.Request] = []

    def add(self, path: str, payload: Any, status_code: int = 200) -> None:
        self.routes[path] = (status_code, payload)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path not in self.routes:
            return httpx.Response(404, json={"title": "Not Found"})
        status_code, payload = self.routes[request.url.path]
        if isinstance(payload, str):
            return httpx.Response(status_code, text=payload)
        return httpx.Response(status_code, json=payload)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


def make_settings(json_response: bool = True, **transport) -> ServerSettings:
    return ServerSettings(
        http=HttpSettings(max_retries=1),
        transport=TransportSettings(json_response=json_response, **transport),
    )


@pytest.fixture
def settings() -> ServerSettings:
    return make_settings()


@pytest.fixture
def nws() -> FakeNWS:
    return FakeNWS()


@pytest.fixture
async def nws_client(settings, nws):
    client = NWSClient(settings, transport=nws.transport)
    yield client
    await client.aclose()


@pytest.fixture
def weather(nws_client) -> WeatherService:
    return WeatherService(nws_client)
