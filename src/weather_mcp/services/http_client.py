"""
HTTP Client Services with Retry Logic

Provides the HTTP client for the National Weather Service API with:
- Automatic retry logic with exponential backoff
- Connection pooling and timeout management
- Failures converted to a `None` result instead of an exception

Classes:
    BaseHTTPClient: Foundation class with retry and configuration
    NWSClient: Client for the api.weather.gov GeoJSON endpoints
"""

from typing import Any, Optional

import httpx
from fastmcp.utilities.logging import get_logger
from tenacity import (
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from weather_mcp.config.constants import NWS_ACCEPT, RETRYABLE_STATUS_CODES
from weather_mcp.config.settings import ServerSettings, get_settings


def is_retryable(exc: BaseException) -> bool:
    """Retry network failures, rate limiting and upstream 5xx responses."""
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code in RETRYABLE_STATUS_CODES
    return isinstance(exc, httpx.TransportError)


class BaseHTTPClient:
    """
    Base HTTP client with configurable retry logic and connection pooling.

    Provides common functionality for all HTTP clients including:
    - Exponential backoff retry logic
    - Connection pooling configuration
    - Timeout management
    """

    def __init__(self, settings: Optional[ServerSettings] = None):
        """Initialize base HTTP client with settings and retry config."""
        self.settings = settings or get_settings()
        self.logger = get_logger(self.__class__.__name__)
        self.timeout = self.settings.http.timeout

        self.retry_decorator = retry(
            stop=stop_after_attempt(self.settings.http.max_retries),
            wait=wait_exponential(
                multiplier=self.settings.http.retry_backoff_factor,
                min=1,
                max=10,
            ),
            retry=retry_if_exception(is_retryable),
            reraise=True,  # Re-raise final exception after all retries
        )

    @property
    def client_config(self) -> dict:
        """
        Get standardized HTTP client configuration.

        Returns:
            dict: Configuration for httpx.AsyncClient with timeouts,
                  redirects, and connection pooling settings
        """
        return {
            "timeout": self.timeout,
            "follow_redirects": True,
            "limits": httpx.Limits(
                max_connections=self.settings.http.pool_connections,
                max_keepalive_connections=self.settings.http.pool_maxsize,
            ),
        }


class NWSClient(BaseHTTPClient):
    """
    Client for the National Weather Service public REST API.

    One pooled `httpx.AsyncClient` is shared by every tool invocation.
    The `transport` argument lets callers swap the network layer
    (e.g. `httpx.MockTransport`).

    API Documentation: https://www.weather.gov/documentation/services-web-api
    """

    def __init__(
        self,
        settings: Optional[ServerSettings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(settings)
        self.api_base = self.settings.nws.api_base.rstrip("/")
        self._client = httpx.AsyncClient(
            headers={
                "User-Agent": self.settings.nws.user_agent,
                "Accept": NWS_ACCEPT,
            },
            transport=transport,
            **self.client_config,
        )

    def url(self, path: str) -> str:
        return f"{self.api_base}/{path.lstrip('/')}"

    async def get_json(self, url: str) -> Optional[dict[str, Any]]:
        """
        Fetch a GeoJSON document.

        Args:
            url: Absolute URL (forecast URLs come back absolute from /points)

        Returns:
            Optional[dict]: Parsed document, or None when the request
                            failed for any reason
        """

        @self.retry_decorator
        async def _fetch():
            response = await self._client.get(url)
            response.raise_for_status()
            return response.json()

        try:
            data = await _fetch()
        except Exception as e:
            self.logger.error(f"Error making NWS request to {url}: {e}")
            return None

        if not isinstance(data, dict):
            self.logger.error(f"Unexpected NWS payload from {url}: {type(data).__name__}")
            return None
        self.logger.debug(f"Fetched {url}")
        return data

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "NWSClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
