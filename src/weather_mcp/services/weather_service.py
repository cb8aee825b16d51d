"""
Weather alerts and forecasts backed by the NWS API.

Upstream failures never raise: every outcome is rendered as the text
that goes back to the MCP client.
"""

from typing import Any, Union

from fastmcp.utilities.logging import get_logger

from weather_mcp.services.http_client import NWSClient

Number = Union[int, float]


def format_number(value: Number) -> str:
    """Render coordinates without a trailing `.0` for whole numbers."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_alert(feature: dict[str, Any]) -> str:
    """Format an alert feature into a readable block."""
    props = feature.get("properties") or {}
    return "\n".join(
        [
            f"Event: {props.get('event') or 'Unknown'}",
            f"Area: {props.get('areaDesc') or 'Unknown'}",
            f"Severity: {props.get('severity') or 'Unknown'}",
            f"Status: {props.get('status') or 'Unknown'}",
            f"Headline: {props.get('headline') or 'No headline'}",
            "---",
        ]
    )


def format_period(period: dict[str, Any]) -> str:
    """Format one forecast period into a readable block."""
    temperature = period.get("temperature")
    if temperature is None:
        temperature = "Unknown"
    return "\n".join(
        [
            f"{period.get('name') or 'Unknown'}:",
            f"Temperature: {temperature}°{period.get('temperatureUnit') or 'F'}",
            f"Wind: {period.get('windSpeed') or 'Unknown'} {period.get('windDirection') or ''}",
            f"{period.get('shortForecast') or 'No forecast available'}",
            "---",
        ]
    )


class WeatherService:
    """Alert and forecast lookups rendered as tool result text."""

    def __init__(self, client: NWSClient):
        self.client = client
        self.logger = get_logger("WeatherService")

    async def get_alerts(self, state: str) -> str:
        """
        Get active weather alerts for a US state.

        Args:
            state: Two-letter state code, any case (e.g. "ca")
        """
        state_code = state.strip().upper()
        data = await self.client.get_json(self.client.url(f"alerts?area={state_code}"))
        if data is None:
            return "Failed to retrieve alerts data"

        features = data.get("features") or []
        if not features:
            return f"No active alerts for {state_code}"

        self.logger.info(f"Found {len(features)} active alerts for {state_code}")
        formatted = "\n".join(format_alert(feature) for feature in features)
        return f"Active alerts for {state_code}:\n\n{formatted}"

    async def get_forecast(self, latitude: Number, longitude: Number) -> str:
        """
        Get the forecast for a location.

        Resolves the grid point through /points first, then fetches the
        forecast URL it advertises.
        """
        points_url = self.client.url(f"points/{latitude:.4f},{longitude:.4f}")
        points = await self.client.get_json(points_url)
        if points is None:
            return (
                "Failed to retrieve grid point data for coordinates: "
                f"{format_number(latitude)}, {format_number(longitude)}. "
                "This location may not be supported by the NWS API "
                "(only US locations are supported)."
            )

        forecast_url = (points.get("properties") or {}).get("forecast")
        if not forecast_url:
            return "Failed to get forecast URL from grid point data"

        forecast = await self.client.get_json(forecast_url)
        if forecast is None:
            return "Failed to retrieve forecast data"

        periods = (forecast.get("properties") or {}).get("periods") or []
        if not periods:
            return "No forecast periods available"

        formatted = "\n".join(format_period(period) for period in periods)
        return (
            f"Forecast for {format_number(latitude)}, {format_number(longitude)}:"
            f"\n\n{formatted}"
        )
