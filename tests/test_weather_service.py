from conftest import ALERTS, FORECAST, POINTS

from weather_mcp.services.weather_service import format_alert, format_number, format_period


async def test_alerts_state_code_is_upper_cased(weather, nws):
    nws.add("/alerts", ALERTS)

    text = await weather.get_alerts("ca")

    assert nws.requests[0].url.params["area"] == "CA"
    assert text.startswith("Active alerts for CA:\n\n")
    assert "Event: Wind Advisory" in text
    assert "Area: San Francisco Bay Shoreline" in text


async def test_alerts_request_headers(weather, nws):
    nws.add("/alerts", ALERTS)

    await weather.get_alerts("CA")

    request = nws.requests[0]
    assert request.headers["user-agent"] == "weather-app/1.0"
    assert request.headers["accept"] == "application/geo+json"


async def test_no_active_alerts(weather, nws):
    nws.add("/alerts", {"features": []})

    assert await weather.get_alerts("ny") == "No active alerts for NY"


async def test_alerts_upstream_failure(weather, nws):
    nws.add("/alerts", {"detail": "boom"}, status_code=500)

    assert await weather.get_alerts("CA") == "Failed to retrieve alerts data"


async def test_forecast(weather, nws):
    nws.add("/points/37.7749,-122.4194", POINTS)
    nws.add("/gridpoints/MTR/85,105/forecast", FORECAST)

    text = await weather.get_forecast(37.7749, -122.4194)

    assert nws.requests[1].url.path == "/gridpoints/MTR/85,105/forecast"
    assert text == (
        "Forecast for 37.7749, -122.4194:\n\n"
        "Tonight:\n"
        "Temperature: 54°F\n"
        "Wind: 10 mph W\n"
        "Mostly Clear\n"
        "---"
    )


async def test_forecast_points_use_four_decimals(weather, nws):
    await weather.get_forecast(40, -75.5)

    assert nws.requests[0].url.path == "/points/40.0000,-75.5000"


async def test_forecast_unsupported_location(weather, nws):
    text = await weather.get_forecast(48.8566, 2.3522)

    assert text.startswith("Failed to retrieve grid point data for coordinates: 48.8566, 2.3522.")
    assert "only US locations are supported" in text


async def test_forecast_missing_forecast_url(weather, nws):
    nws.add("/points/37.7749,-122.4194", {"properties": {}})

    text = await weather.get_forecast(37.7749, -122.4194)

    assert text == "Failed to get forecast URL from grid point data"


async def test_forecast_fetch_failure(weather, nws):
    nws.add("/points/37.7749,-122.4194", POINTS)
    nws.add("/gridpoints/MTR/85,105/forecast", {}, status_code=503)

    assert await weather.get_forecast(37.7749, -122.4194) == "Failed to retrieve forecast data"


async def test_forecast_without_periods(weather, nws):
    nws.add("/points/37.7749,-122.4194", POINTS)
    nws.add("/gridpoints/MTR/85,105/forecast", {"properties": {"periods": []}})

    assert await weather.get_forecast(37.7749, -122.4194) == "No forecast periods available"


def test_format_alert_defaults():
    assert format_alert({"properties": {}}) == (
        "Event: Unknown\n"
        "Area: Unknown\n"
        "Severity: Unknown\n"
        "Status: Unknown\n"
        "Headline: No headline\n"
        "---"
    )


def test_format_period_keeps_zero_temperature():
    text = format_period({"name": "Tonight", "temperature": 0, "temperatureUnit": "C"})

    assert "Temperature: 0°C" in text
    assert "Wind: Unknown " in text
    assert "No forecast available" in text


def test_format_period_missing_temperature():
    assert "Temperature: Unknown°F" in format_period({})


def test_format_number():
    assert format_number(40.0) == "40"
    assert format_number(-122.4194) == "-122.4194"
    assert format_number(7) == "7"
