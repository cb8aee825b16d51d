import json

import pytest
from conftest import ALERTS
from fastmcp import Client

from weather_mcp.config.constants import TOOL_NAMES
from weather_mcp.mcp_server import create_server
from weather_mcp.services import color_scheme


@pytest.fixture
def server(weather, settings):
    return create_server(weather, settings)


async def call(server, name, arguments):
    async with Client(server) as client:
        return await client.call_tool_mcp(name, arguments)


async def test_tool_catalog(server):
    async with Client(server) as client:
        tools = {tool.name: tool for tool in await client.list_tools()}

    assert set(tools) == set(TOOL_NAMES)
    assert tools["get-alerts"].inputSchema["required"] == ["state"]
    assert set(tools["get-forecast"].inputSchema["required"]) == {"latitude", "longitude"}
    category = tools["generate_material_scheme_by_category"].inputSchema["properties"]["category"]
    assert '"tonal-spot"' in category["description"]


async def test_get_alerts_tool(server, nws):
    nws.add("/alerts", ALERTS)

    result = await call(server, "get-alerts", {"state": "ca"})

    assert not result.isError
    assert result.content[0].text.startswith("Active alerts for CA")
    assert nws.requests[0].url.params["area"] == "CA"


async def test_get_alerts_rejects_long_state(server, nws):
    result = await call(server, "get-alerts", {"state": "CAL"})

    assert result.isError
    assert nws.requests == []


async def test_get_forecast_rejects_out_of_range_latitude(server):
    result = await call(server, "get-forecast", {"latitude": 91, "longitude": 0})

    assert result.isError


async def test_core_palette_tool(server):
    result = await call(server, "generate_corepalette_colors", {"seedColor": "FF0062"})

    colors = json.loads(result.content[0].text)
    assert list(colors) == ["primary", "secondary", "tertiary", "error", "neutral", "neutralVariant"]
    assert colors["primary"] == "#FF0062"


async def test_core_palette_tool_rejects_malformed_seed(server):
    result = await call(server, "generate_corepalette_colors", {"seedColor": "not-a-color"})

    assert result.isError


async def test_scheme_tool(server):
    result = await call(
        server,
        "generate_material_scheme_by_category",
        {"seedColor": "#6200EE", "category": "Tonal Spot", "darkMode": True},
    )

    colors = json.loads(result.content[0].text)
    assert "primary" in colors and "surface" in colors


async def test_core_palette_tool_reports_unexpected_failure(server, monkeypatch):
    def broken(seed_color):
        raise RuntimeError("palette exploded")

    monkeypatch.setattr(color_scheme, "generate_core_palette_colors", broken)

    result = await call(server, "generate_corepalette_colors", {"seedColor": "#FF0062"})

    assert not result.isError
    assert result.content[0].text == "Failed to generate core palette colors: palette exploded"


async def test_scheme_tool_unknown_category(server):
    result = await call(
        server,
        "generate_material_scheme_by_category",
        {"seedColor": "#6200EE", "category": "pastel"},
    )

    text = result.content[0].text
    assert text.startswith('Failed to generate color scheme: Unsupported color scheme category: "pastel"')
    assert '"vibrant"' in text
