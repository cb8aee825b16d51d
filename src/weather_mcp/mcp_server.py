import json
from typing import Annotated, Optional

from fastmcp import FastMCP
from fastmcp.utilities.logging import get_logger
from pydantic import Field, StringConstraints

from weather_mcp.config.constants import (
    GENERATE_CORE_PALETTE,
    GENERATE_SCHEME,
    GET_ALERTS,
    GET_FORECAST,
    SEED_COLOR_PATTERN,
)
from weather_mcp.config.settings import ServerSettings, get_settings
from weather_mcp.services import color_scheme
from weather_mcp.services.weather_service import WeatherService

logger = get_logger(__name__)

SeedColor = Annotated[
    str,
    StringConstraints(strip_whitespace=True, pattern=SEED_COLOR_PATTERN),
    Field(description="Seed color hex code (e.g. #6200EE)"),
]


def _as_json(colors: dict) -> str:
    return json.dumps(colors, indent=2)


# ============= MCP SERVER INITIALIZATION =============


def create_server(
    weather: WeatherService, settings: Optional[ServerSettings] = None
) -> FastMCP:
    """
    Build a FastMCP server with the weather and color tools registered.

    Cheap enough to call once per request, which is what the stateless
    transport does.
    """
    settings = settings or get_settings()

    mcp = FastMCP(
        name=settings.server_name,
        instructions=settings.instructions,
        version=settings.server_version,
    )

    # ============= WEATHER TOOLS =============

    @mcp.tool(name=GET_ALERTS, description="Get weather alerts for a state")
    async def get_alerts(
        state: Annotated[
            str,
            Field(
                min_length=2,
                max_length=2,
                description="Two-letter state code (e.g. CA, NY)",
            ),
        ],
    ) -> str:
        return await weather.get_alerts(state)

    @mcp.tool(name=GET_FORECAST, description="Get weather forecast for a location")
    async def get_forecast(
        latitude: Annotated[
            float, Field(ge=-90, le=90, description="Latitude of the location")
        ],
        longitude: Annotated[
            float, Field(ge=-180, le=180, description="Longitude of the location")
        ],
    ) -> str:
        return await weather.get_forecast(latitude, longitude)

    # ============= COLOR TOOLS =============

    @mcp.tool(
        name=GENERATE_SCHEME,
        description=(
            "Generate a Material Design color scheme using Material Color "
            "Utilities, by receiving a seed color and a category"
        ),
    )
    def generate_material_scheme_by_category(
        seedColor: SeedColor,
        category: Annotated[
            str,
            StringConstraints(strip_whitespace=True, min_length=1),
            Field(
                description=(
                    "Material color scheme category. Supported categories: "
                    f"{color_scheme.describe_categories()}"
                )
            ),
        ],
        darkMode: Annotated[
            bool, Field(description="Generate the dark variant of the scheme")
        ] = False,
        contrastLevel: Annotated[
            float,
            Field(
                ge=-1.0,
                le=1.0,
                description="Contrast level from -1 (reduced) to 1 (high); 0 is standard",
            ),
        ] = 0.0,
    ) -> str:
        try:
            colors = color_scheme.generate_color_scheme(
                seedColor, category, dark_mode=darkMode, contrast_level=contrastLevel
            )
        except Exception as e:
            logger.error(f"Color scheme generation failed: {e}")
            return f"Failed to generate color scheme: {e}"
        return _as_json(colors)

    @mcp.tool(
        name=GENERATE_CORE_PALETTE,
        description="Generate the six key colors from Material Color Utilities CorePalette",
    )
    def generate_corepalette_colors(seedColor: SeedColor) -> str:
        try:
            colors = color_scheme.generate_core_palette_colors(seedColor)
        except Exception as e:
            logger.error(f"Core palette generation failed: {e}")
            return f"Failed to generate core palette colors: {e}"
        return _as_json(colors)

    return mcp
