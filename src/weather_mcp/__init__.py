"""Weather alerts, forecasts and Material color tools served over MCP."""

__version__ = "1.0.0"
