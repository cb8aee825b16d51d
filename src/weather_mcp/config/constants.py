"""
Application Constants

Centralized constants for upstream headers, JSON-RPC error codes,
event-stream framing and tool names. Organized by functional area.
"""

# ============= NWS API =============

# NWS serves GeoJSON for /alerts, /points and forecast URLs
NWS_ACCEPT = "application/geo+json"

# Upstream statuses worth another attempt
RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})

# ============= JSON-RPC ERRORS =============

JSONRPC_VERSION = "2.0"

# Generic server error, used for method-not-allowed and bad requests
SERVER_ERROR = -32000

SESSION_NOT_FOUND = -32001

INTERNAL_ERROR = -32603

# ============= HTTP TRANSPORT =============

MCP_SESSION_ID_HEADER = "mcp-session-id"

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}

SSE_KEEPALIVE_COMMENT = ": keepalive\n\n"

# ============= TOOLS =============

GET_ALERTS = "get-alerts"
GET_FORECAST = "get-forecast"
GENERATE_SCHEME = "generate_material_scheme_by_category"
GENERATE_CORE_PALETTE = "generate_corepalette_colors"

TOOL_NAMES = (GET_ALERTS, GET_FORECAST, GENERATE_SCHEME, GENERATE_CORE_PALETTE)

SEED_COLOR_PATTERN = r"^#?(?:[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$"
