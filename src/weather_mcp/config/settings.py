"""
Configuration Management System

Pydantic-based configuration with environment variable support,
validation, and nested settings for the HTTP client, the NWS upstream
and the MCP transport.

Features:
- Type-safe configuration with validation
- Environment variable override support (MCP_ prefix, `__` for nesting)
- Nested settings for logical grouping
- Singleton pattern for global access
"""

from typing import Literal, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

TransportMode = Literal["stateless", "shared", "sessions"]


class HttpSettings(BaseModel):
    """
    HTTP client configuration for external API calls.

    Controls timeouts, retries and connection pooling for the
    National Weather Service client.
    """

    timeout: float = Field(
        default=15.0, ge=1.0, le=60.0, description="Request timeout in seconds"
    )

    max_retries: int = Field(
        default=3, ge=1, le=10, description="Maximum number of attempts per request"
    )

    retry_backoff_factor: float = Field(
        default=1.0,
        ge=0.1,
        le=5.0,
        description="Exponential backoff factor for retries",
    )

    pool_connections: int = Field(
        default=10, ge=1, le=100, description="Maximum number of connections"
    )

    pool_maxsize: int = Field(
        default=10, ge=1, le=100, description="Maximum number of keep-alive connections"
    )


class NwsSettings(BaseModel):
    """National Weather Service API location and client identity."""

    api_base: str = Field(
        default="https://api.weather.gov", description="NWS REST API base URL"
    )

    user_agent: str = Field(
        default="weather-app/1.0",
        description="User-Agent sent to the NWS API (required by api.weather.gov)",
    )


class TransportSettings(BaseModel):
    """
    MCP HTTP transport wiring.

    `mode` selects how requests are bound to transport instances:
    - stateless: fresh server and transport per request
    - shared: one transport for the whole process
    - sessions: one transport per `mcp-session-id`, evicted when idle
    """

    mode: TransportMode = Field(default="stateless", description="Transport strategy")

    path: str = Field(default="/mcp", description="Endpoint path for JSON-RPC traffic")

    json_response: bool = Field(
        default=False,
        description="Answer POSTs with plain JSON instead of an SSE-framed stream",
    )

    session_timeout: float = Field(
        default=1800.0, gt=0, description="Idle seconds before a session is evicted"
    )

    sweep_interval: float = Field(
        default=60.0, gt=0, description="Seconds between idle-session sweeps"
    )

    sse_keepalive: bool = Field(
        default=False,
        description="Answer bare GETs with a keepalive event stream (Android Studio)",
    )

    keepalive_interval: float = Field(
        default=30.0, gt=0, description="Seconds between SSE keepalive comments"
    )


class ServerSettings(BaseSettings):
    """
    Main server configuration with nested settings and environment support.

    Provides centralized configuration management with:
    - Environment variable overrides (MCP_ prefix)
    - Nested configuration sections (MCP_TRANSPORT__MODE=sessions)
    - Logging configuration
    """

    model_config = SettingsConfigDict(
        env_file=".env",  # Load from .env file if present
        env_file_encoding="utf-8",
        env_prefix="MCP_",
        env_nested_delimiter="__",
        extra="ignore",  # Ignore unknown env vars
    )

    # ============= Server Identity =============

    server_name: str = Field(default="weather", description="MCP server name identifier")

    server_version: str = Field(
        default="1.0.0", description="Server version for client compatibility"
    )

    instructions: Optional[str] = Field(
        default=None, description="Instructions advertised to MCP clients"
    )

    # ============= Network =============

    host: str = Field(default="0.0.0.0", description="Interface to bind")

    port: int = Field(default=3000, ge=1, le=65535, description="Port to listen on")

    cors_origins: list[str] = Field(
        default_factory=lambda: ["*"], description="Origins allowed by CORS"
    )

    # ============= Nested Configuration Sections =============

    http: HttpSettings = Field(
        default_factory=HttpSettings, description="HTTP client configuration"
    )

    nws: NwsSettings = Field(
        default_factory=NwsSettings, description="National Weather Service API settings"
    )

    transport: TransportSettings = Field(
        default_factory=TransportSettings, description="MCP transport settings"
    )

    # ============= Logging Configuration =============

    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Logging level for server output",
    )


# ============= Singleton Pattern =============

_settings: Optional[ServerSettings] = None


def get_settings() -> ServerSettings:
    """
    Get or create the global settings singleton instance.

    The first call creates the instance, subsequent calls
    return the same instance for consistency.

    Returns:
        ServerSettings: The global settings instance
    """
    global _settings
    if _settings is None:
        _settings = ServerSettings()
    return _settings
