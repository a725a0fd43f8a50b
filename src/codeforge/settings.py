"""Shared settings loaded from environment / .env file."""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration for the CodeForge API and MCP servers.

    Values are read from environment variables and from a ``.env`` file
    in the working directory.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Shared
    log_level: str = "INFO"

    # REST API
    api_server_host: str = "localhost"
    api_server_port: int = 8000
    port: int | None = None  # Cloud Run injects PORT; takes precedence over api_server_port

    @property
    def effective_port(self) -> int:
        """Return the port to listen on (Cloud Run PORT takes precedence)."""
        return self.port if self.port is not None else self.api_server_port

    # MCP
    mcp_transport: str = "stdio"
    mcp_server_host: str = "localhost"
    mcp_server_port: int = 9000

    # Sessions
    session_ttl_seconds: int = 1800  # 30 min inactivity
    session_cleanup_interval: int = 60  # seconds between cleanup sweeps
    disable_session_list: bool = False  # hide GET /sessions endpoint

    # Sandbox document
    console_source_tag: str = "PREVIEW_CONSOLE"
    sandbox_target_origin: str = "*"  # restrict to the host origin when known
    native_start_delay_ms: int = 500
    root_element_id: str = "root"

    # Request bodies
    max_text_body_bytes: int = 5 * 1024 * 1024  # endpoints taking model output
    max_body_bytes: int = 1 * 1024 * 1024
