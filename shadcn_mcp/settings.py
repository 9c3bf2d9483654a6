"""Environment-driven configuration utilities for the MCP server."""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_GITHUB_API_URL = "https://api.github.com"
_TRANSPORTS = ("stdio", "sse")


@dataclass(frozen=True, slots=True)
class Settings:
    """Container for runtime configuration."""

    github_api_url: str = DEFAULT_GITHUB_API_URL
    github_token: str | None = None
    api_timeout: float = 30.0
    transport: str = "stdio"
    mcp_sse_port: int = 8000

    @classmethod
    def load(cls) -> "Settings":
        """
        Load configuration from environment variables.

        Python-dotenv is used so developers can rely on a local .env file without
        exporting variables globally. FRAMEWORK and UI_LIBRARY set in .env are
        picked up by the framework resolver as a side effect of this call.
        """
        load_dotenv()

        github_api_url = os.getenv("GITHUB_API_URL", "").strip() or DEFAULT_GITHUB_API_URL
        github_token = (
            os.getenv("GITHUB_PERSONAL_ACCESS_TOKEN", "").strip()
            or os.getenv("GITHUB_TOKEN", "").strip()
            or None
        )

        api_timeout_raw = os.getenv("API_TIMEOUT", "").strip() or "30"
        try:
            api_timeout = float(api_timeout_raw)
        except ValueError as exc:
            raise ValueError("API_TIMEOUT must be a numeric value.") from exc
        if api_timeout <= 0:
            raise ValueError("API_TIMEOUT must be greater than zero.")

        transport = (os.getenv("MCP_TRANSPORT", "").strip() or "stdio").lower()
        if transport not in _TRANSPORTS:
            raise ValueError(f"MCP_TRANSPORT must be one of: {', '.join(_TRANSPORTS)}.")

        mcp_sse_port_raw = os.getenv("MCP_SSE_PORT", "").strip() or "8000"
        try:
            mcp_sse_port = int(mcp_sse_port_raw)
        except ValueError as exc:
            raise ValueError("MCP_SSE_PORT must be an integer.") from exc
        if mcp_sse_port <= 0:
            raise ValueError("MCP_SSE_PORT must be greater than zero.")

        return cls(
            github_api_url=github_api_url.rstrip("/"),
            github_token=github_token,
            api_timeout=api_timeout,
            transport=transport,
            mcp_sse_port=mcp_sse_port,
        )
