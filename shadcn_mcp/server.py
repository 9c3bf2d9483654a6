"""
Core server bootstrap for the shadcn/ui MCP server.

Wires the framework resolver, the GitHub HTTP client and the resource
dispatcher into a FastMCP instance.
"""

import asyncio
import logging

from fastmcp import FastMCP  # type: ignore[import-not-found]

from shadcn_mcp.framework import FrameworkResolver, validate_framework_selection
from shadcn_mcp.http_client import create_github_client
from shadcn_mcp.resources import ResourceDependencies, ResourceDispatcher, register_resources
from shadcn_mcp.settings import Settings


class ServerApp:
    """Server container owning the resolved configuration and shared clients."""

    def __init__(self, settings: Settings, resolver: FrameworkResolver | None = None) -> None:
        self._logger = logging.getLogger(__name__)
        self._settings = settings
        self._resolver = resolver or FrameworkResolver()
        self._dependencies = ResourceDependencies(self._resolver)
        self._dispatcher = ResourceDispatcher(self._resolver, self._dependencies.load_registry_client)

        info = self._resolver.framework_info()
        self._mcp_app = FastMCP(
            name="shadcn/ui MCP Server",
            instructions=(
                f"Exposes {info.description} ({info.repository}). "
                f"Component files use the '{info.file_extension}' extension."
            ),
        )
        register_resources(self._mcp_app, self._dispatcher)

    def startup(self) -> None:
        """Resolve the framework selection and open the GitHub client."""
        self._logger.info("Starting server bootstrap")
        self._resolver.resolve_framework()
        self._resolver.resolve_ui_library()
        validate_framework_selection(self._resolver)
        self._dependencies.attach_client(create_github_client(self._settings))

    def shutdown(self) -> None:
        """Release acquired resources."""
        self._logger.info("Shutting down server bootstrap")
        if self._dependencies.http_client is not None:
            asyncio.run(self._dependencies.http_client.aclose())
        self._dependencies.detach_client()

    async def shutdown_async(self) -> None:
        """Async variant of shutdown for callers already inside an event loop."""
        self._logger.info("Shutting down server bootstrap")
        if self._dependencies.http_client is not None:
            await self._dependencies.http_client.aclose()
        self._dependencies.detach_client()

    def serve_forever(self) -> None:
        """Run the FastMCP server on the configured transport until interrupted."""
        if self._settings.transport == "sse":
            host = "0.0.0.0"
            port = self._settings.mcp_sse_port
            self._logger.info("Starting SSE transport", extra={"host": host, "port": port})
            self._mcp_app.run(transport="sse", host=host, port=port)
        else:
            self._logger.info("Starting stdio transport")
            self._mcp_app.run(transport="stdio")

    async def serve_sse_async(self, host: str = "0.0.0.0") -> None:
        """Async helper for running the SSE transport (used by smoke tests)."""
        await self._mcp_app.run_http_async(
            transport="sse",
            host=host,
            port=self._settings.mcp_sse_port,
        )

    @property
    def mcp(self) -> FastMCP:
        """Expose the configured FastMCP instance."""
        return self._mcp_app

    @property
    def dispatcher(self) -> ResourceDispatcher:
        return self._dispatcher


def build_server(settings: Settings, resolver: FrameworkResolver | None = None) -> ServerApp:
    """Factory used by main.py to create the configured server instance."""
    return ServerApp(settings, resolver)
