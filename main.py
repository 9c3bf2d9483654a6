"""Entry point for the shadcn/ui MCP server."""

import logging
import os
import sys

from shadcn_mcp.framework import FrameworkResolver
from shadcn_mcp.server import build_server
from shadcn_mcp.settings import Settings


def _configure_logging() -> None:
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    # stdout carries the stdio transport
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stderr,
    )


def main() -> None:
    """Bootstrap and run the MCP server."""
    _configure_logging()
    logger = logging.getLogger("shadcn-ui-mcp-server")
    settings = Settings.load()
    server = build_server(settings, FrameworkResolver(sys.argv[1:]))

    try:
        server.startup()
        if settings.transport == "sse":
            logger.info(
                "MCP SSE server ready at http://localhost:%s/sse",
                settings.mcp_sse_port,
            )
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Shutdown requested (Ctrl+C).")
    except Exception:
        logger.exception("Server stopped due to an unexpected error.")
        raise
    finally:
        server.shutdown()
        logger.info("Server shutdown complete.")


if __name__ == "__main__":
    main()
