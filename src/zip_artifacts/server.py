"""MCP stdio server entrypoint for zip-artifacts.

The server runs over standard input/output using the Model Context Protocol
and registers the archive tools so that clients can zip build output
directories.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from mcp.server.fastmcp import FastMCP

from .state import CONFIG
from .telemetry.logger import get_logger
from .tools import archive_tools


def build_tools_dispatch() -> dict[str, Callable[..., Any]]:
    """Return a mapping from tool names to callables.

    Each callable accepts keyword arguments and returns a JSON-serializable
    dictionary (directly or through an awaitable).
    """
    return {
        "zip_build_outputs": archive_tools.zip_build_outputs,
        "preview_archive_entries": archive_tools.preview_archive_entries,
    }


def main() -> None:
    """Entrypoint for the zip-artifacts MCP server."""
    # Package-level handler on stderr; stdout is used for the MCP protocol
    logger = get_logger("zip_artifacts", CONFIG.log_level)
    logger.info("Starting zip-artifacts MCP server")

    mcp = FastMCP("zip-artifacts-mcp")

    dispatch = build_tools_dispatch()
    for name, func in dispatch.items():
        mcp.add_tool(func, name=name)

    logger.info("Registered %d tools", len(dispatch))

    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
