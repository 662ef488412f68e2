"""Tool module exports for zip-artifacts.

Each submodule exposes functions that the MCP server registers as tools.

Usage:

    from zip_artifacts.tools import archive_tools
    await archive_tools.zip_build_outputs("dist")
"""

from . import archive_tools  # noqa: F401

__all__ = ["archive_tools"]
