"""Top‑level package for zip-artifacts.

This package collects the finished outputs of a build into a single ZIP
archive and registers that archive back into the build.  The main entry
point is :class:`~zip_artifacts.plugin.ZipFilePlugin`; a tools-only MCP
server is available in :mod:`zip_artifacts.server`.
"""

from .options import ArchiveOptions, FileOptions, ZipOptions
from .plugin import ZipFilePlugin

__all__ = ["ArchiveOptions", "FileOptions", "ZipFilePlugin", "ZipOptions", "__version__"]
__version__ = "0.1.0"
