"""Build host: hooks, compilers, compilations and the directory adapter."""

from .compilation import (
    PROCESS_ASSETS_STAGE_ADDITIONAL,
    PROCESS_ASSETS_STAGE_ADDITIONS,
    PROCESS_ASSETS_STAGE_REPORT,
    PROCESS_ASSETS_STAGE_SUMMARIZE,
    Compilation,
    Compiler,
    RawSource,
)
from .directory import BuildResult, DirectoryBuild, load_assets, write_assets
from .hooks import AsyncSeriesHook, SyncHook

__all__ = [
    "PROCESS_ASSETS_STAGE_ADDITIONAL",
    "PROCESS_ASSETS_STAGE_ADDITIONS",
    "PROCESS_ASSETS_STAGE_REPORT",
    "PROCESS_ASSETS_STAGE_SUMMARIZE",
    "AsyncSeriesHook",
    "BuildResult",
    "Compilation",
    "Compiler",
    "DirectoryBuild",
    "RawSource",
    "SyncHook",
    "load_assets",
    "write_assets",
]
