"""Shared state module for zip-artifacts.

This module provides the single configuration instance used by the tool
modules and the server.  Tool modules import ``CONFIG`` from here instead of
loading their own.
"""

from __future__ import annotations

from .config import Config

# Single shared configuration loaded once at import time
CONFIG: Config = Config.load_from_env()
