"""Configuration loading for zip-artifacts.

This module loads environment variables from a `.env` file using
`python-dotenv` and populates a `Config` object.

Optional variables with defaults:
- ALLOWED_ROOTS (default: the current working directory)
- LOG_LEVEL (default: 'INFO')
- ZIP_CHUNK_SIZE (default: 65536)
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from .constants import DEFAULT_CHUNK_SIZE


@dataclass
class Config:
    """Configuration values loaded from the environment."""

    allowed_roots: list[str]
    log_level: str
    chunk_size: int

    @classmethod
    def load_from_env(cls) -> Config:
        """Load configuration from environment variables.

        The `.env` file is loaded if present.  Raises `RuntimeError` if a
        variable holds an unusable value.
        """
        load_dotenv()

        # Optional: ALLOWED_ROOTS with default
        allowed_roots_str = os.getenv("ALLOWED_ROOTS")
        if allowed_roots_str:
            allowed_roots = [root.strip() for root in allowed_roots_str.split(",") if root.strip()]
        else:
            allowed_roots = [os.getcwd()]

        log_level = os.getenv("LOG_LEVEL", "INFO").upper()

        chunk_size_str = os.getenv("ZIP_CHUNK_SIZE")
        if chunk_size_str:
            try:
                chunk_size = int(chunk_size_str)
            except ValueError as exc:
                raise RuntimeError(f"ZIP_CHUNK_SIZE must be an integer, got {chunk_size_str!r}") from exc
            if chunk_size <= 0:
                raise RuntimeError("ZIP_CHUNK_SIZE must be positive")
        else:
            chunk_size = DEFAULT_CHUNK_SIZE

        return cls(
            allowed_roots=allowed_roots,
            log_level=log_level,
            chunk_size=chunk_size,
        )
