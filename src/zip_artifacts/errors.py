"""Exception types raised by zip-artifacts."""

from __future__ import annotations


class ConfigurationError(ValueError):
    """Raised synchronously when archive options are invalid."""


class AssetConflictError(ValueError):
    """Raised when different content is emitted under an existing asset path."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Conflict: multiple assets emit different content to the same filename {path}")
        self.path = path
