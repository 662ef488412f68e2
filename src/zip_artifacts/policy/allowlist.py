"""Allowlist enforcement for output directories.

The server only archives build output directories that live under one of
the roots configured through the ``ALLOWED_ROOTS`` environment variable.
This module centralises the check.
"""

from __future__ import annotations

import os
from collections.abc import Iterable


def root_allowed(directory: str, allowed: Iterable[str]) -> bool:
    """Return ``True`` if ``directory`` is one of ``allowed`` or lies beneath one.

    Both sides are resolved to real absolute paths first so that ``..``
    segments and symlinks cannot escape an allowed root.  An entry of ``*``
    allows any directory.
    """
    target = os.path.realpath(directory)
    for entry in allowed:
        entry = entry.strip()
        if not entry:
            continue
        if entry == "*":
            return True
        root = os.path.realpath(entry)
        if target == root:
            return True
        if target.startswith(root.rstrip(os.sep) + os.sep):
            return True
    return False
