"""Pytest configuration and fixtures for zip-artifacts tests.

This module provides sample build assets, a recording archive writer and
helpers for reading produced archives back.

IMPORTANT: Environment variables must be set BEFORE importing zip_artifacts
modules, as the state module loads configuration at import time.
"""

from __future__ import annotations

import os
import tempfile

# Set environment variables BEFORE any zip_artifacts imports
os.environ.setdefault("ALLOWED_ROOTS", tempfile.gettempdir())

import io
import zipfile
from pathlib import Path

import pytest

JS_SOURCE = "const abc = 'xyz';\n"
JPG_BYTES = bytes(range(256)) * 8


class RecordingWriter:
    """Archive writer that records the staged calls it receives.

    This is ONLY for testing - it produces a fixed payload instead of a ZIP.
    """

    def __init__(self, payload: bytes = b"PK-fake", fail_on_end: Exception | None = None) -> None:
        self.added: list[tuple[bytes, str, object]] = []
        self.end_options: object = None
        self.ended = False
        self.payload = payload
        self.fail_on_end = fail_on_end

    def add_buffer(self, data, metadata_path, options=None):
        self.added.append((data, metadata_path, options))

    def end(self, options=None):
        if self.fail_on_end is not None:
            raise self.fail_on_end
        self.end_options = options
        self.ended = True

    def output_stream(self):
        yield self.payload[:3]
        yield self.payload[3:]


def read_zip(data: bytes) -> dict[str, bytes]:
    """Return the entries of an in-memory archive as ``{name: content}``."""
    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        return {name: zf.read(name) for name in zf.namelist()}


@pytest.fixture
def sample_assets() -> dict[str, object]:
    """Two finished build outputs: a text script and a binary image."""
    return {"a.js": JS_SOURCE, "subdir/b.jpg": JPG_BYTES}


@pytest.fixture
def output_dir(tmp_path: Path, sample_assets) -> Path:
    """A build output directory on disk holding the sample assets."""
    out = tmp_path / "out"
    (out / "subdir").mkdir(parents=True)
    (out / "a.js").write_text(JS_SOURCE, encoding="utf-8")
    (out / "subdir" / "b.jpg").write_bytes(JPG_BYTES)
    return out


@pytest.fixture
def recording_writer() -> RecordingWriter:
    return RecordingWriter()


@pytest.fixture
def unzip():
    return read_zip


@pytest.fixture
def writer_class():
    return RecordingWriter
