"""In-memory ZIP writer with a staged protocol.

Entries are submitted with ``add_buffer``, the archive is finalised with
``end`` and the finished bytes are drained from ``output_stream`` in order.
Submissions are held until ``end`` so that archive-level options can be
applied to every entry.
"""

from __future__ import annotations

import io
import logging
import re
import zipfile
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from ..constants import DEFAULT_CHUNK_SIZE
from ..options import ArchiveOptions, FileOptions

logger = logging.getLogger(__name__)

# DOS timestamps cannot represent anything earlier
_ZIP_EPOCH = (1980, 1, 1, 0, 0, 0)

_ABSOLUTE_RE = re.compile(r"^(/|[a-zA-Z]:)")


class ArchiveWriter(Protocol):
    """Interface for an archive writer.

    Implementations accept any number of ``add_buffer`` calls, then exactly
    one ``end`` call, after which ``output_stream`` yields the archive bytes.
    """

    def add_buffer(self, data: bytes, metadata_path: str, options: FileOptions | None = None) -> None:
        ...

    def end(self, options: ArchiveOptions | None = None) -> None:
        ...

    def output_stream(self) -> Iterator[bytes]:
        ...


def validate_metadata_path(metadata_path: str) -> str:
    """Check that ``metadata_path`` is usable as a ZIP entry name.

    :raises ValueError: for empty, absolute, backslashed or ``..`` paths
    """
    if not metadata_path:
        raise ValueError("empty metadata_path")
    if "\\" in metadata_path:
        raise ValueError(f"invalid characters in path: {metadata_path}")
    if _ABSOLUTE_RE.match(metadata_path):
        raise ValueError(f"absolute path: {metadata_path}")
    if ".." in metadata_path.split("/"):
        raise ValueError(f"invalid relative path: {metadata_path}")
    return metadata_path


@dataclass
class _PendingEntry:
    name: str
    data: bytes
    options: FileOptions
    submitted_at: datetime


class ZipArchiveWriter:
    """Collects entries and produces a ZIP archive in memory."""

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self.chunk_size = chunk_size
        self._entries: list[_PendingEntry] = []
        self._result: bytes | None = None

    @property
    def ended(self) -> bool:
        return self._result is not None

    def add_buffer(self, data: bytes, metadata_path: str, options: FileOptions | None = None) -> None:
        """Queue ``data`` to be stored under ``metadata_path``."""
        if self.ended:
            raise RuntimeError("cannot add entries after end()")
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError(f"data must be bytes, not {type(data).__name__}")
        self._entries.append(
            _PendingEntry(
                name=validate_metadata_path(metadata_path),
                data=bytes(data),
                options=options or FileOptions(),
                submitted_at=datetime.now(),
            )
        )

    def end(self, options: ArchiveOptions | None = None) -> None:
        """Write every queued entry and the central directory."""
        if self.ended:
            raise RuntimeError("end() already called")
        archive_options = options or ArchiveOptions()
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w") as zf:
            for entry in self._entries:
                self._write_entry(zf, entry, archive_options)
            comment = archive_options.comment
            zf.comment = comment.encode("utf-8") if isinstance(comment, str) else bytes(comment)
        self._result = buffer.getvalue()
        self._entries.clear()
        logger.debug("Finalised archive (%d bytes)", len(self._result))

    def output_stream(self) -> Iterator[bytes]:
        """Yield the finished archive in chunks of at most ``chunk_size`` bytes."""
        if self._result is None:
            raise RuntimeError("output_stream() requires end() to be called first")
        result = self._result
        for start in range(0, len(result), self.chunk_size):
            yield result[start : start + self.chunk_size]

    @staticmethod
    def _write_entry(zf: zipfile.ZipFile, entry: _PendingEntry, archive_options: ArchiveOptions) -> None:
        opts = entry.options
        mtime = opts.mtime or entry.submitted_at
        date_time = max(tuple(mtime.timetuple())[:6], _ZIP_EPOCH)
        info = zipfile.ZipInfo(entry.name, date_time=date_time)
        # Unix mode lives in the high 16 bits of external_attr
        info.create_system = 3
        info.external_attr = (opts.mode & 0xFFFF) << 16
        info.compress_type = zipfile.ZIP_DEFLATED if opts.compress else zipfile.ZIP_STORED
        info.file_size = len(entry.data)
        force_zip64 = opts.force_zip64 or archive_options.force_zip64
        with zf.open(info, "w", force_zip64=force_zip64) as fh:
            fh.write(entry.data)
