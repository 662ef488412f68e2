"""Assemble selected build assets into a single archive."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any

from ..build.compilation import Compilation, RawSource
from ..options import FileOptions, ZipOptions
from ..policy.matcher import matches
from .paths import map_entry, resolve_archive_path
from .writer import ArchiveWriter, ZipArchiveWriter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SelectedEntry:
    """One asset chosen for the archive, with its in-archive path."""

    original_path: str
    archive_path: str
    content: bytes
    file_options: FileOptions | None


def asset_bytes(asset: Any) -> bytes:
    """Return the content of an asset as bytes.

    ``asset`` may be raw ``bytes``/``str`` or a source object exposing
    ``source()``.  Text is encoded as UTF-8.
    """
    value = asset.source() if hasattr(asset, "source") else asset
    if isinstance(value, str):
        return value.encode("utf-8")
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    raise TypeError(f"Asset content must be bytes or str, not {type(value).__name__}")


class ArchiveAssembler:
    """Turns a snapshot of build assets into one archive buffer.

    :param options: archive options; invalid options fail here, before any
        build activity
    :param writer_factory: returns a fresh archive writer per ``assemble`` call
    """

    def __init__(
        self,
        options: ZipOptions | None = None,
        writer_factory: Callable[[], ArchiveWriter] = ZipArchiveWriter,
    ) -> None:
        self.options = options if options is not None else ZipOptions()
        self.writer_factory = writer_factory

    def select(self, assets: Mapping[str, Any]) -> Iterator[SelectedEntry]:
        """Yield an entry for every asset that passes the include/exclude rules.

        Entries are produced lazily in the iteration order of ``assets``.
        """
        options = self.options
        for name, asset in assets.items():
            if not matches(name, options.include, options.exclude):
                continue
            yield SelectedEntry(
                original_path=name,
                archive_path=map_entry(name, options),
                content=asset_bytes(asset),
                file_options=options.file_options,
            )

    def assemble(self, assets: Mapping[str, Any]) -> bytes:
        """Build the archive for ``assets`` and return its bytes.

        An empty selection still yields a valid, empty archive.  Writer errors
        propagate unchanged.
        """
        writer = self.writer_factory()
        count = 0
        for entry in self.select(assets):
            logger.debug("Adding %s as %s", entry.original_path, entry.archive_path)
            writer.add_buffer(entry.content, entry.archive_path, entry.file_options)
            count += 1
        writer.end(self.options.zip_options)
        data = b"".join(writer.output_stream())
        logger.debug("Assembled %d of %d assets into %d bytes", count, len(assets), len(data))
        return data

    def destination(self, output_path: str) -> str:
        """Return the archive's asset key for a build writing to ``output_path``."""
        return resolve_archive_path(output_path, self.options)

    def emit(self, compilation: Compilation) -> str:
        """Assemble the compilation's assets and register the archive as a new asset.

        The asset mapping is copied before assembly so that the archive is
        built from a fixed snapshot.

        :return: the asset key the archive was emitted under
        """
        snapshot = dict(compilation.assets)
        data = self.assemble(snapshot)
        destination = self.destination(compilation.output_path)
        compilation.emit_asset(destination, RawSource(data, convert_to_string=False))
        logger.info("Emitted archive %s (%d bytes)", destination, len(data))
        return destination
