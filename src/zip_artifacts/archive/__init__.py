"""Archive assembly: entry paths, the ZIP writer and the assembler."""

from .assembler import ArchiveAssembler, SelectedEntry
from .paths import map_entry, resolve_archive_path
from .writer import ArchiveWriter, ZipArchiveWriter

__all__ = [
    "ArchiveAssembler",
    "ArchiveWriter",
    "SelectedEntry",
    "ZipArchiveWriter",
    "map_entry",
    "resolve_archive_path",
]
