"""Archive tool implementations.

These functions are registered with the MCP server.  They archive a build
output directory that already exists on disk, restricted to the roots listed
in ``ALLOWED_ROOTS``.  ``zip_build_outputs`` returns the archive location and,
on request, the archive bytes as base64 so that clients without filesystem
access can retrieve it.
"""

from __future__ import annotations

import base64
import io
import logging
import os
import zipfile
from functools import partial

from ..archive.assembler import ArchiveAssembler
from ..archive.writer import ZipArchiveWriter
from ..build.directory import DirectoryBuild, load_assets
from ..options import ArchiveOptions, FileOptions, ZipOptions
from ..plugin import ZipFilePlugin
from ..policy.allowlist import root_allowed
from ..state import CONFIG

logger = logging.getLogger(__name__)


def _validate_output_dir(output_dir: str) -> str:
    """Return ``output_dir`` as an absolute path after the allowlist check.

    Raises:
        PermissionError: If the directory is outside every allowed root
        NotADirectoryError: If the directory does not exist
    """
    if not root_allowed(output_dir, CONFIG.allowed_roots):
        raise PermissionError(f"Directory '{output_dir}' is not under an allowed root")
    if not os.path.isdir(output_dir):
        raise NotADirectoryError(f"Not a directory: {output_dir}")
    return os.path.abspath(output_dir)


def _build_options(
    path: str | None = None,
    filename: str | None = None,
    extension: str | None = None,
    path_prefix: str | None = None,
    include: list[str] | None = None,
    exclude: list[str] | None = None,
    include_patterns: list[str] | None = None,
    exclude_patterns: list[str] | None = None,
    mtime: str | None = None,
    mode: int | None = None,
    compress: bool = True,
    comment: str | None = None,
) -> ZipOptions:
    data: dict[str, object] = {
        "path": path,
        "filename": filename,
        "extension": extension,
        "path_prefix": path_prefix,
        "include": include,
        "exclude": exclude,
        "include_patterns": include_patterns,
        "exclude_patterns": exclude_patterns,
    }
    file_options: dict[str, object] = {"compress": compress}
    if mtime is not None:
        file_options["mtime"] = mtime
    if mode is not None:
        file_options["mode"] = mode
    data["file_options"] = FileOptions.from_dict(file_options)
    if comment:
        data["zip_options"] = ArchiveOptions(comment=comment)
    return ZipOptions.from_dict(data)


async def zip_build_outputs(
    output_dir: str,
    path: str | None = None,
    filename: str | None = None,
    extension: str | None = None,
    path_prefix: str | None = None,
    include: list[str] | None = None,
    exclude: list[str] | None = None,
    include_patterns: list[str] | None = None,
    exclude_patterns: list[str] | None = None,
    mtime: str | None = None,
    mode: int | None = None,
    compress: bool = True,
    comment: str | None = None,
    return_base64: bool = False,
) -> dict[str, object]:
    """Zip the files of a build output directory and write the archive.

    ``include``/``exclude`` hold literal paths (a trailing ``/`` selects a
    whole directory); ``include_patterns``/``exclude_patterns`` hold regular
    expressions.  Exclusions win over inclusions.  The archive is written
    next to the outputs unless ``path`` points elsewhere.

    Returns:
        A dictionary containing:
        - archive_path: Absolute path of the written archive
        - relative_path: Archive path relative to ``output_dir``
        - size_bytes: Size of the archive in bytes
        - entries: In-archive paths, in archive order
        - zip_base64: Base64-encoded archive (only when ``return_base64``)
    """
    root = _validate_output_dir(output_dir)
    options = _build_options(
        path=path,
        filename=filename,
        extension=extension,
        path_prefix=path_prefix,
        include=include,
        exclude=exclude,
        include_patterns=include_patterns,
        exclude_patterns=exclude_patterns,
        mtime=mtime,
        mode=mode,
        compress=compress,
        comment=comment,
    )
    plugin = ZipFilePlugin(options, writer_factory=partial(ZipArchiveWriter, CONFIG.chunk_size))
    relative_path = plugin.assembler.destination(root)
    archive_path = os.path.normpath(os.path.join(root, relative_path))
    if not root_allowed(os.path.dirname(archive_path), CONFIG.allowed_roots):
        raise PermissionError(f"Archive destination '{archive_path}' is not under an allowed root")

    build = DirectoryBuild(root, plugins=[plugin], ignore=[relative_path])
    result = await build.run()

    zip_bytes = result.compilation.assets[relative_path].buffer()
    with zipfile.ZipFile(io.BytesIO(zip_bytes)) as zf:
        entries = zf.namelist()

    logger.info("Archived %d entries from %s into %s", len(entries), root, archive_path)

    response: dict[str, object] = {
        "archive_path": archive_path,
        "relative_path": relative_path,
        "size_bytes": len(zip_bytes),
        "entries": entries,
    }
    if return_base64:
        response["zip_base64"] = base64.b64encode(zip_bytes).decode("ascii")
    return response


def preview_archive_entries(
    output_dir: str,
    path: str | None = None,
    filename: str | None = None,
    extension: str | None = None,
    path_prefix: str | None = None,
    include: list[str] | None = None,
    exclude: list[str] | None = None,
    include_patterns: list[str] | None = None,
    exclude_patterns: list[str] | None = None,
) -> dict[str, object]:
    """Show what ``zip_build_outputs`` would archive, without writing anything.

    Returns:
        A dictionary with the archive's ``relative_path``, the selected
        ``entries`` as ``{"source": ..., "archive_path": ...}`` pairs and the
        ``skipped`` asset paths.
    """
    root = _validate_output_dir(output_dir)
    options = _build_options(
        path=path,
        filename=filename,
        extension=extension,
        path_prefix=path_prefix,
        include=include,
        exclude=exclude,
        include_patterns=include_patterns,
        exclude_patterns=exclude_patterns,
    )
    assembler = ArchiveAssembler(options)
    relative_path = assembler.destination(root)
    assets = load_assets(root, ignore=[relative_path])

    entries = [
        {"source": entry.original_path, "archive_path": entry.archive_path}
        for entry in assembler.select(assets)
    ]
    selected = {entry["source"] for entry in entries}
    return {
        "relative_path": relative_path,
        "entries": entries,
        "skipped": [name for name in assets if name not in selected],
    }
