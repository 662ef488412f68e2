"""Path computations for archives and their entries.

``resolve_archive_path`` decides where the archive itself is emitted and
``map_entry`` decides where each selected asset lands inside it.  Both are
pure functions of their arguments.
"""

from __future__ import annotations

import os
import posixpath
from typing import TYPE_CHECKING

from ..constants import DEFAULT_EXTENSION, ZIP_SUFFIX

if TYPE_CHECKING:
    from ..options import ZipOptions


def _basename(path: str) -> str:
    # Trailing separators do not hide the last component
    stripped = path.rstrip("/" + os.sep)
    return os.path.basename(stripped) if stripped else ""


def _strip_zip_suffix(name: str) -> str:
    if name.endswith(ZIP_SUFFIX) and name != ZIP_SUFFIX:
        return name[: -len(ZIP_SUFFIX)]
    return name


def archive_filename(output_dir: str, options: ZipOptions) -> str:
    """Return the archive file name (base name plus extension).

    ``output_dir`` is the absolute directory the archive is written to; its
    base name is used when no ``filename`` option is given.
    """
    filename = options.filename if options.filename is not None else _basename(output_dir)
    extension = options.extension if options.extension is not None else DEFAULT_EXTENSION
    return f"{_strip_zip_suffix(_basename(filename))}.{extension}"


def resolve_archive_path(host_output_dir: str, options: ZipOptions) -> str:
    """Return the archive destination relative to ``host_output_dir``.

    ``options.path`` defaults to ``host_output_dir``; a relative value is
    resolved against it and an absolute value replaces it.  The returned path
    uses forward slashes and may start with ``..`` when the archive is placed
    outside the build output directory.

    :param host_output_dir: the build's own output directory
    :param options: archive options
    :return: relative destination, suitable as an asset key
    """
    root = os.path.abspath(host_output_dir)
    output_path = options.path if options.path is not None else root
    output_dir = os.path.abspath(os.path.join(root, output_path))
    destination = os.path.join(output_dir, archive_filename(output_dir, options))
    return os.path.relpath(destination, root).replace(os.sep, "/")


def map_entry(original_path: str, options: ZipOptions) -> str:
    """Return the in-archive path for an asset.

    The path prefix is joined first, so a ``path_mapper`` always receives the
    prefixed path.
    """
    prefixed = posixpath.normpath(posixpath.join(options.path_prefix or "", original_path))
    if options.path_mapper is None:
        return prefixed
    return options.path_mapper(prefixed)
