"""Archive options.

``ZipOptions`` is the single, immutable configuration value handed to the
plugin and the assembler.  Per-entry metadata lives in ``FileOptions`` and
archive-level settings in ``ArchiveOptions``; both are forwarded to the
archive writer untouched.

Options can be built directly or from a JSON-style mapping with
``ZipOptions.from_dict``, which accepts both camelCase and snake_case keys.
"""

from __future__ import annotations

import ntpath
import posixpath
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from .constants import DEFAULT_FILE_MODE, DOS_MAX_YEAR
from .errors import ConfigurationError
from .policy.matcher import RuleSpec, to_rule


def _is_absolute(path: str) -> bool:
    return posixpath.isabs(path) or ntpath.isabs(path)


def _parse_mtime(value: object) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text)
        except ValueError as exc:
            raise ConfigurationError(f"Invalid mtime: {value!r}") from exc
    raise ConfigurationError(f"Invalid mtime: {value!r}")


def _parse_flag(value: object, name: str, default: bool) -> bool:
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ConfigurationError(f"Invalid {name}: expected a boolean, got {value!r}")
    return value


def _pick(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return None


def _check_keys(data: Mapping[str, Any], known: set[str], what: str) -> None:
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigurationError(f"Unknown {what} option(s): {', '.join(unknown)}")


@dataclass(frozen=True)
class FileOptions:
    """Metadata attached to every archive entry.

    ``mtime`` defaults to the time the entry is submitted.  Times before 1980
    are clamped when written; later than 2107 cannot be stored and is
    rejected here.  ``mode`` holds the full Unix mode including the file type
    bits.
    """

    mtime: datetime | None = None
    mode: int = DEFAULT_FILE_MODE
    compress: bool = True
    force_zip64: bool = False

    def __post_init__(self) -> None:
        if self.mtime is not None and self.mtime.year > DOS_MAX_YEAR:
            raise ConfigurationError(
                f"mtime {self.mtime.isoformat()} is after {DOS_MAX_YEAR}, the last year a ZIP entry can record"
            )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FileOptions:
        _check_keys(
            data,
            {"mtime", "mode", "compress", "forceZip64Format", "force_zip64"},
            "file",
        )
        mtime = data.get("mtime")
        mode = data.get("mode")
        compress = data.get("compress")
        return cls(
            mtime=_parse_mtime(mtime) if mtime is not None else None,
            mode=int(mode) if mode is not None else DEFAULT_FILE_MODE,
            compress=_parse_flag(compress, "compress", True),
            force_zip64=_parse_flag(_pick(data, "force_zip64", "forceZip64Format"), "force_zip64", False),
        )


@dataclass(frozen=True)
class ArchiveOptions:
    """Settings applied when the archive is finalised."""

    comment: str | bytes = b""
    force_zip64: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ArchiveOptions:
        _check_keys(data, {"comment", "forceZip64Format", "force_zip64"}, "archive")
        return cls(
            comment=data.get("comment") or b"",
            force_zip64=_parse_flag(_pick(data, "force_zip64", "forceZip64Format"), "force_zip64", False),
        )


@dataclass(frozen=True)
class ZipOptions:
    """Configuration for one archive.

    :param path: output directory, relative to the build output directory or absolute
    :param filename: archive base name, with or without a ``.zip`` extension
    :param extension: archive extension, ``zip`` when omitted
    :param path_prefix: relative directory prepended to every entry path
    :param path_mapper: function applied to each prefixed entry path
    :param include: rules an asset path must match to be archived
    :param exclude: rules that keep an asset out; wins over ``include``
    :param file_options: per-entry metadata forwarded to the writer
    :param zip_options: archive-level options forwarded to the writer
    :raises ConfigurationError: if ``path_prefix`` is absolute or a rule is malformed
    """

    path: str | None = None
    filename: str | None = None
    extension: str | None = None
    path_prefix: str | None = None
    path_mapper: Callable[[str], str] | None = None
    include: RuleSpec | None = None
    exclude: RuleSpec | None = None
    file_options: FileOptions | None = None
    zip_options: ArchiveOptions | None = None

    def __post_init__(self) -> None:
        if self.path_prefix and _is_absolute(self.path_prefix):
            raise ConfigurationError("`path_prefix` must be a relative path")
        if self.path_mapper is not None and not callable(self.path_mapper):
            raise ConfigurationError("`path_mapper` must be callable")
        # Rule specs are stored as immutable rules
        try:
            object.__setattr__(self, "include", to_rule(self.include))
            object.__setattr__(self, "exclude", to_rule(self.exclude))
        except TypeError as exc:
            raise ConfigurationError(str(exc)) from exc

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ZipOptions:
        """Build options from a JSON-style mapping.

        ``include_patterns`` and ``exclude_patterns`` hold regular expression
        sources; they are compiled and combined with any literal ``include``
        and ``exclude`` entries.
        """
        _check_keys(
            data,
            {
                "path",
                "filename",
                "extension",
                "pathPrefix",
                "path_prefix",
                "pathMapper",
                "path_mapper",
                "include",
                "exclude",
                "include_patterns",
                "exclude_patterns",
                "fileOptions",
                "file_options",
                "zipOptions",
                "zip_options",
            },
            "zip",
        )
        file_options = _pick(data, "file_options", "fileOptions")
        zip_options = _pick(data, "zip_options", "zipOptions")
        return cls(
            path=data.get("path"),
            filename=data.get("filename"),
            extension=data.get("extension"),
            path_prefix=_pick(data, "path_prefix", "pathPrefix"),
            path_mapper=_pick(data, "path_mapper", "pathMapper"),
            include=_combine_rules(data.get("include"), data.get("include_patterns")),
            exclude=_combine_rules(data.get("exclude"), data.get("exclude_patterns")),
            file_options=_as_options(file_options, FileOptions),
            zip_options=_as_options(zip_options, ArchiveOptions),
        )


def _as_options(value: Any, kind: type) -> Any:
    if value is None or isinstance(value, kind):
        return value
    if isinstance(value, Mapping):
        return kind.from_dict(value)
    raise ConfigurationError(f"Invalid {kind.__name__}: {value!r}")


def _combine_rules(literals: Any, patterns: Any) -> list | str | None:
    if patterns is None:
        return literals
    if isinstance(patterns, str):
        patterns = [patterns]
    try:
        compiled = [re.compile(p) for p in patterns]
    except re.error as exc:
        raise ConfigurationError(f"Invalid pattern: {exc}") from exc
    if literals is None:
        return compiled
    if isinstance(literals, (str, re.Pattern)):
        literals = [literals]
    return [*literals, *compiled]
