"""Build host for an already populated output directory.

``DirectoryBuild`` treats every file under a directory as a finished asset,
runs the given plugins over them and writes back whatever the plugins
emitted.  Existing files are never rewritten.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from .compilation import Compilation, Compiler, Plugin, RawSource

logger = logging.getLogger(__name__)


def load_assets(root: str, ignore: Iterable[str] = ()) -> dict[str, RawSource]:
    """Read every file under ``root`` into memory.

    Keys are relative POSIX paths in sorted order.  Paths listed in ``ignore``
    are skipped.
    """
    skipped = set(ignore)
    assets: dict[str, RawSource] = {}
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for fn in sorted(filenames):
            full = os.path.join(dirpath, fn)
            rel = os.path.relpath(full, root).replace(os.sep, "/")
            if rel in skipped:
                continue
            with open(full, "rb") as f:
                assets[rel] = RawSource(f.read())
    return assets


def write_assets(root: str, assets: Mapping[str, RawSource], names: Iterable[str]) -> list[str]:
    """Write the named assets below ``root`` and return the absolute paths written."""
    written = []
    for name in names:
        target = os.path.normpath(os.path.join(root, name))
        os.makedirs(os.path.dirname(target), exist_ok=True)
        with open(target, "wb") as f:
            f.write(assets[name].buffer())
        logger.debug("Wrote %s", target)
        written.append(target)
    return written


@dataclass
class BuildResult:
    """Outcome of a ``DirectoryBuild`` run."""

    output_path: str
    compilation: Compilation
    emitted: list[str] = field(default_factory=list)
    written: list[str] = field(default_factory=list)


class DirectoryBuild:
    """Runs plugins over the files already present in ``root``.

    Files whose relative path is listed in ``ignore`` are not loaded, which
    keeps a previous run's archive out of the next one.

    :raises NotADirectoryError: if ``root`` is not an existing directory
    """

    def __init__(self, root: str, plugins: Iterable[Plugin] = (), ignore: Iterable[str] = ()) -> None:
        if not os.path.isdir(root):
            raise NotADirectoryError(f"Not a directory: {root}")
        self.root = os.path.abspath(root)
        self.plugins = list(plugins)
        self.ignore = list(ignore)

    async def run(self, write: bool = True) -> BuildResult:
        """Process the directory and, unless ``write`` is false, write new assets."""
        assets = load_assets(self.root, self.ignore)
        logger.info("Loaded %d assets from %s", len(assets), self.root)
        compiler = Compiler(self.root, plugins=self.plugins)
        compilation = await compiler.run(assets)
        emitted = list(compilation.emitted)
        written = write_assets(self.root, compilation.assets, emitted) if write else []
        return BuildResult(
            output_path=self.root,
            compilation=compilation,
            emitted=emitted,
            written=written,
        )
