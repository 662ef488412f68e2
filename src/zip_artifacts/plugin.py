"""Build plugin that zips the finished assets of a build.

Typical use::

    compiler = Compiler("dist", plugins=[ZipFilePlugin(ZipOptions(exclude=re.compile(r"\\.map$")))])
    await compiler.run(assets)

The archive is emitted once per top-level compilation, after every other
asset-producing and optimising stage has run.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from .archive.assembler import ArchiveAssembler
from .archive.writer import ArchiveWriter, ZipArchiveWriter
from .build.compilation import PROCESS_ASSETS_STAGE_SUMMARIZE, Compilation, Compiler
from .options import ZipOptions

logger = logging.getLogger(__name__)


class ZipFilePlugin:
    """Compresses all assets of a compilation into one archive.

    :param options: a ``ZipOptions`` value or a mapping accepted by
        ``ZipOptions.from_dict``
    :param writer_factory: archive writer factory, mainly for tests
    :raises ConfigurationError: immediately, if the options are invalid
    """

    name = "ZipFilePlugin"
    stage = PROCESS_ASSETS_STAGE_SUMMARIZE

    def __init__(
        self,
        options: ZipOptions | dict[str, Any] | None = None,
        writer_factory: Callable[[], ArchiveWriter] = ZipArchiveWriter,
    ) -> None:
        if options is None:
            options = ZipOptions()
        elif not isinstance(options, ZipOptions):
            options = ZipOptions.from_dict(options)
        self.options = options
        self.assembler = ArchiveAssembler(options, writer_factory=writer_factory)

    def apply(self, compiler: Compiler) -> None:
        compiler.hooks.compilation.tap(self.name, self._on_compilation)

    def _on_compilation(self, compilation: Compilation) -> None:
        # Child compilers' assets end up in the parent compilation
        if compilation.compiler.is_child():
            logger.debug("Skipping child compiler %s", compilation.compiler.name)
            return

        async def process_assets(assets: dict[str, Any]) -> None:
            self.assembler.emit(compilation)

        compilation.hooks.process_assets.tap_promise(self.name, process_assets, stage=self.stage)
