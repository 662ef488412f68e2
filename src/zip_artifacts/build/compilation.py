"""In-process build host: compilers, compilations and their assets.

A ``Compiler`` owns the output directory and creates one ``Compilation`` per
build.  Plugins hook into ``Compiler.hooks.compilation`` to learn about new
compilations and into ``Compilation.hooks.process_assets`` to inspect or add
assets once the build has produced them.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Mapping
from typing import Any, Protocol

from ..constants import DEFAULT_OUTPUT_DIRNAME
from ..errors import AssetConflictError
from .hooks import AsyncSeriesHook, SyncHook

logger = logging.getLogger(__name__)

# Stages of Compilation.hooks.process_assets, in execution order
PROCESS_ASSETS_STAGE_ADDITIONAL = -2000
PROCESS_ASSETS_STAGE_PRE_PROCESS = -1000
PROCESS_ASSETS_STAGE_DERIVED = -200
PROCESS_ASSETS_STAGE_ADDITIONS = -100
PROCESS_ASSETS_STAGE_OPTIMIZE = 100
PROCESS_ASSETS_STAGE_OPTIMIZE_SIZE = 400
PROCESS_ASSETS_STAGE_DEV_TOOLING = 500
PROCESS_ASSETS_STAGE_SUMMARIZE = 1000
PROCESS_ASSETS_STAGE_OPTIMIZE_HASH = 2500
PROCESS_ASSETS_STAGE_ANALYSE = 4000
PROCESS_ASSETS_STAGE_REPORT = 5000


class Plugin(Protocol):
    def apply(self, compiler: Compiler) -> None:
        ...


class RawSource:
    """Asset content held in memory.

    :param value: bytes or text
    :param convert_to_string: decode bytes to text on construction
    """

    def __init__(self, value: bytes | str, convert_to_string: bool = False) -> None:
        if convert_to_string and isinstance(value, (bytes, bytearray)):
            value = bytes(value).decode("utf-8")
        elif isinstance(value, bytearray):
            value = bytes(value)
        self._value = value

    def source(self) -> bytes | str:
        return self._value

    def buffer(self) -> bytes:
        if isinstance(self._value, str):
            return self._value.encode("utf-8")
        return self._value

    def size(self) -> int:
        return len(self.buffer())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RawSource):
            return NotImplemented
        return self.buffer() == other.buffer()

    def __repr__(self) -> str:
        return f"RawSource({self.size()} bytes)"


class CompilationHooks:
    def __init__(self) -> None:
        self.process_assets = AsyncSeriesHook()


class Compilation:
    """A single build pass and its assets, keyed by relative output path."""

    def __init__(self, compiler: Compiler, assets: Mapping[str, Any] | None = None) -> None:
        self.compiler = compiler
        self.hooks = CompilationHooks()
        self.assets: dict[str, RawSource] = {}
        self.emitted: list[str] = []
        for name, value in (assets or {}).items():
            self.assets[name] = value if isinstance(value, RawSource) else RawSource(value)

    @property
    def output_path(self) -> str:
        return self.compiler.output_path

    def get_asset(self, name: str) -> RawSource | None:
        return self.assets.get(name)

    def emit_asset(self, name: str, source: RawSource) -> None:
        """Register a new asset.

        Emitting identical content twice under the same name is allowed.

        :raises AssetConflictError: if ``name`` already holds different content
        """
        existing = self.assets.get(name)
        if existing is not None and existing != source:
            raise AssetConflictError(name)
        self.assets[name] = source
        if name not in self.emitted:
            self.emitted.append(name)
        logger.debug("Emitted asset %s (%d bytes)", name, source.size())

    async def process_assets(self) -> None:
        """Run every ``process_assets`` tap against the current assets."""
        await self.hooks.process_assets.promise(self.assets)


class CompilerHooks:
    def __init__(self) -> None:
        self.compilation = SyncHook()


class Compiler:
    """Creates compilations for one output directory.

    :param output_path: build output directory; ``<cwd>/dist`` when omitted
    :param plugins: plugins applied immediately
    :param name: compiler name, used for child compilers
    :param parent: parent compiler when this is a child compiler
    """

    def __init__(
        self,
        output_path: str | None = None,
        plugins: Iterable[Plugin] = (),
        name: str | None = None,
        parent: Compiler | None = None,
    ) -> None:
        if output_path:
            self.output_path = os.path.abspath(output_path)
        else:
            self.output_path = os.path.join(os.getcwd(), DEFAULT_OUTPUT_DIRNAME)
        self.name = name
        self.parent = parent
        self.hooks = CompilerHooks()
        for plugin in plugins:
            plugin.apply(self)

    def is_child(self) -> bool:
        return self.parent is not None

    def create_child_compiler(self, name: str, plugins: Iterable[Plugin] = ()) -> Compiler:
        return Compiler(self.output_path, plugins=plugins, name=name, parent=self)

    def new_compilation(self, assets: Mapping[str, Any] | None = None) -> Compilation:
        compilation = Compilation(self, assets)
        self.hooks.compilation.call(compilation)
        return compilation

    async def run(self, assets: Mapping[str, Any] | None = None) -> Compilation:
        """Create a compilation for ``assets`` and process it to completion."""
        compilation = self.new_compilation(assets)
        await compilation.process_assets()
        return compilation
