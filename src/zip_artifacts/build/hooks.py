"""Minimal tapable hooks used by the build host.

``SyncHook`` calls its taps in registration order.  ``AsyncSeriesHook``
awaits its taps one after another, ordered by ``stage`` and then by
registration order.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Tap:
    """A registered hook callback."""

    name: str
    fn: Callable[..., Any]
    stage: int = 0
    is_async: bool = False


class SyncHook:
    """Hook whose taps are plain callables run in registration order."""

    def __init__(self) -> None:
        self._taps: list[Tap] = []

    @property
    def taps(self) -> list[Tap]:
        return list(self._taps)

    def tap(self, name: str, fn: Callable[..., Any]) -> None:
        self._taps.append(Tap(name=name, fn=fn))

    def call(self, *args: Any) -> None:
        for tap in self._taps:
            tap.fn(*args)


class AsyncSeriesHook:
    """Hook whose taps run sequentially and may be coroutines."""

    def __init__(self) -> None:
        self._taps: list[Tap] = []

    @property
    def taps(self) -> list[Tap]:
        return sorted(self._taps, key=lambda t: t.stage)

    def tap(self, name: str, fn: Callable[..., Any], stage: int = 0) -> None:
        """Register a synchronous callback."""
        self._taps.append(Tap(name=name, fn=fn, stage=stage))

    def tap_promise(self, name: str, fn: Callable[..., Any], stage: int = 0) -> None:
        """Register a callback returning an awaitable."""
        self._taps.append(Tap(name=name, fn=fn, stage=stage, is_async=True))

    async def promise(self, *args: Any) -> None:
        """Run every tap in stage order, awaiting asynchronous ones.

        The first exception stops the series and propagates to the caller.
        """
        for tap in self.taps:
            result = tap.fn(*args)
            if tap.is_async or inspect.isawaitable(result):
                await result
