"""
Stage timer.

Usage:
    async with Timer("search", sink=ctx.stage_timings) as t:
        outcome = await adapter.search(question)
    logger.info("took %.1fms", t.elapsed_ms)
"""

from __future__ import annotations

import time
from typing import Any

from orsbot.utils.logging import get_logger

logger = get_logger("orsbot.timing")


class Timer:
    """
    Context-manager timer (sync + async).

    When ``sink`` is given, the elapsed seconds are written into it under
    ``label`` on exit, even if the body raised.
    """

    def __init__(self, label: str = "", sink: dict[str, float] | None = None):
        self.label = label
        self.sink = sink
        self._start: float = 0.0
        self.elapsed_s: float = 0.0

    @property
    def elapsed_ms(self) -> float:
        return self.elapsed_s * 1000

    def _stop(self) -> None:
        self.elapsed_s = time.perf_counter() - self._start
        if self.sink is not None and self.label:
            self.sink[self.label] = round(self.elapsed_s, 4)
        if self.label:
            logger.debug("%s completed in %.1fms", self.label, self.elapsed_ms)

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, *_: Any) -> None:
        self._stop()

    async def __aenter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    async def __aexit__(self, *_: Any) -> None:
        self._stop()
