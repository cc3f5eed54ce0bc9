"""
Structured logging setup for the ``orsbot`` logger tree.

Usage:
    from orsbot.utils.logging import get_logger
    logger = get_logger("orsbot.pipeline.executor")
    logger.info("[PIPELINE] Started | workflow=%s", workflow)
"""

from __future__ import annotations

import logging
import sys

# Client libraries that log every HTTP exchange at INFO.
_NOISY_LOGGERS = ("httpx", "httpcore", "openai", "google_genai")

_handler: logging.Handler | None = None


def _coerce_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    value = getattr(logging, level.upper(), None)
    return value if isinstance(value, int) else logging.INFO


def setup_logging(level: int | str = logging.INFO) -> None:
    """
    Attach the single stderr handler to ``orsbot``; later calls only
    change the level.
    """
    global _handler
    level = _coerce_level(level)
    root = logging.getLogger("orsbot")

    if _handler is None:
        _handler = logging.StreamHandler(sys.stderr)
        _handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        root.addHandler(_handler)
        root.propagate = False
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    _handler.setLevel(level)
    root.setLevel(level)


def get_logger(name: str) -> logging.Logger:
    """Logger under ``orsbot``; attaches the handler on first use."""
    if _handler is None:
        setup_logging()
    return logging.getLogger(name)
