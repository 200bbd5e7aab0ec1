"""Shared logging configuration for the CLI and library callers."""
from __future__ import annotations

import logging
import os
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
LEVEL_ENV = "LOOSEJAVA_LOG_LEVEL"


def _level_from(value: int | str | None) -> Optional[int]:
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip():
        candidate = logging.getLevelName(value.strip().upper())
        if isinstance(candidate, int):
            return candidate
    return None


def resolve_level(value: int | str | None = None, *, debug: bool = False) -> int:
    """Explicit value first, then ``--debug``, then ``LOOSEJAVA_LOG_LEVEL``, then INFO."""

    explicit = _level_from(value)
    if explicit is not None:
        return explicit
    if debug:
        return logging.DEBUG
    from_env = _level_from(os.environ.get(LEVEL_ENV))
    return from_env if from_env is not None else logging.INFO


def configure_logging(level: int | str | None = None, *, debug: bool = False) -> None:
    resolved = resolve_level(level, debug=debug)
    root = logging.getLogger()
    if not root.hasHandlers():
        logging.basicConfig(level=resolved, format=LOG_FORMAT)
    elif level is not None or debug:
        root.setLevel(resolved)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    configure_logging()
    return logging.getLogger(name or "loosejava")
