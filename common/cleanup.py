"""Best-effort removal of temporary trees.

Directories that cannot be removed right away (for example because a file
handle is still open) are remembered and retried once more when the
interpreter shuts down.
"""
from __future__ import annotations

import atexit
import shutil
import threading
from pathlib import Path
from typing import List

from common.logging import get_logger

LOGGER = get_logger(__name__)

_PENDING: List[Path] = []
_LOCK = threading.Lock()


def remove_tree(path: Path | None) -> bool:
    """Delete ``path`` recursively; schedule it for exit when that fails."""

    if path is None:
        return True
    path = Path(path)
    if not path.exists():
        return True
    try:
        shutil.rmtree(path)
        LOGGER.debug("Removed temporary directory %s", path)
        return True
    except OSError as exc:
        LOGGER.warning("Could not remove %s (%s); deferring until exit", path, exc)
        schedule(path)
        return False


def schedule(path: Path) -> None:
    with _LOCK:
        if path not in _PENDING:
            _PENDING.append(path)


def pending() -> List[Path]:
    with _LOCK:
        return list(_PENDING)


def flush_pending() -> List[Path]:
    """Retry every deferred deletion; return the paths that still remain."""

    with _LOCK:
        queued = list(_PENDING)
        _PENDING.clear()
    remaining: List[Path] = []
    for path in queued:
        shutil.rmtree(path, ignore_errors=True)
        if path.exists():
            remaining.append(path)
    if remaining:
        LOGGER.warning("Leaving %d temporary directories behind", len(remaining))
    return remaining


atexit.register(flush_pending)


__all__ = ["remove_tree", "schedule", "pending", "flush_pending"]
