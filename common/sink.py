"""Line-oriented wrapper around a caller-supplied error writer."""
from __future__ import annotations

import threading
import traceback
from typing import Optional, TextIO

from common.logging import get_logger

LOGGER = get_logger(__name__)


class ErrorSink:
    """Forwards build output and failures to ``writer``.

    Closing the sink flushes it and stops forwarding; the caller's writer
    itself stays open because the caller owns it.
    """

    def __init__(self, writer: Optional[TextIO]) -> None:
        self._writer = writer
        self._lock = threading.Lock()
        self.closed = False

    @property
    def enabled(self) -> bool:
        return self._writer is not None and not self.closed

    def write_line(self, line: str) -> None:
        if not self.enabled:
            LOGGER.debug("%s", line.rstrip("\n"))
            return
        with self._lock:
            self._writer.write(line.rstrip("\n") + "\n")

    def write_exception(self, exc: BaseException) -> None:
        if not self.enabled:
            return
        with self._lock:
            traceback.print_exception(type(exc), exc, exc.__traceback__, file=self._writer)
            self._writer.flush()

    def close(self) -> None:
        if self.closed:
            return
        if self._writer is not None:
            try:
                self._writer.flush()
            except (OSError, ValueError) as exc:
                LOGGER.debug("Error writer could not be flushed: %s", exc)
        self.closed = True


__all__ = ["ErrorSink"]
