"""Per-request ownership of the temporary tree and the error sink."""
from __future__ import annotations

from pathlib import Path
from typing import Optional

from common.cleanup import remove_tree
from common.config import EngineSettings
from common.logging import get_logger
from common.paths import create_temporary_directory
from common.sink import ErrorSink

from .descriptor import ProjectDescriptor
from .errors import DescriptorWriteError, SynthesisError

LOGGER = get_logger(__name__)


class SynthesisSession:
    """Owns at most one temporary directory; releases everything in :meth:`cleanup`."""

    def __init__(self, sink: ErrorSink, settings: EngineSettings) -> None:
        self.sink = sink
        self.settings = settings
        self.temporary_directory: Optional[Path] = None
        self.descriptor: Optional[ProjectDescriptor] = None
        self.closed = False

    def create_temporary_directory(self) -> Path:
        if self.temporary_directory is not None:
            raise SynthesisError("A session may own only one temporary directory")
        try:
            self.temporary_directory = create_temporary_directory(self.settings.temp_prefix)
        except OSError as exc:
            raise DescriptorWriteError(f"Could not create a temporary directory: {exc}") from exc
        LOGGER.debug("Created %s", self.temporary_directory)
        return self.temporary_directory

    def cleanup(self) -> None:
        if self.closed:
            return
        self.closed = True
        self.sink.close()
        if self.temporary_directory is not None:
            remove_tree(self.temporary_directory)

    def __enter__(self) -> "SynthesisSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cleanup()


__all__ = ["SynthesisSession"]
