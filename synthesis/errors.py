"""Exceptions raised while turning a loose source into a project."""
from __future__ import annotations

from pathlib import Path


class SynthesisError(RuntimeError):
    """Base class for failures that abort a synthesis request."""


class UnsupportedSourceError(SynthesisError):
    """Raised for inputs that are neither a ``pom.xml`` nor a ``.java`` file."""


class DescriptorWriteError(SynthesisError):
    """Raised when the temporary tree, the source or the descriptor cannot be written."""


class UnitLocationError(SynthesisError):
    """Raised when a class sits in a directory that contradicts its package."""

    def __init__(self, path: Path, class_name: str, expected_suffix: str) -> None:
        super().__init__(
            f"Class {class_name} in invalid directory: {path} "
            f"(expected a path ending in {expected_suffix})"
        )
        self.path = path
        self.class_name = class_name
        self.expected_suffix = expected_suffix
