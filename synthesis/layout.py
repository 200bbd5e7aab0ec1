"""Conventional Maven layout rules.

All path-suffix reasoning lives here so the "does this file already sit in a
project?" question has exactly one answer.
"""
from __future__ import annotations

from pathlib import Path, PurePosixPath
from typing import Optional

from common.paths import posix_endswith

from .errors import UnitLocationError
from .unit_name import SourceUnit

DESCRIPTOR_NAME = "pom.xml"
SOURCE_ROOT = "src/main/java"


def unit_path(root: Path, unit: SourceUnit, source_root: str = SOURCE_ROOT) -> Path:
    """Where ``unit`` belongs below the project ``root``."""

    return root.joinpath(*PurePosixPath(source_root).parts, *unit.relative_path.parts)


def source_directory_of(path: Path, unit: SourceUnit) -> Path:
    """Return the directory that acts as source root for ``path``.

    Raises :class:`UnitLocationError` when the trailing path components do not
    spell out the unit's package and type name.
    """

    path = Path(path).resolve()
    expected = unit.relative_path.parts
    actual = path.parts[-len(expected):]
    if len(path.parts) <= len(expected) or tuple(actual) != tuple(expected):
        raise UnitLocationError(path, unit.full_name, unit.relative_path.as_posix())
    return path.parents[len(expected) - 1]


def project_root_for(source_directory: Path, source_root: str = SOURCE_ROOT) -> Optional[Path]:
    """Project root owning ``source_directory`` if it is a conventional source root."""

    if not posix_endswith(source_directory, source_root):
        return None
    depth = len(PurePosixPath(source_root).parts)
    return source_directory.parents[depth - 1]


def existing_descriptor(source_directory: Path, source_root: str = SOURCE_ROOT) -> Optional[Path]:
    root = project_root_for(source_directory, source_root)
    if root is None:
        return None
    descriptor = root / DESCRIPTOR_NAME
    return descriptor if descriptor.is_file() else None


__all__ = [
    "DESCRIPTOR_NAME",
    "SOURCE_ROOT",
    "unit_path",
    "source_directory_of",
    "project_root_for",
    "existing_descriptor",
]
