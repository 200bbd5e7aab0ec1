"""Collision-free artifact ids for faked dependencies."""
from __future__ import annotations

import threading
from pathlib import Path
from typing import Callable, Dict, Optional, Tuple

ContainsProject = Callable[[str, str], bool]


def artifact_prefix(name: str) -> str:
    """Derive an artifact id candidate from a file name (up to its first dot)."""

    dot = name.find(".")
    if dot < 0:
        return name or "dependency"
    if dot == 0:
        return "dependency"
    return name[:dot]


class ArtifactIdRegistry:
    """Tracks which ``(group, artifactId)`` pairs are taken within one build session.

    ``contains`` lets the owning build environment report projects it already
    knows about (parsed descriptors), so fakes never shadow them.  Lookups and
    inserts happen under one lock, so two threads cannot allocate the same id.
    """

    def __init__(self, contains: ContainsProject | None = None) -> None:
        self._contains = contains
        self._lock = threading.Lock()
        self._allocated: Dict[Tuple[str, str], Optional[Path]] = {}

    def _taken(self, group_id: str, artifact_id: str) -> bool:
        if (group_id, artifact_id) in self._allocated:
            return True
        return bool(self._contains and self._contains(group_id, artifact_id))

    def allocate(self, group_id: str, name: str, path: Path | None = None) -> str:
        prefix = artifact_prefix(name)
        with self._lock:
            candidate = prefix
            counter = 0
            while self._taken(group_id, candidate):
                counter += 1
                candidate = f"{prefix}-{counter}"
            self._allocated[(group_id, candidate)] = path
            return candidate

    def path_for(self, group_id: str, artifact_id: str) -> Optional[Path]:
        with self._lock:
            return self._allocated.get((group_id, artifact_id))

    def __len__(self) -> int:
        with self._lock:
            return len(self._allocated)


__all__ = ["ArtifactIdRegistry", "artifact_prefix"]
