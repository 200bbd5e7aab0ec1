"""Path helpers to keep directory layout consistent."""
from __future__ import annotations

import tempfile
from pathlib import Path


def get_repo_root() -> Path:
    return Path(__file__).resolve().parents[1]


def get_config_dir() -> Path:
    return get_repo_root() / "config"


def ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def create_temporary_directory(prefix: str, suffix: str = "") -> Path:
    return Path(tempfile.mkdtemp(prefix=prefix, suffix=suffix))


def posix_endswith(path: Path, suffix: str) -> bool:
    """Compare a path against a ``/``-separated suffix on any platform."""

    normalized = path.as_posix().rstrip("/")
    return normalized == suffix.strip("/") or normalized.endswith("/" + suffix.strip("/"))
