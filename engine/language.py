"""Metadata describing Java as a compiled scripting language."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Tuple


@dataclass(frozen=True)
class ScriptLanguage:
    name: str
    engine_name: str
    extensions: Tuple[str, ...]
    mime_types: Tuple[str, ...]
    compiled: bool

    def handles(self, path: Path) -> bool:
        suffix = Path(path).suffix.lstrip(".").lower()
        return suffix in self.extensions or Path(path).name == "pom.xml"


JAVA_LANGUAGE = ScriptLanguage(
    name="Java",
    engine_name="MiniMaven",
    extensions=("java",),
    mime_types=("application/x-java",),
    compiled=True,
)


__all__ = ["ScriptLanguage", "JAVA_LANGUAGE"]
