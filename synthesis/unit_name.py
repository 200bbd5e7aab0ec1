"""Recover the fully-qualified class name of a Java source without parsing it.

The scanner walks logical lines, skipping blank lines, ``//`` comments and
``/* ... */`` blocks (which may span several lines).  The first ``package``
line sets the namespace; the first public type declaration ends the scan.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Iterable, Optional, Tuple

from common.logging import get_logger

LOGGER = get_logger(__name__)

JAVA_SUFFIX = ".java"
PACKAGE_PATTERN = re.compile(r"package\s+([a-zA-Z0-9_.]*).*")
TYPE_PATTERN = re.compile(
    r".*?\bpublic\s+(?:(?:abstract|final|strictfp|sealed|non-sealed)\s+)*"
    r"(?:class|interface|enum|record)\s+([a-zA-Z0-9_]+).*"
)


@dataclass(frozen=True)
class SourceUnit:
    """One compilable Java source: namespace, type name and where it lives."""

    namespace: str
    type_name: str
    origin: Optional[Path] = None

    @property
    def full_name(self) -> str:
        if self.namespace:
            return f"{self.namespace}.{self.type_name}"
        return self.type_name

    @property
    def namespace_parts(self) -> Tuple[str, ...]:
        return tuple(part for part in self.namespace.split(".") if part)

    @property
    def relative_path(self) -> PurePosixPath:
        return PurePosixPath(*self.namespace_parts, self.type_name + JAVA_SUFFIX)


def _strip_block_comments(line: str, in_comment: bool) -> Tuple[str, bool]:
    """Drop comment spans from the start of ``line``.

    Returns the remaining text and whether a block comment is still open.
    A ``/*`` that opens after other text on the line is not tracked.
    """

    while True:
        if in_comment:
            end = line.find("*/")
            if end < 0:
                return "", True
            line = line[end + 2 :].strip()
            in_comment = False
        elif line.startswith("/*"):
            end = line.find("*/", 2)
            if end < 0:
                return "", True
            line = line[end + 2 :].strip()
        else:
            return line, False


def scan_lines(lines: Iterable[str]) -> Tuple[str, Optional[str]]:
    """Return ``(namespace, type_name)``; ``type_name`` is None when absent."""

    namespace = ""
    in_comment = False
    for raw in lines:
        line, in_comment = _strip_block_comments(raw.strip(), in_comment)
        if not line or line.startswith("//"):
            continue
        package_match = PACKAGE_PATTERN.fullmatch(line)
        if package_match:
            namespace = package_match.group(1).strip(".")
        type_match = TYPE_PATTERN.fullmatch(line)
        if type_match:
            return namespace, type_match.group(1)
    if in_comment:
        LOGGER.debug("Unterminated block comment; stopped scanning")
    return namespace, None


def extract_unit_name(
    source: str,
    *,
    filename: str | None = None,
    origin: Path | None = None,
    default_name: str = "Main",
) -> SourceUnit:
    """Scan source text; fall back to ``filename`` minus extension for the type."""

    namespace, type_name = scan_lines(source.splitlines())
    if type_name is None:
        fallback = _stem(filename) or (_stem(origin.name) if origin else "") or default_name
        LOGGER.info("No public type declaration found; using %s", fallback)
        type_name = fallback
    return SourceUnit(namespace=namespace, type_name=type_name, origin=origin)


def extract_unit_from_file(path: Path, *, default_name: str = "Main") -> SourceUnit:
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    return extract_unit_name(text, filename=path.name, origin=path.resolve(), default_name=default_name)


def _stem(name: str | None) -> str:
    if not name:
        return ""
    base = PurePosixPath(name.replace("\\", "/")).name
    if base.endswith(JAVA_SUFFIX):
        return base[: -len(JAVA_SUFFIX)]
    return base.split(".", 1)[0]


__all__ = ["SourceUnit", "extract_unit_name", "extract_unit_from_file", "scan_lines", "JAVA_SUFFIX"]
