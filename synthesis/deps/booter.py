"""Surefire-style booter jars: empty jars whose manifest carries the real classpath."""
from __future__ import annotations

import re
import zipfile
from pathlib import Path
from typing import Dict, List
from urllib.parse import urljoin

MANIFEST_ENTRY = "META-INF/MANIFEST.MF"
CLASS_PATH = "Class-Path"


class ManifestError(RuntimeError):
    """Raised when a booter jar's manifest cannot be read."""


def is_booter(url: str, pattern: str) -> bool:
    return re.fullmatch(pattern, url) is not None


def parse_manifest(text: str) -> Dict[str, str]:
    """Main-section attributes; continuation lines start with a single space."""

    attributes: Dict[str, str] = {}
    current: str | None = None
    for line in text.splitlines():
        if not line:
            break
        if line.startswith(" ") and current is not None:
            attributes[current] += line[1:]
            continue
        name, sep, value = line.partition(":")
        if not sep:
            continue
        current = name.strip()
        attributes[current] = value.strip()
    return attributes


def read_manifest(jar: Path) -> Dict[str, str]:
    try:
        with zipfile.ZipFile(jar) as archive:
            try:
                raw = archive.read(MANIFEST_ENTRY)
            except KeyError:
                return {}
    except (OSError, zipfile.BadZipFile) as exc:
        raise ManifestError(f"Cannot read manifest of {jar}: {exc}") from exc
    try:
        return parse_manifest(raw.decode("utf-8"))
    except UnicodeDecodeError as exc:
        raise ManifestError(f"Manifest of {jar} is not UTF-8: {exc}") from exc


def booter_class_path(jar: Path, base_url: str) -> List[str]:
    """URLs listed in the booter's ``Class-Path``, resolved against ``base_url``."""

    value = read_manifest(jar).get(CLASS_PATH)
    if not value:
        return []
    return [urljoin(base_url, element) for element in value.split()]


__all__ = ["ManifestError", "is_booter", "parse_manifest", "read_manifest", "booter_class_path"]
