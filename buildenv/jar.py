"""Jar assembly for built projects."""
from __future__ import annotations

import zipfile
from pathlib import Path
from typing import TYPE_CHECKING

from common.logging import get_logger
from common.paths import ensure_dir

if TYPE_CHECKING:  # pragma: no cover
    from .project import MavenProject

LOGGER = get_logger(__name__)

MANIFEST_PATH = "META-INF/MANIFEST.MF"


def render_manifest(main_class: str | None) -> str:
    lines = ["Manifest-Version: 1.0", "Created-By: loosejava"]
    if main_class:
        lines.append(f"Main-Class: {main_class}")
    return "\r\n".join(lines) + "\r\n\r\n"


def write_jar(project: "MavenProject", output: Path, include_sources: bool = False) -> Path:
    """Package classes, a manifest and a descriptor copy into ``output``.

    Only file entries are written; directories are implied by entry names.
    """

    coordinate = project.coordinate
    ensure_dir(output.parent)
    descriptor = project.model.raw
    with zipfile.ZipFile(output, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        archive.writestr(MANIFEST_PATH, render_manifest(project.main_class))
        archive.writestr(
            f"META-INF/maven/{coordinate.group_id}/{coordinate.artifact_id}/pom.xml",
            descriptor,
        )
        classes = project.classes_directory
        if classes.is_dir():
            for path in sorted(classes.rglob("*")):
                if path.is_file():
                    archive.write(path, path.relative_to(classes).as_posix())
        if include_sources:
            archive.writestr("pom.xml", descriptor)
            sources = project.source_directory
            if sources.is_dir():
                prefix = project.source_root.strip("/")
                for path in sorted(sources.rglob("*.java")):
                    archive.write(path, f"{prefix}/{path.relative_to(sources).as_posix()}")
    LOGGER.info("Wrote %s", output)
    return output


__all__ = ["write_jar", "render_manifest", "MANIFEST_PATH"]
