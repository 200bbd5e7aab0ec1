"""Synthesize Maven descriptors for loose sources and their faked dependencies."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence
from xml.etree import ElementTree

from buildenv import BuildEnvironment, Coordinate, MavenProject
from common.config import EngineSettings
from common.logging import get_logger

from .errors import DescriptorWriteError
from .layout import DESCRIPTOR_NAME, project_root_for

LOGGER = get_logger(__name__)

POM_NAMESPACE = "http://maven.apache.org/POM/4.0.0"
XSI_NAMESPACE = "http://www.w3.org/2001/XMLSchema-instance"
SCHEMA_LOCATION = f"{POM_NAMESPACE} http://maven.apache.org/xsd/maven-4.0.0.xsd"


@dataclass
class ProjectDescriptor:
    """What a synthesized descriptor declares, plus where (if anywhere) it was written."""

    coordinate: Coordinate
    main_class: Optional[str]
    dependencies: Sequence[Coordinate]
    data: bytes
    path: Optional[Path] = None


def _append(parent: ElementTree.Element, tag: str, text: str | None = None) -> ElementTree.Element:
    child = ElementTree.SubElement(parent, tag)
    if text is not None:
        child.text = text
    return child


def render_descriptor(
    coordinate: Coordinate,
    main_class: Optional[str],
    dependencies: Sequence[Coordinate],
) -> bytes:
    project = ElementTree.Element(
        "project",
        {
            "xmlns": POM_NAMESPACE,
            "xmlns:xsi": XSI_NAMESPACE,
            "xsi:schemaLocation": SCHEMA_LOCATION,
        },
    )
    _append(project, "modelVersion", "4.0.0")
    _append(project, "groupId", coordinate.group_id)
    _append(project, "artifactId", coordinate.artifact_id)
    _append(project, "version", coordinate.version)

    build = _append(project, "build")
    if main_class:
        plugin = _append(_append(build, "plugins"), "plugin")
        _append(plugin, "artifactId", "maven-jar-plugin")
        archive = _append(_append(plugin, "configuration"), "archive")
        _append(_append(archive, "manifest"), "mainClass", main_class)

    entries = _append(project, "dependencies")
    for dependency in dependencies:
        entry = _append(entries, "dependency")
        _append(entry, "groupId", dependency.group_id)
        _append(entry, "artifactId", dependency.artifact_id)
        _append(entry, "version", dependency.version)

    ElementTree.indent(project, space="    ")
    return ElementTree.tostring(project, encoding="UTF-8", xml_declaration=True) + b"\n"


class DescriptorFactory:
    """Builds a descriptor and decides whether it lives on disk or only in memory.

    * ``directory`` is a conventional source root (``<root>/src/main/java``)
      and ``<root>`` has no descriptor yet: write ``<root>/pom.xml`` and parse
      that file, so the next request finds a real project there.
    * otherwise, with ``write_to_disk``: also write ``<directory>/pom.xml``.
    * otherwise the engine only ever sees the bytes.
    """

    def __init__(self, env: BuildEnvironment, settings: EngineSettings) -> None:
        self.env = env
        self.settings = settings

    def coordinate(self, artifact_id: str) -> Coordinate:
        return Coordinate(self.settings.group_id, artifact_id, self.settings.version)

    def synthesize(
        self,
        directory: Path,
        artifact_id: str,
        main_class: Optional[str],
        dependencies: Sequence[Coordinate],
        write_to_disk: bool,
    ) -> tuple[ProjectDescriptor, MavenProject]:
        directory = Path(directory)
        coordinate = self.coordinate(artifact_id)
        data = render_descriptor(coordinate, main_class, dependencies)
        descriptor = ProjectDescriptor(coordinate, main_class, list(dependencies), data)

        project_root = project_root_for(directory, self.settings.source_root)
        if project_root is not None and self.settings.graduate:
            pom_file = project_root / DESCRIPTOR_NAME
            if not pom_file.exists():
                self._write(pom_file, data)
                descriptor.path = pom_file
                LOGGER.info("Graduated %s into a project at %s", coordinate, project_root)
                return descriptor, self.env.parse(pom_file)

        if write_to_disk:
            pom_file = directory / DESCRIPTOR_NAME
            self._write(pom_file, data)
            descriptor.path = pom_file
        return descriptor, self.env.parse_bytes(data, directory)

    @staticmethod
    def _write(path: Path, data: bytes) -> None:
        try:
            path.write_bytes(data)
        except OSError as exc:
            raise DescriptorWriteError(f"Could not write descriptor {path}: {exc}") from exc


__all__ = ["DescriptorFactory", "ProjectDescriptor", "render_descriptor"]
