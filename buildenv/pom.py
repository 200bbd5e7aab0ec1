"""Reading Maven descriptors into a small model."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional
from xml.etree import ElementTree

POM_NAMESPACE = "http://maven.apache.org/POM/4.0.0"


class DescriptorParseError(ValueError):
    """Raised when a descriptor is not well-formed or lacks its coordinate."""


@dataclass(frozen=True)
class Coordinate:
    group_id: str
    artifact_id: str
    version: str
    scope: Optional[str] = None

    @property
    def key(self) -> tuple[str, str]:
        return (self.group_id, self.artifact_id)

    @property
    def jar_name(self) -> str:
        return f"{self.artifact_id}-{self.version}.jar"

    def __str__(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.version}"


@dataclass
class PomModel:
    coordinate: Coordinate
    main_class: Optional[str] = None
    dependencies: List[Coordinate] = field(default_factory=list)
    source_directory: Optional[str] = None
    raw: bytes = b""


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _child(element: ElementTree.Element | None, name: str) -> Optional[ElementTree.Element]:
    if element is None:
        return None
    for child in element:
        if _local(child.tag) == name:
            return child
    return None


def _children(element: ElementTree.Element | None, name: str) -> List[ElementTree.Element]:
    if element is None:
        return []
    return [child for child in element if _local(child.tag) == name]


def _text(element: ElementTree.Element | None, name: str) -> Optional[str]:
    child = _child(element, name)
    if child is None or child.text is None:
        return None
    value = child.text.strip()
    return value or None


def _main_class(build: ElementTree.Element | None) -> Optional[str]:
    for plugin in _children(_child(build, "plugins"), "plugin"):
        if _text(plugin, "artifactId") != "maven-jar-plugin":
            continue
        manifest = _child(_child(_child(plugin, "configuration"), "archive"), "manifest")
        value = _text(manifest, "mainClass")
        if value:
            return value
    return None


def parse_pom(data: bytes) -> PomModel:
    try:
        root = ElementTree.fromstring(data)
    except ElementTree.ParseError as exc:
        raise DescriptorParseError(f"Malformed descriptor: {exc}") from exc
    if _local(root.tag) != "project":
        raise DescriptorParseError(f"Unexpected root element <{_local(root.tag)}>")

    parent = _child(root, "parent")
    group_id = _text(root, "groupId") or _text(parent, "groupId")
    artifact_id = _text(root, "artifactId")
    version = _text(root, "version") or _text(parent, "version")
    if not (group_id and artifact_id and version):
        raise DescriptorParseError("Descriptor must declare groupId, artifactId and version")

    dependencies: List[Coordinate] = []
    for entry in _children(_child(root, "dependencies"), "dependency"):
        dep_group = _text(entry, "groupId")
        dep_artifact = _text(entry, "artifactId")
        dep_version = _text(entry, "version")
        if not (dep_group and dep_artifact and dep_version):
            raise DescriptorParseError(f"Incomplete dependency entry in {group_id}:{artifact_id}")
        dependencies.append(Coordinate(dep_group, dep_artifact, dep_version, _text(entry, "scope")))

    build = _child(root, "build")
    return PomModel(
        coordinate=Coordinate(group_id, artifact_id, version),
        main_class=_main_class(build),
        dependencies=dependencies,
        source_directory=_text(build, "sourceDirectory"),
        raw=data,
    )


__all__ = ["Coordinate", "DescriptorParseError", "PomModel", "parse_pom", "POM_NAMESPACE"]
