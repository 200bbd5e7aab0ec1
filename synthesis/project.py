"""Decide how a source becomes a buildable project and own the request lifecycle.

Three ways in:

``EXISTING_DESCRIPTOR``
    the input is a ``pom.xml``; it is parsed as is.
``EXISTING_UNIT_IN_PROJECT``
    a ``.java`` file below ``<root>/src/main/java`` where ``<root>/pom.xml``
    exists; that descriptor is reused.
``LOOSE_UNIT``
    anything else.  Raw text (or a file outside any recognizable layout) is
    copied into a temporary tree; a file that already sits in a conventional
    source root is graduated in place by writing ``<root>/pom.xml``.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional, TextIO

from buildenv import BuildEnvironment, MavenProject
from common.config import EngineSettings, load_settings
from common.logging import get_logger
from common.paths import ensure_dir
from common.sink import ErrorSink

from .deps import ClassLoaderLink, DependencyDiscovery, DependencyRecord
from .descriptor import DescriptorFactory
from .errors import DescriptorWriteError, UnsupportedSourceError
from .layout import DESCRIPTOR_NAME, existing_descriptor, project_root_for, source_directory_of, unit_path
from .registry import ArtifactIdRegistry
from .session import SynthesisSession
from .unit_name import JAVA_SUFFIX, SourceUnit, extract_unit_from_file, extract_unit_name

LOGGER = get_logger(__name__)

EnvironmentFactory = Callable[[EngineSettings, ErrorSink], BuildEnvironment]

SYNTHESIS_STATES: List[str] = [
    "START",
    "EXISTING_DESCRIPTOR",
    "EXISTING_UNIT_IN_PROJECT",
    "LOOSE_UNIT",
    "DESCRIPTOR_READY",
    "DONE",
    "CLEANUP",
]

SYNTHESIS_TRANSITIONS: Dict[str, List[str]] = {
    "START": ["EXISTING_DESCRIPTOR", "EXISTING_UNIT_IN_PROJECT", "LOOSE_UNIT"],
    "EXISTING_DESCRIPTOR": ["DESCRIPTOR_READY"],
    "EXISTING_UNIT_IN_PROJECT": ["DESCRIPTOR_READY"],
    "LOOSE_UNIT": ["DESCRIPTOR_READY"],
    "DESCRIPTOR_READY": ["DONE"],
    "DONE": [],
    "CLEANUP": [],
}


@dataclass
class SynthesisStateMachine:
    """Validates transitions; CLEANUP is reachable from every state."""

    current: str = "START"

    def transition(self, target: str) -> str:
        target = target.upper()
        if target not in SYNTHESIS_STATES:
            raise ValueError(f"Unknown target state: {target}")
        allowed = SYNTHESIS_TRANSITIONS[self.current]
        if target != "CLEANUP" and target not in allowed:
            raise ValueError(f"Illegal transition {self.current} -> {target}")
        self.current = target
        return self.current


def _default_environment(settings: EngineSettings, sink: ErrorSink) -> BuildEnvironment:
    return BuildEnvironment(settings, sink)


class ProjectSynthesizer:
    """One instance per compile/run/package request; use it as a context manager."""

    def __init__(
        self,
        settings: EngineSettings | None = None,
        error_writer: Optional[TextIO] = None,
        *,
        chain: ClassLoaderLink | None = None,
        environment_factory: EnvironmentFactory | None = None,
    ) -> None:
        self.settings = settings or load_settings()
        self.sink = ErrorSink(error_writer)
        self.session = SynthesisSession(self.sink, self.settings)
        self.env = (environment_factory or _default_environment)(self.settings, self.sink)
        self.registry = ArtifactIdRegistry(contains=self.env.has_project)
        self.discovery = DependencyDiscovery(self.registry, env=self.env, settings=self.settings, chain=chain)
        self.descriptors = DescriptorFactory(self.env, self.settings)
        self.state = SynthesisStateMachine()
        self.unit: Optional[SourceUnit] = None
        self.main_class: Optional[str] = None
        self.project: Optional[MavenProject] = None
        self._dependencies: Optional[List[DependencyRecord]] = None

    def __enter__(self) -> "ProjectSynthesizer":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cleanup()

    @property
    def temporary_directory(self) -> Optional[Path]:
        return self.session.temporary_directory

    def dependencies(self) -> List[DependencyRecord]:
        """Faked records for the loader chain, discovered once per request."""

        if self._dependencies is None:
            self._dependencies = self.discovery.discover()
        return self._dependencies

    def synthesize(self, source: str | Path | None, *, filename: str | None = None) -> MavenProject:
        if isinstance(source, Path):
            return self.from_file(source)
        return self.from_text(source or "", filename=filename)

    def from_file(self, path: Path) -> MavenProject:
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"No such source: {path}")
        if path.name == DESCRIPTOR_NAME:
            self.state.transition("EXISTING_DESCRIPTOR")
            self.dependencies()
            project = self.env.parse(path)
            self.main_class = project.main_class
            return self._ready(project)
        if not path.name.endswith(JAVA_SUFFIX):
            raise UnsupportedSourceError(f"Not a Java source or descriptor: {path}")

        unit = extract_unit_from_file(path, default_name=self.settings.default_unit_name)
        source_directory = source_directory_of(path, unit)
        self.unit = unit
        self.main_class = unit.full_name

        descriptor = existing_descriptor(source_directory, self.settings.source_root)
        if descriptor is not None:
            self.state.transition("EXISTING_UNIT_IN_PROJECT")
            self.dependencies()
            return self._ready(self.env.parse(descriptor))

        self.state.transition("LOOSE_UNIT")
        if self.settings.graduate and project_root_for(source_directory, self.settings.source_root):
            return self._ready(self._describe(source_directory, unit, write_to_disk=False))
        return self._ready(self._materialize(path.read_text(encoding="utf-8"), unit))

    def from_text(self, text: str, *, filename: str | None = None) -> MavenProject:
        self.state.transition("LOOSE_UNIT")
        unit = extract_unit_name(text, filename=filename, default_name=self.settings.default_unit_name)
        self.main_class = unit.full_name
        project = self._materialize(text, unit)
        return self._ready(project)

    def _materialize(self, text: str, unit: SourceUnit) -> MavenProject:
        directory = self.session.create_temporary_directory()
        target = unit_path(directory, unit, self.settings.source_root)
        try:
            ensure_dir(target.parent)
            target.write_text(text if text.endswith("\n") else text + "\n", encoding="utf-8")
        except OSError as exc:
            raise DescriptorWriteError(f"Could not write {target}: {exc}") from exc
        self.unit = SourceUnit(unit.namespace, unit.type_name, origin=target)
        return self._describe(directory, self.unit, write_to_disk=self.settings.write_descriptor)

    def _describe(self, directory: Path, unit: SourceUnit, write_to_disk: bool) -> MavenProject:
        dependencies = [record.coordinate for record in self.dependencies()]
        artifact_id = self.registry.allocate(self.settings.group_id, unit.type_name)
        descriptor, project = self.descriptors.synthesize(
            directory, artifact_id, unit.full_name, dependencies, write_to_disk
        )
        self.session.descriptor = descriptor
        return project

    def _ready(self, project: MavenProject) -> MavenProject:
        self.state.transition("DESCRIPTOR_READY")
        self.project = project
        return project

    def done(self) -> None:
        self.state.transition("DONE")

    def cleanup(self) -> None:
        """Release the temporary tree and the sink; never raises."""

        if self.state.current == "CLEANUP":
            return
        self.state.transition("CLEANUP")
        self.session.cleanup()


__all__ = [
    "ProjectSynthesizer",
    "SynthesisStateMachine",
    "SYNTHESIS_STATES",
    "SYNTHESIS_TRANSITIONS",
]
