"""Session-scoped registry of known projects and faked dependencies."""
from __future__ import annotations

import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from common.config import EngineSettings, load_settings
from common.logging import get_logger
from common.sink import ErrorSink

from .pom import Coordinate, parse_pom
from .project import MavenProject

LOGGER = get_logger(__name__)

Key = Tuple[str, str]


@dataclass(frozen=True)
class FakeProject:
    """A classpath entry standing in for a project that has no descriptor."""

    coordinate: Coordinate
    path: Path

    def classpath(self, include_test_scope: bool = False) -> List[Path]:
        return [self.path]

    def build(self, *args, **kwargs) -> Path:
        return self.path


@dataclass(frozen=True)
class RepositoryArtifact:
    """A jar found in the local repository."""

    coordinate: Coordinate
    path: Path

    def classpath(self, include_test_scope: bool = False) -> List[Path]:
        return [self.path]

    def build(self, *args, **kwargs) -> Path:
        return self.path


Resolved = Union[MavenProject, FakeProject, RepositoryArtifact]


class BuildEnvironment:
    """Holds every project parsed or faked during one build session."""

    def __init__(
        self,
        settings: EngineSettings | None = None,
        sink: ErrorSink | None = None,
        *,
        verbose: bool = False,
        debug: bool = False,
    ) -> None:
        self.settings = settings or load_settings()
        self.sink = sink
        self.verbose = verbose or self.settings.verbose
        self.debug = debug or self.settings.debug
        self._lock = threading.RLock()
        self._projects: Dict[Key, MavenProject] = {}
        self._by_path: Dict[Path, MavenProject] = {}
        self._fakes: Dict[Key, FakeProject] = {}

    def parse(self, path: Path) -> MavenProject:
        """Parse a descriptor file; repeated calls return the cached project."""

        path = Path(path).resolve()
        with self._lock:
            cached = self._by_path.get(path)
        if cached is not None:
            return cached
        project = self._register(parse_pom(path.read_bytes()), path.parent, path)
        with self._lock:
            self._by_path[path] = project
        LOGGER.info("Parsed %s from %s", project.coordinate, path)
        return project

    def parse_bytes(self, data: bytes, base_directory: Path) -> MavenProject:
        """Parse an in-memory descriptor for the project rooted at ``base_directory``."""

        project = self._register(parse_pom(data), Path(base_directory).resolve(), None)
        LOGGER.info("Parsed in-memory descriptor for %s", project.coordinate)
        return project

    def _register(self, model, directory: Path, pom_path: Optional[Path]) -> MavenProject:
        project = MavenProject(self, model, directory, pom_path)
        with self._lock:
            self._projects[model.coordinate.key] = project
        return project

    def has_project(self, group_id: str, artifact_id: str) -> bool:
        key = (group_id, artifact_id)
        with self._lock:
            return key in self._projects or key in self._fakes

    def register_fake_descriptor(self, path: Path, coordinate: Coordinate) -> FakeProject:
        fake = FakeProject(coordinate=coordinate, path=Path(path))
        with self._lock:
            self._fakes[coordinate.key] = fake
        if self.debug:
            LOGGER.debug("Faked %s for %s", coordinate, path)
        return fake

    def resolve(self, coordinate: Coordinate) -> Optional[Resolved]:
        key = coordinate.key
        with self._lock:
            fake = self._fakes.get(key)
            project = self._projects.get(key)
        if fake is not None:
            return fake
        if project is not None:
            return project
        jar = self.local_repository_jar(coordinate)
        if jar is not None:
            return RepositoryArtifact(coordinate=coordinate, path=jar)
        return None

    def local_repository_jar(self, coordinate: Coordinate) -> Optional[Path]:
        root = self.settings.local_repository_path
        candidate = (
            root.joinpath(*coordinate.group_id.split("."))
            / coordinate.artifact_id
            / coordinate.version
            / coordinate.jar_name
        )
        return candidate if candidate.is_file() else None


__all__ = ["BuildEnvironment", "FakeProject", "RepositoryArtifact"]
