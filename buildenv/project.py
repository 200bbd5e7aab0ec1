"""A Maven project as far as this build environment understands one."""
from __future__ import annotations

import shutil
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING, List, Optional

from common.logging import get_logger
from common.paths import ensure_dir

from .jar import write_jar
from .pom import Coordinate, PomModel
from .runtime import BuildError, find_tool, format_classpath, run_command

if TYPE_CHECKING:  # pragma: no cover
    from .environment import BuildEnvironment

LOGGER = get_logger(__name__)

_COMPILE_SCOPES = {None, "compile", "provided", "system", "runtime"}
_TEST_SOURCE_ROOT = "src/test/java"
_RESOURCE_ROOT = "src/main/resources"


class MavenProject:
    """Compiles ``src/main/java`` with javac and optionally packages a jar."""

    def __init__(
        self,
        env: "BuildEnvironment",
        model: PomModel,
        directory: Path,
        pom_path: Optional[Path] = None,
    ) -> None:
        self.env = env
        self.model = model
        self.directory = Path(directory)
        self.pom_path = pom_path
        self._built = False
        self._building = False

    def __repr__(self) -> str:
        return f"MavenProject({self.coordinate}, {self.directory})"

    @property
    def coordinate(self) -> Coordinate:
        return self.model.coordinate

    @property
    def main_class(self) -> Optional[str]:
        return self.model.main_class

    @property
    def source_root(self) -> str:
        return self.model.source_directory or self.env.settings.source_root

    @property
    def source_directory(self) -> Path:
        return self.directory.joinpath(*PurePosixPath(self.source_root).parts)

    @property
    def build_directory(self) -> Path:
        return self.directory / "target"

    @property
    def classes_directory(self) -> Path:
        return self.build_directory / "classes"

    @property
    def test_classes_directory(self) -> Path:
        return self.build_directory / "test-classes"

    @property
    def target(self) -> Path:
        return self.build_directory / self.coordinate.jar_name

    def dependencies(self, include_test_scope: bool = False) -> List[object]:
        resolved: List[object] = []
        for dependency in self.model.dependencies:
            if dependency.scope not in _COMPILE_SCOPES and not (
                include_test_scope and dependency.scope == "test"
            ):
                continue
            found = self.env.resolve(dependency)
            if found is None:
                if dependency.group_id == self.env.settings.group_id:
                    LOGGER.warning("Skipping stale faked dependency %s", dependency)
                    continue
                raise BuildError(f"Unresolved dependency {dependency} of {self.coordinate}")
            resolved.append(found)
        return resolved

    def classpath(self, include_test_scope: bool = False) -> List[Path]:
        """Build output first, then every dependency's entries, without repeats."""

        entries: List[Path] = []
        if include_test_scope:
            entries.append(self.test_classes_directory)
        entries.append(self.classes_directory)
        for dependency in self.dependencies(include_test_scope):
            if dependency is self:
                continue
            entries.extend(dependency.classpath(False))
        seen = set()
        unique: List[Path] = []
        for entry in entries:
            if entry in seen:
                continue
            seen.add(entry)
            unique.append(entry)
        return unique

    def build(self, include_tests: bool = False, make_jar: bool = False, include_sources: bool = False) -> Path:
        """Compile the project (dependencies first); return the jar or class directory."""

        if self._building:
            raise BuildError(f"Dependency cycle through {self.coordinate}")
        self._building = True
        try:
            for dependency in self.dependencies(include_tests):
                if isinstance(dependency, MavenProject) and dependency is not self:
                    dependency.build()
            if not self._built:
                self._compile(self.source_directory, self.classes_directory, self.classpath(False)[1:])
                self._copy_resources()
                self._built = True
            if include_tests:
                test_sources = self.directory.joinpath(*PurePosixPath(_TEST_SOURCE_ROOT).parts)
                if test_sources.is_dir():
                    self._compile(test_sources, self.test_classes_directory, self.classpath(True)[1:])
            if make_jar:
                return write_jar(self, self.target, include_sources)
            return self.classes_directory
        finally:
            self._building = False

    def _compile(self, source_directory: Path, output: Path, classpath: List[Path]) -> None:
        sources = sorted(source_directory.rglob("*.java")) if source_directory.is_dir() else []
        ensure_dir(output)
        if not sources:
            LOGGER.warning("No sources to compile in %s", source_directory)
            return
        cmd = [find_tool(self.env.settings.javac), "-g", "-encoding", "UTF-8", "-d", str(output)]
        if classpath:
            cmd.extend(["-classpath", format_classpath(classpath)])
        if self.env.verbose:
            LOGGER.info("Compiling %d source(s) for %s", len(sources), self.coordinate)
        cmd.extend(str(source) for source in sources)
        run_command(cmd, self.env.sink, cwd=self.directory)

    def _copy_resources(self) -> None:
        resources = self.directory.joinpath(*PurePosixPath(_RESOURCE_ROOT).parts)
        if not resources.is_dir():
            return
        shutil.copytree(resources, self.classes_directory, dirs_exist_ok=True)


__all__ = ["MavenProject"]
