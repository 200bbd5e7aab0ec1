"""Minimal local build environment: parses POMs, compiles with javac, packages jars."""

from .environment import BuildEnvironment, FakeProject, RepositoryArtifact
from .pom import Coordinate, DescriptorParseError, PomModel, parse_pom
from .project import MavenProject
from .runtime import BuildError, run_java

__all__ = [
    "BuildEnvironment",
    "BuildError",
    "Coordinate",
    "DescriptorParseError",
    "FakeProject",
    "MavenProject",
    "PomModel",
    "RepositoryArtifact",
    "parse_pom",
    "run_java",
]
