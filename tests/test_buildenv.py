from __future__ import annotations

import sys
import zipfile
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from buildenv import BuildEnvironment, BuildError, Coordinate, DescriptorParseError, parse_pom
from buildenv.jar import render_manifest, write_jar
from common.config import EngineSettings

POM = b"""<?xml version="1.0"?>
<project xmlns="http://maven.apache.org/POM/4.0.0">
  <groupId>com.acme</groupId>
  <artifactId>tool</artifactId>
  <version>2.0</version>
  <dependencies>
    <dependency>
      <groupId>org.example</groupId>
      <artifactId>lib</artifactId>
      <version>1.1</version>
    </dependency>
    <dependency>
      <groupId>org.example</groupId>
      <artifactId>checker</artifactId>
      <version>3</version>
      <scope>test</scope>
    </dependency>
  </dependencies>
</project>
"""


def _settings(tmp_path: Path) -> EngineSettings:
    return EngineSettings(local_repository=str(tmp_path / "m2"))


def test_parse_reads_coordinate_and_scopes() -> None:
    model = parse_pom(POM)
    assert str(model.coordinate) == "com.acme:tool:2.0"
    assert [dep.scope for dep in model.dependencies] == [None, "test"]
    assert model.main_class is None


def test_malformed_descriptor_is_rejected() -> None:
    with pytest.raises(DescriptorParseError):
        parse_pom(b"<project><groupId>x</groupId>")
    with pytest.raises(DescriptorParseError):
        parse_pom(b"<project><artifactId>x</artifactId></project>")


def test_parse_caches_per_path(tmp_path: Path) -> None:
    pom = tmp_path / "pom.xml"
    pom.write_bytes(POM)
    env = BuildEnvironment(_settings(tmp_path))
    assert env.parse(pom) is env.parse(pom)
    assert env.has_project("com.acme", "tool")


def test_classpath_resolves_fakes_and_local_repository(tmp_path: Path) -> None:
    repo_jar = tmp_path / "m2" / "org" / "example" / "lib" / "1.1" / "lib-1.1.jar"
    repo_jar.parent.mkdir(parents=True)
    repo_jar.write_bytes(b"")
    env = BuildEnvironment(_settings(tmp_path))
    fake = tmp_path / "checker.jar"
    env.register_fake_descriptor(fake, Coordinate("org.example", "checker", "3"))
    project = env.parse_bytes(POM, tmp_path)
    assert project.classpath(False) == [tmp_path.resolve() / "target" / "classes", repo_jar]
    assert project.classpath(True)[-1] == fake


def test_unresolved_dependency_fails_but_stale_fake_is_skipped(tmp_path: Path) -> None:
    env = BuildEnvironment(_settings(tmp_path))
    project = env.parse_bytes(POM, tmp_path)
    with pytest.raises(BuildError):
        project.classpath(False)

    group = env.settings.group_id
    stale = (
        f"<project><groupId>{group}</groupId><artifactId>S</artifactId><version>1</version>"
        f"<dependencies><dependency><groupId>{group}</groupId><artifactId>gone</artifactId>"
        "<version>1.0.0</version></dependency></dependencies></project>"
    ).encode("utf-8")
    assert env.parse_bytes(stale, tmp_path / "s").classpath(False) == [(tmp_path / "s").resolve() / "target" / "classes"]


def test_jar_contains_only_expected_entries(tmp_path: Path) -> None:
    env = BuildEnvironment(_settings(tmp_path))
    data = (
        b"<project><groupId>g</groupId><artifactId>Dummy</artifactId><version>1</version>"
        b"<build><plugins><plugin><artifactId>maven-jar-plugin</artifactId><configuration><archive>"
        b"<manifest><mainClass>Dummy</mainClass></manifest></archive></configuration></plugin></plugins></build>"
        b"</project>"
    )
    project = env.parse_bytes(data, tmp_path)
    project.classes_directory.mkdir(parents=True)
    (project.classes_directory / "Dummy.class").write_bytes(b"\xca\xfe\xba\xbe")
    project.source_directory.mkdir(parents=True)
    (project.source_directory / "Dummy.java").write_text("public class Dummy {}\n", encoding="utf-8")

    output = write_jar(project, tmp_path / "out" / "d.jar", include_sources=True)
    with zipfile.ZipFile(output) as archive:
        names = sorted(archive.namelist())
        manifest = archive.read("META-INF/MANIFEST.MF").decode("utf-8")
    assert names == sorted(
        [
            "META-INF/MANIFEST.MF",
            "META-INF/maven/g/Dummy/pom.xml",
            "Dummy.class",
            "pom.xml",
            "src/main/java/Dummy.java",
        ]
    )
    assert "Main-Class: Dummy" in manifest


def test_manifest_without_main_class() -> None:
    assert "Main-Class" not in render_manifest(None)
