from __future__ import annotations

import sys
import zipfile
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from buildenv import BuildEnvironment, Coordinate
from common.config import EngineSettings
from synthesis.deps import (
    ClassLoaderLink,
    DependencyDiscovery,
    build_chain,
    is_booter,
    parse_manifest,
    url_to_path,
)
from synthesis.registry import ArtifactIdRegistry

SETTINGS = EngineSettings()


def _booter(root: Path, class_path: str, name: str = "surefirebooter123.jar") -> Path:
    jar = root / "target" / "surefire" / name
    jar.parent.mkdir(parents=True, exist_ok=True)
    manifest = f"Manifest-Version: 1.0\r\nClass-Path: {class_path}\r\n\r\n"
    with zipfile.ZipFile(jar, "w") as archive:
        archive.writestr("META-INF/MANIFEST.MF", manifest)
    return jar


def _discovery(chain: ClassLoaderLink, env: BuildEnvironment | None = None) -> DependencyDiscovery:
    return DependencyDiscovery(ArtifactIdRegistry(), env=env, settings=SETTINGS, chain=chain)


def test_plain_entries_become_records_in_chain_order(tmp_path: Path) -> None:
    first = tmp_path / "first.jar"
    second = tmp_path / "second-1.2.jar"
    root = ClassLoaderLink("root", urls=(second.as_uri(),))
    middle = ClassLoaderLink("platform", urls=None, parent=root)
    inner = ClassLoaderLink("app", urls=(first.as_uri(), "http://example.com/remote.jar"), parent=middle)
    records = _discovery(inner).discover()
    assert [record.artifact_id for record in records] == ["first", "second-1"]
    assert [record.path for record in records] == [first, second]
    assert all(record.version == "1.0.0" for record in records)
    assert all(record.group_id == SETTINGS.group_id for record in records)


def test_booter_is_expanded_and_not_itself_recorded(tmp_path: Path) -> None:
    jar = _booter(tmp_path, "../../lib/a.jar ../../lib/b.jar ../classes/")
    records = _discovery(ClassLoaderLink("app", urls=(jar.as_uri(),))).discover()
    assert len(records) == 3
    assert [record.path for record in records] == [
        tmp_path / "lib" / "a.jar",
        tmp_path / "lib" / "b.jar",
        tmp_path / "target" / "classes",
    ]
    assert jar not in [record.path for record in records]


def test_unreadable_booter_is_skipped_without_aborting(tmp_path: Path) -> None:
    broken = tmp_path / "target" / "surefire" / "surefirebooter7.jar"
    broken.parent.mkdir(parents=True)
    broken.write_bytes(b"not a zip at all")
    other = tmp_path / "other.jar"
    chain = ClassLoaderLink("app", urls=(broken.as_uri(), other.as_uri()))
    records = _discovery(chain).discover()
    assert [record.path for record in records] == [other]


def test_same_prefix_yields_distinct_ids(tmp_path: Path) -> None:
    entries = [tmp_path / str(index) / "util.jar" for index in range(3)]
    chain = ClassLoaderLink("app", urls=tuple(entry.as_uri() for entry in entries))
    records = _discovery(chain).discover()
    assert [record.artifact_id for record in records] == ["util", "util-1", "util-2"]


def test_rediscovery_never_reuses_allocated_ids(tmp_path: Path) -> None:
    chain = ClassLoaderLink("app", urls=((tmp_path / "util.jar").as_uri(),))
    discovery = _discovery(chain)
    first = discovery.discover()
    second = discovery.discover()
    assert first[0].artifact_id == "util"
    assert second[0].artifact_id == "util-1"
    assert discovery.registry.path_for(SETTINGS.group_id, "util") == tmp_path / "util.jar"


def test_records_are_registered_as_fake_descriptors(tmp_path: Path) -> None:
    env = BuildEnvironment(SETTINGS)
    jar = tmp_path / "lib.jar"
    records = _discovery(ClassLoaderLink("app", urls=(jar.as_uri(),)), env=env).discover()
    assert env.has_project(SETTINGS.group_id, records[0].artifact_id)
    resolved = env.resolve(Coordinate(SETTINGS.group_id, "lib", "1.0.0"))
    assert resolved is not None and resolved.path == jar


def test_build_chain_marks_directories(tmp_path: Path) -> None:
    classes = tmp_path / "classes"
    classes.mkdir()
    chain = build_chain([classes, tmp_path / "x.jar"])
    assert chain.urls[0].endswith("/classes/")
    assert chain.parent is not None and chain.parent.urls is None
    assert url_to_path(chain.urls[1]) == (tmp_path / "x.jar").resolve()


def test_booter_pattern_and_manifest_continuations() -> None:
    assert is_booter("file:///w/target/surefire/surefirebooter42.jar", SETTINGS.booter_pattern)
    assert not is_booter("file:///w/target/surefire/other.jar", SETTINGS.booter_pattern)
    manifest = parse_manifest("Manifest-Version: 1.0\r\nClass-Path: a.jar b.\r\n jar c.jar\r\n\r\nName: x\r\n")
    assert manifest["Class-Path"] == "a.jar b.jar c.jar"
    assert "Name" not in manifest


def test_each_physical_path_is_faked_once_per_pass(tmp_path: Path) -> None:
    shared = tmp_path / "lib" / "a.jar"
    jar = _booter(tmp_path, "../../lib/a.jar ../../lib/b.jar")
    root = ClassLoaderLink("root", urls=(shared.as_uri(),))
    inner = ClassLoaderLink("app", urls=(shared.as_uri(), shared.as_uri(), jar.as_uri()), parent=root)
    env = BuildEnvironment(SETTINGS)
    records = _discovery(inner, env=env).discover()
    assert [record.path for record in records] == [shared, tmp_path / "lib" / "b.jar"]
    assert [record.artifact_id for record in records] == ["a", "b"]
    assert not env.has_project(SETTINGS.group_id, "a-1")
