from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from common.config import DEFAULT_GROUP_ID, EngineSettings, clear_settings_cache, load_settings


@pytest.fixture(autouse=True)
def _fresh_cache():
    clear_settings_cache()
    yield
    clear_settings_cache()


def test_defaults_match_descriptor_conventions() -> None:
    settings = EngineSettings()
    assert settings.group_id == DEFAULT_GROUP_ID
    assert settings.version == "1.0.0-SNAPSHOT"
    assert settings.dependency_version == "1.0.0"
    assert settings.source_root == "src/main/java"


def test_yaml_file_and_environment_overrides(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config = tmp_path / "engine.yaml"
    config.write_text(
        "group_id: com.example.scratch\nverbose: 'yes'\nclasspath:\n  - /opt/a.jar\n  - /opt/b.jar\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("LOOSEJAVA_CONFIG", str(config))
    monkeypatch.delenv("LOOSEJAVA_CLASSPATH", raising=False)
    monkeypatch.delenv("CLASSPATH", raising=False)
    settings = load_settings()
    assert settings.group_id == "com.example.scratch"
    assert settings.verbose is True
    assert settings.classpath == ("/opt/a.jar", "/opt/b.jar")

    monkeypatch.setenv("LOOSEJAVA_CLASSPATH", os.pathsep.join(["/x/one.jar", "/x/two"]))
    monkeypatch.setenv("LOOSEJAVA_JAVAC", "/usr/local/bin/javac")
    settings = load_settings()
    assert settings.classpath == ("/x/one.jar", "/x/two")
    assert settings.javac == "/usr/local/bin/javac"


def test_non_mapping_config_is_rejected(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config = tmp_path / "engine.yaml"
    config.write_text("- just\n- a list\n", encoding="utf-8")
    monkeypatch.setenv("LOOSEJAVA_CONFIG", str(config))
    with pytest.raises(ValueError):
        load_settings()


def test_local_repository_defaults_to_home(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    assert EngineSettings().local_repository_path == Path.home() / ".m2" / "repository"
    assert EngineSettings(local_repository="/srv/m2").local_repository_path == Path("/srv/m2")
