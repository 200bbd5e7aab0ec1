"""Engine settings shared by synthesis, the build environment and the CLI.

Values come from three layers, later ones winning: the dataclass defaults, an
optional YAML file (``LOOSEJAVA_CONFIG`` or ``config/engine.yaml``) and a few
environment variables.
"""
from __future__ import annotations

import functools
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from common.paths import get_config_dir

DEFAULT_GROUP_ID = "org.scijava.scripting.java"
DEFAULT_VERSION = "1.0.0-SNAPSHOT"
DEPENDENCY_VERSION = "1.0.0"
SOURCE_ROOT = "src/main/java"
BOOTER_PATTERN = r".*/target/surefire/surefirebooter[0-9]*\.jar"

CONFIG_ENV = "LOOSEJAVA_CONFIG"
_ENV_OVERRIDES = {
    "javac": "LOOSEJAVA_JAVAC",
    "java": "LOOSEJAVA_JAVA",
    "local_repository": "LOOSEJAVA_LOCAL_REPOSITORY",
    "verbose": "LOOSEJAVA_VERBOSE",
    "debug": "LOOSEJAVA_DEBUG",
}
_CLASSPATH_ENVS = ("LOOSEJAVA_CLASSPATH", "CLASSPATH")


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in {"true", "1", "yes", "on"}
    return bool(value)


def _split_classpath(value: Any) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        raw = value.split(os.pathsep)
    else:
        raw = [str(item) for item in value]
    return tuple(item.strip() for item in raw if item and item.strip())


@dataclass(frozen=True)
class EngineSettings:
    """Knobs for descriptor synthesis and the local build engine."""

    group_id: str = DEFAULT_GROUP_ID
    version: str = DEFAULT_VERSION
    dependency_version: str = DEPENDENCY_VERSION
    source_root: str = SOURCE_ROOT
    booter_pattern: str = BOOTER_PATTERN
    temp_prefix: str = "java"
    default_unit_name: str = "Main"
    write_descriptor: bool = True
    graduate: bool = True
    classpath: Tuple[str, ...] = ()
    local_repository: Optional[str] = None
    javac: str = "javac"
    java: str = "java"
    verbose: bool = False
    debug: bool = False

    @classmethod
    def from_mapping(cls, raw: Optional[Dict[str, Any]]) -> "EngineSettings":
        raw = raw or {}
        known = {item.name for item in fields(cls)}
        values: Dict[str, Any] = {}
        for key, value in raw.items():
            if key not in known or value is None:
                continue
            if key == "classpath":
                values[key] = _split_classpath(value)
            elif key in {"write_descriptor", "graduate", "verbose", "debug"}:
                values[key] = _as_bool(value)
            else:
                values[key] = str(value)
        return cls(**values)

    @property
    def local_repository_path(self) -> Path:
        if self.local_repository:
            return Path(self.local_repository).expanduser()
        return Path.home() / ".m2" / "repository"

    def with_overrides(self, **changes: Any) -> "EngineSettings":
        return replace(self, **changes)


def _config_path() -> Path:
    override = os.environ.get(CONFIG_ENV)
    if override:
        return Path(override)
    return get_config_dir() / "engine.yaml"


def _read_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    return data


def _environment_signature() -> Tuple[Tuple[str, str], ...]:
    keys = [CONFIG_ENV, *_ENV_OVERRIDES.values(), *_CLASSPATH_ENVS]
    return tuple((key, os.environ.get(key, "")) for key in keys)


def load_settings() -> EngineSettings:
    """Return settings for the current environment (cached per env signature)."""

    return _load_settings_cached(_environment_signature())


@functools.lru_cache(maxsize=8)
def _load_settings_cached(signature: Tuple[Tuple[str, str], ...]) -> EngineSettings:
    env = dict(signature)
    raw = _read_yaml(_config_path())
    for key, env_key in _ENV_OVERRIDES.items():
        if env.get(env_key):
            raw[key] = env[env_key]
    for env_key in _CLASSPATH_ENVS:
        if env.get(env_key):
            raw["classpath"] = env[env_key]
            break
    return EngineSettings.from_mapping(raw)


def clear_settings_cache() -> None:
    _load_settings_cached.cache_clear()
