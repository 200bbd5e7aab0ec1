"""Fake one dependency per physical path visible on the loader chain."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Set

from buildenv import BuildEnvironment, Coordinate
from common.config import EngineSettings, load_settings
from common.logging import get_logger

from ..registry import ArtifactIdRegistry
from .booter import ManifestError, booter_class_path, is_booter
from .classpath import ClassLoaderLink, default_chain, iter_chain, url_to_path

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class DependencyRecord:
    group_id: str
    artifact_id: str
    version: str
    path: Path

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.group_id, self.artifact_id, self.version)


class DependencyDiscovery:
    """Walks the loader chain innermost-first and fakes a record per entry.

    Booter jars are replaced by the entries their manifest lists (one level
    deep; the listed entries are not inspected for further indirection).
    Call :meth:`discover` once per session: a second pass allocates fresh ids
    for the same paths.
    """

    def __init__(
        self,
        registry: ArtifactIdRegistry,
        *,
        env: BuildEnvironment | None = None,
        settings: EngineSettings | None = None,
        chain: ClassLoaderLink | None = None,
    ) -> None:
        self.registry = registry
        self.env = env
        self.settings = settings or (env.settings if env is not None else load_settings())
        self.chain = chain if chain is not None else default_chain(self.settings)

    def discover(self) -> List[DependencyRecord]:
        """Fake one record per unique physical path on the chain."""

        records: List[DependencyRecord] = []
        seen: Set[Path] = set()
        for link in iter_chain(self.chain):
            if link.urls is None:
                continue
            for url in link.urls:
                path = url_to_path(url)
                if path is None:
                    LOGGER.debug("Ignoring non-file entry %s of %s", url, link.name)
                    continue
                if is_booter(url, self.settings.booter_pattern):
                    records.extend(self._expand_booter(path, url, seen))
                    continue
                record = self._fake_once(path, seen)
                if record is not None:
                    records.append(record)
        LOGGER.info("Faked %d dependencies", len(records))
        return records

    def _expand_booter(self, jar: Path, url: str, seen: Set[Path]) -> List[DependencyRecord]:
        try:
            listed = booter_class_path(jar, url)
        except ManifestError as exc:
            LOGGER.warning("Skipping booter jar %s: %s", jar, exc)
            return []
        records: List[DependencyRecord] = []
        for element in listed:
            path = url_to_path(element)
            if path is None:
                LOGGER.warning("Ignoring non-file Class-Path entry %s in %s", element, jar)
                continue
            record = self._fake_once(path, seen)
            if record is not None:
                records.append(record)
        return records

    def _fake_once(self, path: Path, seen: Set[Path]) -> Optional[DependencyRecord]:
        key = path.resolve()
        if key in seen:
            LOGGER.debug("Already faked %s", path)
            return None
        seen.add(key)
        return self.fake_dependency(path)

    def fake_dependency(self, path: Path) -> DependencyRecord:
        group_id = self.settings.group_id
        artifact_id = self.registry.allocate(group_id, path.name, path)
        record = DependencyRecord(group_id, artifact_id, self.settings.dependency_version, path)
        if self.env is not None:
            self.env.register_fake_descriptor(path, record.coordinate)
        return record


__all__ = ["DependencyDiscovery", "DependencyRecord"]
