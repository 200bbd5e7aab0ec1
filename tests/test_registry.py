from __future__ import annotations

import sys
import threading
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from synthesis.registry import ArtifactIdRegistry, artifact_prefix

GROUP = "org.scijava.scripting.java"


def test_prefix_stops_at_first_dot() -> None:
    assert artifact_prefix("commons-lang3-3.12.0.jar") == "commons-lang3-3"
    assert artifact_prefix("classes") == "classes"
    assert artifact_prefix(".hidden.jar") == "dependency"


def test_collisions_get_numbered_suffixes() -> None:
    registry = ArtifactIdRegistry()
    ids = [registry.allocate(GROUP, "util.jar", Path(f"/lib/{n}/util.jar")) for n in range(4)]
    assert ids == ["util", "util-1", "util-2", "util-3"]
    assert registry.path_for(GROUP, "util-2") == Path("/lib/2/util.jar")


def test_groups_are_independent() -> None:
    registry = ArtifactIdRegistry()
    assert registry.allocate("a", "x.jar") == "x"
    assert registry.allocate("b", "x.jar") == "x"


def test_contains_callback_blocks_known_projects() -> None:
    known = {(GROUP, "core")}
    registry = ArtifactIdRegistry(contains=lambda g, a: (g, a) in known)
    assert registry.allocate(GROUP, "core.jar") == "core-1"


def test_allocation_is_atomic_across_threads() -> None:
    registry = ArtifactIdRegistry()
    results: list[str] = []
    lock = threading.Lock()

    def worker() -> None:
        for _ in range(50):
            value = registry.allocate(GROUP, "shared.jar")
            with lock:
                results.append(value)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert len(results) == 400
    assert len(set(results)) == 400
    assert len(registry) == 400
