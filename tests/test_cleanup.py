from __future__ import annotations

import sys
from shutil import rmtree as real_rmtree
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from common import cleanup


def test_remove_tree_deletes_nested_content(tmp_path: Path) -> None:
    target = tmp_path / "tree"
    (target / "a" / "b").mkdir(parents=True)
    (target / "a" / "b" / "file.txt").write_text("x", encoding="utf-8")
    assert cleanup.remove_tree(target) is True
    assert not target.exists()
    assert cleanup.remove_tree(None) is True


def test_failed_removal_is_deferred_and_flushed(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    target = tmp_path / "held"
    target.mkdir()

    def refuse(path, *args, **kwargs):
        raise PermissionError("file is busy")

    monkeypatch.setattr(cleanup.shutil, "rmtree", refuse)
    assert cleanup.remove_tree(target) is False
    assert target.exists()
    assert target in cleanup.pending()

    monkeypatch.setattr(cleanup.shutil, "rmtree", real_rmtree)
    assert cleanup.flush_pending() == []
    assert not target.exists()
    assert target not in cleanup.pending()
