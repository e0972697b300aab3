from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from hasher.manifest import build_manifest
from hasher.walker import FileWalker, discover_files, iter_files, normalize_path


def _tree(root: Path) -> None:
    (root / "sub" / "deeper").mkdir(parents=True)
    (root / "empty").mkdir()
    (root / "a.txt").write_text("a", encoding="utf-8")
    (root / "sub" / "b.txt").write_text("b", encoding="utf-8")
    (root / "sub" / "deeper" / "c.txt").write_text("c", encoding="utf-8")


def test_normalize_path() -> None:
    assert normalize_path("./a//b/./c") == "a/b/c"
    assert normalize_path("a\\b\\c.txt") == "a/b/c.txt"
    assert normalize_path("./hashes.json") == "hashes.json"
    assert normalize_path("") == "."


def test_iter_files_yields_files_only(tmp_path: Path, monkeypatch) -> None:
    _tree(tmp_path)
    monkeypatch.chdir(tmp_path)
    assert sorted(iter_files(".")) == ["a.txt", "sub/b.txt", "sub/deeper/c.txt"]


def test_iter_files_keeps_root_prefix(tmp_path: Path, monkeypatch) -> None:
    _tree(tmp_path / "data")
    monkeypatch.chdir(tmp_path)
    assert sorted(iter_files("./data/")) == [
        "data/a.txt",
        "data/sub/b.txt",
        "data/sub/deeper/c.txt",
    ]


def test_iter_files_is_a_fresh_traversal(tmp_path: Path) -> None:
    _tree(tmp_path)
    first = sorted(iter_files(tmp_path))
    (tmp_path / "new.txt").write_text("n", encoding="utf-8")
    second = sorted(iter_files(tmp_path))
    assert len(second) == len(first) + 1


def test_iter_files_missing_root_is_empty(tmp_path: Path) -> None:
    assert list(iter_files(tmp_path / "nope")) == []


def test_walker_delivers_everything_through_small_queue(tmp_path: Path) -> None:
    for i in range(25):
        (tmp_path / f"f{i:02d}.txt").write_text(str(i), encoding="utf-8")
    walker = FileWalker(tmp_path, queue_size=1)
    walker.start()
    paths = list(walker)
    walker.stop()
    assert len(paths) == 25
    assert len(set(paths)) == 25
    assert not walker.running


def test_discover_files_stops_producer_on_early_exit(tmp_path: Path) -> None:
    for i in range(50):
        (tmp_path / f"f{i:02d}.txt").write_text(str(i), encoding="utf-8")
    walker = FileWalker(tmp_path, queue_size=1)
    walker.start()
    iterator = iter(walker)
    next(iterator)
    walker.stop()
    assert not walker.running

    gen = discover_files(tmp_path, queue_size=1)
    assert next(gen)
    gen.close()


@pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="needs os.mkfifo")
def test_iter_files_skips_fifo(tmp_path: Path) -> None:
    _tree(tmp_path)
    os.mkfifo(tmp_path / "sub" / "pipe")
    paths = sorted(iter_files(tmp_path))
    assert len(paths) == 3
    assert not any(p.endswith("/pipe") for p in paths)

    manifest = build_manifest(tmp_path)
    assert len(manifest.fingerprints) == 3


def test_unreadable_subdirectory_is_skipped(tmp_path: Path, monkeypatch) -> None:
    _tree(tmp_path)
    blocked = str(tmp_path / "sub")
    real_scandir = os.scandir

    def _scandir(path="."):
        if os.fspath(path) == blocked:
            raise PermissionError(13, "Permission denied", blocked)
        return real_scandir(path)

    monkeypatch.setattr(os, "scandir", _scandir)

    paths = list(iter_files(tmp_path))
    assert [Path(p).name for p in paths] == ["a.txt"]

    manifest = build_manifest(tmp_path)
    assert list(manifest.fingerprints) == [normalize_path(tmp_path / "a.txt")]
