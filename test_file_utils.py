#!/usr/bin/env python3
"""ファイル列挙とキー生成のテスト"""
import os

import pytest

from r2_uploader.errors import FilesystemError
from r2_uploader.utils import file_utils
from r2_uploader.utils.file_utils import FileEnumerator, FileRecord, KeyMapper


def test_scan_lists_every_file_once(make_tree):
    root = make_tree({
        "a.txt": "a",
        "z.txt": "z",
        "m/c.txt": "c",
        "m/deep/d.bin": "d",
        "b/e.css": "e",
    })
    os.makedirs(root / "empty")

    records = FileEnumerator(str(root)).scan()

    suffixes = [r.relative_key_suffix for r in records]
    assert suffixes == ["a.txt", "z.txt", "b/e.css", "m/c.txt", "m/deep/d.bin"]
    assert all(os.path.isabs(r.absolute_path) for r in records)
    assert all(os.path.isfile(r.absolute_path) for r in records)


def test_scan_is_deterministic(make_tree):
    root = make_tree({f"dir{i % 3}/file{i}.txt": str(i) for i in range(20)})

    first = FileEnumerator(str(root)).scan()
    second = FileEnumerator(str(root)).scan()

    assert first == second
    assert len(first) == 20


def test_scan_empty_directory(tmp_path):
    assert FileEnumerator(str(tmp_path)).scan() == []


def test_scan_missing_root_raises(tmp_path):
    with pytest.raises(FilesystemError):
        FileEnumerator(str(tmp_path / "missing")).scan()


def test_scan_unreadable_subdirectory_raises(make_tree, monkeypatch):
    root = make_tree({"a.txt": "a"})

    def broken_walk(top, onerror=None, **kwargs):
        yield str(top), ["locked"], ["a.txt"]
        onerror(PermissionError(13, "Permission denied", os.path.join(str(top), "locked")))

    monkeypatch.setattr(file_utils.os, "walk", broken_walk)

    with pytest.raises(FilesystemError, match="locked"):
        FileEnumerator(str(root)).scan()


@pytest.mark.parametrize("source_root, prefix, suffix, expected", [
    ("dist", "assets", "a.txt", "assets/a.txt"),
    ("dist", "assets", "sub/b.png", "assets/sub/b.png"),
    ("dist", "", "sub/b.png", "dist/sub/b.png"),
    ("./dist/", "", "a.txt", "dist/a.txt"),
    ("dist", "assets//img/", "a.txt", "assets/img/a.txt"),
    ("dist", "/assets", "a.txt", "assets/a.txt"),
    ("/home/runner/work/site", "", "a.txt", "home/runner/work/site/a.txt"),
    ("dist", "static\\v1", "a.txt", "static/v1/a.txt"),
])
def test_object_key(source_root, prefix, suffix, expected):
    mapper = KeyMapper(source_root, prefix)
    record = FileRecord(absolute_path=f"/abs/{suffix}", relative_key_suffix=suffix)

    assert mapper.object_key(record) == expected


def test_placeholder_detection():
    mapper = KeyMapper("dist", "assets")

    assert mapper.is_placeholder("assets/.gitkeep")
    assert mapper.is_placeholder("assets/sub/.gitkeep")
    assert not mapper.is_placeholder("assets/keep.txt")


def test_custom_placeholder_markers():
    mapper = KeyMapper("dist", "", placeholder_markers=[".DS_Store", ".gitkeep"])

    assert mapper.is_placeholder("dist/.DS_Store")
    assert mapper.is_placeholder("dist/.gitkeep")

    assert not KeyMapper("dist", "", placeholder_markers=[]).is_placeholder("dist/.gitkeep")
