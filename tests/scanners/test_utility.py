"""Tests for the scanner filesystem helpers."""

from __future__ import annotations

from pathlib import Path

import pytest

from ciseed.exceptions import DetectionError
from ciseed.scanners.utility import list_paths, read_text, relative_path


class TestListPaths:
    """Ordering and skipping."""

    def test_shallowest_first(self, tmp_path: Path, make_file) -> None:
        make_file(tmp_path / "b" / "deep" / "x.txt")
        make_file(tmp_path / "a" / "y.txt")
        make_file(tmp_path / "z.txt")
        names = [path.relative_to(tmp_path.resolve()).as_posix() for path in list_paths(tmp_path)]
        assert names == ["a", "b", "z.txt", "a/y.txt", "b/deep", "b/deep/x.txt"]

    def test_skips_dirs(self, tmp_path: Path, make_file) -> None:
        make_file(tmp_path / "node_modules" / "pkg" / "package.json")
        make_file(tmp_path / ".git" / "HEAD")
        make_file(tmp_path / "package.json")
        assert [path.name for path in list_paths(tmp_path)] == ["package.json"]

    def test_missing_root(self, tmp_path: Path) -> None:
        with pytest.raises(DetectionError, match="does not exist"):
            list_paths(tmp_path / "missing")


class TestHelpers:
    """relative_path and read_text."""

    def test_relative_path(self, tmp_path: Path) -> None:
        assert relative_path(tmp_path, tmp_path / "ios" / "App.xcodeproj") == "./ios/App.xcodeproj"
        assert relative_path(tmp_path, tmp_path) == "./"

    def test_read_text_missing(self, tmp_path: Path) -> None:
        with pytest.raises(DetectionError):
            read_text(tmp_path / "missing")

    def test_read_text_tolerates_bad_bytes(self, tmp_path: Path) -> None:
        path = tmp_path / "Fastfile"
        path.write_bytes(b"lane :beta do\xff\n")
        assert "lane :beta" in read_text(path)
