"""
Unit tests for the directory allowlist scanner.
"""

import os
from pathlib import Path

import pytest

from staticserve.allowlist import scan_allowed_directories


def _canonical(*paths: Path) -> set:
    return {str(p.resolve()) for p in paths}


class TestScanAllowedDirectories:
    """Tests for scan_allowed_directories()."""

    def test_includes_root_and_all_nested(self, tmp_path: Path):
        """Every directory at any depth is included, and nothing else."""
        (tmp_path / "a" / "b" / "c").mkdir(parents=True)
        (tmp_path / "d").mkdir()
        (tmp_path / "a" / "file.txt").write_text("x")

        allowed = scan_allowed_directories([str(tmp_path)])

        assert allowed == _canonical(
            tmp_path,
            tmp_path / "a",
            tmp_path / "a" / "b",
            tmp_path / "a" / "b" / "c",
            tmp_path / "d",
        )

    def test_excludes_parent_and_siblings(self, tmp_path: Path):
        (tmp_path / "served" / "sub").mkdir(parents=True)
        (tmp_path / "other").mkdir()

        allowed = scan_allowed_directories([str(tmp_path / "served")])

        assert str(tmp_path.resolve()) not in allowed
        assert str((tmp_path / "other").resolve()) not in allowed
        assert allowed == _canonical(tmp_path / "served", tmp_path / "served" / "sub")

    def test_multiple_roots_collapse_duplicates(self, tmp_path: Path):
        (tmp_path / "outer" / "inner").mkdir(parents=True)

        allowed = scan_allowed_directories([
            str(tmp_path / "outer"),
            str(tmp_path / "outer" / "inner"),
            str(tmp_path / "outer" / "." / "inner"),
        ])

        assert allowed == _canonical(tmp_path / "outer", tmp_path / "outer" / "inner")

    def test_empty_roots(self):
        assert scan_allowed_directories([]) == frozenset()

    def test_result_is_immutable(self, tmp_path: Path):
        assert isinstance(scan_allowed_directories([str(tmp_path)]), frozenset)

    def test_missing_root_is_fatal(self, tmp_path: Path):
        with pytest.raises(OSError):
            scan_allowed_directories([str(tmp_path / "does-not-exist")])

    def test_file_as_root_is_fatal(self, tmp_path: Path):
        target = tmp_path / "file.txt"
        target.write_text("x")

        with pytest.raises(OSError):
            scan_allowed_directories([str(target)])

    def test_unreadable_directory_is_fatal(self, tmp_path: Path, monkeypatch):
        """An error listing any nested directory fails the whole scan."""
        (tmp_path / "open" / "locked").mkdir(parents=True)
        real_scandir = os.scandir

        def failing_scandir(path):
            if os.fspath(path).endswith("locked"):
                raise PermissionError(13, "Permission denied", os.fspath(path))
            return real_scandir(path)

        monkeypatch.setattr(os, "scandir", failing_scandir)

        with pytest.raises(PermissionError):
            scan_allowed_directories([str(tmp_path)])

    def test_symlink_cycle_does_not_recurse(self, tmp_path: Path):
        (tmp_path / "a").mkdir()
        try:
            os.symlink(tmp_path, tmp_path / "a" / "loop", target_is_directory=True)
        except (OSError, NotImplementedError):
            pytest.skip("symlinks not supported")

        allowed = scan_allowed_directories([str(tmp_path)])

        assert allowed == _canonical(tmp_path, tmp_path / "a")
