"""
Unit tests for path normalization and destination directory creation.

Tests cover:
- Trailing separator stripping
- Absolute path resolution
- mkdir_all creation, undo and blocking components
"""

import errno
import os

import pytest

from targz.errors import DestinationError, PathResolutionError
from targz.paths import make_absolute, mkdir_all, strip_trailing_slashes


class TestStripTrailingSlashes:
    """Tests for strip_trailing_slashes."""

    @pytest.mark.parametrize(
        "path, expected",
        [
            ("a/b/", "a/b"),
            ("a/b//", "a/b"),
            ("a/b", "a/b"),
            ("/", "/"),
            ("", ""),
        ],
    )
    def test_strip(self, path, expected):
        assert strip_trailing_slashes(path) == expected


class TestMakeAbsolute:
    """Tests for make_absolute."""

    def test_relative_paths(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        src, dst = make_absolute("in", "out/archive.tar.gz")

        assert src == str(tmp_path / "in")
        assert dst == str(tmp_path / "out" / "archive.tar.gz")

    def test_absolute_paths_unchanged(self):
        assert make_absolute("/x/y", "/z.tar.gz") == ("/x/y", "/z.tar.gz")

    def test_resolution_failure(self, monkeypatch):
        """A vanished working directory is reported as PathResolutionError."""

        def no_cwd():
            raise FileNotFoundError(errno.ENOENT, "No such file or directory")

        monkeypatch.setattr(os, "getcwd", no_cwd)

        with pytest.raises(PathResolutionError) as exc_info:
            make_absolute("relative", "/abs.tar.gz")

        assert exc_info.value.path == "relative"
        assert exc_info.value.code == "PATH_RESOLUTION_ERROR"


class TestMkdirAll:
    """Tests for mkdir_all."""

    def test_existing_directory_noop_undo(self, tmp_path):
        undo = mkdir_all(str(tmp_path))

        undo()

        assert tmp_path.is_dir()

    def test_creates_chain(self, tmp_path):
        target = tmp_path / "a" / "b" / "c"

        mkdir_all(str(target))

        assert target.is_dir()

    def test_undo_removes_topmost_created(self, tmp_path):
        (tmp_path / "a").mkdir()
        target = tmp_path / "a" / "b" / "c"

        undo = mkdir_all(str(target))
        (target / "leftover.txt").write_text("x")
        undo()

        assert not (tmp_path / "a" / "b").exists()
        assert (tmp_path / "a").is_dir()

    def test_symlink_to_directory_accepted(self, tmp_path):
        (tmp_path / "real").mkdir()
        os.symlink(str(tmp_path / "real"), str(tmp_path / "alias"))

        undo = mkdir_all(str(tmp_path / "alias" / "sub"))

        assert (tmp_path / "real" / "sub").is_dir()
        undo()
        assert not (tmp_path / "real" / "sub").exists()
        assert (tmp_path / "alias").is_symlink()

    def test_file_component_rejected(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("x")

        with pytest.raises(DestinationError) as exc_info:
            mkdir_all(str(blocker))

        assert exc_info.value.errno == errno.ENOTDIR
        assert exc_info.value.code == "DESTINATION_ERROR"

    def test_nested_below_file_rejected(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("x")

        with pytest.raises(DestinationError) as exc_info:
            mkdir_all(str(blocker / "a" / "b"))

        assert exc_info.value.errno == errno.ENOTDIR
        assert blocker.is_file()

    def test_makedirs_failure_cleans_partial_chain(self, tmp_path, monkeypatch):
        target = tmp_path / "a" / "b"

        def fail_makedirs(path, mode=0o777, exist_ok=False):
            os.mkdir(str(tmp_path / "a"))
            raise PermissionError(errno.EACCES, "Permission denied", str(target))

        monkeypatch.setattr(os, "makedirs", fail_makedirs)

        with pytest.raises(DestinationError) as exc_info:
            mkdir_all(str(target))

        assert exc_info.value.errno == errno.EACCES
        assert not (tmp_path / "a").exists()
