"""Tests for kmsctl.utils.file_utils."""
import logging
import os
import stat

import pytest

from kmsctl.utils.file_utils import expand_files, parse_perms, write_file


class TestParsePerms:
    def test_octal_string(self):
        assert parse_perms("0744") == 0o744
        assert parse_perms("600") == 0o600

    def test_integer_passthrough(self):
        assert parse_perms(0o640) == 0o640

    @pytest.mark.parametrize("value", ["0999", "rwx", "77777"])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            parse_perms(value)


def test_write_file_creates_parents_and_sets_mode(tmp_path):
    target = tmp_path / "a" / "b" / "secret"

    write_file(str(target), b"data", 0o600)

    assert target.read_bytes() == b"data"
    assert stat.S_IMODE(os.stat(target).st_mode) == 0o600


class TestExpandFiles:
    def test_single_file(self, tmp_path):
        target = tmp_path / "one"
        target.write_text("1")
        assert expand_files(str(target)) == [str(target)]

    def test_walks_directory_sorted(self, tmp_path):
        (tmp_path / "b").mkdir()
        (tmp_path / "b" / "2").write_text("2")
        (tmp_path / "a").write_text("1")

        assert expand_files(str(tmp_path)) == [
            str(tmp_path / "a"),
            str(tmp_path / "b" / "2"),
        ]

    def test_missing_path(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            expand_files(str(tmp_path / "nope"))

    def test_symlink_policy(self, tmp_path):
        real_dir = tmp_path / "real"
        real_dir.mkdir()
        (real_dir / "inside").write_text("x")
        tree = tmp_path / "tree"
        tree.mkdir()
        (tree / "file").write_text("f")
        os.symlink(real_dir / "inside", tree / "file-link")
        os.symlink(real_dir, tree / "dir-link")
        os.symlink(tmp_path / "missing", tree / "broken")

        assert expand_files(str(tree)) == [
            str(tree / "file"),
            str(tree / "file-link"),
        ]

    def test_nested_symlinked_directory_is_reported(self, tmp_path, caplog):
        real_dir = tmp_path / "real"
        real_dir.mkdir()
        (real_dir / "inside").write_text("x")
        tree = tmp_path / "tree"
        (tree / "nested").mkdir(parents=True)
        os.symlink(real_dir, tree / "nested" / "dir-link")

        with caplog.at_level(logging.WARNING, logger="kmsctl"):
            assert expand_files(str(tree)) == []

        assert f"Skipping symlinked directory: {tree / 'nested' / 'dir-link'}" in caplog.text

    def test_special_files_are_skipped(self, tmp_path):
        fifo = tmp_path / "pipe"
        os.mkfifo(fifo)
        assert expand_files(str(fifo)) == []
