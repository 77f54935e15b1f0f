"""Tests for the os.scandir-backed native finder."""

import os
import stat
import sys
from pathlib import Path

import pytest

from fsenum.core.native import ScandirFinder, critical_error_mode, find_data_from_stat
from fsenum.core.types import IO_REPARSE_TAG_SYMLINK, FileAttributes, FindData
from fsenum.exceptions import TransactionNotSupportedError

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="synthesized attributes are POSIX-only")


def _drain(finder: ScandirFinder, search_path: str, **kwargs) -> list[FindData]:
    search, record = finder.find_first(search_path, **kwargs)
    records = []
    try:
        while record is not None:
            records.append(record)
            record = finder.find_next(search)
    finally:
        finder.find_close(search)
    return records


def _symlink(target: Path, link: Path, *, directory: bool) -> None:
    try:
        os.symlink(target, link, target_is_directory=directory)
    except (OSError, NotImplementedError) as e:
        pytest.skip(f"symlinks unavailable: {e}")


@pytest.fixture
def tree(tmp_path: Path) -> Path:
    (tmp_path / "a.txt").write_text("hello")
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "b.txt").write_text("x")
    return tmp_path


class TestScandirFinder:
    """Test cases for ScandirFinder."""

    def test_enumerates_children_with_dot_entries_first(self, tree: Path) -> None:
        """Test that '.' and '..' lead, followed by the real children."""
        records = _drain(ScandirFinder(), os.path.join(str(tree), "*"))

        names = [r.file_name for r in records]
        assert names[:2] == [".", ".."]
        assert sorted(names[2:]) == ["a.txt", "sub"]

    def test_dot_entries_can_be_disabled(self, tree: Path) -> None:
        """Test emit_dot_entries=False."""
        records = _drain(ScandirFinder(emit_dot_entries=False), os.path.join(str(tree), "*"))

        assert sorted(r.file_name for r in records) == ["a.txt", "sub"]

    def test_file_and_directory_records(self, tree: Path) -> None:
        """Test sizes and directory bits on enumerated records."""
        records = {r.file_name: r for r in _drain(ScandirFinder(), os.path.join(str(tree), "*"))}

        assert records["a.txt"].file_size == 5
        assert not records["a.txt"].attributes & FileAttributes.DIRECTORY
        assert records["sub"].attributes & FileAttributes.DIRECTORY
        assert records["sub"].file_size == 0
        assert records["a.txt"].last_write_time == pytest.approx((tree / "a.txt").stat().st_mtime)

    def test_limit_to_directories_hint(self, tree: Path) -> None:
        """Test that the directories-only hint drops files."""
        records = _drain(ScandirFinder(emit_dot_entries=False), os.path.join(str(tree), "*"), limit_to_directories=True)

        assert [r.file_name for r in records] == ["sub"]

    def test_empty_directory(self, tmp_path: Path) -> None:
        """Test that an empty directory yields no first record without dot entries."""
        finder = ScandirFinder(emit_dot_entries=False)

        search, first = finder.find_first(os.path.join(str(tmp_path), "*"))
        finder.find_close(search)

        assert first is None

    def test_single_entry_lookup(self, tree: Path) -> None:
        """Test that a non-wildcard search path returns just that entry."""
        records = _drain(ScandirFinder(), str(tree / "a.txt"), enumerate_children=False)

        assert len(records) == 1
        assert records[0].file_name == "a.txt"
        assert records[0].file_size == 5

    def test_missing_directory(self, tmp_path: Path) -> None:
        """Test that a nonexistent directory raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            ScandirFinder().find_first(os.path.join(str(tmp_path), "nope", "*"))

    def test_missing_single_entry(self, tmp_path: Path) -> None:
        """Test that a nonexistent entry raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            ScandirFinder().find_first(str(tmp_path / "nope.txt"), enumerate_children=False)

    @posix_only
    def test_lookup_of_entry_named_star(self, tree: Path) -> None:
        """Test that a single-entry lookup of a file named '*' returns that file."""
        (tree / "*").write_text("star")

        records = _drain(ScandirFinder(), str(tree / "*"), enumerate_children=False)

        assert [r.file_name for r in records] == ["*"]
        assert records[0].file_size == 4

    @posix_only
    def test_file_as_directory(self, tree: Path) -> None:
        """Test that enumerating a file raises NotADirectoryError."""
        with pytest.raises(NotADirectoryError):
            ScandirFinder().find_first(os.path.join(str(tree / "a.txt"), "*"))

    def test_transaction_rejected(self, tree: Path) -> None:
        """Test that scandir refuses transacted calls."""
        finder = ScandirFinder()

        assert finder.supports_transactions is False
        with pytest.raises(TransactionNotSupportedError):
            finder.find_first(os.path.join(str(tree), "*"), transaction=object())

    def test_close_stops_iteration(self, tree: Path) -> None:
        """Test that a closed search yields nothing more."""
        finder = ScandirFinder(emit_dot_entries=False)
        search, first = finder.find_first(os.path.join(str(tree), "*"))
        assert first is not None

        finder.find_close(search)
        finder.find_close(search)

        assert finder.find_next(search) is None

    def test_directory_symlink_is_reparse_point(self, tree: Path) -> None:
        """Test that a link to a directory reports REPARSE_POINT and DIRECTORY."""
        _symlink(tree / "sub", tree / "link", directory=True)

        records = {r.file_name: r for r in _drain(ScandirFinder(), os.path.join(str(tree), "*"))}

        link = records["link"]
        assert link.attributes & FileAttributes.REPARSE_POINT
        assert link.attributes & FileAttributes.DIRECTORY
        assert link.reparse_tag == IO_REPARSE_TAG_SYMLINK

    def test_file_symlink_is_not_directory(self, tree: Path) -> None:
        """Test that a link to a file is a reparse point without DIRECTORY."""
        _symlink(tree / "a.txt", tree / "alink", directory=False)

        records = _drain(ScandirFinder(), str(tree / "alink"), enumerate_children=False)

        assert records[0].attributes & FileAttributes.REPARSE_POINT
        assert not records[0].attributes & FileAttributes.DIRECTORY


@posix_only
class TestFindDataFromStat:
    """Test cases for attribute synthesis from POSIX stat results."""

    @staticmethod
    def _stat(mode: int, size: int = 0) -> os.stat_result:
        return os.stat_result((mode, 1, 1, 1, 0, 0, size, 100, 200, 300))

    def test_regular_file(self) -> None:
        """Test that a writable regular file is NORMAL."""
        data = find_data_from_stat("f", self._stat(stat.S_IFREG | 0o644, 42))

        assert data.attributes == FileAttributes.NORMAL
        assert data.file_size == 42
        assert data.last_access_time == 100
        assert data.last_write_time == 200

    def test_read_only_and_hidden(self) -> None:
        """Test READ_ONLY from the mode and HIDDEN from a leading dot."""
        data = find_data_from_stat(".secret", self._stat(stat.S_IFREG | 0o444))

        assert data.attributes & FileAttributes.READ_ONLY
        assert data.attributes & FileAttributes.HIDDEN

    def test_directory_has_no_size(self) -> None:
        """Test that directories report size 0."""
        data = find_data_from_stat("d", self._stat(stat.S_IFDIR | 0o755, 4096))

        assert data.attributes & FileAttributes.DIRECTORY
        assert data.file_size == 0

    def test_symlink(self) -> None:
        """Test that a symlink gets the symlink reparse tag."""
        data = find_data_from_stat("l", self._stat(stat.S_IFLNK | 0o777), target_is_dir=True)

        assert data.attributes & FileAttributes.REPARSE_POINT
        assert data.attributes & FileAttributes.DIRECTORY
        assert data.reparse_tag == IO_REPARSE_TAG_SYMLINK

    def test_device(self) -> None:
        """Test that special files are flagged DEVICE."""
        data = find_data_from_stat("fifo", self._stat(stat.S_IFIFO | 0o644))

        assert data.attributes & FileAttributes.DEVICE


def test_critical_error_mode_is_reentrant() -> None:
    """Test that the error-mode guard can be nested and always exits."""
    with critical_error_mode():
        with critical_error_mode():
            pass
