"""Tests for metadata decoding and typed handles."""

import os
from datetime import datetime, timezone

from fsenum.core.metadata import DirectoryInfo, FileInfo, MetadataDecoder
from fsenum.core.paths import PathResolver
from fsenum.core.types import (
    IO_REPARSE_TAG_MOUNT_POINT,
    IO_REPARSE_TAG_SYMLINK,
    FileAttributes,
    FindData,
)
from tests.fakes import dir_entry, file_entry, link_entry


class TestMetadataDecoder:
    """Test cases for MetadataDecoder."""

    def test_decode_file(self, posix_resolver: PathResolver) -> None:
        """Test that a file record decodes name, size and UTC times."""
        info = MetadataDecoder(posix_resolver).decode(file_entry("a.txt", 10, mtime=0.0), "/r/a.txt")

        assert info.file_name == "a.txt"
        assert info.full_path == "/r/a.txt"
        assert info.file_size == 10
        assert info.last_write_time == datetime(1970, 1, 1, tzinfo=timezone.utc)
        assert info.is_archive
        assert not info.is_directory

    def test_decode_strips_long_prefix(self) -> None:
        """Test that full_path is regular and long_full_path is prefixed."""
        decoder = MetadataDecoder(PathResolver(windows=True))

        info = decoder.decode(file_entry("a.txt"), "\\\\?\\C:\\r\\a.txt")

        assert info.full_path == "C:\\r\\a.txt"
        assert info.long_full_path == "\\\\?\\C:\\r\\a.txt"

    def test_out_of_range_timestamp_falls_back_to_epoch(self, posix_resolver: PathResolver) -> None:
        """Test that unrepresentable native times do not raise."""
        info = MetadataDecoder(posix_resolver).decode(file_entry("x", mtime=1e20), "/x")

        assert info.last_write_time.year == 1970

    def test_attribute_properties(self, posix_resolver: PathResolver) -> None:
        """Test the attribute convenience properties."""
        bits = FileAttributes.HIDDEN | FileAttributes.READ_ONLY | FileAttributes.SYSTEM | FileAttributes.TEMPORARY
        info = MetadataDecoder(posix_resolver).decode(FindData(file_name="h", attributes=int(bits)), "/h")

        assert info.is_hidden
        assert info.is_read_only
        assert info.is_system
        assert info.is_temporary
        assert not info.is_compressed
        assert not info.is_encrypted
        assert not info.is_offline
        assert not info.is_sparse_file

    def test_reparse_tags(self, posix_resolver: PathResolver) -> None:
        """Test symbolic link vs mount point classification."""
        decoder = MetadataDecoder(posix_resolver)
        symlink = decoder.decode(link_entry("l"), "/l")
        junction = decoder.decode(
            FindData(
                file_name="j",
                attributes=int(FileAttributes.REPARSE_POINT | FileAttributes.DIRECTORY),
                reparse_tag=IO_REPARSE_TAG_MOUNT_POINT,
            ),
            "/j",
        )

        assert symlink.is_symbolic_link
        assert symlink.reparse_point_tag == IO_REPARSE_TAG_SYMLINK
        assert not symlink.is_mount_point
        assert junction.is_mount_point
        assert not junction.is_symbolic_link

    def test_to_dict(self, posix_resolver: PathResolver) -> None:
        """Test the JSON-friendly serialization."""
        data = MetadataDecoder(posix_resolver).decode(dir_entry("sub"), "/r/sub").to_dict()

        assert data["file_name"] == "sub"
        assert data["is_directory"] is True
        assert data["attributes"] == int(FileAttributes.DIRECTORY)
        assert data["last_write_time"].startswith("1970-01-01T00:00:00")


class TestTypedHandles:
    """Test cases for FileInfo and DirectoryInfo."""

    def test_file_info(self, posix_resolver: PathResolver) -> None:
        """Test FileInfo accessors."""
        entry_info = MetadataDecoder(posix_resolver).decode(file_entry("report.tar.gz", 7), "/r/report.tar.gz")
        handle = FileInfo(entry_info=entry_info, parent_full_path="/r")

        assert handle.name == "report.tar.gz"
        assert handle.full_name == "/r/report.tar.gz"
        assert handle.length == 7
        assert handle.extension == ".gz"
        assert handle.directory_name == "/r"
        assert os.fspath(handle) == "/r/report.tar.gz"
        assert str(handle) == "/r/report.tar.gz"

    def test_directory_info(self, posix_resolver: PathResolver) -> None:
        """Test DirectoryInfo accessors."""
        entry_info = MetadataDecoder(posix_resolver).decode(dir_entry("sub"), "/r/sub")
        handle = DirectoryInfo(entry_info=entry_info, parent_full_path="/r", transaction="t")

        assert handle.parent == "/r"
        assert handle.attributes & FileAttributes.DIRECTORY
        assert handle.transaction == "t"
