"""Tests for ResultProjector."""

from unittest.mock import MagicMock

import pytest

from fsenum.config import OutputShape
from fsenum.core.metadata import DirectoryInfo, FileInfo, FileSystemEntryInfo, MetadataDecoder
from fsenum.core.paths import PathResolver
from fsenum.core.projector import ResultProjector
from fsenum.core.types import EntryRecord
from tests.fakes import dir_entry, file_entry

FILE = EntryRecord.from_find_data(file_entry("a.txt", 3))
DIRECTORY = EntryRecord.from_find_data(dir_entry("sub"))


def _projector(shape: OutputShape, resolver: PathResolver, **kwargs) -> ResultProjector:
    return ResultProjector(shape, resolver=resolver, decoder=MetadataDecoder(resolver), **kwargs)


class TestResultProjector:
    """Test cases for each output shape."""

    def test_path_shape_regular_form(self) -> None:
        """Test that PATH strips the long prefix by default."""
        resolver = PathResolver(windows=True)
        projector = _projector(OutputShape.PATH, resolver)

        assert projector.project(FILE, "\\\\?\\C:\\r\\a.txt") == "C:\\r\\a.txt"

    def test_path_shape_long_form(self) -> None:
        """Test that as_long_path keeps the prefix."""
        resolver = PathResolver(windows=True)
        projector = _projector(OutputShape.PATH, resolver, as_long_path=True)

        assert projector.project(FILE, "\\\\?\\C:\\r\\a.txt") == "\\\\?\\C:\\r\\a.txt"

    def test_metadata_shape(self, posix_resolver: PathResolver) -> None:
        """Test that METADATA returns a decoded record."""
        info = _projector(OutputShape.METADATA, posix_resolver).project(FILE, "/r/a.txt")

        assert isinstance(info, FileSystemEntryInfo)
        assert info.file_size == 3

    @pytest.mark.parametrize(
        ("entry", "expected"),
        [(FILE, FileInfo), (DIRECTORY, DirectoryInfo)],
    )
    def test_file_system_info_picks_type(
        self, posix_resolver: PathResolver, entry: EntryRecord, expected: type
    ) -> None:
        """Test that FILE_SYSTEM_INFO chooses the handle type by kind."""
        handle = _projector(OutputShape.FILE_SYSTEM_INFO, posix_resolver).project(entry, f"/r/{entry.name}")

        assert type(handle) is expected
        assert handle.parent_full_path == "/r"

    def test_file_info_excludes_directories(self, posix_resolver: PathResolver) -> None:
        """Test that FILE_INFO returns None for a directory."""
        projector = _projector(OutputShape.FILE_INFO, posix_resolver)

        assert projector.project(DIRECTORY, "/r/sub") is None
        assert isinstance(projector.project(FILE, "/r/a.txt"), FileInfo)

    def test_directory_info_excludes_files(self, posix_resolver: PathResolver) -> None:
        """Test that DIRECTORY_INFO returns None for a file."""
        projector = _projector(OutputShape.DIRECTORY_INFO, posix_resolver)

        assert projector.project(FILE, "/r/a.txt") is None
        assert isinstance(projector.project(DIRECTORY, "/r/sub"), DirectoryInfo)

    def test_excluded_kind_skips_decoding(self, posix_resolver: PathResolver) -> None:
        """Test that no metadata is decoded for an excluded entry."""
        decoder = MagicMock(spec=MetadataDecoder)
        projector = ResultProjector(OutputShape.DIRECTORY_INFO, resolver=posix_resolver, decoder=decoder)

        assert projector.project(FILE, "/r/a.txt") is None
        decoder.decode.assert_not_called()
