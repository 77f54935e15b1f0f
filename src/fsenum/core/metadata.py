"""Metadata records and typed handles built from raw find records."""

from __future__ import annotations

import posixpath
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from fsenum.core.paths import PathResolver
from fsenum.core.types import (
    IO_REPARSE_TAG_MOUNT_POINT,
    IO_REPARSE_TAG_SYMLINK,
    FileAttributes,
    FindData,
)


@dataclass(frozen=True)
class FileSystemEntryInfo:
    """Decoded metadata for one file or directory.

    Attributes:
        file_name: Base name of the entry
        full_path: Full path in regular (unprefixed) form
        long_full_path: Full path in long-path form
        attributes: Attribute bits
        file_size: Size in bytes (0 for directories)
        creation_time: Creation time (UTC)
        last_access_time: Last access time (UTC)
        last_write_time: Last write time (UTC)
        reparse_point_tag: Reparse tag, 0 when not a reparse point
        alternate_file_name: Short (8.3) name, empty when unavailable

    """

    file_name: str
    full_path: str
    long_full_path: str
    attributes: FileAttributes
    file_size: int
    creation_time: datetime
    last_access_time: datetime
    last_write_time: datetime
    reparse_point_tag: int = 0
    alternate_file_name: str = ""

    def _has(self, flag: FileAttributes) -> bool:
        return bool(self.attributes & flag)

    @property
    def is_directory(self) -> bool:
        return self._has(FileAttributes.DIRECTORY)

    @property
    def is_reparse_point(self) -> bool:
        return self._has(FileAttributes.REPARSE_POINT)

    @property
    def is_symbolic_link(self) -> bool:
        return self.is_reparse_point and self.reparse_point_tag == IO_REPARSE_TAG_SYMLINK

    @property
    def is_mount_point(self) -> bool:
        return self.is_reparse_point and self.reparse_point_tag == IO_REPARSE_TAG_MOUNT_POINT

    @property
    def is_hidden(self) -> bool:
        return self._has(FileAttributes.HIDDEN)

    @property
    def is_read_only(self) -> bool:
        return self._has(FileAttributes.READ_ONLY)

    @property
    def is_system(self) -> bool:
        return self._has(FileAttributes.SYSTEM)

    @property
    def is_archive(self) -> bool:
        return self._has(FileAttributes.ARCHIVE)

    @property
    def is_compressed(self) -> bool:
        return self._has(FileAttributes.COMPRESSED)

    @property
    def is_encrypted(self) -> bool:
        return self._has(FileAttributes.ENCRYPTED)

    @property
    def is_offline(self) -> bool:
        return self._has(FileAttributes.OFFLINE)

    @property
    def is_sparse_file(self) -> bool:
        return self._has(FileAttributes.SPARSE_FILE)

    @property
    def is_temporary(self) -> bool:
        return self._has(FileAttributes.TEMPORARY)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-friendly mapping."""
        return {
            "file_name": self.file_name,
            "full_path": self.full_path,
            "is_directory": self.is_directory,
            "is_reparse_point": self.is_reparse_point,
            "file_size": self.file_size,
            "attributes": int(self.attributes),
            "creation_time": self.creation_time.isoformat(),
            "last_access_time": self.last_access_time.isoformat(),
            "last_write_time": self.last_write_time.isoformat(),
        }


def _timestamp(value: float) -> datetime:
    try:
        return datetime.fromtimestamp(value, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return datetime.fromtimestamp(0, tz=timezone.utc)


class MetadataDecoder:
    """Build FileSystemEntryInfo records from raw FindData."""

    def __init__(self, resolver: PathResolver | None = None) -> None:
        self.resolver = resolver if resolver is not None else PathResolver()

    def decode(self, find_data: FindData, full_path: str) -> FileSystemEntryInfo:
        """Decode a raw record.

        Args:
            find_data: Raw native record
            full_path: Full path of the entry, in either form

        Returns:
            Decoded metadata record

        """
        regular = self.resolver.get_regular_path(full_path)
        return FileSystemEntryInfo(
            file_name=find_data.file_name,
            full_path=regular,
            long_full_path=self.resolver.get_long_path(regular),
            attributes=FileAttributes(find_data.attributes),
            file_size=find_data.file_size,
            creation_time=_timestamp(find_data.creation_time),
            last_access_time=_timestamp(find_data.last_access_time),
            last_write_time=_timestamp(find_data.last_write_time),
            reparse_point_tag=find_data.reparse_tag,
            alternate_file_name=find_data.alternate_file_name,
        )


@dataclass(frozen=True)
class FileSystemInfo:
    """Typed handle wrapping a metadata record.

    Attributes:
        entry_info: Decoded metadata
        parent_full_path: Full path of the containing directory
        transaction: Transaction the handle was enumerated under, if any

    """

    entry_info: FileSystemEntryInfo
    parent_full_path: str
    transaction: Any = None

    @property
    def name(self) -> str:
        return self.entry_info.file_name

    @property
    def full_name(self) -> str:
        return self.entry_info.full_path

    @property
    def attributes(self) -> FileAttributes:
        return self.entry_info.attributes

    @property
    def creation_time(self) -> datetime:
        return self.entry_info.creation_time

    @property
    def last_access_time(self) -> datetime:
        return self.entry_info.last_access_time

    @property
    def last_write_time(self) -> datetime:
        return self.entry_info.last_write_time

    def __fspath__(self) -> str:
        return self.full_name

    def __str__(self) -> str:
        return self.full_name


@dataclass(frozen=True)
class FileInfo(FileSystemInfo):
    """Typed handle for a file."""

    @property
    def length(self) -> int:
        return self.entry_info.file_size

    @property
    def directory_name(self) -> str:
        return self.parent_full_path

    @property
    def extension(self) -> str:
        return posixpath.splitext(self.name)[1]


@dataclass(frozen=True)
class DirectoryInfo(FileSystemInfo):
    """Typed handle for a directory."""

    @property
    def parent(self) -> str:
        return self.parent_full_path
