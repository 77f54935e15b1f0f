"""Shared types for the enumeration core."""

from enum import Enum, IntFlag
from typing import NamedTuple

CURRENT_DIRECTORY = "."
PARENT_DIRECTORY = ".."
WILDCARD_MATCH_ALL = "*"


class FileAttributes(IntFlag):
    """File attribute bits as reported by the native find record."""

    NONE = 0
    READ_ONLY = 0x1
    HIDDEN = 0x2
    SYSTEM = 0x4
    DIRECTORY = 0x10
    ARCHIVE = 0x20
    DEVICE = 0x40
    NORMAL = 0x80
    TEMPORARY = 0x100
    SPARSE_FILE = 0x200
    REPARSE_POINT = 0x400
    COMPRESSED = 0x800
    OFFLINE = 0x1000
    NOT_CONTENT_INDEXED = 0x2000
    ENCRYPTED = 0x4000


# Reparse tags the metadata layer distinguishes
IO_REPARSE_TAG_MOUNT_POINT = 0xA0000003
IO_REPARSE_TAG_SYMLINK = 0xA000000C


class FindData(NamedTuple):
    """Raw record produced by one native find-first/find-next step.

    Opaque to the traversal engine; only the metadata decoder reads the
    timestamp and size fields.

    Attributes:
        file_name: Base name as returned by the primitive
        attributes: Raw attribute bits
        file_size: Size in bytes (0 for directories)
        creation_time: Creation time as Unix timestamp
        last_access_time: Last access time as Unix timestamp
        last_write_time: Last write time as Unix timestamp
        reparse_tag: Reparse tag when the entry is a reparse point, else 0
        alternate_file_name: Short (8.3) name where the platform has one

    """

    file_name: str
    attributes: int
    file_size: int = 0
    creation_time: float = 0.0
    last_access_time: float = 0.0
    last_write_time: float = 0.0
    reparse_tag: int = 0
    alternate_file_name: str = ""


class EntryRecord(NamedTuple):
    """Decoded view of one native enumeration result.

    Attributes:
        name: Base name, including the "." and ".." pseudo-entries
        attributes: Attribute bits as FileAttributes
        find_data: Raw record, passed through to the metadata decoder

    """

    name: str
    attributes: FileAttributes
    find_data: FindData

    @classmethod
    def from_find_data(cls, find_data: FindData) -> "EntryRecord":
        """Build a record from a raw native find record."""
        return cls(
            name=find_data.file_name,
            attributes=FileAttributes(find_data.attributes),
            find_data=find_data,
        )

    @property
    def is_directory(self) -> bool:
        return bool(self.attributes & FileAttributes.DIRECTORY)

    @property
    def is_reparse_point(self) -> bool:
        return bool(self.attributes & FileAttributes.REPARSE_POINT)


class TraversalTask(NamedTuple):
    """A directory awaiting enumeration.

    Attributes:
        full_path: Absolute, long-path-safe directory path

    """

    full_path: str


class TraversalState(Enum):
    """Lifecycle of a TraversalEngine."""

    SEEDED = "seeded"
    DRAINING = "draining"
    DONE = "done"
