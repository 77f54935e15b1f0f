"""fsenum - lazy file-system entry enumeration over a find-first/find-next primitive."""

from fsenum.api import (
    enumerate_directories,
    enumerate_file_system_entries,
    enumerate_file_system_entry_infos,
    enumerate_files,
    get_file_system_entry_info,
)
from fsenum.config import (
    DirectoryEnumerationOptions,
    EnumerationOptions,
    OutputShape,
    load_options,
)
from fsenum.core.engine import TraversalEngine
from fsenum.core.metadata import DirectoryInfo, FileInfo, FileSystemEntryInfo, FileSystemInfo
from fsenum.exceptions import (
    AccessDeniedError,
    ConfigError,
    EntryNotFoundError,
    EnumerationError,
    EnumerationFailedError,
    FsEnumError,
    InvalidPathError,
    InvalidPatternError,
    NotADirectoryPathError,
    PathNotFoundError,
    TransactionNotSupportedError,
)

__version__ = "0.1.0"

__all__ = [
    "AccessDeniedError",
    "ConfigError",
    "DirectoryEnumerationOptions",
    "DirectoryInfo",
    "EntryNotFoundError",
    "EnumerationError",
    "EnumerationFailedError",
    "EnumerationOptions",
    "FileInfo",
    "FileSystemEntryInfo",
    "FileSystemInfo",
    "FsEnumError",
    "InvalidPathError",
    "InvalidPatternError",
    "NotADirectoryPathError",
    "OutputShape",
    "PathNotFoundError",
    "TransactionNotSupportedError",
    "TraversalEngine",
    "enumerate_directories",
    "enumerate_file_system_entries",
    "enumerate_file_system_entry_infos",
    "enumerate_files",
    "get_file_system_entry_info",
    "load_options",
]
