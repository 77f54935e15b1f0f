"""Exception hierarchy for fsenum.

Every error raised by the library derives from FsEnumError. Enumeration
failures carry the failing path and a classified ErrorKind; native numeric
codes never cross this boundary except as the chained ``__cause__``.

Enumeration errors additionally subclass the matching builtin OSError
subclass, so callers may catch either ``AccessDeniedError`` or
``PermissionError``.
"""

from __future__ import annotations

import errno
from enum import Enum

__all__ = [
    "AccessDeniedError",
    "ConfigError",
    "EntryNotFoundError",
    "EnumerationError",
    "EnumerationFailedError",
    "ErrorKind",
    "FsEnumError",
    "InvalidPathError",
    "InvalidPatternError",
    "NotADirectoryPathError",
    "PathNotFoundError",
    "TransactionNotSupportedError",
    "classify_os_error",
]

# Windows system error codes surfaced through OSError.winerror
ERROR_FILE_NOT_FOUND = 2
ERROR_PATH_NOT_FOUND = 3
ERROR_ACCESS_DENIED = 5
ERROR_NO_MORE_FILES = 18
ERROR_DIRECTORY = 267


class ErrorKind(str, Enum):
    """Classified failure kinds exposed to callers."""

    PATH_NOT_FOUND = "path_not_found"
    FILE_NOT_FOUND = "file_not_found"
    NOT_A_DIRECTORY = "not_a_directory"
    ACCESS_DENIED = "access_denied"
    INVALID_PATTERN = "invalid_pattern"
    INVALID_PATH = "invalid_path"
    ENUMERATION_FAILED = "enumeration_failed"


class FsEnumError(Exception):
    """Base exception for all fsenum errors.

    Attributes:
        path: Path the failure relates to (empty when not applicable).
        kind: Classified failure kind.

    """

    default_kind: ErrorKind = ErrorKind.ENUMERATION_FAILED

    def __init__(self, message: str, *, path: str = "", kind: ErrorKind | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path
        self.kind = kind if kind is not None else self.default_kind

    def __str__(self) -> str:
        return self.message


class ConfigError(FsEnumError):
    """Invalid configuration, raised eagerly at construction time."""


class InvalidPatternError(ConfigError, ValueError):
    """Search pattern is empty, whitespace-only or missing."""

    default_kind = ErrorKind.INVALID_PATTERN


class InvalidPathError(ConfigError, ValueError):
    """Input path cannot be resolved to a usable absolute path."""

    default_kind = ErrorKind.INVALID_PATH


class TransactionNotSupportedError(ConfigError):
    """A transaction was supplied to a finder without a transacted primitive."""


class EnumerationError(FsEnumError, OSError):
    """Native enumeration failed for a path."""

    def __init__(self, message: str, *, path: str = "", kind: ErrorKind | None = None) -> None:
        FsEnumError.__init__(self, message, path=path, kind=kind)
        # OSError.filename keeps the builtin API useful for callers
        self.filename = path


class PathNotFoundError(EnumerationError, FileNotFoundError):
    """Directory path does not exist."""

    default_kind = ErrorKind.PATH_NOT_FOUND


class EntryNotFoundError(EnumerationError, FileNotFoundError):
    """File path does not exist."""

    default_kind = ErrorKind.FILE_NOT_FOUND


class NotADirectoryPathError(EnumerationError, NotADirectoryError):
    """Path refers to a file where a directory was required."""

    default_kind = ErrorKind.NOT_A_DIRECTORY


class AccessDeniedError(EnumerationError, PermissionError):
    """Caller lacks permission to enumerate the path."""

    default_kind = ErrorKind.ACCESS_DENIED


class EnumerationFailedError(EnumerationError):
    """Any other native failure while opening or iterating a search."""

    default_kind = ErrorKind.ENUMERATION_FAILED


_NOT_FOUND_ERRNOS = {errno.ENOENT}
_NOT_FOUND_WINERRORS = {ERROR_FILE_NOT_FOUND, ERROR_PATH_NOT_FOUND}
_ACCESS_ERRNOS = {errno.EACCES, errno.EPERM}


def classify_os_error(exc: OSError, path: str, *, is_directory: bool) -> EnumerationError:
    """Collapse a native OSError into a classified EnumerationError.

    Args:
        exc: Error raised by the native primitive.
        path: Path (or search path) the call was made with.
        is_directory: True when the call happened in a directory context;
            a not-found condition is then reported as PathNotFoundError.

    Returns:
        EnumerationError subclass instance. The caller is expected to raise
        it ``from exc``.

    """
    winerror = getattr(exc, "winerror", None)
    reason = exc.strerror or str(exc)

    if exc.errno in _NOT_FOUND_ERRNOS or winerror in _NOT_FOUND_WINERRORS:
        if is_directory:
            return PathNotFoundError(f"Could not find a part of the path: {path}", path=path)
        return EntryNotFoundError(f"Could not find file: {path}", path=path)

    if exc.errno == errno.ENOTDIR or winerror == ERROR_DIRECTORY:
        return NotADirectoryPathError(f"The directory name is invalid: {path}", path=path)

    if exc.errno in _ACCESS_ERRNOS or winerror == ERROR_ACCESS_DENIED:
        return AccessDeniedError(f"Access to the path is denied: {path}", path=path)

    return EnumerationFailedError(f"Enumeration failed for {path}: {reason}", path=path)
