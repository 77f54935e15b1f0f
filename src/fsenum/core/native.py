"""Native find-first / find-next enumeration primitive.

The traversal core talks to the filesystem only through the NativeFinder
protocol, which mirrors the FindFirstFile/FindNextFile/FindClose triple:
``find_first`` opens a search and returns its first record, ``find_next``
advances it and ``find_close`` releases it. ScandirFinder implements the
protocol on top of ``os.scandir`` and ``os.lstat``; tests inject their own
finder to simulate reparse points, access failures and transactions.
"""

from __future__ import annotations

import contextlib
import logging
import os
import stat
import sys
from collections import deque
from collections.abc import Iterator
from typing import Any, Protocol

from fsenum.core.types import (
    CURRENT_DIRECTORY,
    IO_REPARSE_TAG_SYMLINK,
    PARENT_DIRECTORY,
    FileAttributes,
    FindData,
)
from fsenum.exceptions import TransactionNotSupportedError

logger = logging.getLogger(__name__)

IS_WINDOWS = sys.platform == "win32"

# SetThreadErrorMode flags
SEM_FAILCRITICALERRORS = 0x0001


class NativeFinder(Protocol):
    """Protocol for the native enumeration primitive.

    With ``enumerate_children`` the search path is ``<directory><sep>*`` and
    the search yields the directory's children, "." and ".." included where
    the platform reports them. Without it the search path names one entry
    and the search yields that entry only; a trailing ``*`` is then part of
    the name.
    """

    supports_transactions: bool

    def find_first(
        self,
        search_path: str,
        *,
        enumerate_children: bool = True,
        limit_to_directories: bool = False,
        large_fetch: bool = False,
        basic_info: bool = False,
        transaction: Any = None,
    ) -> tuple[Any, FindData | None]:
        """Open a search and fetch its first record.

        Args:
            search_path: Wildcard search path or plain entry path
            enumerate_children: Enumerate a directory rather than look up a
                single entry
            limit_to_directories: Hint that only directories are wanted
            large_fetch: Hint to use a larger buffer per native call
            basic_info: Hint to skip alternate (short) names
            transaction: Opaque transaction handle; when set the call must be
                routed through the transacted primitive

        Returns:
            Tuple of (search handle, first record or None if empty)

        Raises:
            OSError: If the search cannot be opened.
            TransactionNotSupportedError: If a transaction is given to a
                finder without a transacted primitive.

        """
        ...

    def find_next(self, search: Any) -> FindData | None:
        """Advance the search.

        Returns:
            Next record, or None once no more files remain

        Raises:
            OSError: If the native call fails for any other reason.

        """
        ...

    def find_close(self, search: Any) -> None:
        """Release the search handle."""
        ...


@contextlib.contextmanager
def critical_error_mode() -> Iterator[None]:
    """Suppress OS critical-error popups for the duration of a native call.

    On Windows a find call against a not-ready device can otherwise block on
    a modal "insert disk" prompt. The previous thread error mode is restored
    on exit. Elsewhere this is a no-op.
    """
    if not IS_WINDOWS:
        yield
        return

    import ctypes

    kernel32 = ctypes.WinDLL("kernel32", use_last_error=True)  # type: ignore[attr-defined]
    old_mode = ctypes.c_uint(0)
    changed = bool(kernel32.SetThreadErrorMode(SEM_FAILCRITICALERRORS, ctypes.byref(old_mode)))
    if not changed:
        logger.debug("SetThreadErrorMode failed: %s", ctypes.get_last_error())
    try:
        yield
    finally:
        if changed:
            kernel32.SetThreadErrorMode(old_mode.value, None)


def _synthesized_attributes(name: str, st: os.stat_result, *, target_is_dir: bool) -> int:
    """Derive Windows-style attribute bits from a POSIX stat result."""
    attributes = 0
    if stat.S_ISLNK(st.st_mode):
        attributes |= FileAttributes.REPARSE_POINT
        if target_is_dir:
            attributes |= FileAttributes.DIRECTORY
    elif stat.S_ISDIR(st.st_mode):
        attributes |= FileAttributes.DIRECTORY
    elif not stat.S_ISREG(st.st_mode):
        attributes |= FileAttributes.DEVICE

    if name.startswith(".") and name not in (CURRENT_DIRECTORY, PARENT_DIRECTORY):
        attributes |= FileAttributes.HIDDEN
    if not st.st_mode & stat.S_IWUSR:
        attributes |= FileAttributes.READ_ONLY
    if attributes == 0:
        attributes = FileAttributes.NORMAL
    return int(attributes)


def find_data_from_stat(name: str, st: os.stat_result, *, target_is_dir: bool = False) -> FindData:
    """Build a FindData record from a stat result taken without following links.

    Args:
        name: Base name of the entry
        st: Result of lstat / DirEntry.stat(follow_symlinks=False)
        target_is_dir: For symlinks, whether the link target is a directory

    Returns:
        FindData with attribute bits, size and timestamps filled in

    """
    attributes = getattr(st, "st_file_attributes", None)
    reparse_tag = getattr(st, "st_reparse_tag", 0) or 0
    if attributes is None:
        attributes = _synthesized_attributes(name, st, target_is_dir=target_is_dir)
        if stat.S_ISLNK(st.st_mode):
            reparse_tag = IO_REPARSE_TAG_SYMLINK

    is_dir = bool(attributes & FileAttributes.DIRECTORY)
    return FindData(
        file_name=name,
        attributes=attributes,
        file_size=0 if is_dir else st.st_size,
        creation_time=getattr(st, "st_birthtime", st.st_ctime),
        last_access_time=st.st_atime,
        last_write_time=st.st_mtime,
        reparse_tag=reparse_tag,
    )


def _find_data_from_entry(entry: os.DirEntry[str]) -> FindData:
    try:
        st = entry.stat(follow_symlinks=False)
    except OSError as e:
        # Entry vanished between readdir and stat; keep the d_type view
        logger.debug(f"Cannot stat {entry.path}: {e}")
        attributes = FileAttributes.NONE
        if entry.is_symlink():
            attributes |= FileAttributes.REPARSE_POINT
        if entry.is_dir():
            attributes |= FileAttributes.DIRECTORY
        return FindData(file_name=entry.name, attributes=int(attributes or FileAttributes.NORMAL))

    target_is_dir = False
    if stat.S_ISLNK(st.st_mode):
        try:
            target_is_dir = entry.is_dir(follow_symlinks=True)
        except OSError:
            target_is_dir = False
    return find_data_from_stat(entry.name, st, target_is_dir=target_is_dir)


class _ScandirSearch:
    """Open search state for ScandirFinder."""

    def __init__(self, iterator: Any, pending: deque[FindData], *, directories_only: bool) -> None:
        self.iterator = iterator
        self.pending = pending
        self.directories_only = directories_only

    def advance(self) -> FindData | None:
        if self.pending:
            return self.pending.popleft()
        if self.iterator is None:
            return None
        for entry in self.iterator:
            find_data = _find_data_from_entry(entry)
            if self.directories_only and not find_data.attributes & FileAttributes.DIRECTORY:
                continue
            return find_data
        return None

    def close(self) -> None:
        if self.iterator is not None:
            self.iterator.close()
            self.iterator = None
        self.pending.clear()


class ScandirFinder:
    """NativeFinder backed by ``os.scandir``.

    Args:
        emit_dot_entries: Report "." and ".." first when enumerating a
            directory, as FindFirstFile does

    """

    supports_transactions = False

    def __init__(self, *, emit_dot_entries: bool = True) -> None:
        self.emit_dot_entries = emit_dot_entries

    def find_first(
        self,
        search_path: str,
        *,
        enumerate_children: bool = True,
        limit_to_directories: bool = False,
        large_fetch: bool = False,
        basic_info: bool = False,
        transaction: Any = None,
    ) -> tuple[_ScandirSearch, FindData | None]:
        """Open a search; see NativeFinder.find_first."""
        if transaction is not None:
            raise TransactionNotSupportedError("os.scandir has no transacted variant", path=search_path)

        directory, name = os.path.split(search_path)
        if not enumerate_children:
            st = os.lstat(search_path)
            target_is_dir = stat.S_ISLNK(st.st_mode) and os.path.isdir(search_path)
            name = name or search_path
            search = _ScandirSearch(
                None,
                deque([find_data_from_stat(name, st, target_is_dir=target_is_dir)]),
                directories_only=False,
            )
            return search, search.advance()

        # Raises FileNotFoundError / NotADirectoryError / PermissionError
        iterator = os.scandir(directory or os.curdir)
        pending: deque[FindData] = deque()
        if self.emit_dot_entries:
            directory_bits = int(FileAttributes.DIRECTORY)
            pending.append(FindData(file_name=CURRENT_DIRECTORY, attributes=directory_bits))
            pending.append(FindData(file_name=PARENT_DIRECTORY, attributes=directory_bits))

        search = _ScandirSearch(iterator, pending, directories_only=limit_to_directories)
        try:
            first = search.advance()
        except OSError:
            search.close()
            raise
        return search, first

    def find_next(self, search: _ScandirSearch) -> FindData | None:
        """Advance the search; see NativeFinder.find_next."""
        return search.advance()

    def find_close(self, search: _ScandirSearch) -> None:
        """Release the search; see NativeFinder.find_close."""
        search.close()
