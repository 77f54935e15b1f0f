"""Owned handle over one open native search."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from enum import Enum
from types import TracebackType
from typing import Any

from fsenum.core.native import NativeFinder, critical_error_mode
from fsenum.core.paths import PathResolver
from fsenum.core.types import EntryRecord, FindData
from fsenum.exceptions import classify_os_error

logger = logging.getLogger(__name__)


class HandleState(Enum):
    """Lifecycle of a DirectoryHandle. There is no transition back to OPEN."""

    UNOPENED = "unopened"
    OPEN = "open"
    EXHAUSTED = "exhausted"
    CLOSED = "closed"


class DirectoryHandle:
    """Closeable handle bound to a single find-first call.

    The handle is a context manager; leaving the ``with`` block releases the
    native search whether iteration finished, was abandoned or failed.

    Args:
        finder: Native primitive to drive
        search_path: ``<directory><sep>*`` or a plain entry path
        enumerate_children: True to enumerate a directory, False to look up
            the single entry named by search_path
        resolver: Used to strip trailing separators before the native call
        is_directory: True in a directory context (not-found is reported as
            PathNotFoundError rather than EntryNotFoundError)
        continue_on_exception: End iteration silently on a mid-iteration
            failure instead of raising
        limit_to_directories: Native "directories only" search hint
        large_fetch: Native large-buffer hint
        basic_info: Native "skip short names" hint
        transaction: Opaque transaction handle forwarded to the finder

    """

    def __init__(
        self,
        finder: NativeFinder,
        search_path: str,
        *,
        enumerate_children: bool = True,
        resolver: PathResolver | None = None,
        is_directory: bool = True,
        continue_on_exception: bool = False,
        limit_to_directories: bool = False,
        large_fetch: bool = False,
        basic_info: bool = False,
        transaction: Any = None,
    ) -> None:
        self.finder = finder
        self.resolver = resolver if resolver is not None else PathResolver()
        self.search_path = self.resolver.remove_trailing_separator(search_path)
        self.enumerate_children = enumerate_children
        self.is_directory = is_directory
        self.continue_on_exception = continue_on_exception
        self.limit_to_directories = limit_to_directories
        self.large_fetch = large_fetch
        self.basic_info = basic_info
        self.transaction = transaction

        self.state = HandleState.UNOPENED
        self._search: Any = None
        self._pending: FindData | None = None

    def open(self) -> DirectoryHandle:
        """Issue the find-first call.

        Returns:
            self, now OPEN (or EXHAUSTED if the search produced nothing)

        Raises:
            RuntimeError: If the handle was opened before.
            EnumerationError: Classified failure of the native call.

        """
        if self.state is not HandleState.UNOPENED:
            raise RuntimeError(f"DirectoryHandle for {self.search_path} cannot be reopened")

        logger.debug("find_first %s", self.search_path)
        try:
            with critical_error_mode():
                search, first = self.finder.find_first(
                    self.search_path,
                    enumerate_children=self.enumerate_children,
                    limit_to_directories=self.limit_to_directories,
                    large_fetch=self.large_fetch,
                    basic_info=self.basic_info,
                    transaction=self.transaction,
                )
        except OSError as e:
            self.state = HandleState.CLOSED
            raise classify_os_error(e, self.search_path, is_directory=self.is_directory) from e

        self._search = search
        self._pending = first
        self.state = HandleState.OPEN if first is not None else HandleState.EXHAUSTED
        return self

    def next(self) -> EntryRecord | None:
        """Return the next entry, or None once the search is exhausted.

        Raises:
            EnumerationError: On a native failure other than "no more files",
                unless continue_on_exception is set.

        """
        if self.state is not HandleState.OPEN:
            return None

        if self._pending is not None:
            find_data, self._pending = self._pending, None
            return EntryRecord.from_find_data(find_data)

        try:
            with critical_error_mode():
                find_data = self.finder.find_next(self._search)
        except OSError as e:
            self.state = HandleState.EXHAUSTED
            if self.continue_on_exception:
                logger.warning(f"Enumeration of {self.search_path} ended early: {e}")
                return None
            raise classify_os_error(e, self.search_path, is_directory=self.is_directory) from e

        if find_data is None:
            self.state = HandleState.EXHAUSTED
            return None
        return EntryRecord.from_find_data(find_data)

    def close(self) -> None:
        """Release the native search. Safe to call more than once."""
        if self.state is HandleState.CLOSED:
            return
        search, self._search = self._search, None
        self._pending = None
        self.state = HandleState.CLOSED
        if search is not None:
            with critical_error_mode():
                self.finder.find_close(search)

    def __iter__(self) -> Iterator[EntryRecord]:
        while (entry := self.next()) is not None:
            yield entry

    def __enter__(self) -> DirectoryHandle:
        if self.state is HandleState.UNOPENED:
            self.open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
