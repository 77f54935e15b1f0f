"""Breadth-first traversal engine over the native find primitive."""

from __future__ import annotations

import logging
import os
from collections import deque
from collections.abc import Iterator
from typing import Any

from fsenum.config import EnumerationOptions
from fsenum.core.handle import DirectoryHandle
from fsenum.core.matcher import NameMatcher
from fsenum.core.metadata import MetadataDecoder
from fsenum.core.native import NativeFinder, ScandirFinder
from fsenum.core.paths import PathResolver
from fsenum.core.projector import ResultProjector
from fsenum.core.types import (
    CURRENT_DIRECTORY,
    PARENT_DIRECTORY,
    WILDCARD_MATCH_ALL,
    EntryRecord,
    TraversalState,
    TraversalTask,
)
from fsenum.exceptions import EnumerationError, TransactionNotSupportedError

logger = logging.getLogger(__name__)


class TraversalEngine:
    """Lazy, breadth-first enumeration of the entries beneath a path.

    Uses an iterative FIFO queue of directories rather than recursion, so
    deep trees never hit the recursion limit. Directories are processed one
    at a time and at most one native search handle is open at any moment.
    Entries within a directory keep native enumeration order.

    The engine is single-use: its queue is seeded with the root at
    construction and drained by ``enumerate()``. Once drained (or abandoned)
    the engine is DONE and further enumeration yields nothing.

    Example:
        >>> engine = TraversalEngine("/data", EnumerationOptions(recursive=True))
        >>> for path in engine:
        ...     print(path)

    """

    def __init__(
        self,
        path: str | os.PathLike[str],
        options: EnumerationOptions | None = None,
        *,
        is_directory: bool = True,
        transaction: Any = None,
        finder: NativeFinder | None = None,
        resolver: PathResolver | None = None,
        decoder: MetadataDecoder | None = None,
    ) -> None:
        """Initialize the engine and seed its queue.

        Args:
            path: Root directory (or, for ``get()``, the entry) to enumerate
            options: Enumeration options; defaults to EnumerationOptions()
            is_directory: False puts the engine in file context: not-found
                errors become EntryNotFoundError and recursion, reparse
                skipping and the type filter are inactive
            transaction: Object exposing an opaque ``handle`` attribute;
                when given every native call uses the transacted primitive
            finder: Native primitive, defaults to ScandirFinder
            resolver: Path resolver, defaults to PathResolver()
            decoder: Metadata decoder, defaults to MetadataDecoder(resolver)

        Raises:
            InvalidPathError: If path cannot be resolved.
            InvalidPatternError: If the search pattern is empty.
            TransactionNotSupportedError: If a transaction is given and the
                finder has no transacted primitive.

        """
        self.options = options if options is not None else EnumerationOptions()
        self.resolver = resolver if resolver is not None else PathResolver()
        self.finder: NativeFinder = finder if finder is not None else ScandirFinder()
        self.decoder = decoder if decoder is not None else MetadataDecoder(self.resolver)
        self.is_directory = is_directory
        self.transaction = transaction

        self.input_path = self.resolver.resolve(path)
        self.matcher = NameMatcher.compile(self.options.search_pattern)

        if transaction is not None and not getattr(self.finder, "supports_transactions", False):
            raise TransactionNotSupportedError(
                f"{type(self.finder).__name__} cannot run transacted enumeration",
                path=self.input_path,
            )
        self._transaction_handle = getattr(transaction, "handle", None) if transaction is not None else None

        # Directory-context policies; file context only ever reads the input path
        self.recursive = is_directory and self.options.recursive
        self.skip_reparse_points = is_directory and self.options.skip_reparse_points
        self.object_type_filter = self.options.object_type_filter if is_directory else None
        self.limit_to_directories = is_directory and self.options.limit_to_directories

        self.projector = ResultProjector(
            self.options.output_shape,
            resolver=self.resolver,
            decoder=self.decoder,
            as_long_path=self.options.as_long_path,
            transaction=transaction,
        )

        self._queue: deque[TraversalTask] = deque([TraversalTask(self.input_path)])
        self.state = TraversalState.SEEDED

    @property
    def continue_on_exception(self) -> bool:
        return self.options.continue_on_exception

    def __iter__(self) -> Iterator[Any]:
        return self.enumerate()

    def enumerate(self) -> Iterator[Any]:
        """Lazily yield every accepted entry beneath the root.

        Yields:
            Entries projected to the configured output shape

        Raises:
            EnumerationError: On the first failure to open or iterate a
                directory, unless continue_on_exception is set.
            RuntimeError: If another enumeration of this engine is in
                progress.

        """
        if self.state is TraversalState.DONE:
            return
        if self.state is TraversalState.DRAINING:
            raise RuntimeError(f"Enumeration of {self.input_path} is already in progress")

        self.state = TraversalState.DRAINING
        logger.debug(
            "Enumerating %s (pattern=%r, recursive=%s)",
            self.input_path,
            self.options.search_pattern,
            self.recursive,
        )
        try:
            while self._queue:
                task = self._queue.popleft()
                try:
                    yield from self._drain(task)
                except EnumerationError as e:
                    if not self.continue_on_exception:
                        raise
                    logger.warning(f"Cannot enumerate directory {task.full_path}: {e}")
        finally:
            self._queue.clear()
            self.state = TraversalState.DONE

    def _drain(self, task: TraversalTask) -> Iterator[Any]:
        """Enumerate one queued directory, enqueueing subdirectories as found."""
        directory = self.resolver.add_trailing_separator(task.full_path)
        handle = self._new_handle(
            self.resolver.join_search_path(directory, WILDCARD_MATCH_ALL), enumerate_children=True
        )

        with handle:
            for entry in handle:
                if entry.name in (CURRENT_DIRECTORY, PARENT_DIRECTORY):
                    continue

                # Before the recursion decision, so links are never descended into
                if self.skip_reparse_points and entry.is_reparse_point:
                    continue

                full_path = directory + entry.name

                # Recursion is independent of the name and type filters
                if entry.is_directory and self.recursive:
                    self._queue.append(TraversalTask(full_path))

                if not self.matcher.matches(entry.name):
                    continue

                if not self._accepts_kind(entry):
                    continue

                result = self.projector.project(entry, full_path)
                if result is None:
                    continue

                yield result

    def get(self) -> Any | None:
        """Return the projected entry for the input path itself.

        Returns:
            Projected entry, or None if the path could not be opened and
            continue_on_exception is set, or the entry is excluded by the
            type filter or output shape

        Raises:
            EnumerationError: If the path cannot be opened and
                continue_on_exception is not set.

        """
        handle = self._new_handle(self.input_path, enumerate_children=False)
        try:
            with handle:
                entry = handle.next()
        except EnumerationError as e:
            if not self.continue_on_exception:
                raise
            logger.debug(f"Cannot get {self.input_path}: {e}")
            return None

        if entry is None or not self._accepts_kind(entry):
            return None
        return self.projector.project(entry, self.input_path)

    def _accepts_kind(self, entry: EntryRecord) -> bool:
        if self.object_type_filter is None:
            return True
        return entry.is_directory == self.object_type_filter

    def _new_handle(self, search_path: str, *, enumerate_children: bool) -> DirectoryHandle:
        return DirectoryHandle(
            self.finder,
            search_path,
            enumerate_children=enumerate_children,
            resolver=self.resolver,
            is_directory=self.is_directory,
            continue_on_exception=self.continue_on_exception,
            limit_to_directories=self.limit_to_directories,
            large_fetch=self.options.use_large_fetch_hint,
            basic_info=self.options.basic_search,
            transaction=self._transaction_handle,
        )
