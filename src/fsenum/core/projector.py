"""Projection of accepted entries into the caller-selected output shape."""

from collections.abc import Callable
from typing import Any

from fsenum.config import OutputShape
from fsenum.core.metadata import DirectoryInfo, FileInfo, FileSystemInfo, MetadataDecoder
from fsenum.core.paths import PathResolver
from fsenum.core.types import EntryRecord


class ResultProjector:
    """Map an accepted EntryRecord and its full path to an output value.

    The projector function is picked once from the output shape; ``project``
    never inspects types at runtime.

    Args:
        shape: Output shape to produce
        resolver: Converts long paths to regular form
        decoder: Builds metadata records
        as_long_path: Keep the long-path prefix on PATH results
        transaction: Attached to typed handles

    """

    def __init__(
        self,
        shape: OutputShape,
        *,
        resolver: PathResolver,
        decoder: MetadataDecoder,
        as_long_path: bool = False,
        transaction: Any = None,
    ) -> None:
        self.shape = shape
        self.resolver = resolver
        self.decoder = decoder
        self.as_long_path = as_long_path
        self.transaction = transaction

        projectors: dict[OutputShape, Callable[[EntryRecord, str], Any]] = {
            OutputShape.PATH: self._project_path,
            OutputShape.METADATA: self._project_metadata,
            OutputShape.FILE_SYSTEM_INFO: self._project_handle,
            OutputShape.FILE_INFO: self._project_file,
            OutputShape.DIRECTORY_INFO: self._project_directory,
        }
        self._project = projectors[shape]

    def project(self, entry: EntryRecord, full_path: str) -> Any | None:
        """Project an entry.

        Args:
            entry: Accepted entry
            full_path: Full path of the entry in long-path-safe form

        Returns:
            Projected value, or None when a typed-handle shape excludes the
            entry's kind

        """
        return self._project(entry, full_path)

    def _project_path(self, entry: EntryRecord, full_path: str) -> str:
        if self.as_long_path:
            return full_path
        return self.resolver.get_regular_path(full_path)

    def _project_metadata(self, entry: EntryRecord, full_path: str) -> Any:
        return self.decoder.decode(entry.find_data, full_path)

    def _project_handle(self, entry: EntryRecord, full_path: str) -> FileSystemInfo:
        info = self.decoder.decode(entry.find_data, full_path)
        parent = self._parent_of(info.full_path)
        if info.is_directory:
            return DirectoryInfo(entry_info=info, parent_full_path=parent, transaction=self.transaction)
        return FileInfo(entry_info=info, parent_full_path=parent, transaction=self.transaction)

    def _project_file(self, entry: EntryRecord, full_path: str) -> FileInfo | None:
        if entry.is_directory:
            return None
        info = self.decoder.decode(entry.find_data, full_path)
        return FileInfo(entry_info=info, parent_full_path=self._parent_of(info.full_path), transaction=self.transaction)

    def _project_directory(self, entry: EntryRecord, full_path: str) -> DirectoryInfo | None:
        if not entry.is_directory:
            return None
        info = self.decoder.decode(entry.find_data, full_path)
        return DirectoryInfo(
            entry_info=info, parent_full_path=self._parent_of(info.full_path), transaction=self.transaction
        )

    def _parent_of(self, path: str) -> str:
        return self.resolver.get_directory_name(path)
