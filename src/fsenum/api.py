"""High-level enumeration functions.

Thin wrappers that build EnumerationOptions and a TraversalEngine for the
common cases:

    from fsenum import enumerate_files

    for path in enumerate_files("/data", "*.csv", recursive=True):
        ...
"""

import os
from collections.abc import Iterator
from typing import Any

from fsenum.config import EnumerationOptions, OutputShape
from fsenum.core.engine import TraversalEngine
from fsenum.core.metadata import FileSystemEntryInfo
from fsenum.core.types import WILDCARD_MATCH_ALL

PathArg = str | os.PathLike[str]


def _options(
    options: EnumerationOptions | None,
    search_pattern: str,
    output_shape: OutputShape,
    **updates: Any,
) -> EnumerationOptions:
    base = options if options is not None else EnumerationOptions()
    update: dict[str, Any] = {"search_pattern": search_pattern, "output_shape": output_shape}
    update.update({k: v for k, v in updates.items() if v is not None})
    # Re-validate so the include_files/include_directories rule applies
    return EnumerationOptions(**{**base.model_dump(), **update})


def enumerate_file_system_entries(
    path: PathArg,
    search_pattern: str = WILDCARD_MATCH_ALL,
    *,
    recursive: bool | None = None,
    options: EnumerationOptions | None = None,
    transaction: Any = None,
) -> Iterator[str]:
    """Yield full paths of files and directories beneath path.

    Args:
        path: Directory to enumerate
        search_pattern: DOS wildcard pattern for entry names
        recursive: Override options.recursive when given
        options: Base options; search_pattern and output shape are replaced
        transaction: Optional transaction object

    Returns:
        Lazy iterator of path strings

    """
    opts = _options(options, search_pattern, OutputShape.PATH, recursive=recursive)
    return TraversalEngine(path, opts, transaction=transaction).enumerate()


def enumerate_files(
    path: PathArg,
    search_pattern: str = WILDCARD_MATCH_ALL,
    *,
    recursive: bool | None = None,
    options: EnumerationOptions | None = None,
    transaction: Any = None,
) -> Iterator[str]:
    """Yield full paths of files beneath path."""
    opts = _options(
        options,
        search_pattern,
        OutputShape.PATH,
        recursive=recursive,
        include_files=True,
        include_directories=False,
    )
    return TraversalEngine(path, opts, transaction=transaction).enumerate()


def enumerate_directories(
    path: PathArg,
    search_pattern: str = WILDCARD_MATCH_ALL,
    *,
    recursive: bool | None = None,
    options: EnumerationOptions | None = None,
    transaction: Any = None,
) -> Iterator[str]:
    """Yield full paths of directories beneath path."""
    opts = _options(
        options,
        search_pattern,
        OutputShape.PATH,
        recursive=recursive,
        include_files=False,
        include_directories=True,
    )
    return TraversalEngine(path, opts, transaction=transaction).enumerate()


def enumerate_file_system_entry_infos(
    path: PathArg,
    search_pattern: str = WILDCARD_MATCH_ALL,
    *,
    recursive: bool | None = None,
    options: EnumerationOptions | None = None,
    transaction: Any = None,
) -> Iterator[FileSystemEntryInfo]:
    """Yield metadata records for the entries beneath path."""
    opts = _options(options, search_pattern, OutputShape.METADATA, recursive=recursive)
    return TraversalEngine(path, opts, transaction=transaction).enumerate()


def get_file_system_entry_info(
    path: PathArg,
    *,
    continue_on_exception: bool = False,
    transaction: Any = None,
) -> FileSystemEntryInfo | None:
    """Return the metadata record for a single file or directory.

    Args:
        path: Entry to look up
        continue_on_exception: Return None instead of raising when the
            entry cannot be opened
        transaction: Optional transaction object

    Returns:
        Metadata record, or None (only when continue_on_exception is set)

    Raises:
        EntryNotFoundError: If path does not exist.

    """
    opts = EnumerationOptions(output_shape=OutputShape.METADATA, continue_on_exception=continue_on_exception)
    result: FileSystemEntryInfo | None = TraversalEngine(
        path, opts, is_directory=False, transaction=transaction
    ).get()
    return result
