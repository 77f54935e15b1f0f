"""Enumeration options and their YAML loader.

EnumerationOptions is the single immutable configuration bundle handed to
the traversal engine. It can be built directly, from the
DirectoryEnumerationOptions flag set, or from a YAML file:

    # fsenum.yaml
    enumeration:
      recursive: true
      skip_reparse_points: true
      search_pattern: "*.txt"
      output_shape: metadata
"""

import logging
from enum import Enum, IntFlag
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from fsenum.core.types import WILDCARD_MATCH_ALL
from fsenum.exceptions import ConfigError

logger = logging.getLogger(__name__)


class OutputShape(str, Enum):
    """Element shape produced by an enumeration."""

    PATH = "path"
    METADATA = "metadata"
    FILE_SYSTEM_INFO = "file_system_info"
    FILE_INFO = "file_info"
    DIRECTORY_INFO = "directory_info"


class DirectoryEnumerationOptions(IntFlag):
    """Flag-style enumeration options."""

    NONE = 0
    FOLDERS = 1
    FILES = 2
    FILES_AND_FOLDERS = 3
    AS_LONG_PATH = 4
    SKIP_REPARSE_POINTS = 8
    CONTINUE_ON_EXCEPTION = 16
    RECURSIVE = 32
    BASIC_SEARCH = 64
    LARGE_CACHE = 128


class EnumerationOptions(BaseModel):
    """Immutable enumeration configuration.

    Attributes:
        recursive: Descend into subdirectories
        skip_reparse_points: Neither yield nor descend into reparse points
        continue_on_exception: Skip directories that fail to enumerate
            instead of aborting the traversal
        include_files: Yield files
        include_directories: Yield directories
        search_pattern: DOS wildcard pattern applied to entry names
        use_large_fetch_hint: Ask the native primitive for larger batches
        output_shape: Shape of the yielded elements
        as_long_path: Keep the long-path prefix on PATH-shaped results
        basic_search: Ask the native primitive to skip short (8.3) names

    If neither include_files nor include_directories is set, both are
    treated as set.

    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    recursive: bool = Field(default=False, description="Descend into subdirectories")
    skip_reparse_points: bool = Field(
        default=False,
        description="Skip reparse points (symlinks, junctions) entirely",
    )
    continue_on_exception: bool = Field(
        default=False,
        description="Skip directories that fail to enumerate",
    )
    include_files: bool = Field(default=True, description="Yield file entries")
    include_directories: bool = Field(default=True, description="Yield directory entries")
    search_pattern: str = Field(
        default=WILDCARD_MATCH_ALL,
        description="DOS wildcard pattern ('*' and '?') matched against entry names",
    )
    use_large_fetch_hint: bool = Field(
        default=False,
        description="Native large-fetch buffer hint",
    )
    output_shape: OutputShape = Field(
        default=OutputShape.PATH,
        description="Shape of yielded elements",
    )
    as_long_path: bool = Field(
        default=False,
        description="Return paths in long-path form",
    )
    basic_search: bool = Field(
        default=False,
        description="Native basic-info hint (skip short names)",
    )

    @model_validator(mode="before")
    @classmethod
    def include_something(cls, data: Any) -> Any:
        """Enumerate both kinds when neither is requested."""
        if isinstance(data, dict):
            files = data.get("include_files", True)
            directories = data.get("include_directories", True)
            if not files and not directories:
                data = {**data, "include_files": True, "include_directories": True}
        return data

    @property
    def object_type_filter(self) -> bool | None:
        """None yields both kinds, True only directories, False only files.

        Both flags equal means both kinds, whichever way the model was built.
        """
        if self.include_files == self.include_directories:
            return None
        return self.include_directories

    @property
    def limit_to_directories(self) -> bool:
        """Native "search limited to directories" hint."""
        return self.object_type_filter is True

    @classmethod
    def from_flags(
        cls,
        flags: DirectoryEnumerationOptions,
        *,
        search_pattern: str = WILDCARD_MATCH_ALL,
        output_shape: OutputShape = OutputShape.PATH,
    ) -> "EnumerationOptions":
        """Build options from a flag set.

        Args:
            flags: Combination of DirectoryEnumerationOptions
            search_pattern: Wildcard pattern
            output_shape: Shape of yielded elements

        Returns:
            Equivalent EnumerationOptions

        """
        return cls(
            recursive=bool(flags & DirectoryEnumerationOptions.RECURSIVE),
            skip_reparse_points=bool(flags & DirectoryEnumerationOptions.SKIP_REPARSE_POINTS),
            continue_on_exception=bool(flags & DirectoryEnumerationOptions.CONTINUE_ON_EXCEPTION),
            include_files=bool(flags & DirectoryEnumerationOptions.FILES),
            include_directories=bool(flags & DirectoryEnumerationOptions.FOLDERS),
            use_large_fetch_hint=bool(flags & DirectoryEnumerationOptions.LARGE_CACHE),
            as_long_path=bool(flags & DirectoryEnumerationOptions.AS_LONG_PATH),
            basic_search=bool(flags & DirectoryEnumerationOptions.BASIC_SEARCH),
            search_pattern=search_pattern,
            output_shape=output_shape,
        )

    def to_flags(self) -> DirectoryEnumerationOptions:
        """Return the flag set equivalent to these options."""
        flags = DirectoryEnumerationOptions.NONE
        mapping = (
            (self.include_files, DirectoryEnumerationOptions.FILES),
            (self.include_directories, DirectoryEnumerationOptions.FOLDERS),
            (self.as_long_path, DirectoryEnumerationOptions.AS_LONG_PATH),
            (self.skip_reparse_points, DirectoryEnumerationOptions.SKIP_REPARSE_POINTS),
            (self.continue_on_exception, DirectoryEnumerationOptions.CONTINUE_ON_EXCEPTION),
            (self.recursive, DirectoryEnumerationOptions.RECURSIVE),
            (self.basic_search, DirectoryEnumerationOptions.BASIC_SEARCH),
            (self.use_large_fetch_hint, DirectoryEnumerationOptions.LARGE_CACHE),
        )
        for enabled, flag in mapping:
            if enabled:
                flags |= flag
        return flags


def load_options(path: Path, **overrides: Any) -> EnumerationOptions:
    """Load EnumerationOptions from a YAML file.

    The file may hold the options at top level or under an ``enumeration``
    key. An empty file yields the defaults.

    Args:
        path: YAML file to read
        **overrides: Values that take precedence over the file

    Returns:
        Validated EnumerationOptions

    Raises:
        ConfigError: If the file cannot be read, is not valid YAML, or holds
            invalid option values.

    """
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigError(f"Cannot read options file {path}: {e}", path=str(path)) from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}", path=str(path)) from e

    if not isinstance(data, dict):
        raise ConfigError(f"Options file {path} must contain a mapping", path=str(path))

    if "enumeration" in data:
        data = data["enumeration"] or {}
        if not isinstance(data, dict):
            raise ConfigError(f"'enumeration' in {path} must be a mapping", path=str(path))

    try:
        # The file must be valid on its own before overrides are layered on
        options = EnumerationOptions(**data)
        if overrides:
            options = EnumerationOptions(**{**options.model_dump(), **overrides})
    except ValidationError as e:
        raise ConfigError(f"Invalid options in {path}: {e}", path=str(path)) from e

    logger.debug("Loaded enumeration options from %s: %s", path, options)
    return options
