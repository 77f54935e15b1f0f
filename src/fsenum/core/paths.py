"""Path resolution and long-path handling.

Windows paths beyond MAX_PATH need the ``\\\\?\\`` prefix (``\\\\?\\UNC\\``
for network shares) before they reach the native primitive. POSIX has no
such convention, so the resolver only makes paths absolute there.
"""

from __future__ import annotations

import logging
import ntpath
import os
import posixpath
import sys

from fsenum.exceptions import InvalidPathError

logger = logging.getLogger(__name__)

IS_WINDOWS = sys.platform == "win32"

LONG_PATH_PREFIX = "\\\\?\\"
LONG_PATH_UNC_PREFIX = "\\\\?\\UNC\\"
UNC_PREFIX = "\\\\"

# Characters Windows rejects anywhere in a path component
_INVALID_WINDOWS_CHARS = frozenset('<>"|*?') | frozenset(chr(c) for c in range(32))


class PathResolver:
    """Resolve input paths to absolute, long-path-safe form.

    Args:
        windows: Apply Windows rules (separators, invalid characters, long
            path prefix). Defaults to the running platform.
        use_long_paths: Add the long-path prefix to resolved paths. Defaults
            to True on Windows, ignored elsewhere.

    """

    def __init__(self, *, windows: bool | None = None, use_long_paths: bool | None = None) -> None:
        self.windows = IS_WINDOWS if windows is None else windows
        self.use_long_paths = self.windows if use_long_paths is None else (use_long_paths and self.windows)
        self._pathmod = ntpath if self.windows else posixpath

    @property
    def separator(self) -> str:
        return self._pathmod.sep

    def resolve(self, path: str | os.PathLike[str]) -> str:
        """Resolve a path to its absolute, long-path-safe form.

        Trailing separators are removed (except on a root).

        Args:
            path: Path to resolve

        Returns:
            Absolute path, prefixed for long-path use where applicable

        Raises:
            InvalidPathError: If path is empty, whitespace-only or contains
                characters the platform rejects.

        """
        try:
            raw = os.fspath(path)
        except TypeError as e:
            raise InvalidPathError(f"Path must be str or os.PathLike, got {type(path).__name__}") from e

        if not isinstance(raw, str):
            raise InvalidPathError(f"Path must be a text path, got {type(raw).__name__}", path=repr(raw))
        if not raw.strip():
            raise InvalidPathError("Path must not be empty", path=raw)
        if "\x00" in raw:
            raise InvalidPathError("Path contains a null character", path=raw)

        regular = self.get_regular_path(raw)
        if self.windows:
            self._check_windows_characters(regular, original=raw)

        absolute = self._pathmod.normpath(self._pathmod.abspath(regular))
        absolute = self.remove_trailing_separator(absolute)

        if self.use_long_paths:
            return self.get_long_path(absolute)
        return absolute

    def get_long_path(self, path: str) -> str:
        """Add the long-path prefix to an absolute Windows path."""
        if not self.windows or path.startswith(LONG_PATH_PREFIX):
            return path
        if path.startswith(UNC_PREFIX):
            return LONG_PATH_UNC_PREFIX + path[len(UNC_PREFIX) :]
        return LONG_PATH_PREFIX + path

    def get_regular_path(self, path: str) -> str:
        """Strip a long-path prefix, returning the regular form."""
        if path.startswith(LONG_PATH_UNC_PREFIX):
            return UNC_PREFIX + path[len(LONG_PATH_UNC_PREFIX) :]
        if path.startswith(LONG_PATH_PREFIX):
            return path[len(LONG_PATH_PREFIX) :]
        return path

    def remove_trailing_separator(self, path: str) -> str:
        """Remove trailing separators unless path is a root."""
        seps = self._separators()
        stripped = path.rstrip(seps)
        if not stripped:
            # "/" or "\\"
            return path[:1]
        if self.windows and stripped.endswith(":") and len(stripped) < len(path):
            # "C:\\" keeps its separator; "C:" alone means the drive's cwd
            return stripped + self.separator
        return stripped

    def add_trailing_separator(self, path: str) -> str:
        """Ensure path ends with exactly one separator."""
        if path.endswith(tuple(self._separators())):
            return path
        return path + self.separator

    def get_directory_name(self, path: str) -> str:
        """Return the parent directory of path."""
        return self._pathmod.dirname(path)

    def join_search_path(self, directory: str, pattern: str) -> str:
        """Build the search path handed to the native primitive."""
        return self.add_trailing_separator(directory) + pattern

    def _separators(self) -> str:
        if self.windows:
            return "\\/"
        return "/"

    def _check_windows_characters(self, path: str, *, original: str) -> None:
        _, tail = ntpath.splitdrive(path)
        bad = sorted({c for c in tail if c in _INVALID_WINDOWS_CHARS})
        if bad:
            raise InvalidPathError(f"Path contains invalid characters {bad!r}: {original}", path=original)
