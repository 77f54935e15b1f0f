"""DOS-style wildcard matching for entry names.

Only ``*`` and ``?`` are special. ``?`` follows the legacy DOS rule and
matches zero or one character, so ``a?c`` accepts both ``abc`` and ``ac``.
Matching is anchored and case-insensitive.
"""

import re
from dataclasses import dataclass

from fsenum.core.types import WILDCARD_MATCH_ALL
from fsenum.exceptions import InvalidPatternError


def _translate(pattern: str) -> str:
    parts: list[str] = []
    for char in pattern:
        if char == "*":
            parts.append(".*")
        elif char == "?":
            parts.append(".?")
        else:
            parts.append(re.escape(char))
    return "".join(parts)


@dataclass(frozen=True)
class NameMatcher:
    """Compiled name predicate for a search pattern.

    Use ``NameMatcher.compile`` rather than constructing directly.

    Attributes:
        pattern: Original search pattern
        regex: Compiled expression, None when the pattern matches everything

    """

    pattern: str
    regex: re.Pattern[str] | None = None

    @classmethod
    def compile(cls, pattern: str | None) -> "NameMatcher":
        """Compile a wildcard search pattern.

        Args:
            pattern: Search pattern such as ``*``, ``*.txt`` or ``a?c``

        Returns:
            NameMatcher for the pattern. ``*`` yields a match-all matcher
            without building a regular expression.

        Raises:
            InvalidPatternError: If pattern is None, empty or whitespace-only.

        """
        if pattern is None or not pattern.strip():
            raise InvalidPatternError(f"Search pattern must not be empty: {pattern!r}")

        if pattern == WILDCARD_MATCH_ALL:
            return cls(pattern=pattern)

        return cls(pattern=pattern, regex=re.compile(_translate(pattern), re.IGNORECASE | re.DOTALL))

    @property
    def matches_all(self) -> bool:
        return self.regex is None

    def matches(self, name: str) -> bool:
        """Return True if name satisfies the pattern."""
        if self.regex is None:
            return True
        return self.regex.fullmatch(name) is not None

    __call__ = matches
