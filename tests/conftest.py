"""Pytest configuration and fixtures for fsenum tests."""

from collections.abc import Callable
from typing import Any

import pytest

from fsenum.config import EnumerationOptions
from fsenum.core.engine import TraversalEngine
from fsenum.core.paths import PathResolver
from tests.fakes import FakeFinder, sample_tree


@pytest.fixture
def posix_resolver() -> PathResolver:
    """Resolver with POSIX rules regardless of the host platform."""
    return PathResolver(windows=False)


@pytest.fixture
def sample_finder() -> FakeFinder:
    """Fake finder over /r with a file, a subdirectory and a reparse point."""
    return FakeFinder(sample_tree())


@pytest.fixture
def make_engine(posix_resolver: PathResolver) -> Callable[..., TraversalEngine]:
    """Factory for engines over a fake finder with POSIX path rules."""

    def _make(finder: FakeFinder, path: str = "/r", **options: Any) -> TraversalEngine:
        is_directory = options.pop("is_directory", True)
        transaction = options.pop("transaction", None)
        return TraversalEngine(
            path,
            EnumerationOptions(**options),
            is_directory=is_directory,
            transaction=transaction,
            finder=finder,
            resolver=posix_resolver,
        )

    return _make
