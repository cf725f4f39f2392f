"""Pytest configuration and fixtures for swiftstore tests.

This module provides common fixtures and configuration for all tests.
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from swiftstore.storage.openstack.store import SwiftObjectStore
from swiftstore.storage.tracing import SWIFTSTORE_OTEL_ENABLED_ENV
from tests.fixtures import TEST_CONTAINER, FakeContainer, FakeSwift, FakeTokens, make_store


@pytest.fixture(autouse=True)
def disable_tracing(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep tracing off unless a test turns it on explicitly."""
    monkeypatch.delenv(SWIFTSTORE_OTEL_ENABLED_ENV, raising=False)


@pytest.fixture
def swift() -> FakeSwift:
    """Return a fake Swift account holding one private, empty container."""
    return FakeSwift(containers={TEST_CONTAINER: FakeContainer()})


@pytest.fixture
def tokens(swift: FakeSwift) -> FakeTokens:
    return FakeTokens(swift)


@pytest.fixture
def store(swift: FakeSwift, tokens: FakeTokens) -> Iterator[SwiftObjectStore]:
    """Return a store for the private test container."""
    with make_store(swift, tokens) as s:
        yield s
