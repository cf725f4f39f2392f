"""Shared test fixtures for swiftstore tests."""

from tests.fixtures.fake_swift import (
    STORAGE_URL,
    TEST_CONTAINER,
    FakeContainer,
    FakeSwift,
    FakeTokens,
    make_store,
)

__all__ = [
    "STORAGE_URL",
    "TEST_CONTAINER",
    "FakeContainer",
    "FakeSwift",
    "FakeTokens",
    "make_store",
]
