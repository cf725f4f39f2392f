"""Storage backend registry.

Maintains a catalog of storage backends keyed by name, each with a factory
that builds a Storage from string options. Fail-closed on unknown backends and
on duplicate registrations.

Backends register themselves when their module is imported:

    from swiftstore.storage import registry

    registry.register("OpenStack", new)

and generic code selects one by name at runtime:

    store = registry.dial(
        "OpenStack",
        registry.with_key_value("openstackContainer", "blocks"),
        registry.with_options("openstackRegion=WAW1"),
    )
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from swiftstore.storage.errors import (
    BackendNotRegisteredError,
    DuplicateBackendError,
    InvalidConfigError,
)

if TYPE_CHECKING:
    from swiftstore.storage.object_store import Storage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Opts:
    """Options handed to a backend factory.

    Attributes:
        opts: Read-only mapping of option names to string values.
    """

    opts: Mapping[str, str] = field(default_factory=dict)

    def get(self, key: str, default: str | None = None) -> str | None:
        return self.opts.get(key, default)

    def __contains__(self, key: object) -> bool:
        return key in self.opts


DialOpt = Callable[[dict[str, str]], None]
StorageFactory = Callable[[Opts], "Storage"]


def with_key_value(key: str, value: str) -> DialOpt:
    """Return a dial option that sets a single key/value option."""

    def apply(opts: dict[str, str]) -> None:
        opts[key] = value

    return apply


def with_options(options: str) -> DialOpt:
    """Return a dial option that sets every pair in a "k1=v1,k2=v2" string.

    Raises:
        InvalidConfigError: If a pair is not of the form key=value.
    """
    pairs: dict[str, str] = {}
    for raw in options.split(","):
        pair = raw.strip()
        if not pair:
            continue
        key, sep, value = pair.partition("=")
        key = key.strip()
        if not sep or not key:
            raise InvalidConfigError(
                f"malformed option {pair!r}, want key=value",
                op="storage.with_options",
            )
        pairs[key] = value.strip()

    def apply(opts: dict[str, str]) -> None:
        opts.update(pairs)

    return apply


@dataclass
class StorageRegistry:
    """Registry of storage backend factories.

    Provides lookup by backend name. Fail-closed: unknown names raise
    BackendNotRegisteredError rather than falling back to a default backend.
    """

    _factories: dict[str, StorageFactory] = field(default_factory=dict)

    def register(self, name: str, factory: StorageFactory) -> None:
        """Register a backend factory under name.

        Raises:
            DuplicateBackendError: If a backend with the same name is already registered.
        """
        if name in self._factories:
            raise DuplicateBackendError(name)
        self._factories[name] = factory
        logger.info("Registered storage backend: %s", name)

    def dial(self, name: str, *dial_opts: DialOpt) -> Storage:
        """Build a Storage for the named backend.

        Args:
            name: Registered backend name.
            *dial_opts: Options produced by with_key_value / with_options,
                applied in order (later options override earlier ones).

        Raises:
            BackendNotRegisteredError: If name is not registered.
            StorageError: Whatever the backend factory raises on construction.
        """
        factory = self._factories.get(name)
        if factory is None:
            raise BackendNotRegisteredError(name)

        collected: dict[str, str] = {}
        for apply in dial_opts:
            apply(collected)

        logger.debug("Dialing storage backend %s with options %s", name, sorted(collected))
        return factory(Opts(opts=MappingProxyType(collected)))

    @property
    def names(self) -> frozenset[str]:
        """Return the set of registered backend names."""
        return frozenset(self._factories.keys())


_default_registry = StorageRegistry()


def register(name: str, factory: StorageFactory) -> None:
    """Register a backend factory in the default registry."""
    _default_registry.register(name, factory)


def dial(name: str, *dial_opts: DialOpt) -> Storage:
    """Dial a backend from the default registry."""
    return _default_registry.dial(name, *dial_opts)


def registered_backends() -> frozenset[str]:
    """Return the names registered in the default registry."""
    return _default_registry.names
