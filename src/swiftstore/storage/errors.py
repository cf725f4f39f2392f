"""swiftstore storage error types.

Every failure surfaced by a storage backend is a StorageError tagged with the
operation that failed and one error Kind. Subclasses exist per kind so callers
can catch either by class or by inspecting ``kind``.
"""

from __future__ import annotations

from enum import Enum


class Kind(str, Enum):
    """Classification of a storage failure."""

    INVALID = "invalid"
    PERMISSION = "permission"
    NOT_EXIST = "not_exist"
    IO = "io"
    INTERNAL = "internal"
    NOT_SUPPORTED = "not_supported"


class StorageError(Exception):
    """Base exception for storage operations.

    Attributes:
        op: Operation tag, e.g. "storage.openstack.download".
        kind: Error classification.
        message: Human-readable error message.
        ref: Object reference associated with the operation (if applicable).
        container: Container associated with the operation (if applicable).
        cause: Underlying exception (if any).
    """

    default_kind: Kind = Kind.IO

    def __init__(
        self,
        message: str,
        *,
        op: str = "",
        kind: Kind | None = None,
        ref: str | None = None,
        container: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.op = op
        self.kind = kind if kind is not None else self.default_kind
        self.ref = ref
        self.container = container
        self.cause = cause

    def __str__(self) -> str:
        parts = []
        if self.op:
            parts.append(f"{self.op}:")
        parts.append(f"{self.kind.value}:")
        parts.append(self.message)
        if self.ref is not None:
            parts.append(f"ref={self.ref!r}")
        if self.container is not None:
            parts.append(f"container={self.container!r}")
        return " ".join(parts)


class InvalidConfigError(StorageError):
    """Raised for missing or malformed configuration, or an unusable endpoint."""

    default_kind = Kind.INVALID


class PermissionDeniedError(StorageError):
    """Raised when the backend rejects the supplied credentials."""

    default_kind = Kind.PERMISSION


class ObjectNotFoundError(StorageError):
    """Raised when an object does not exist.

    Callers should treat this as a normal, recoverable condition.
    """

    default_kind = Kind.NOT_EXIST


class StorageIOError(StorageError):
    """Raised when a transport or service failure prevents an operation."""

    default_kind = Kind.IO


class InternalStorageError(StorageError):
    """Raised when backend state (e.g. container metadata) cannot be read."""

    default_kind = Kind.INTERNAL


class NotSupportedError(StorageError):
    """Raised when the backend does not support the requested capability."""

    default_kind = Kind.NOT_SUPPORTED


class BackendNotRegisteredError(Exception):
    """Raised when a requested storage backend is not in the registry."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Storage backend not registered: {name}")


class DuplicateBackendError(Exception):
    """Raised when attempting to register a backend name that already exists."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Storage backend already registered: {name}")


def is_not_exist(err: BaseException) -> bool:
    """Return True if err reports a missing object."""
    return isinstance(err, StorageError) and err.kind is Kind.NOT_EXIST
