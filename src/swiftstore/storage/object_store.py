"""swiftstore storage interface definition.

Provides the Storage and Lister interfaces that all storage backends implement.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from swiftstore.storage.models import ListPage


class Storage(ABC):
    """Abstract base class for blob storage backends.

    A backend stores opaque byte blobs under string references in a single
    remote namespace (bucket, container). It keeps no local copy of any blob.

    Implementations:
    - SwiftObjectStore: OpenStack Object Storage (Swift)
    """

    @property
    @abstractmethod
    def backend_name(self) -> str:
        """Return the backend identifier used for registration and observability."""
        ...

    @abstractmethod
    def link_base(self) -> str:
        """Return a URL prefix under which any reference can be fetched directly.

        The URL for a reference is ``link_base() + ref`` when ref is URL-safe.
        Other references must be percent-encoded by the caller, for example
        with ``urllib.parse.quote(ref)``.

        Raises:
            NotSupportedError: If the backend's objects are not publicly readable.
            InternalStorageError: If the backend cannot determine its access policy.
        """
        ...

    @abstractmethod
    def download(self, ref: str) -> bytes:
        """Retrieve the full contents stored under ref.

        Raises:
            ObjectNotFoundError: If nothing is stored under ref.
            StorageIOError: If the backend cannot complete the read.
        """
        ...

    @abstractmethod
    def put(self, ref: str, contents: bytes) -> None:
        """Store contents under ref, replacing any existing blob.

        Raises:
            StorageIOError: If the backend cannot complete the write.
        """
        ...

    @abstractmethod
    def delete(self, ref: str) -> None:
        """Remove the blob stored under ref.

        Raises:
            ObjectNotFoundError: If nothing is stored under ref.
            StorageIOError: If the backend cannot complete the deletion.
        """
        ...


class Lister(ABC):
    """Backends that can enumerate their references one page at a time."""

    @abstractmethod
    def list(self, token: str = "") -> ListPage:
        """Return the next page of references.

        Args:
            token: Empty for the first page, otherwise the ``next_token`` of
                the previous page, passed back unchanged.

        Returns:
            ListPage whose ``next_token`` is empty once the listing is done.

        Raises:
            StorageIOError: If the backend cannot complete the listing.
        """
        ...
