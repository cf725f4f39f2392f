"""OpenStack Object Storage (Swift) backend.

Stores blobs as objects in a single Swift container:
    <endpoint>/<container>/<ref>

Listing is paginated by the caller: each list() call fetches exactly one page
and returns the URL of the following page as the continuation token.
"""

from __future__ import annotations

import hashlib
import logging
from types import TracebackType
from typing import Any
from urllib.parse import quote

import httpx
from keystoneauth1 import exceptions as ks_exceptions

from swiftstore.storage import registry
from swiftstore.storage.errors import (
    InternalStorageError,
    Kind,
    NotSupportedError,
    ObjectNotFoundError,
    StorageError,
    StorageIOError,
)
from swiftstore.storage.models import ListPage, ListRefsItem
from swiftstore.storage.object_store import Lister, Storage
from swiftstore.storage.openstack.auth import KeystoneTokenAuth, authenticate, create_session
from swiftstore.storage.openstack.options import SwiftOptions
from swiftstore.storage.tracing import traced_storage_operation

logger = logging.getLogger(__name__)

STORAGE_NAME = "OpenStack"

# See https://docs.openstack.org/swift/latest/overview_acl.html
CONTAINER_PUBLIC_ACL = ".r:*"
CONTAINER_READ_HEADER = "X-Container-Read"

_OP_PREFIX = "storage.openstack"


def _quote_ref(ref: str) -> str:
    """Quote ref for use as an object path.

    Dot segments are percent-encoded so the URL is not normalized into a
    different object, container or the account itself.
    """
    segments = quote(ref, safe="/").split("/")
    return "/".join(s.replace(".", "%2E") if s in (".", "..") else s for s in segments)


class SwiftObjectStore(Storage, Lister):
    """Swift implementation of Storage and Lister.

    Holds a long-lived authenticated httpx.Client and a fixed container name.
    Operations share no mutable state, so one instance may serve concurrent
    callers.
    """

    def __init__(self, client: httpx.Client, storage_url: str, container: str) -> None:
        """Initialize the store.

        Args:
            client: HTTP client that authenticates every request
                (see KeystoneTokenAuth).
            storage_url: Object-store endpoint of the account, e.g.
                "https://storage.example.net/v1/AUTH_1234".
            container: Name of the container holding the blobs.
        """
        self._client = client
        self._storage_url = storage_url.rstrip("/")
        self._container = container
        self._container_url = f"{self._storage_url}/{quote(container, safe='')}"

    @property
    def backend_name(self) -> str:
        return STORAGE_NAME

    @property
    def container(self) -> str:
        return self._container

    def _object_url(self, ref: str, op: str) -> str:
        if not ref:
            raise StorageError(
                "empty reference", op=op, kind=Kind.INVALID, ref=ref, container=self._container
            )
        return f"{self._container_url}/{_quote_ref(ref)}"

    def _request(
        self,
        method: str,
        url: str | httpx.URL,
        *,
        op: str,
        ref: str | None = None,
        error_cls: type[StorageError] = StorageIOError,
        **kwargs: Any,
    ) -> httpx.Response:
        """Issue one request, wrapping transport failures in error_cls."""
        logger.debug("%s %s", method, op)
        try:
            return self._client.request(method, url, **kwargs)
        except (httpx.HTTPError, ks_exceptions.ClientException) as e:
            raise error_cls(
                f"request failed: {e}",
                op=op,
                ref=ref,
                container=self._container,
                cause=e,
            ) from e

    @traced_storage_operation("link_base")
    def link_base(self) -> str:
        """Return the public URL prefix of the container.

        Only containers whose read ACL grants anonymous read (``.r:*``) are
        linkable.
        The prefix is URL-encoded; append refs percent-encoded as well.

        Raises:
            InternalStorageError: If the container metadata cannot be read.
            NotSupportedError: If the container is not publicly readable.
        """
        op = f"{_OP_PREFIX}.link_base"

        response = self._request("HEAD", self._container_url, op=op, error_cls=InternalStorageError)
        if response.is_error:
            raise InternalStorageError(
                f"unable to read container metadata: HTTP {response.status_code}",
                op=op,
                container=self._container,
            )

        acls = [
            acl.strip() for acl in response.headers.get(CONTAINER_READ_HEADER, "").split(",")
        ]
        if CONTAINER_PUBLIC_ACL in acls:
            return self._container_url + "/"

        raise NotSupportedError(
            "container is not publicly readable", op=op, container=self._container
        )

    @traced_storage_operation("download")
    def download(self, ref: str) -> bytes:
        op = f"{_OP_PREFIX}.download"

        response = self._request("GET", self._object_url(ref, op), op=op, ref=ref)
        if response.status_code == 404:
            raise ObjectNotFoundError(
                "object not found", op=op, ref=ref, container=self._container
            )
        if response.is_error:
            raise StorageIOError(
                f"unable to download: HTTP {response.status_code}",
                op=op,
                ref=ref,
                container=self._container,
            )
        return response.content

    @traced_storage_operation("put")
    def put(self, ref: str, contents: bytes) -> None:
        op = f"{_OP_PREFIX}.put"

        headers = {
            "Content-Type": "application/octet-stream",
            # Swift rejects the upload with 422 if the stored bytes differ.
            "ETag": hashlib.md5(contents, usedforsecurity=False).hexdigest(),
        }
        response = self._request(
            "PUT", self._object_url(ref, op), op=op, ref=ref, content=contents, headers=headers
        )
        if response.is_error:
            raise StorageIOError(
                f"unable to upload: HTTP {response.status_code}",
                op=op,
                ref=ref,
                container=self._container,
            )
        logger.debug("Stored %d bytes in container %s", len(contents), self._container)

    @traced_storage_operation("delete")
    def delete(self, ref: str) -> None:
        """Delete the object stored under ref.

        Raises:
            ObjectNotFoundError: If the service reports no such object.
            StorageIOError: On any other failure.
        """
        op = f"{_OP_PREFIX}.delete"

        response = self._request("DELETE", self._object_url(ref, op), op=op, ref=ref)
        if response.status_code == 404:
            raise ObjectNotFoundError(
                "object not found", op=op, ref=ref, container=self._container
            )
        if response.is_error:
            raise StorageIOError(
                f"unable to delete: HTTP {response.status_code}",
                op=op,
                ref=ref,
                container=self._container,
            )

    def _page_url(self, token: str, page_size: int | None) -> httpx.URL:
        if not token:
            params: dict[str, str | int] = {"format": "json"}
            if page_size:
                params["limit"] = page_size
            return httpx.URL(self._container_url, params=params)

        base = httpx.URL(self._container_url)
        try:
            url = httpx.URL(token)
        except httpx.InvalidURL as e:
            raise StorageError(
                f"malformed continuation token: {e}",
                op=f"{_OP_PREFIX}.list",
                kind=Kind.INVALID,
                container=self._container,
                cause=e,
            ) from e
        # The token carries our auth header to wherever it points.
        if (url.scheme, url.host, url.port, url.path) != (
            base.scheme,
            base.host,
            base.port,
            base.path,
        ):
            raise StorageError(
                "continuation token does not belong to this container",
                op=f"{_OP_PREFIX}.list",
                kind=Kind.INVALID,
                container=self._container,
            )
        return url

    @traced_storage_operation("list")
    def list(self, token: str = "", *, page_size: int | None = None) -> ListPage:
        """Fetch one page of the container listing.

        Args:
            token: Empty for the first page, else the previous page's next_token.
            page_size: Optional page size hint used for the first page. Later
                pages keep the size encoded in the token. When omitted the
                service default applies.

        Returns:
            ListPage of (ref, size) items. Its next_token is the URL of the
            following page, or empty once a page comes back empty.
        """
        op = f"{_OP_PREFIX}.list"
        if page_size is not None and page_size < 0:
            raise ValueError(f"page_size must be non-negative, got {page_size}")

        url = self._page_url(token, page_size)
        response = self._request("GET", url, op=op)
        if response.is_error:
            raise StorageIOError(
                f"unable to list: HTTP {response.status_code}",
                op=op,
                container=self._container,
            )

        if response.status_code == 204 or not response.content.strip():
            return ListPage(refs=[], next_token="")

        try:
            refs = [
                ListRefsItem(ref=str(entry["name"]), size=int(entry["bytes"]))
                for entry in response.json()
            ]
        except (ValueError, KeyError, TypeError) as e:
            raise StorageIOError(
                f"malformed listing: {e}", op=op, container=self._container, cause=e
            ) from e

        if not refs:
            return ListPage(refs=[], next_token="")

        # Stop after this page; the caller drives further pagination.
        next_token = str(url.copy_set_param("marker", refs[-1].ref))
        return ListPage(refs=refs, next_token=next_token)

    def create_container(self, *, public_read: bool = False) -> None:
        """Create the container, optionally readable by anyone.

        Creating an existing container updates its read ACL.
        """
        op = f"{_OP_PREFIX}.create_container"

        headers = {CONTAINER_READ_HEADER: CONTAINER_PUBLIC_ACL} if public_read else {}
        response = self._request("PUT", self._container_url, op=op, headers=headers)
        if response.is_error:
            raise StorageIOError(
                f"unable to create container: HTTP {response.status_code}",
                op=op,
                container=self._container,
            )
        logger.info("Created container %s (public_read=%s)", self._container, public_read)

    def delete_container(self) -> None:
        """Delete the container. The service refuses if it still holds objects."""
        op = f"{_OP_PREFIX}.delete_container"

        response = self._request("DELETE", self._container_url, op=op)
        if response.is_error:
            raise StorageIOError(
                f"unable to delete container: HTTP {response.status_code}",
                op=op,
                container=self._container,
            )
        logger.info("Deleted container %s", self._container)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> SwiftObjectStore:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


def new(opts: registry.Opts) -> SwiftObjectStore:
    """Create a SwiftObjectStore from dial options.

    Raises:
        InvalidConfigError: If options are missing/malformed or the region has
            no object-store endpoint.
        PermissionDeniedError: If Keystone rejects the credentials.
    """
    options = SwiftOptions.from_opts(opts)
    logger.debug("Creating OpenStack storage: %r", options)

    session = create_session(options)
    storage_url = authenticate(session, options)

    client = httpx.Client(
        auth=KeystoneTokenAuth(session, allow_reauth=options.allow_reauth),
        timeout=None,
    )

    logger.info(
        "OpenStack storage ready: region=%s container=%s", options.region, options.container
    )
    return SwiftObjectStore(client, storage_url, options.container)


# A second registration under the same name raises, so the application
# does not start with two backends competing for one name.
registry.register(STORAGE_NAME, new)
