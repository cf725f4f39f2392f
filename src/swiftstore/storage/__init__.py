"""swiftstore blob storage abstraction.

Provides a generic interface for storing opaque blobs under string references,
a registry that selects backends by name, and a typed error taxonomy.

Backends:
- OpenStack: OpenStack Object Storage / Swift (swiftstore.storage.openstack)

Backends register on import; generic code dials them by name:

    import swiftstore.storage.openstack  # registers "OpenStack"
    from swiftstore.storage import dial, with_key_value

    store = dial("OpenStack", with_key_value("openstackContainer", "blocks"), ...)
"""

from swiftstore.storage.errors import (
    BackendNotRegisteredError,
    DuplicateBackendError,
    InternalStorageError,
    InvalidConfigError,
    Kind,
    NotSupportedError,
    ObjectNotFoundError,
    PermissionDeniedError,
    StorageError,
    StorageIOError,
    is_not_exist,
)
from swiftstore.storage.models import ListPage, ListRefsItem
from swiftstore.storage.object_store import Lister, Storage
from swiftstore.storage.registry import (
    Opts,
    StorageRegistry,
    dial,
    register,
    registered_backends,
    with_key_value,
    with_options,
)

__all__ = [
    "BackendNotRegisteredError",
    "DuplicateBackendError",
    "InternalStorageError",
    "InvalidConfigError",
    "Kind",
    "ListPage",
    "ListRefsItem",
    "Lister",
    "NotSupportedError",
    "ObjectNotFoundError",
    "Opts",
    "PermissionDeniedError",
    "Storage",
    "StorageError",
    "StorageIOError",
    "StorageRegistry",
    "dial",
    "is_not_exist",
    "register",
    "registered_backends",
    "with_key_value",
    "with_options",
]
