"""OpenStack Object Storage (Swift) backend.

Importing this package registers the backend under the name "OpenStack" in
the default storage registry.
"""

from swiftstore.storage.openstack.options import REQUIRED_OPTIONS, SwiftOptions
from swiftstore.storage.openstack.store import (
    CONTAINER_PUBLIC_ACL,
    STORAGE_NAME,
    SwiftObjectStore,
    new,
)

__all__ = [
    "CONTAINER_PUBLIC_ACL",
    "REQUIRED_OPTIONS",
    "STORAGE_NAME",
    "SwiftObjectStore",
    "SwiftOptions",
    "new",
]
