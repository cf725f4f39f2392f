"""swiftstore - blob storage in OpenStack Object Storage containers."""

__version__ = "0.1.0"
