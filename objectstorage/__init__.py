"""Backend-agnostic object storage with a DigitalOcean Spaces backend."""

from objectstorage.config import ProviderConfig, SpacesConfig, SpacesOptions
from objectstorage.errors import ConfigError, NotFoundError, ObjectStorageError, TransportError
from objectstorage.providers import get_storage
from objectstorage.storage import (
    ConnectionState,
    ListOpts,
    LocalStorage,
    ObjectStorage,
    SpacesStorage,
)

__all__ = [
    "ConfigError",
    "ConnectionState",
    "ListOpts",
    "LocalStorage",
    "NotFoundError",
    "ObjectStorage",
    "ObjectStorageError",
    "ProviderConfig",
    "SpacesConfig",
    "SpacesOptions",
    "SpacesStorage",
    "TransportError",
    "get_storage",
]
