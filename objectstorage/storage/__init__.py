"""Storage backend implementations."""

from objectstorage.storage.base import ListOpts, ObjectStorage, collect_keys
from objectstorage.storage.local import LocalStorage
from objectstorage.storage.spaces import ConnectionState, SpacesStorage

__all__ = [
    "ConnectionState",
    "ListOpts",
    "LocalStorage",
    "ObjectStorage",
    "SpacesStorage",
    "collect_keys",
]
