"""Exceptions raised by storage backends."""


class ObjectStorageError(Exception):
    """Base exception for object storage operations."""
    pass


class ConfigError(ObjectStorageError, ValueError):
    """Invalid configuration or call argument, detected before any network call."""
    pass


class TransportError(ObjectStorageError):
    """Network, authentication or API failure while talking to a backend."""

    def __init__(self, operation: str, target: str, cause: BaseException | str):
        self.operation = operation
        self.target = target
        self.cause = cause
        super().__init__(f"{operation} {target!r} failed: {cause}")


class NotFoundError(TransportError):
    """The requested key does not exist."""
    pass
