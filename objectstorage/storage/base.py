"""Storage backend protocol definition."""

from dataclasses import dataclass
from typing import BinaryIO, Iterable, Protocol, runtime_checkable

from objectstorage.errors import ConfigError


@dataclass(frozen=True)
class ListOpts:
    """Options for list_keys. A limit of 0 means no limit."""

    limit: int = 0


@runtime_checkable
class ObjectStorage(Protocol):
    """Protocol for object storage backends (S3-compatible or local filesystem)."""

    name: str

    def download(self, key: str) -> BinaryIO:
        """Open the object stored at key for reading.

        The caller owns the returned stream and must close it, e.g. by using
        it as a context manager.
        """
        ...

    def upload(self, key: str, data: BinaryIO) -> None:
        """Read data to exhaustion and store it at key, replacing any existing object."""
        ...

    def list_keys(self, prefix: str = "", opts: ListOpts | None = None) -> list[str]:
        """List keys starting with prefix, in backend order, capped by opts.limit."""
        ...


def check_key(operation: str, key: str) -> None:
    """Reject empty keys."""
    if not key:
        raise ConfigError(f"{operation}: key must not be empty")


def check_limit(opts: ListOpts | None) -> int:
    """Return the effective limit, rejecting negative values."""
    limit = opts.limit if opts is not None else 0
    if limit < 0:
        raise ConfigError(f"opts.limit must be equal to or greater than 0, got {limit}")
    return limit


def collect_keys(pages: Iterable[list[str]], limit: int = 0) -> list[str]:
    """Accumulate keys from a lazy sequence of pages.

    Pages are pulled one at a time. Once `limit` keys are held (limit > 0)
    no further page is requested, and the page that satisfied the limit is
    truncated. With limit == 0 every page is consumed.
    """
    keys: list[str] = []
    for page in pages:
        if limit:
            keys.extend(page[: limit - len(keys)])
            if len(keys) >= limit:
                break
        else:
            keys.extend(page)
    return keys
