"""DigitalOcean Spaces storage backend.

Spaces speaks the S3 API, so the backend drives an S3Client pointed at the
regional Spaces endpoint. A SpacesStorage is only handed to the caller once
a one-key listing against the bucket has succeeded.
"""

import logging
from enum import Enum
from typing import BinaryIO, Iterator

from objectstorage.config import SpacesConfig, SpacesOptions
from objectstorage.errors import NotFoundError, TransportError
from objectstorage.storage.base import ListOpts, check_key, check_limit, collect_keys
from objectstorage.storage.s3 import (
    ListObjectsV2Paginator,
    NoSuchKey,
    S3Client,
    S3ClientError,
    StreamingBody,
)
from objectstorage.utils import format_size

logger = logging.getLogger(__name__)

SPACES_ENDPOINT = "https://{region}.digitaloceanspaces.com"


class ConnectionState(Enum):
    """Construction progress of a SpacesStorage."""

    UNVALIDATED = "unvalidated"
    CONFIGURED = "configured"
    PROBED = "probed"
    READY = "ready"
    FAILED = "failed"


class SpacesStorage:
    """Storage backend for DigitalOcean Spaces (https://www.digitalocean.com/products/spaces)."""

    def __init__(self, config: SpacesConfig, opts: SpacesOptions | None = None):
        self.state = ConnectionState.UNVALIDATED
        opts = opts or SpacesOptions()
        try:
            config.validate()
            self.region = config.region
            self.bucket = config.bucket
            self._client = self._build_client(config, opts)
            self._transition(ConnectionState.CONFIGURED)

            self._test_connection()
            self._transition(ConnectionState.PROBED)
        except Exception:
            self._transition(ConnectionState.FAILED)
            raise

        self.name = f"Spaces bucket '{self.bucket}' in {self.region}"
        self._transition(ConnectionState.READY)

    @staticmethod
    def _build_client(config: SpacesConfig, opts: SpacesOptions) -> S3Client:
        """Create the S3 client. No I/O happens here."""
        return S3Client(
            endpoint_url=SPACES_ENDPOINT.format(region=config.region),
            region=config.region,
            access_key=config.auth_key,
            secret_key=config.auth_secret,
            use_path_style=opts.use_path_style,
            timeout=opts.timeout,
            max_retries=opts.max_retries,
        )

    def _transition(self, state: ConnectionState) -> None:
        logger.debug("Spaces backend %s -> %s", self.state.value, state.value)
        self.state = state

    def _test_connection(self) -> None:
        """Probe the bucket with a one-key listing."""
        logger.debug("Probing Spaces bucket '%s' in %s", self.bucket, self.region)
        self.list_keys("", ListOpts(limit=1))

    def download(self, key: str) -> StreamingBody:
        """Open an object for reading. Close the returned body when done."""
        check_key("download", key)
        try:
            return self._client.get_object(self.bucket, key)
        except NoSuchKey as e:
            raise NotFoundError("download", key, e) from e
        except S3ClientError as e:
            logger.warning("Download of %s from %s failed: %s", key, self.bucket, e)
            raise TransportError("download", key, e) from e

    def upload(self, key: str, data: BinaryIO) -> None:
        """Upload an object, replacing any existing object at key."""
        check_key("upload", key)
        content = data.read()
        try:
            self._client.put_object(self.bucket, key, content)
        except S3ClientError as e:
            logger.warning("Upload of %s to %s failed: %s", key, self.bucket, e)
            raise TransportError("upload", key, e) from e
        logger.debug("Uploaded %s (%s) to %s", key, format_size(len(content)), self.bucket)

    def list_keys(self, prefix: str = "", opts: ListOpts | None = None) -> list[str]:
        """List keys with the given prefix, stopping as soon as opts.limit keys are held."""
        limit = check_limit(opts)
        paginator = ListObjectsV2Paginator(self._client, self.bucket, prefix)
        try:
            return collect_keys(self._pages(paginator), limit)
        except S3ClientError as e:
            logger.warning("Listing %s in %s failed: %s", prefix, self.bucket, e)
            raise TransportError("list", prefix, e) from e

    @staticmethod
    def _pages(paginator: ListObjectsV2Paginator) -> Iterator[list[str]]:
        while paginator.has_more_pages:
            yield paginator.next_page().keys
