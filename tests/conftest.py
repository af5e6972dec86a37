"""Shared fixtures and an in-memory S3 client for testing."""

import io
from dataclasses import dataclass, field
from unittest.mock import patch

import pytest

from objectstorage.config import SpacesConfig, SpacesOptions
from objectstorage.storage.s3 import ListPage, NoSuchKey, S3ClientError
from objectstorage.storage.spaces import SpacesStorage


@dataclass
class FakeS3Client:
    """In-memory stand-in for S3Client with a configurable page size."""

    page_size: int = 2
    objects: dict[str, bytes] = field(default_factory=dict)
    list_calls: int = 0
    fail_list_on_call: int | None = None
    fail_put: bool = False
    fail_get: bool = False

    def get_object(self, bucket: str, key: str) -> io.BytesIO:
        if self.fail_get:
            raise S3ClientError(f"GetObject {key} failed: 403 AccessDenied", status_code=403)
        if key not in self.objects:
            raise NoSuchKey(f"GetObject {key} failed: 404 NoSuchKey", status_code=404, code="NoSuchKey")
        return io.BytesIO(self.objects[key])

    def put_object(self, bucket: str, key: str, body: bytes) -> None:
        if self.fail_put:
            raise S3ClientError(f"PutObject {key} failed: 403 AccessDenied", status_code=403)
        self.objects[key] = bytes(body)

    def list_objects_v2(
        self, bucket: str, prefix: str = "", continuation_token: str | None = None
    ) -> ListPage:
        self.list_calls += 1
        if self.fail_list_on_call is not None and self.list_calls >= self.fail_list_on_call:
            raise S3ClientError("ListObjectsV2 failed: 503 SlowDown", status_code=503)

        keys = sorted(k for k in self.objects if k.startswith(prefix))
        start = int(continuation_token) if continuation_token else 0
        end = start + self.page_size
        truncated = end < len(keys)
        return ListPage(
            keys=keys[start:end],
            is_truncated=truncated,
            next_continuation_token=str(end) if truncated else None,
        )


@pytest.fixture
def spaces_config():
    return SpacesConfig(region="nyc3", bucket="test-bucket", auth_key="key", auth_secret="secret")


@pytest.fixture
def fake_s3():
    return FakeS3Client()


@pytest.fixture
def build_client(fake_s3):
    """Patch client construction so SpacesStorage talks to fake_s3."""
    with patch.object(SpacesStorage, "_build_client", return_value=fake_s3) as mock_build:
        yield mock_build


@pytest.fixture
def storage(build_client, spaces_config):
    return SpacesStorage(spaces_config, SpacesOptions(use_path_style=True))
