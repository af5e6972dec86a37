"""Tests for the local filesystem backend."""

import io

import pytest

from objectstorage.errors import ConfigError, NotFoundError
from objectstorage.storage import local
from objectstorage.storage.base import ListOpts, ObjectStorage
from objectstorage.storage.local import LocalStorage


@pytest.fixture
def storage(tmp_path):
    return LocalStorage(tmp_path / "root")


def test_conforms_to_protocol(storage):
    assert isinstance(storage, ObjectStorage)


def test_round_trip(storage):
    payload = b"\x00\x01binary\xff" * 100
    storage.upload("logs/2024/a.bin", io.BytesIO(payload))

    with storage.download("logs/2024/a.bin") as f:
        assert f.read() == payload


def test_upload_overwrites(storage):
    storage.upload("a", io.BytesIO(b"first"))
    storage.upload("a", io.BytesIO(b"second"))

    with storage.download("a") as f:
        assert f.read() == b"second"


def test_download_missing_raises_not_found(storage):
    with pytest.raises(NotFoundError):
        storage.download("nope")


def test_key_outside_root_rejected(storage):
    with pytest.raises(ConfigError):
        storage.upload("../escape", io.BytesIO(b"x"))


def test_list_filters_by_prefix(storage):
    for key in ["logs/a", "logs/b", "logs/c", "tmp/x", "logsheet"]:
        storage.upload(key, io.BytesIO(b"x"))

    assert storage.list_keys("logs/") == ["logs/a", "logs/b", "logs/c"]
    assert storage.list_keys("logs") == ["logs/a", "logs/b", "logs/c", "logsheet"]
    assert len(storage.list_keys("logs/", ListOpts(limit=2))) == 2
    assert "tmp/x" not in storage.list_keys("logs/", ListOpts(limit=2))


def test_list_with_partial_name_prefix(storage):
    for key in ["logs/app-1", "logs/app-2", "logs/db-1"]:
        storage.upload(key, io.BytesIO(b"x"))

    assert storage.list_keys("logs/app") == ["logs/app-1", "logs/app-2"]


def test_list_empty_storage(storage):
    assert storage.list_keys("anything/") == []


def test_list_negative_limit_rejected(storage):
    with pytest.raises(ConfigError):
        storage.list_keys("", ListOpts(limit=-1))


def test_list_spans_pages(storage, monkeypatch):
    monkeypatch.setattr(local, "LIST_PAGE_SIZE", 2)
    keys = [f"k/{i:02d}" for i in range(5)]
    for key in keys:
        storage.upload(key, io.BytesIO(b"x"))

    assert storage.list_keys("k/") == keys
    assert storage.list_keys("k/", ListOpts(limit=3)) == keys[:3]
