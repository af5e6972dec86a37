"""Local filesystem storage backend."""

import shutil
from pathlib import Path
from typing import BinaryIO, Iterator

from objectstorage.errors import ConfigError, NotFoundError, TransportError
from objectstorage.storage.base import ListOpts, check_key, check_limit, collect_keys

LIST_PAGE_SIZE = 1000


class LocalStorage:
    """Storage backend using local filesystem."""

    def __init__(self, base_path: str | Path):
        self.base_path = Path(base_path)
        self.base_path.mkdir(parents=True, exist_ok=True)
        self.base_path = self.base_path.resolve()
        self.name = f"local filesystem ({self.base_path})"

    def _resolve(self, key: str) -> Path:
        """Resolve a key to a full path inside base_path."""
        path = (self.base_path / key).resolve()
        if not path.is_relative_to(self.base_path):
            raise ConfigError(f"key escapes storage root: {key!r}")
        return path

    def download(self, key: str) -> BinaryIO:
        """Open a file for reading."""
        check_key("download", key)
        path = self._resolve(key)
        try:
            return path.open("rb")
        except (FileNotFoundError, IsADirectoryError) as e:
            raise NotFoundError("download", key, e) from e
        except OSError as e:
            raise TransportError("download", key, e) from e

    def upload(self, key: str, data: BinaryIO) -> None:
        """Write data to a file, replacing it if present."""
        check_key("upload", key)
        path = self._resolve(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("wb") as f:
                shutil.copyfileobj(data, f)
        except OSError as e:
            raise TransportError("upload", key, e) from e

    def list_keys(self, prefix: str = "", opts: ListOpts | None = None) -> list[str]:
        """List all files whose key starts with prefix, in key order."""
        limit = check_limit(opts)
        try:
            return collect_keys(self._pages(prefix), limit)
        except OSError as e:
            raise TransportError("list", prefix, e) from e

    def _pages(self, prefix: str) -> Iterator[list[str]]:
        # Only walk the directory that can hold matching keys
        directory = prefix.rpartition("/")[0]
        search_path = self._resolve(directory) if directory else self.base_path
        if not search_path.is_dir():
            return

        keys = sorted(
            path.relative_to(self.base_path).as_posix()
            for path in search_path.rglob("*")
            if path.is_file()
        )
        keys = [key for key in keys if key.startswith(prefix)]
        for start in range(0, len(keys), LIST_PAGE_SIZE):
            yield keys[start:start + LIST_PAGE_SIZE]
