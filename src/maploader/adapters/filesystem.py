"""Filesystem storage adapter: the on-disk cache directory layout."""

from __future__ import annotations

import logging
import os
import shutil

from maploader.errors import CacheReadFailed, CacheWriteFailed, PurgeFailed
from maploader.identifiers import descend_path

logger = logging.getLogger(__name__)


class FileSystemStore:
    """Cache files stored below a cache directory."""

    def __init__(self, cache_dir: str | os.PathLike[str]) -> None:
        self._cache_dir = os.fspath(cache_dir)

    @property
    def cache_dir(self) -> str:
        return self._cache_dir

    def _path(self, key: str) -> str:
        return descend_path(self._cache_dir, key)

    def read(self, key: str) -> str | None:
        try:
            with open(self._path(key), encoding="utf-8") as f:
                return f.read()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise CacheReadFailed(f"Cannot read file {self._path(key)}: {e}") from e

    def write(self, key: str, contents: str) -> None:
        path = self._path(key)
        try:
            os.makedirs(os.path.dirname(path), exist_ok=True)
        except OSError as e:
            raise CacheWriteFailed(f"Cannot create directory for {path}: {e}") from e
        try:
            with open(path, "w", encoding="utf-8") as f:
                f.write(contents)
        except OSError as e:
            raise CacheWriteFailed(f"Cannot write file {path}: {e}") from e

    def delete(self, key: str) -> None:
        path = self._path(key)
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            raise PurgeFailed(f"Cannot delete file {path}: {e}") from e

    def exists(self, key: str) -> bool:
        return os.path.isfile(self._path(key))

    def local_path(self, key: str) -> str | None:
        return self._path(key)

    def clear(self) -> None:
        """Remove the whole cache directory."""
        if not os.path.exists(self._cache_dir):
            return
        try:
            shutil.rmtree(self._cache_dir)
        except OSError as e:
            raise PurgeFailed(f"Cannot delete directory {self._cache_dir}: {e}") from e
        logger.debug(f"[cache:clear] removed {self._cache_dir}")
