"""Redis storage adapter, for sharing one cache between worker processes."""

from __future__ import annotations

from typing import Any

from redis.exceptions import RedisError

from maploader.errors import CacheReadFailed, CacheWriteFailed, PurgeFailed


class RedisStore:
    """Sync Redis cache store."""

    def __init__(
        self,
        client: Any,  # redis.Redis
        *,
        prefix: str = "maploader",
    ) -> None:
        self._client = client
        self._prefix = prefix

    def _cache_key(self, key: str) -> str:
        """Generate full Redis key for a cache file."""
        return f"{self._prefix}:cache:{key}"

    def read(self, key: str) -> str | None:
        try:
            data = self._client.get(self._cache_key(key))
        except RedisError as e:
            raise CacheReadFailed(f"Cannot read {key} from Redis: {e}") from e
        if data is None:
            return None
        if isinstance(data, bytes):
            data = data.decode("utf-8")
        return str(data)

    def write(self, key: str, contents: str) -> None:
        try:
            self._client.set(self._cache_key(key), contents.encode("utf-8"))
        except RedisError as e:
            raise CacheWriteFailed(f"Cannot write {key} to Redis: {e}") from e

    def delete(self, key: str) -> None:
        try:
            self._client.delete(self._cache_key(key))
        except RedisError as e:
            raise PurgeFailed(f"Cannot delete {key} from Redis: {e}") from e

    def exists(self, key: str) -> bool:
        try:
            return bool(self._client.exists(self._cache_key(key)))
        except RedisError as e:
            raise CacheReadFailed(f"Cannot check {key} in Redis: {e}") from e

    def local_path(self, key: str) -> str | None:
        return None

    def clear(self) -> None:
        """Delete every key under this store's prefix."""
        cursor = 0
        pattern = f"{self._prefix}:cache:*"
        try:
            while True:
                cursor, keys = self._client.scan(cursor, match=pattern, count=100)
                if keys:
                    self._client.delete(*keys)
                if cursor == 0:
                    break
        except RedisError as e:
            raise PurgeFailed(f"Cannot clear Redis cache {self._prefix}: {e}") from e

    def disconnect(self) -> None:
        """Close the Redis connection."""
        self._client.close()
