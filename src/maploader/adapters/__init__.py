"""Cache storage adapters for maploader."""

from contextlib import suppress

from maploader.adapters.base import CacheStore
from maploader.adapters.filesystem import FileSystemStore
from maploader.adapters.memory import MemoryStore

# Optional adapters - only available when dependencies are installed
with suppress(ImportError):
    from maploader.adapters.redis import RedisStore

__all__ = [
    "CacheStore",
    "FileSystemStore",
    "MemoryStore",
    "RedisStore",
]
