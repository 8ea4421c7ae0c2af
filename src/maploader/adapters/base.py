"""Base protocol for cache storage backends."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class CacheStore(Protocol):
    """Storage for cache files, addressed by relative keys like "a/b/c.py"."""

    def read(self, key: str) -> str | None:
        """Return the file contents, or None if absent."""
        ...

    def write(self, key: str, contents: str) -> None:
        """Store file contents, creating parents as needed."""
        ...

    def delete(self, key: str) -> None:
        """Delete a file. Absent files are not an error."""
        ...

    def exists(self, key: str) -> bool:
        """Check whether a file is stored under `key`."""
        ...

    def local_path(self, key: str) -> str | None:
        """Return the real filesystem path for `key`, or None if not file-backed."""
        ...

    def clear(self) -> None:
        """Remove every stored file."""
        ...
