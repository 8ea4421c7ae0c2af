"""In-memory storage adapter."""


class MemoryStore:
    """In-process cache store. Contents live until `clear()` or process exit."""

    def __init__(self) -> None:
        self._files: dict[str, str] = {}

    def read(self, key: str) -> str | None:
        return self._files.get(key)

    def write(self, key: str, contents: str) -> None:
        self._files[key] = contents

    def delete(self, key: str) -> None:
        self._files.pop(key, None)

    def exists(self, key: str) -> bool:
        return key in self._files

    def local_path(self, key: str) -> str | None:
        """Memory entries have no filesystem path."""
        return None

    def clear(self) -> None:
        self._files.clear()

    def keys(self) -> list[str]:
        return sorted(self._files)
