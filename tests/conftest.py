"""Shared pytest fixtures."""

import sys
from pathlib import Path

import pytest

from maploader import FileSystemStore, MemoryStore, RegistryFileLoader, VirtualSourceRegistry


@pytest.fixture(autouse=True)
def isolated_modules():
    """Drop fixture modules (named mlfix*) and restore the import hooks afterwards."""
    meta_path_before = list(sys.meta_path)
    yield
    for name in [name for name in sys.modules if name.startswith("mlfix")]:
        del sys.modules[name]
    sys.meta_path[:] = meta_path_before


@pytest.fixture
def registry() -> VirtualSourceRegistry:
    """Create a fresh VirtualSourceRegistry for each test."""
    return VirtualSourceRegistry()


@pytest.fixture
def file_loader(registry: VirtualSourceRegistry) -> RegistryFileLoader:
    """Create a mapping-enabled file loader on the test registry."""
    return RegistryFileLoader(registry, enable_mapping=True)


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    return tmp_path / "cache"


@pytest.fixture
def fs_store(cache_dir: Path) -> FileSystemStore:
    return FileSystemStore(cache_dir)


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()
