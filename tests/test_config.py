"""Tests for loader configuration."""

import pytest

from maploader import CacheNotConfigured, LoaderConfig, MappingLoader, MemoryStore


class TestLoaderConfig:
    def test_defaults(self) -> None:
        config = LoaderConfig()
        assert not config.enable_caching
        assert config.cache_dir is None
        assert not config.enable_mapping

    def test_from_mapping_camel_case(self) -> None:
        config = LoaderConfig.from_mapping(
            {"enableCaching": True, "cacheDir": "/tmp/c", "enableMapping": True}
        )
        assert config == LoaderConfig(True, "/tmp/c", True)

    def test_from_mapping_snake_case(self, tmp_path) -> None:
        config = LoaderConfig.from_mapping({"enable_caching": "yes", "cache_dir": tmp_path})
        assert config.enable_caching
        assert config.cache_dir == str(tmp_path)
        assert not config.enable_mapping

    def test_from_env(self) -> None:
        config = LoaderConfig.from_env(
            {
                "MAPLOADER_ENABLE_CACHING": "1",
                "MAPLOADER_CACHE_DIR": "/var/cache/maploader",
                "MAPLOADER_ENABLE_MAPPING": "false",
            }
        )
        assert config == LoaderConfig(True, "/var/cache/maploader", False)

    def test_from_env_empty(self) -> None:
        assert LoaderConfig.from_env({}) == LoaderConfig()

    def test_from_env_custom_prefix(self) -> None:
        config = LoaderConfig.from_env({"APP_ENABLE_MAPPING": "on"}, prefix="APP_")
        assert config.enable_mapping


class TestLoaderConfigValidation:
    def test_caching_without_location_fails(self) -> None:
        with pytest.raises(CacheNotConfigured):
            MappingLoader(LoaderConfig(enable_caching=True))

    def test_caching_with_injected_store(self) -> None:
        loader = MappingLoader(LoaderConfig(enable_caching=True), store=MemoryStore())
        assert loader.is_caching

    def test_clear_cache_without_store_fails(self) -> None:
        with pytest.raises(CacheNotConfigured):
            MappingLoader().clear_cache()
