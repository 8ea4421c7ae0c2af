"""Loader configuration."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_VALUES
    return bool(value)


@dataclass(frozen=True, slots=True)
class LoaderConfig:
    """Settings for MappingLoader."""

    enable_caching: bool = False
    cache_dir: str | None = None
    enable_mapping: bool = False  # report original files to debuggers/tracebacks

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> LoaderConfig:
        """Build from a dict using either camelCase or snake_case keys."""

        def pick(snake: str, camel: str, default: Any) -> Any:
            if snake in data:
                return data[snake]
            return data.get(camel, default)

        cache_dir = pick("cache_dir", "cacheDir", None)
        return cls(
            enable_caching=_as_bool(pick("enable_caching", "enableCaching", False)),
            cache_dir=os.fspath(cache_dir) if cache_dir else None,
            enable_mapping=_as_bool(pick("enable_mapping", "enableMapping", False)),
        )

    @classmethod
    def from_env(
        cls, environ: Mapping[str, str] | None = None, *, prefix: str = "MAPLOADER_"
    ) -> LoaderConfig:
        """Build from MAPLOADER_ENABLE_CACHING, MAPLOADER_CACHE_DIR, MAPLOADER_ENABLE_MAPPING."""
        env = os.environ if environ is None else environ
        return cls.from_mapping(
            {
                "enable_caching": env.get(f"{prefix}ENABLE_CACHING", ""),
                "cache_dir": env.get(f"{prefix}CACHE_DIR") or None,
                "enable_mapping": env.get(f"{prefix}ENABLE_MAPPING", ""),
            }
        )
