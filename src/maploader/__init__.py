"""maploader - Resolve, cache and load Python modules from pluggable resolvers."""

from contextlib import suppress

# Storage adapters
from maploader.adapters import CacheStore, FileSystemStore, MemoryStore
from maploader.cache_entry import ClassCacheEntry
from maploader.config import LoaderConfig

# Errors
from maploader.errors import (
    CacheNotConfigured,
    CacheReadFailed,
    CacheWriteFailed,
    ChainIdentifierMismatch,
    DuplicateFragment,
    FragmentNotFound,
    InvalidChain,
    InvalidReference,
    MappingLoaderError,
    PurgeFailed,
)
from maploader.file_loader import MappingFileLoader, RegistryFileLoader
from maploader.initializers import (
    HookTableInitializer,
    ModuleInitInitializer,
    MultiInitializer,
    StaticInitializer,
)
from maploader.loader import MappingLoader
from maploader.registry import (
    EvalReference,
    RemapReference,
    VirtualSourceRegistry,
    default_registry,
    parse_reference,
)
from maploader.resolvers import (
    ClassResolver,
    ClassScanner,
    ResolverChain,
    validate_chain,
)

# Core types
from maploader.types import CachedMeta, Chain, Identifier, LoadAction, SourceStat

# Optional adapter imports - only available when dependencies are installed
with suppress(ImportError):
    from maploader.adapters import RedisStore

__version__ = "0.1.0"

__all__ = [
    "CacheNotConfigured",
    "CacheReadFailed",
    "CacheStore",
    "CacheWriteFailed",
    "CachedMeta",
    "Chain",
    "ChainIdentifierMismatch",
    "ClassCacheEntry",
    "ClassResolver",
    "ClassScanner",
    "DuplicateFragment",
    "EvalReference",
    "FileSystemStore",
    "FragmentNotFound",
    "HookTableInitializer",
    "Identifier",
    "InvalidChain",
    "InvalidReference",
    "LoadAction",
    "LoaderConfig",
    "MappingFileLoader",
    "MappingLoader",
    "MappingLoaderError",
    "MemoryStore",
    "ModuleInitInitializer",
    "MultiInitializer",
    "PurgeFailed",
    "RedisStore",
    "RegistryFileLoader",
    "RemapReference",
    "ResolverChain",
    "SourceStat",
    "StaticInitializer",
    "VirtualSourceRegistry",
    "default_registry",
    "parse_reference",
    "validate_chain",
]
