"""Top-level loader: cache lookup, resolution and import-system integration."""

from __future__ import annotations

import importlib.abc
import importlib.util
import logging
import os
import sys
import types
from collections.abc import Iterable

from maploader.adapters.base import CacheStore
from maploader.adapters.filesystem import FileSystemStore
from maploader.cache_entry import ClassCacheEntry
from maploader.config import LoaderConfig
from maploader.errors import CacheNotConfigured, InvalidChain
from maploader.file_loader import MappingFileLoader, RegistryFileLoader
from maploader.identifiers import identifier_file_path, is_valid_identifier
from maploader.initializers import StaticInitializer
from maploader.resolvers import ClassResolver, ResolverChain
from maploader.types import Chain, Identifier

logger = logging.getLogger(__name__)

HINT_FILE_SUFFIX = ".py"


class MappingLoader:
    """Resolves identifiers through resolvers, optionally caching the result.

    With caching enabled, a load first tries the cache entry and only consults
    resolvers on a miss. Without caching every action of the resolved chain is
    executed directly, in chain order. An identifier no resolver knows about
    is left alone so other import mechanisms can handle it.
    """

    def __init__(
        self,
        config: LoaderConfig | None = None,
        resolvers: Iterable[ClassResolver] = (),
        *,
        initializer: StaticInitializer | None = None,
        file_loader: MappingFileLoader | None = None,
        store: CacheStore | None = None,
    ) -> None:
        self._config = config if config is not None else LoaderConfig()
        self._resolvers = ResolverChain(resolvers)
        self._initializer = initializer
        self._file_loader: MappingFileLoader = (
            file_loader
            if file_loader is not None
            else RegistryFileLoader(enable_mapping=self._config.enable_mapping)
        )
        if store is None and self._config.cache_dir:
            store = FileSystemStore(self._config.cache_dir)
        if self._config.enable_caching and store is None:
            raise CacheNotConfigured("cache_dir is not specified")
        self._store = store
        self._finder: _MappingFinder | None = None

    @property
    def is_caching(self) -> bool:
        return self._config.enable_caching

    @property
    def store(self) -> CacheStore | None:
        return self._store

    def add_resolver(self, resolver: ClassResolver) -> None:
        self._resolvers.add(resolver)

    def scan_classes(self) -> list[Identifier]:
        """Every identifier reported by resolvers that can enumerate them."""
        return self._resolvers.scan()

    def entry(self, identifier: Identifier) -> ClassCacheEntry:
        return ClassCacheEntry(
            self._require_store(), self._file_loader, self._initializer, identifier
        )

    def load_class(self, identifier: Identifier) -> bool:
        """Load `identifier`. Returns False if no resolver could resolve it."""
        if self.is_caching:
            entry = self.entry(identifier)
            if entry.load():
                return True
            chain = self._resolvers.resolve(identifier)
            if not chain:
                return False
            entry.cache_and_load(chain)
            return True
        chain = self._resolvers.resolve(identifier)
        if not chain:
            return False
        self._load_uncached(chain)
        return True

    def _load_uncached(self, chain: Chain) -> None:
        for action in chain:
            if action.source:
                self._file_loader.eval(action.identifier, action.source, action.file)
            elif action.file:
                self._file_loader.include_once(action.identifier, action.file)
            else:
                raise InvalidChain(
                    f"LoadAction for {action.identifier!r} must specify source or file"
                )
            if self._initializer is not None:
                self._initializer.init(action.identifier)

    def _prefetch_actions(self) -> dict[Identifier, Chain]:
        return {
            identifier: self._resolvers.resolve(identifier)
            for identifier in self.scan_classes()
        }

    def prime_cache(self) -> None:
        """Cache every scannable identifier without loading it."""
        self._require_store()
        primed = 0
        for identifier, chain in self._prefetch_actions().items():
            if chain:
                self.entry(identifier).cache(chain)
                primed += 1
        logger.info(f"Primed cache for {primed} identifiers")

    def dump_hints(self, target_dir: str | os.PathLike[str]) -> list[str]:
        """Write hint text of every scannable action below `target_dir`."""
        target = os.fspath(target_dir)
        written: list[str] = []
        for chain in self._prefetch_actions().values():
            for action in chain:
                if action.hint is None:
                    continue
                path = identifier_file_path(action.identifier, target, HINT_FILE_SUFFIX)
                os.makedirs(os.path.dirname(path), exist_ok=True)
                with open(path, "w", encoding="utf-8") as f:
                    f.write(action.hint)
                written.append(path)
        logger.debug(f"[loader:hints] wrote {len(written)} hint files to {target}")
        return written

    def clear_cache(self) -> None:
        """Remove every cache entry."""
        self._require_store().clear()
        self._file_loader.forget()

    def clear_specific(self, identifiers: Iterable[Identifier]) -> None:
        """Purge the given identifiers and their recorded dependency chains."""
        for identifier in identifiers:
            self.entry(identifier).purge()

    def register(self, *, prepend: bool = True) -> None:
        """Route imports through this loader by installing a meta path finder."""
        if self._finder is not None:
            return
        self._finder = _MappingFinder(self)
        if prepend:
            sys.meta_path.insert(0, self._finder)
        else:
            sys.meta_path.append(self._finder)

    def unregister(self) -> None:
        if self._finder is None:
            return
        if self._finder in sys.meta_path:
            sys.meta_path.remove(self._finder)
        self._finder = None

    def _require_store(self) -> CacheStore:
        if self._store is None:
            raise CacheNotConfigured("cache_dir is not specified")
        return self._store


class _LoadedModuleLoader(importlib.abc.Loader):
    """Hands an already executed module to the import system."""

    def __init__(self, module: types.ModuleType) -> None:
        self._module = module

    def create_module(self, spec):
        return self._module

    def exec_module(self, module: types.ModuleType) -> None:
        pass


class _MappingFinder(importlib.abc.MetaPathFinder):
    def __init__(self, loader: MappingLoader) -> None:
        self._loader = loader

    def find_spec(self, fullname, path, target=None):
        if not is_valid_identifier(fullname):
            return None
        if not self._loader.load_class(fullname):
            return None
        module = sys.modules.get(fullname)
        if module is None:
            return None
        # As a package, submodule imports come back through this finder
        return importlib.util.spec_from_loader(
            fullname,
            _LoadedModuleLoader(module),
            origin=getattr(module, "__file__", None),
            is_package=True,
        )
