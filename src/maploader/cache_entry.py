"""Per-identifier cache entries.

Each identifier owns up to three cache files:

- `<id-path>.py`: the artifact (resolved source text)
- `<id-path>.map`: the original file path the artifact is reported as
- `<id-path>.meta.json`: fallback include path and dependency chain

The meta file is always written last; its presence means the cache write for
that identifier completed.
"""

from __future__ import annotations

import json
import logging

from maploader.adapters.base import CacheStore
from maploader.errors import ChainIdentifierMismatch, InvalidChain
from maploader.file_loader import MappingFileLoader
from maploader.identifiers import identifier_to_path
from maploader.initializers import StaticInitializer
from maploader.resolvers import validate_chain
from maploader.types import CachedMeta, Chain, Identifier, LoadAction

logger = logging.getLogger(__name__)

ARTIFACT_SUFFIX = ".py"
MAP_SUFFIX = ".map"
META_SUFFIX = ".meta.json"


class ClassCacheEntry:
    """Cache files and cascading purge for one identifier."""

    def __init__(
        self,
        store: CacheStore,
        file_loader: MappingFileLoader,
        initializer: StaticInitializer | None,
        identifier: Identifier,
    ) -> None:
        self._store = store
        self._file_loader = file_loader
        self._initializer = initializer
        self._identifier = identifier
        self._path = identifier_to_path(identifier)

    @property
    def identifier(self) -> Identifier:
        return self._identifier

    @property
    def artifact_key(self) -> str:
        return self._path + ARTIFACT_SUFFIX

    @property
    def map_key(self) -> str:
        return self._path + MAP_SUFFIX

    @property
    def meta_key(self) -> str:
        return self._path + META_SUFFIX

    def cache_and_load(self, chain: Chain) -> None:
        """Cache every action of `chain` and load them in chain order."""
        self._cache_chain(chain, do_load=True)

    def cache(self, chain: Chain) -> None:
        """Cache every action of `chain` without loading anything."""
        self._cache_chain(chain, do_load=False)

    def _cache_chain(self, chain: Chain, *, do_load: bool) -> None:
        """Materialize dependencies, then this entry's own (last) action.

        A dependency records the dependencies after it as its chain; the
        target records all of them. Purging the target therefore cascades to
        every dependency, while purging a dependency only cascades forward.
        """
        if not chain:
            raise InvalidChain(f"Cannot cache an empty chain for {self._identifier!r}")
        validate_chain(chain, self._identifier)
        *dependencies, own = chain
        if own.identifier != self._identifier:
            raise ChainIdentifierMismatch(
                f"Last action of chain is {own.identifier!r}, "
                f"expected {self._identifier!r}"
            )
        for index, action in enumerate(dependencies):
            self._entry(action.identifier)._cache_action(
                action, dependencies[index + 1 :], do_load
            )
        self._cache_action(own, dependencies, do_load)

    def _cache_action(
        self, action: LoadAction, chain: Chain, do_load: bool
    ) -> None:
        if action.identifier != self._identifier:
            raise ChainIdentifierMismatch(
                f"Action for {action.identifier!r} given to entry {self._identifier!r}"
            )
        include: str | None = None
        if action.source:
            self._store.write(self.artifact_key, action.source)
            if action.file:
                self._store.write(self.map_key, action.file)
            else:
                self._store.delete(self.map_key)
            if do_load:
                self._load_artifact(action.file, source=action.source)
        elif action.file:
            # A stale artifact would shadow the include path on the next load
            self._store.delete(self.artifact_key)
            self._store.delete(self.map_key)
            if do_load:
                self._file_loader.include_once(self._identifier, action.file)
            include = action.file
        else:
            raise InvalidChain(
                f"LoadAction for {action.identifier!r} must specify source or file"
            )
        if do_load:
            self._run_initializer()
        meta = CachedMeta(include=include, chain=[a.identifier for a in chain])
        self._store.write(self.meta_key, json.dumps(meta.to_dict(), indent=2))
        logger.debug(
            f"[cache:write] {self._identifier} "
            f"(include={include}, chain={meta.chain}, loaded={do_load})"
        )

    def load(self) -> bool:
        """Load from cache. Returns False when nothing usable is cached."""
        if self._store.exists(self.artifact_key):
            map_to_file = self._store.read(self.map_key)
            self._load_artifact(map_to_file or None)
            self._run_initializer()
            logger.debug(f"[cache:hit] {self._identifier}")
            return True
        meta = self.get_meta()
        if meta is not None and meta.include:
            self._file_loader.include_once(self._identifier, meta.include)
            self._run_initializer()
            logger.debug(f"[cache:hit] {self._identifier} -> {meta.include}")
            return True
        return False

    def is_cached(self) -> bool:
        if self._store.exists(self.artifact_key):
            return True
        meta = self.get_meta()
        return meta is not None and bool(meta.include)

    def get_meta(self) -> CachedMeta | None:
        data = self._store.read(self.meta_key)
        if data is None:
            return None
        try:
            return CachedMeta.from_dict(json.loads(data))
        except (ValueError, TypeError, AttributeError) as e:
            logger.warning(f"Ignoring unreadable meta record for {self._identifier}: {e}")
            return None

    def purge(self) -> None:
        """Delete this entry and every entry in its recorded dependency chain."""
        # Must happen before deleting: the meta record is one of the files
        meta = self.get_meta()
        self._purge_single(meta)
        if meta is not None:
            for identifier in meta.chain:
                dependency = self._entry(identifier)
                dependency._purge_single(dependency.get_meta())
        logger.debug(
            f"[cache:purge] {self._identifier} "
            f"(cascade={meta.chain if meta is not None else []})"
        )

    def _purge_single(self, meta: CachedMeta | None) -> None:
        for key in (self.artifact_key, self.map_key, self.meta_key):
            self._store.delete(key)
        # A re-cached artifact reuses the same path and must execute again
        local_path = self._store.local_path(self.artifact_key)
        if local_path is not None:
            self._file_loader.forget(local_path)
        if meta is not None and meta.include:
            self._file_loader.forget(meta.include)

    def _load_artifact(self, map_to_file: str | None, source: str | None = None) -> None:
        local_path = self._store.local_path(self.artifact_key)
        if local_path is not None:
            self._file_loader.include_once(self._identifier, local_path, map_to_file)
            return
        if source is None:
            source = self._store.read(self.artifact_key) or ""
        self._file_loader.eval(self._identifier, source, map_to_file)

    def _run_initializer(self) -> None:
        if self._initializer is not None:
            self._initializer.init(self._identifier)

    def _entry(self, identifier: Identifier) -> ClassCacheEntry:
        return ClassCacheEntry(
            self._store, self._file_loader, self._initializer, identifier
        )
