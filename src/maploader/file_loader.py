"""Mapping file loaders: execute source into modules under a reported filename."""

from __future__ import annotations

import linecache
import logging
import os
import sys
import types
from typing import Protocol, runtime_checkable

from maploader.registry import RemapReference, VirtualSourceRegistry, default_registry
from maploader.types import Identifier

logger = logging.getLogger(__name__)


@runtime_checkable
class MappingFileLoader(Protocol):
    """Executes module code while controlling which file it is attributed to."""

    def eval(
        self, identifier: Identifier, source: str, map_to_file: str | None = None
    ) -> None:
        """Execute source text, attributing it to `map_to_file` when given."""
        ...

    def include_once(
        self, identifier: Identifier, file: str, map_to_file: str | None = None
    ) -> None:
        """Execute a file at most once, attributing it to `map_to_file` when given."""
        ...

    def forget(self, file: str | None = None) -> None:
        """Allow `file` (or every file, when None) to be included again."""
        ...


def execute_module(identifier: Identifier, code: bytes | str, filename: str) -> types.ModuleType:
    """Run `code` in the namespace of `sys.modules[identifier]`.

    A module already placed in `sys.modules` (e.g. by the import system) is
    reused; otherwise a new package module is created and removed again if
    execution fails.
    """
    module = sys.modules.get(identifier)
    created = module is None
    if module is None:
        module = types.ModuleType(identifier)
        module.__file__ = filename
        # Identifiers are hierarchical: any module may have submodules
        module.__path__ = []
        sys.modules[identifier] = module
    try:
        exec(compile(code, filename, "exec"), module.__dict__)
    except BaseException:
        if created:
            sys.modules.pop(identifier, None)
        raise
    return module


def _publish_source(filename: str, data: bytes) -> None:
    """Make source without a backing file visible to tracebacks and inspect."""
    text = data.decode("utf-8")
    linecache.cache[filename] = (len(text), None, text.splitlines(True), filename)


class RegistryFileLoader:
    """Default MappingFileLoader backed by a VirtualSourceRegistry.

    With mapping disabled code is executed directly: evaluated source gets a
    synthetic filename and included files report their own path.
    """

    def __init__(
        self,
        registry: VirtualSourceRegistry | None = None,
        *,
        enable_mapping: bool = False,
    ) -> None:
        self._registry = registry if registry is not None else default_registry()
        self._enable_mapping = enable_mapping
        self._included: set[str] = set()

    @property
    def registry(self) -> VirtualSourceRegistry:
        return self._registry

    def eval(
        self, identifier: Identifier, source: str, map_to_file: str | None = None
    ) -> None:
        if self._enable_mapping:
            name = map_to_file or self._registry.new_inline_name()
            reference = self._registry.set_fragment(
                name, source, backing_file=map_to_file
            )
            data, _ = self._registry.read_all(reference)
            filename = map_to_file or f"<{reference.url}>"
        else:
            data = source.encode("utf-8")
            filename = f"<maploader:{identifier}>"
        if filename.startswith("<"):
            _publish_source(filename, data)
        logger.debug(f"[loader:eval] {identifier} as {filename}")
        execute_module(identifier, data, filename)

    def include_once(
        self, identifier: Identifier, file: str, map_to_file: str | None = None
    ) -> None:
        key = os.path.realpath(file)
        if key in self._included:
            return
        self._included.add(key)
        try:
            if self._enable_mapping and map_to_file:
                data, _ = self._registry.read_all(RemapReference(file, map_to_file))
                filename = map_to_file
            else:
                with open(file, "rb") as f:
                    data = f.read()
                filename = file
            logger.debug(f"[loader:include] {identifier} from {file} as {filename}")
            execute_module(identifier, data, filename)
        except BaseException:
            self._included.discard(key)
            raise

    def forget(self, file: str | None = None) -> None:
        if file is None:
            self._included.clear()
        else:
            self._included.discard(os.path.realpath(file))
