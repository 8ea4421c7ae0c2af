"""Post-load initializers.

The loader calls `init(identifier)` after every successful load. Initializers
are responsible for their own idempotence: the implementations here run an
identifier's hook at most once per initializer instance.
"""

import logging
import sys
from collections.abc import Callable, Iterable
from typing import Protocol, runtime_checkable

from maploader.types import Identifier

logger = logging.getLogger(__name__)


@runtime_checkable
class StaticInitializer(Protocol):
    """Hook invoked after an identifier has been loaded."""

    def init(self, identifier: Identifier) -> None:
        ...


class MultiInitializer:
    """Runs several initializers in order for every load."""

    def __init__(self, initializers: Iterable[StaticInitializer]) -> None:
        self._initializers = list(initializers)

    def init(self, identifier: Identifier) -> None:
        for initializer in self._initializers:
            initializer.init(identifier)


class ModuleInitInitializer:
    """Calls a loaded module's own `module_init()` once.

    Only a hook defined by the module itself counts; a function of that name
    imported from another module is ignored.
    """

    def __init__(self, hook_name: str = "module_init") -> None:
        self._hook_name = hook_name
        self._initialized: set[Identifier] = set()

    def is_initialized(self, identifier: Identifier) -> bool:
        return identifier in self._initialized

    def init(self, identifier: Identifier) -> None:
        if identifier in self._initialized:
            return
        module = sys.modules.get(identifier)
        if module is None:
            return
        hook = vars(module).get(self._hook_name)
        if callable(hook) and getattr(hook, "__module__", None) == identifier:
            logger.debug(f"[init] {identifier}.{self._hook_name}()")
            hook()
        self._initialized.add(identifier)


class HookTableInitializer:
    """Initializer driven by an explicit identifier -> hook table."""

    def __init__(self, hooks: dict[Identifier, Callable[[], None]] | None = None) -> None:
        self._hooks: dict[Identifier, Callable[[], None]] = dict(hooks or {})
        self._initialized: set[Identifier] = set()

    def register(self, identifier: Identifier, hook: Callable[[], None]) -> None:
        self._hooks[identifier] = hook

    def is_initialized(self, identifier: Identifier) -> bool:
        return identifier in self._initialized

    def init(self, identifier: Identifier) -> None:
        if identifier in self._initialized:
            return
        hook = self._hooks.get(identifier)
        if hook is None:
            return
        logger.debug(f"[init] {identifier} (registered hook)")
        hook()
        self._initialized.add(identifier)
