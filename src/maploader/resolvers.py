"""Resolver protocols, dispatch and chain validation."""

import logging
from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from maploader.errors import ChainIdentifierMismatch, InvalidChain
from maploader.types import Chain, Identifier

logger = logging.getLogger(__name__)


@runtime_checkable
class ClassResolver(Protocol):
    """Resolves a requested identifier to a chain of load actions."""

    def resolve_class(self, identifier: Identifier) -> Chain:
        """Return the load actions for `identifier`, or an empty list."""
        ...


@runtime_checkable
class ClassScanner(Protocol):
    """Optional capability: enumerate every identifier a resolver can resolve."""

    def scan_classes(self) -> list[Identifier]:
        """Return all resolvable identifiers."""
        ...


def validate_chain(chain: Chain, identifier: Identifier) -> None:
    """Check a non-empty chain before anything is cached or executed."""
    found = False
    for action in chain:
        if not action.identifier:
            raise InvalidChain("Every LoadAction must specify an identifier")
        if not action.source and not action.file:
            raise InvalidChain(
                f"LoadAction for {action.identifier!r} must specify source or file"
            )
        if action.identifier == identifier:
            found = True
    if not found:
        raise ChainIdentifierMismatch(
            f"Resolved chain does not contain an action for {identifier!r}"
        )


class ResolverChain:
    """Ordered resolvers; the first one returning a non-empty chain wins."""

    def __init__(self, resolvers: Iterable[ClassResolver] = ()) -> None:
        self._resolvers: list[ClassResolver] = list(resolvers)

    def __iter__(self):
        return iter(self._resolvers)

    def __len__(self) -> int:
        return len(self._resolvers)

    def add(self, resolver: ClassResolver) -> None:
        self._resolvers.append(resolver)

    def resolve(self, identifier: Identifier) -> Chain:
        """Query resolvers in order; returns [] when none can resolve."""
        for resolver in self._resolvers:
            chain = resolver.resolve_class(identifier)
            if chain:
                validate_chain(chain, identifier)
                logger.debug(
                    f"[loader:resolve] {identifier} -> {type(resolver).__name__} "
                    f"({len(chain)} actions)"
                )
                return list(chain)
        logger.debug(f"[loader:resolve] {identifier} -> unresolved")
        return []

    def scan(self) -> list[Identifier]:
        """Union of identifiers reported by scanning resolvers, first seen first."""
        seen: dict[Identifier, None] = {}
        for resolver in self._resolvers:
            if isinstance(resolver, ClassScanner):
                for identifier in resolver.scan_classes():
                    seen.setdefault(identifier, None)
        return list(seen)
