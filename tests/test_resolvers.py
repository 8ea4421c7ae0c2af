"""Tests for resolver dispatch and chain validation."""

import pytest
from props import NonScanningResolver, StaticResolver

from maploader import (
    ChainIdentifierMismatch,
    ClassResolver,
    ClassScanner,
    InvalidChain,
    LoadAction,
    ResolverChain,
    validate_chain,
)


class TestValidateChain:
    def test_valid_chain_with_target_anywhere(self) -> None:
        chain = [
            LoadAction("a.target", source="X = 1"),
            LoadAction("a.dep", file="/src/dep.py"),
        ]
        validate_chain(chain, "a.target")

    def test_missing_identifier_fails(self) -> None:
        chain = [LoadAction("", source="X = 1"), LoadAction("a.b", source="Y = 1")]
        with pytest.raises(InvalidChain):
            validate_chain(chain, "a.b")

    def test_action_without_source_or_file_fails(self) -> None:
        with pytest.raises(InvalidChain):
            validate_chain([LoadAction("a.b")], "a.b")

    def test_empty_source_counts_as_missing(self) -> None:
        with pytest.raises(InvalidChain):
            validate_chain([LoadAction("a.b", source="")], "a.b")

    def test_chain_without_requested_identifier_fails(self) -> None:
        chain = [LoadAction("a.other", source="X = 1")]
        with pytest.raises(ChainIdentifierMismatch):
            validate_chain(chain, "a.b")


class TestResolverChain:
    def test_first_non_empty_chain_wins(self) -> None:
        empty = StaticResolver({})
        first = StaticResolver({"a.b": [LoadAction("a.b", source="FIRST = 1")]})
        second = StaticResolver({"a.b": [LoadAction("a.b", source="SECOND = 1")]})
        resolvers = ResolverChain([empty, first, second])

        chain = resolvers.resolve("a.b")

        assert chain[0].source == "FIRST = 1"
        assert empty.calls == ["a.b"]
        assert second.calls == []

    def test_unresolvable_returns_empty_chain(self) -> None:
        resolvers = ResolverChain([StaticResolver({})])
        assert resolvers.resolve("nothing.here") == []

    def test_no_resolvers_returns_empty_chain(self) -> None:
        assert ResolverChain().resolve("a.b") == []

    def test_resolve_validates_chain(self) -> None:
        resolver = StaticResolver({"a.b": [LoadAction("a.c", source="X = 1")]})
        with pytest.raises(ChainIdentifierMismatch):
            ResolverChain([resolver]).resolve("a.b")

    def test_add_appends_resolver(self) -> None:
        resolvers = ResolverChain([StaticResolver({})])
        resolvers.add(StaticResolver({"a.b": [LoadAction("a.b", source="X = 1")]}))
        assert len(resolvers) == 2
        assert resolvers.resolve("a.b")

    def test_scan_unions_scanning_resolvers_in_order(self) -> None:
        one = StaticResolver({"a": [], "b": []})
        two = StaticResolver({"b": [], "c": []})
        hidden = NonScanningResolver({"d": []})
        assert ResolverChain([one, hidden, two]).scan() == ["a", "b", "c"]


class TestProtocols:
    def test_static_resolver_is_scanner(self) -> None:
        resolver = StaticResolver({})
        assert isinstance(resolver, ClassResolver)
        assert isinstance(resolver, ClassScanner)

    def test_non_scanning_resolver(self) -> None:
        resolver = NonScanningResolver({})
        assert isinstance(resolver, ClassResolver)
        assert not isinstance(resolver, ClassScanner)
