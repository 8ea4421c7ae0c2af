"""Virtual source registry.

Lets a loader present source text under an identity other than where the
bytes actually live. Two addressing modes are supported:

- Inline eval: a named fragment registered with `set_fragment()`. A fragment
  supports exactly one open/read/close cycle and is deleted on close.
- Origin remap: bytes are read from `content_path` while `stat()` describes
  `reported_path`, so tooling attributes the code to the original file.

Every open handle keeps its own cursor, so loads triggered while another load
is in progress never interfere.
"""

from __future__ import annotations

import io
import itertools
import logging
import os
from dataclasses import dataclass

from maploader.errors import DuplicateFragment, FragmentNotFound, InvalidReference
from maploader.types import SourceStat

logger = logging.getLogger(__name__)

URL_SCHEME_EVAL = "maploader-eval"
URL_SCHEME_INCLUDE = "maploader-include"
INLINE_PREFIX = "INLINE"


@dataclass(frozen=True, slots=True)
class EvalReference:
    """Reference to a registered fragment."""

    name: str

    @property
    def url(self) -> str:
        return f"{URL_SCHEME_EVAL}://-/{self.name}"


@dataclass(frozen=True, slots=True)
class RemapReference:
    """Reference reading `content_path` but reporting `reported_path`."""

    content_path: str
    reported_path: str

    @property
    def url(self) -> str:
        return f"{URL_SCHEME_INCLUDE}://-/{self.content_path},{self.reported_path}"


Reference = EvalReference | RemapReference


def parse_reference(url: str) -> Reference:
    """Parse a `maploader-eval://` or `maploader-include://` URL."""
    scheme, sep, rest = url.partition("://")
    if not sep or not rest.startswith("-/"):
        raise InvalidReference(f"Invalid virtual source URL: {url!r}")
    path = rest[2:]
    if scheme == URL_SCHEME_EVAL:
        if not path:
            raise InvalidReference(f"Missing fragment name: {url!r}")
        return EvalReference(path)
    if scheme == URL_SCHEME_INCLUDE:
        content_path, comma, reported_path = path.partition(",")
        if not comma or not content_path or not reported_path:
            raise InvalidReference(f"Include URL needs two paths: {url!r}")
        return RemapReference(content_path, reported_path)
    raise InvalidReference(f"Unknown virtual source scheme: {scheme!r}")


@dataclass(slots=True)
class _Fragment:
    data: bytes
    backing_file: str | None


class _Handle:
    """Per-open state. Eval handles own their fragment until closed."""

    __slots__ = ("reference", "fragment", "stream", "pos", "stat")

    def __init__(
        self,
        reference: Reference,
        fragment: _Fragment | None = None,
        stream: io.BufferedReader | None = None,
    ) -> None:
        self.reference = reference
        self.fragment = fragment
        self.stream = stream
        self.pos = 0
        self.stat: SourceStat | None = None


class VirtualSourceRegistry:
    """Process-lifetime table of single-use fragments plus open handles."""

    def __init__(self) -> None:
        self._fragments: dict[str, _Fragment] = {}
        self._handles: dict[int, _Handle] = {}
        self._handle_ids = itertools.count(1)
        self._inline_ids = itertools.count()

    def __len__(self) -> int:
        """Number of registered fragments not yet consumed."""
        return len(self._fragments)

    def new_inline_name(self) -> str:
        """Return a fragment name that no other inline registration will use."""
        return f"{INLINE_PREFIX}/{next(self._inline_ids)}"

    def set_fragment(
        self, name: str, text: str | bytes, backing_file: str | None = None
    ) -> EvalReference:
        """Register a fragment for one read cycle."""
        if name in self._fragments:
            raise DuplicateFragment(f"Fragment {name!r} is already set")
        data = text.encode("utf-8") if isinstance(text, str) else text
        self._fragments[name] = _Fragment(data, backing_file)
        return EvalReference(name)

    def has_fragment(self, name: str) -> bool:
        return name in self._fragments

    def discard(self, name: str) -> bool:
        """Release a fragment without reading it. Returns whether it existed."""
        return self._fragments.pop(name, None) is not None

    def open(self, reference: Reference | str) -> int:
        if isinstance(reference, str):
            reference = parse_reference(reference)
        if isinstance(reference, EvalReference):
            fragment = self._fragments.get(reference.name)
            if fragment is None:
                raise FragmentNotFound(f"Fragment {reference.name!r} is not registered")
            handle = _Handle(reference, fragment=fragment)
        else:
            handle = _Handle(reference, stream=open(reference.content_path, "rb"))
        handle_id = next(self._handle_ids)
        self._handles[handle_id] = handle
        return handle_id

    def read(self, handle_id: int, count: int) -> bytes:
        handle = self._get(handle_id)
        if handle.fragment is not None:
            chunk = handle.fragment.data[handle.pos : handle.pos + count]
            handle.pos += len(chunk)
            return chunk
        assert handle.stream is not None
        return handle.stream.read(count)

    def eof(self, handle_id: int) -> bool:
        handle = self._get(handle_id)
        if handle.fragment is not None:
            return handle.pos >= len(handle.fragment.data)
        assert handle.stream is not None
        return not handle.stream.peek(1)

    def stat(self, handle_id: int) -> SourceStat:
        handle = self._get(handle_id)
        if handle.stat is None:
            handle.stat = self._make_stat(handle)
        return handle.stat

    def close(self, handle_id: int) -> None:
        handle = self._handles.pop(handle_id, None)
        if handle is None:
            return
        if isinstance(handle.reference, EvalReference):
            # Only release the registration this handle consumed
            if self._fragments.get(handle.reference.name) is handle.fragment:
                del self._fragments[handle.reference.name]
        elif handle.stream is not None:
            handle.stream.close()

    def read_all(self, reference: Reference | str) -> tuple[bytes, SourceStat]:
        """Run one complete open/read/stat/close cycle."""
        handle_id = self.open(reference)
        try:
            chunks = []
            while not self.eof(handle_id):
                chunk = self.read(handle_id, 8192)
                if not chunk:
                    break
                chunks.append(chunk)
            return b"".join(chunks), self.stat(handle_id)
        finally:
            self.close(handle_id)

    def _get(self, handle_id: int) -> _Handle:
        try:
            return self._handles[handle_id]
        except KeyError:
            raise ValueError(f"Unknown or closed handle: {handle_id}") from None

    def _make_stat(self, handle: _Handle) -> SourceStat:
        if handle.fragment is not None:
            size = len(handle.fragment.data)
            backing = handle.fragment.backing_file
            if backing and os.path.exists(backing):
                return SourceStat.from_stat_result(os.stat(backing), size=size)
            return SourceStat(size=size)
        assert isinstance(handle.reference, RemapReference)
        content_stat = os.stat(handle.reference.content_path)
        try:
            reported_stat = os.stat(handle.reference.reported_path)
        except FileNotFoundError:
            logger.debug(
                f"[registry:stat] {handle.reference.reported_path} missing, "
                "reporting content file"
            )
            return SourceStat.from_stat_result(content_stat)
        return SourceStat.from_stat_result(reported_stat, size=content_stat.st_size)


_default_registry: VirtualSourceRegistry | None = None


def default_registry() -> VirtualSourceRegistry:
    """Return the process-wide registry, creating it on first use."""
    global _default_registry
    if _default_registry is None:
        _default_registry = VirtualSourceRegistry()
    return _default_registry
