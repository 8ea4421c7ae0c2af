"""Core types for the maploader library."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any

# Dotted module name, e.g. "pkg.models.user"
Identifier = str


@dataclass(frozen=True, slots=True)
class LoadAction:
    """One resolver instruction: load `identifier` from source text and/or a file."""

    identifier: Identifier
    file: str | None = None  # physical path, reported as origin when source is set
    source: str | None = None
    hint: str | None = None  # hint text for external tooling


Chain = list[LoadAction]


@dataclass(frozen=True, slots=True)
class CachedMeta:
    """Persisted fallback path and dependency chain of a cache entry."""

    include: str | None = None
    chain: list[Identifier] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.include is not None:
            result["include"] = self.include
        if self.chain:
            result["chain"] = list(self.chain)
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CachedMeta:
        return cls(
            include=data.get("include"),
            chain=list(data.get("chain") or []),
        )


@dataclass(frozen=True, slots=True)
class SourceStat:
    """Stat record reported for a virtual source handle."""

    size: int
    mode: int = 0
    ino: int = 0
    dev: int = 0
    nlink: int = 0
    uid: int = 0
    gid: int = 0
    atime: float = 0.0
    mtime: float = 0.0
    ctime: float = 0.0

    @classmethod
    def from_stat_result(
        cls, st: os.stat_result, *, size: int | None = None
    ) -> SourceStat:
        """Copy an os.stat_result, optionally overriding the size."""
        return cls(
            size=st.st_size if size is None else size,
            mode=st.st_mode,
            ino=st.st_ino,
            dev=st.st_dev,
            nlink=st.st_nlink,
            uid=st.st_uid,
            gid=st.st_gid,
            atime=st.st_atime,
            mtime=st.st_mtime,
            ctime=st.st_ctime,
        )
