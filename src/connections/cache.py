"""
Per-session memo of connection documents, keyed by scope.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from .loader import (
    ConnectionDocumentLoader,
    LoadResult,
    area_scope_path,
    global_scope_path,
    room_scope_path,
)
from .models import ConnectionDocument

LOGGER = logging.getLogger(__name__)


class Scope(str, Enum):
    ROOM = "room"
    AREA = "area"
    GLOBAL = "global"


@dataclass(frozen=True)
class ScopeKey:
    scope: Scope
    area: Optional[str] = None
    subarea: Optional[str] = None

    def logical_path(self) -> str:
        if self.scope is Scope.ROOM:
            return room_scope_path(self.area or "", self.subarea or "")
        if self.scope is Scope.AREA:
            return area_scope_path(self.area or "")
        return global_scope_path()

    def __str__(self) -> str:
        parts = [self.scope.value] + [part for part in (self.area, self.subarea) if part is not None]
        return ":".join(parts)


class ConnectionCache:
    """
    Memoizes loader results for one working root.

    Absent results are cached too: a missing file stays missing until the
    working root changes, and :meth:`invalidate_all` is the only way to drop
    entries.
    """

    def __init__(self, loader: ConnectionDocumentLoader) -> None:
        self._loader = loader
        self._entries: Dict[ScopeKey, LoadResult] = {}
        self._hits = 0
        self._misses = 0

    @property
    def loader(self) -> ConnectionDocumentLoader:
        return self._loader

    # ------------------------------------------------------------------ #
    # Scope accessors
    # ------------------------------------------------------------------ #

    async def get_room_scope(self, area: str, subarea: str) -> Optional[ConnectionDocument]:
        return await self.get(ScopeKey(Scope.ROOM, area, subarea))

    async def get_area_scope(self, area: str) -> Optional[ConnectionDocument]:
        return await self.get(ScopeKey(Scope.AREA, area))

    async def get_global_scope(self) -> Optional[ConnectionDocument]:
        return await self.get(ScopeKey(Scope.GLOBAL))

    async def get(self, key: ScopeKey) -> Optional[ConnectionDocument]:
        result = await self.get_result(key)
        return result.document

    async def get_result(self, key: ScopeKey) -> LoadResult:
        cached = self._entries.get(key)
        if cached is not None:
            self._hits += 1
            return cached
        self._misses += 1
        result = await self._loader.load(key.logical_path())
        self._entries[key] = result
        LOGGER.debug("Cached %s (%s)", key, "loaded" if result.is_loaded else result.reason)
        return result

    # ------------------------------------------------------------------ #
    # Invalidation
    # ------------------------------------------------------------------ #

    def invalidate_all(self) -> None:
        """Drop every cached document. Call once per working-root change."""

        count = len(self._entries)
        self._entries = {}
        LOGGER.debug("Invalidated %d cached connection document(s)", count)

    def rebind(self, loader: ConnectionDocumentLoader) -> None:
        """Point the cache at a new loader (new working root) and invalidate."""

        self._loader = loader
        self.invalidate_all()

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def stats(self) -> Dict[str, Any]:
        return {
            "size": len(self._entries),
            "keys": [str(key) for key in self._entries],
            "absent": [str(key) for key, result in self._entries.items() if not result.is_loaded],
            "hits": self._hits,
            "misses": self._misses,
        }


__all__ = ["ConnectionCache", "Scope", "ScopeKey"]
