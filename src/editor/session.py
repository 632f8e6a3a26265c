"""
Editor session: one working root, its connection cache and the open room.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional

from connections.cache import ConnectionCache
from connections.loader import ConnectionDocumentLoader
from connections.models import DoorNode, ResolvedConnection
from connections.resolver import DoorConnectionResolver
from rooms.catalog import RoomCatalog, build_room_catalog, find_room_by_name, start_room_path
from rooms.room_file import LoadedRoom, load_room, parse_room_path

from .config import EditorConfig

LOGGER = logging.getLogger(__name__)


class EditorSession:
    """
    Owns the state that lives as long as a working root.

    The connection cache is created once and rebound whenever the working root
    changes, so every cached document belongs to the current root.
    """

    def __init__(self, config: Optional[EditorConfig] = None) -> None:
        self.config = config or EditorConfig()
        self._root: Optional[Path] = None
        self._cache = ConnectionCache(self._make_loader(Path(".")))
        self._resolver = DoorConnectionResolver(self._cache)
        self.catalog = RoomCatalog()
        self.current_room: Optional[LoadedRoom] = None

    @classmethod
    async def open(cls, config: Optional[EditorConfig] = None) -> "EditorSession":
        """Create a session and enter ``config.working_root`` when one is set."""

        session = cls(config)
        if session.config.working_root is not None:
            await session.set_working_root(session.config.working_root)
        return session

    @property
    def working_root(self) -> Optional[Path]:
        return self._root

    @property
    def cache(self) -> ConnectionCache:
        return self._cache

    @property
    def resolver(self) -> DoorConnectionResolver:
        return self._resolver

    # ------------------------------------------------------------------ #
    # Working root
    # ------------------------------------------------------------------ #

    async def set_working_root(self, root: Path | str) -> None:
        root_path = Path(root)
        self._root = root_path
        # Invalidate before anything else can load against the new root.
        self._cache.rebind(self._make_loader(root_path))
        self.current_room = None
        self.catalog = await build_room_catalog(root_path, self.config.areas)
        LOGGER.info("Working root set to %s", root_path)

    def _make_loader(self, root: Path) -> ConnectionDocumentLoader:
        return ConnectionDocumentLoader(root, validate=self.config.validate_documents)

    def _require_root(self) -> Path:
        if self._root is None:
            raise RuntimeError("Set working directory first!")
        return self._root

    def _require_room(self) -> LoadedRoom:
        if self.current_room is None:
            raise RuntimeError("No room is open.")
        return self.current_room

    # ------------------------------------------------------------------ #
    # Rooms
    # ------------------------------------------------------------------ #

    async def open_room(self, area: str, subarea: str, room_name: str) -> LoadedRoom:
        root = self._require_root()
        room = await load_room(root, area, subarea, room_name)
        self.current_room = room
        return room

    async def open_room_path(self, room_path: str) -> LoadedRoom:
        area, subarea, room_name = parse_room_path(room_path)
        return await self.open_room(area, subarea, room_name)

    async def navigate_to_area(self, area_code: str) -> LoadedRoom:
        self._require_root()
        return await self.open_room_path(start_room_path(area_code))

    async def navigate_to_room(self, room_name: str) -> Optional[LoadedRoom]:
        root = self._require_root()
        found = self.catalog.find_by_name(room_name)
        if found is None:
            # The catalog only covers the configured areas.
            found = await find_room_by_name(root, room_name)
        if found is None:
            LOGGER.warning("Room not found: %s", room_name)
            return None
        return await self.open_room(*found)

    # ------------------------------------------------------------------ #
    # Doors
    # ------------------------------------------------------------------ #

    async def resolve_door(self, door_node: DoorNode) -> Optional[ResolvedConnection]:
        room = self._require_room()
        return await self._resolver.resolve(door_node, room.identity)

    async def door_connections(self) -> Dict[str, ResolvedConnection]:
        """Resolved connections of the open room, keyed by door name."""

        room = self._require_room()
        return await self._resolver.resolve_room_doors(room.identity, room.door_nodes())

    async def navigate_through_door(self, connection: Optional[ResolvedConnection]) -> Optional[LoadedRoom]:
        if connection is None or not connection.target_room:
            return None
        if connection.target_area and connection.target_subarea:
            return await self.open_room(connection.target_area, connection.target_subarea, connection.target_room)
        return await self.navigate_to_room(connection.target_room)


__all__ = ["EditorSession"]
