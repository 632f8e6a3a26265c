"""
Door connection resolution.

Three connection sources are consulted in priority order::

    room scope   connection/<area>/<subarea>.json
    area scope   connection/<area>/intra.json
    global scope connection/inter.json

The first usable match wins and later sources are never requested.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from .cache import ConnectionCache
from .composite import subroom_of
from .models import (
    Connection,
    ConnectionDocument,
    ConnectionEndpoint,
    Direction,
    DoorNode,
    ResolvedConnection,
    RoomIdentity,
)

LOGGER = logging.getLogger(__name__)

SourceProvider = Callable[[], Awaitable[Optional[ConnectionDocument]]]


def match_connection(
    connection: Connection,
    room_id: int,
    node_id: int,
) -> Optional[Tuple[ConnectionEndpoint, ConnectionEndpoint]]:
    """
    Return ``(source, target)`` when ``connection`` is traversable from the door.

    A Forward connection only leads out of ``nodes[0]``; a door matching its
    ``nodes[1]`` gets ``None`` here so the caller keeps scanning.
    """

    match = connection.find_endpoint(room_id, node_id)
    if match is None:
        return None
    if connection.direction is Direction.FORWARD:
        if not connection.origin.matches(room_id, node_id):
            return None
        return connection.origin, connection.destination
    return match, connection.other_endpoint(match)


def build_resolved(
    connection: Connection,
    source: ConnectionEndpoint,
    target: ConnectionEndpoint,
) -> ResolvedConnection:
    return ResolvedConnection(
        source_node=source,
        target_node=target,
        target_room=target.room_name,
        target_area=target.area,
        target_subarea=target.subarea,
        target_subroom=subroom_of(target),
        direction=connection.direction,
        connection_type=connection.connection_type,
        nodes=connection.nodes,
    )


class DoorConnectionResolver:
    """Answers "where does this door lead" against a :class:`ConnectionCache`."""

    def __init__(self, cache: ConnectionCache) -> None:
        self._cache = cache

    @property
    def cache(self) -> ConnectionCache:
        return self._cache

    def source_providers(self, room: RoomIdentity) -> List[Tuple[str, SourceProvider]]:
        """Ordered, lazily evaluated document sources for ``room``."""

        cache = self._cache
        return [
            ("room", lambda: cache.get_room_scope(room.area, room.subarea)),
            ("area", lambda: cache.get_area_scope(room.area)),
            ("global", cache.get_global_scope),
        ]

    async def resolve(self, door_node: DoorNode, room: RoomIdentity) -> Optional[ResolvedConnection]:
        if not door_node.is_door:
            LOGGER.debug("Refusing to resolve non-door node %s (%s)", door_node.id, door_node.node_type)
            return None

        # Sources are awaited one at a time so a match short-circuits later I/O.
        for label, provider in self.source_providers(room):
            document = await provider()
            if document is None:
                continue
            resolved = self._scan(document, door_node, room)
            if resolved is not None:
                LOGGER.debug(
                    "Door %s in room %s resolved from %s scope to %s",
                    door_node.id,
                    room.room_id,
                    label,
                    resolved.target_room,
                )
                return resolved

        LOGGER.debug("No connection for door %s in room %s", door_node.id, room.room_id)
        return None

    async def resolve_room_doors(
        self,
        room: RoomIdentity,
        nodes: Iterable[Union[DoorNode, Mapping[str, object]]],
    ) -> Dict[str, ResolvedConnection]:
        """
        Resolve every door of a room, keyed by door name.

        ``nodes`` may be :class:`DoorNode` instances or raw node payloads from the
        room file; non-door nodes are skipped and unresolved doors left out.
        """

        connections: Dict[str, ResolvedConnection] = {}
        for node in nodes:
            door = node if isinstance(node, DoorNode) else _door_from_payload(node)
            if door is None or not door.is_door:
                continue
            resolved = await self.resolve(door, room)
            if resolved is not None:
                connections[door.name] = resolved
        return connections

    @staticmethod
    def _scan(
        document: ConnectionDocument,
        door_node: DoorNode,
        room: RoomIdentity,
    ) -> Optional[ResolvedConnection]:
        for connection in document.connections:
            pair = match_connection(connection, room.room_id, door_node.id)
            if pair is None:
                continue
            source, target = pair
            return build_resolved(connection, source, target)
        return None


def _door_from_payload(payload: Mapping[str, object]) -> Optional[DoorNode]:
    if payload.get("nodeType") != "door":
        return None
    try:
        return DoorNode.from_payload(payload)
    except ValueError as exc:
        LOGGER.warning("Skipping malformed door node %r: %s", payload.get("name"), exc)
        return None


__all__ = ["DoorConnectionResolver", "build_resolved", "match_connection"]
