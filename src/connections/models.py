"""
Typed records for rooms, doors and the connection documents that link them.

Connection documents are stored as JSON with camelCase keys::

    {
        "connections": [
            {
                "direction": "Forward" | "Bidirectional",
                "connectionType": "...",
                "nodes": [{"roomid": 1, "nodeid": 2, ...}, {...}],
            }
        ]
    }

Each record exposes ``from_payload`` / ``to_payload`` so callers never have to
touch the raw key names.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple


class ConnectionDataError(ValueError):
    """Raised when a payload cannot be converted into a connection record."""

    def __init__(self, message: str, *, errors: Optional[Sequence[str]] = None) -> None:
        super().__init__(message)
        self.errors = list(errors or [])


def _require(payload: Mapping[str, Any], key: str, kind: type, owner: str) -> Any:
    if not isinstance(payload, Mapping):
        raise ConnectionDataError(f"{owner} payload must be a mapping.")
    if key not in payload:
        raise ConnectionDataError(f"{owner} is missing '{key}'.")
    value = payload[key]
    if kind is int:
        # bool is an int subclass; ids are never booleans.
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConnectionDataError(f"{owner}.{key} must be an integer, got {value!r}.")
        return value
    if not isinstance(value, kind):
        raise ConnectionDataError(f"{owner}.{key} must be {kind.__name__}, got {value!r}.")
    return value


def _optional_str(payload: Mapping[str, Any], key: str, default: str = "") -> str:
    value = payload.get(key, default)
    return value if isinstance(value, str) else default


class Direction(str, Enum):
    FORWARD = "Forward"
    BIDIRECTIONAL = "Bidirectional"


@dataclass(frozen=True)
class RoomIdentity:
    """Identifies the room currently open in the editor."""

    room_id: int
    area: str
    subarea: str
    room_name: str

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "RoomIdentity":
        return cls(
            room_id=_require(payload, "roomId", int, "RoomIdentity"),
            area=_require(payload, "area", str, "RoomIdentity"),
            subarea=_require(payload, "subarea", str, "RoomIdentity"),
            room_name=_optional_str(payload, "roomName"),
        )

    def to_payload(self) -> Dict[str, Any]:
        return {
            "roomId": self.room_id,
            "area": self.area,
            "subarea": self.subarea,
            "roomName": self.room_name,
        }


@dataclass(frozen=True)
class DoorNode:
    """A door entry from a room's node list."""

    id: int
    node_type: str
    name: str
    door_orientation: str = ""
    node_address: str = ""

    @property
    def is_door(self) -> bool:
        return self.node_type == "door"

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "DoorNode":
        return cls(
            id=_require(payload, "id", int, "DoorNode"),
            node_type=_require(payload, "nodeType", str, "DoorNode"),
            name=_optional_str(payload, "name"),
            door_orientation=_optional_str(payload, "doorOrientation"),
            node_address=_optional_str(payload, "nodeAddress"),
        )

    def to_payload(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "nodeType": self.node_type,
            "name": self.name,
            "doorOrientation": self.door_orientation,
            "nodeAddress": self.node_address,
        }


@dataclass(frozen=True)
class ConnectionEndpoint:
    """
    One side of a connection.

    ``roomid``/``nodeid`` are the matching keys; ``room_name``/``node_name``
    are display labels used to work out composite sub-rooms.
    """

    roomid: int
    nodeid: int
    room_name: str = ""
    node_name: str = ""
    area: str = ""
    subarea: str = ""
    position: str = ""

    def matches(self, room_id: int, node_id: int) -> bool:
        return self.roomid == room_id and self.nodeid == node_id

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ConnectionEndpoint":
        return cls(
            roomid=_require(payload, "roomid", int, "ConnectionEndpoint"),
            nodeid=_require(payload, "nodeid", int, "ConnectionEndpoint"),
            room_name=_optional_str(payload, "roomName"),
            node_name=_optional_str(payload, "nodeName"),
            area=_optional_str(payload, "area"),
            subarea=_optional_str(payload, "subarea"),
            position=_optional_str(payload, "position"),
        )

    def to_payload(self) -> Dict[str, Any]:
        return {
            "roomid": self.roomid,
            "nodeid": self.nodeid,
            "roomName": self.room_name,
            "nodeName": self.node_name,
            "area": self.area,
            "subarea": self.subarea,
            "position": self.position,
        }


@dataclass(frozen=True)
class Connection:
    """A link between two endpoints. ``nodes[0]`` is the origin of a Forward link."""

    direction: Direction
    connection_type: str
    nodes: Tuple[ConnectionEndpoint, ConnectionEndpoint]

    def __post_init__(self) -> None:
        if len(self.nodes) != 2:
            raise ConnectionDataError(f"Connection must have exactly two nodes, got {len(self.nodes)}.")

    @property
    def origin(self) -> ConnectionEndpoint:
        return self.nodes[0]

    @property
    def destination(self) -> ConnectionEndpoint:
        return self.nodes[1]

    def find_endpoint(self, room_id: int, node_id: int) -> Optional[ConnectionEndpoint]:
        for endpoint in self.nodes:
            if endpoint.matches(room_id, node_id):
                return endpoint
        return None

    def other_endpoint(self, endpoint: ConnectionEndpoint) -> ConnectionEndpoint:
        # Identity, not equality: both sides may carry identical labels.
        return self.nodes[1] if endpoint is self.nodes[0] else self.nodes[0]

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Connection":
        raw_direction = _require(payload, "direction", str, "Connection")
        try:
            direction = Direction(raw_direction)
        except ValueError as exc:
            raise ConnectionDataError(f"Unknown connection direction {raw_direction!r}.") from exc
        raw_nodes = _require(payload, "nodes", list, "Connection")
        if len(raw_nodes) != 2:
            raise ConnectionDataError(f"Connection must have exactly two nodes, got {len(raw_nodes)}.")
        nodes = (
            ConnectionEndpoint.from_payload(raw_nodes[0]),
            ConnectionEndpoint.from_payload(raw_nodes[1]),
        )
        return cls(
            direction=direction,
            connection_type=_optional_str(payload, "connectionType"),
            nodes=nodes,
        )

    def to_payload(self) -> Dict[str, Any]:
        return {
            "direction": self.direction.value,
            "connectionType": self.connection_type,
            "nodes": [node.to_payload() for node in self.nodes],
        }


@dataclass(frozen=True)
class ConnectionDocument:
    """Parsed contents of one connection file (room, area or global scope)."""

    connections: Tuple[Connection, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.connections)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ConnectionDocument":
        raw = _require(payload, "connections", list, "ConnectionDocument")
        connections: List[Connection] = []
        errors: List[str] = []
        for index, item in enumerate(raw):
            try:
                connections.append(Connection.from_payload(item))
            except ConnectionDataError as exc:
                errors.append(f"connections[{index}]: {exc}")
        if errors:
            raise ConnectionDataError("Connection document contains malformed entries.", errors=errors)
        return cls(connections=tuple(connections))

    def to_payload(self) -> Dict[str, Any]:
        return {"connections": [conn.to_payload() for conn in self.connections]}


@dataclass(frozen=True)
class ResolvedConnection:
    """Where a door leads. Produced per query and never persisted."""

    source_node: ConnectionEndpoint
    target_node: ConnectionEndpoint
    target_room: str
    target_area: str
    target_subarea: str
    target_subroom: Optional[str]
    direction: Direction
    connection_type: str
    nodes: Tuple[ConnectionEndpoint, ConnectionEndpoint]

    @property
    def position(self) -> str:
        return self.target_node.position

    def describe(self) -> str:
        """Short human label, e.g. for a door tooltip."""

        label = self.target_room
        if self.target_subroom:
            label = f"{label} ({self.target_subroom})"
        if self.target_area and self.target_subarea:
            label = f"{label} [{self.target_area}/{self.target_subarea}]"
        return label

    def to_payload(self) -> Dict[str, Any]:
        return {
            "sourceNode": self.source_node.to_payload(),
            "targetNode": self.target_node.to_payload(),
            "targetRoom": self.target_room,
            "targetArea": self.target_area,
            "targetSubarea": self.target_subarea,
            "targetSubroom": self.target_subroom,
            "direction": self.direction.value,
            "connectionType": self.connection_type,
            "position": self.position,
            "nodes": [node.to_payload() for node in self.nodes],
        }


__all__ = [
    "Connection",
    "ConnectionDataError",
    "ConnectionDocument",
    "ConnectionEndpoint",
    "Direction",
    "DoorNode",
    "ResolvedConnection",
    "RoomIdentity",
]
