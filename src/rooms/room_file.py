"""
Room files under ``<root>/region/<area>/<subarea>/<room>.json``.

Room names may contain ``/`` (composite rooms); on disk those become ``_``.
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from connections.models import DoorNode, RoomIdentity

LOGGER = logging.getLogger(__name__)

REGION_DIR = "region"


class RoomLoadError(RuntimeError):
    """Raised when a room file is missing or cannot be parsed."""

    def __init__(self, message: str, *, path: Optional[Path] = None, errors: Optional[Sequence[str]] = None) -> None:
        super().__init__(message)
        self.path = path
        self.errors = list(errors or [])


def room_name_to_file_name(room_name: str) -> str:
    return room_name.replace("/", "_")


def file_name_to_room_name(file_name: str) -> str:
    return file_name.replace("_", "/")


def parse_room_path(room_path: str) -> Tuple[str, str, str]:
    """Split ``"area/subarea/room"`` into its three parts."""

    parts = room_path.split("/")
    if len(parts) != 3:
        raise ValueError(f"Invalid room path format: {room_path}. Expected: area/subarea/roomName")
    area, subarea, room_name = parts
    return area, subarea, room_name


def room_file_path(root: Path | str, area: str, subarea: str, room_name: str) -> Path:
    return Path(root) / REGION_DIR / area / subarea / f"{room_name_to_file_name(room_name)}.json"


@dataclass
class LoadedRoom:
    """A room file as opened in the editor."""

    path: Path
    identity: RoomIdentity
    nodes: List[Dict[str, Any]] = field(default_factory=list)
    raw: Dict[str, Any] = field(default_factory=dict)

    def door_nodes(self) -> List[DoorNode]:
        doors: List[DoorNode] = []
        for node in self.nodes:
            if node.get("nodeType") != "door":
                continue
            try:
                doors.append(DoorNode.from_payload(node))
            except ValueError as exc:
                LOGGER.warning("Skipping malformed door node in %s: %s", self.path, exc)
        return doors

    def find_door(self, node_id: int) -> Optional[DoorNode]:
        for door in self.door_nodes():
            if door.id == node_id:
                return door
        return None


def room_from_payload(path: Path, payload: Mapping[str, Any], *, area: str, subarea: str, room_name: str) -> LoadedRoom:
    """
    Build a :class:`LoadedRoom` from parsed room JSON.

    Identity fields come from the payload (``id``, ``area``, ``subarea``,
    ``name``) and fall back to the location of the file.
    """

    room_id = payload.get("id")
    if isinstance(room_id, bool) or not isinstance(room_id, int):
        raise RoomLoadError(f"Room file {path} has no integer 'id'.", path=path)
    nodes = payload.get("nodes") or []
    if not isinstance(nodes, list):
        raise RoomLoadError(f"Room file {path} has a non-list 'nodes' entry.", path=path)
    identity = RoomIdentity(
        room_id=room_id,
        area=str(payload.get("area") or area),
        subarea=str(payload.get("subarea") or subarea),
        room_name=str(payload.get("name") or room_name),
    )
    return LoadedRoom(
        path=path,
        identity=identity,
        nodes=[dict(node) for node in nodes if isinstance(node, Mapping)],
        raw=dict(payload),
    )


async def read_json(path: Path) -> Any:
    text = await asyncio.to_thread(path.read_text, encoding="utf-8")
    return json.loads(text)


async def load_room(root: Path | str, area: str, subarea: str, room_name: str) -> LoadedRoom:
    path = room_file_path(root, area, subarea, room_name)
    try:
        payload = await read_json(path)
    except FileNotFoundError as exc:
        raise RoomLoadError(f"Room file not found: {path}", path=path) from exc
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise RoomLoadError(f"Failed to load room data: {path}", path=path, errors=[str(exc)]) from exc
    if not isinstance(payload, Mapping):
        raise RoomLoadError(f"Room file {path} does not contain an object.", path=path)
    LOGGER.info("Loaded room %s", path)
    return room_from_payload(path, payload, area=area, subarea=subarea, room_name=room_name)


__all__ = [
    "LoadedRoom",
    "REGION_DIR",
    "RoomLoadError",
    "file_name_to_room_name",
    "load_room",
    "parse_room_path",
    "read_json",
    "room_file_path",
    "room_from_payload",
    "room_name_to_file_name",
]
