"""
Room metadata index for a working root.
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Optional, Sequence, Tuple

from .room_file import REGION_DIR, file_name_to_room_name, room_name_to_file_name

LOGGER = logging.getLogger(__name__)

AREAS: Tuple[str, ...] = ("L-X", "MDK", "SRX", "TRO", "PYR", "AQA", "ARC", "NOC", "DMX")

# Area code -> "area/subarea/room file name" of the room an area opens on.
AREA_START_ROOMS: Mapping[str, str] = {
    "L-X": "L-X/General/Revival Room",
    "MDK": "MDK/West Main Deck/Central Nexus _ Nexus Storage _ Concourse",
    "SRX": "SRX/Upper SRX/SRX Entrance Lobby",
    "TRO": "TRO/General/TRO Entrance Lobby",
    "PYR": "PYR/Upper PYR/PYR-TRO Elevator _ PYR Entrance Lobby",
    "AQA": "AQA/Upper East AQA/AQA-ARC Elevator",
    "ARC": "ARC/Upper ARC/ARC-PYR Access",
    "NOC": "NOC/Upper NOC/NOC Entrance Lobby North",
    "DMX": "DMX/Opening Segment/DMX Entrance",
}


class UnknownAreaError(KeyError):
    """Raised when navigating to an area code with no start room."""


@dataclass(frozen=True)
class DoorSummary:
    name: str
    orientation: str = ""
    address: str = ""


@dataclass(frozen=True)
class RoomSummary:
    name: str
    area: str
    subarea: str
    address: str = ""
    doors: Tuple[DoorSummary, ...] = field(default_factory=tuple)
    file_stem: str = ""


@dataclass
class RoomCatalog:
    """Every readable room under ``region/`` for the configured areas."""

    entries: List[RoomSummary] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.entries)

    def rooms(self) -> List[RoomSummary]:
        return sorted(self.entries, key=lambda room: room.name)

    def find_by_name(self, room_name: str) -> Optional[Tuple[str, str, str]]:
        """
        Look a room up by display name without touching the filesystem.

        Matches on the room file name, falling back to the ``name`` field.
        Returns ``(area, subarea, room_name)`` in the form ``load_room`` expects.
        """

        file_stem = room_name_to_file_name(room_name)
        named = None
        for room in self.entries:
            if room.file_stem == file_stem:
                return room.area, room.subarea, file_name_to_room_name(room.file_stem)
            if named is None and room.name == room_name and room.file_stem:
                named = room
        if named is not None:
            return named.area, named.subarea, file_name_to_room_name(named.file_stem)
        return None


def _sorted_dirs(path: Path) -> List[Path]:
    return sorted(child for child in path.iterdir() if child.is_dir())


def _summarise_room(
    payload: Mapping[str, object], area: str, subarea: str, file_stem: str = ""
) -> Optional[RoomSummary]:
    nodes = payload.get("nodes")
    if not isinstance(nodes, list):
        return None
    doors = tuple(
        DoorSummary(
            name=str(node.get("name") or ""),
            orientation=str(node.get("doorOrientation") or ""),
            address=str(node.get("nodeAddress") or ""),
        )
        for node in nodes
        if isinstance(node, Mapping) and node.get("nodeType") == "door"
    )
    return RoomSummary(
        name=str(payload.get("name") or ""),
        area=area,
        subarea=subarea,
        address=str(payload.get("roomAddress") or ""),
        doors=doors,
        file_stem=file_stem,
    )


def scan_room_catalog(root: Path | str, areas: Sequence[str] = AREAS) -> RoomCatalog:
    catalog = RoomCatalog()
    region = Path(root) / REGION_DIR
    for area in areas:
        area_path = region / area
        try:
            subareas = _sorted_dirs(area_path)
        except OSError as exc:
            LOGGER.warning("Failed to read area directory %s: %s", area_path, exc)
            continue
        for subarea_path in subareas:
            try:
                room_files = sorted(subarea_path.glob("*.json"))
            except OSError:
                continue
            for room_path in room_files:
                try:
                    payload = json.loads(room_path.read_text(encoding="utf-8"))
                except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
                    LOGGER.warning("Failed to load room file %s: %s", room_path, exc)
                    continue
                if not isinstance(payload, Mapping):
                    continue
                summary = _summarise_room(payload, area, subarea_path.name, room_path.stem)
                if summary is not None:
                    catalog.entries.append(summary)
    LOGGER.info("Loaded metadata for %d rooms", len(catalog))
    return catalog


async def build_room_catalog(root: Path | str, areas: Sequence[str] = AREAS) -> RoomCatalog:
    return await asyncio.to_thread(scan_room_catalog, root, tuple(areas))


def _search_room_file(root: Path, room_name: str) -> Optional[Tuple[str, str, str]]:
    region = root / REGION_DIR
    file_name = f"{room_name_to_file_name(room_name)}.json"
    try:
        areas = _sorted_dirs(region)
    except OSError as exc:
        LOGGER.error("Error reading region directory %s: %s", region, exc)
        return None
    for area_path in areas:
        try:
            subareas = _sorted_dirs(area_path)
        except OSError as exc:
            LOGGER.error("Error reading area %s: %s", area_path.name, exc)
            continue
        for subarea_path in subareas:
            if (subarea_path / file_name).is_file():
                return area_path.name, subarea_path.name, room_name
    return None


async def find_room_by_name(root: Path | str, room_name: str) -> Optional[Tuple[str, str, str]]:
    """
    Search every area and subarea under ``region/`` for a room file.

    Returns ``(area, subarea, room_name)`` or ``None``.
    """

    return await asyncio.to_thread(_search_room_file, Path(root), room_name)


def start_room_path(area_code: str) -> str:
    try:
        return AREA_START_ROOMS[area_code]
    except KeyError as exc:
        raise UnknownAreaError(f"Unknown area: {area_code}") from exc


__all__ = [
    "AREAS",
    "AREA_START_ROOMS",
    "DoorSummary",
    "RoomCatalog",
    "RoomSummary",
    "UnknownAreaError",
    "build_room_catalog",
    "find_room_by_name",
    "scan_room_catalog",
    "start_room_path",
]
