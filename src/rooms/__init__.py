"""Room files, the room catalog and door direction helpers."""

from .catalog import (
    AREAS,
    AREA_START_ROOMS,
    DoorSummary,
    RoomCatalog,
    RoomSummary,
    UnknownAreaError,
    build_room_catalog,
    find_room_by_name,
    start_room_path,
)
from .directions import expected_door_name, format_direction, match_door_connection
from .room_file import (
    LoadedRoom,
    RoomLoadError,
    file_name_to_room_name,
    load_room,
    parse_room_path,
    room_file_path,
    room_name_to_file_name,
)

__all__ = [
    "AREAS",
    "AREA_START_ROOMS",
    "DoorSummary",
    "LoadedRoom",
    "RoomCatalog",
    "RoomLoadError",
    "RoomSummary",
    "UnknownAreaError",
    "build_room_catalog",
    "expected_door_name",
    "file_name_to_room_name",
    "find_room_by_name",
    "format_direction",
    "load_room",
    "match_door_connection",
    "parse_room_path",
    "room_file_path",
    "room_name_to_file_name",
    "start_room_path",
]
