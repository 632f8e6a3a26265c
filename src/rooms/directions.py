"""
Door orientation names and lookup of a room's door connections by direction.
"""

from __future__ import annotations

from typing import Dict, Iterable, Mapping, Optional, Tuple

from connections.models import ResolvedConnection

DIRECTION_NAMES: Dict[str, str] = {
    "up": "North",
    "down": "South",
    "right": "East",
    "left": "West",
    "north": "North",
    "south": "South",
    "east": "East",
    "west": "West",
    "northwest": "North-West",
    "westnorth": "West-North",
    "northeast": "North-East",
    "eastnorth": "East-North",
    "southwest": "South-West",
    "westsouth": "West-South",
    "southeast": "South-East",
    "eastsouth": "East-South",
    "westupper": "West-Upper",
    "eastupper": "East-Upper",
}

MORPH_BALL_HOLE = "Morph Ball Hole"


def format_direction(orientation: str) -> str:
    """``"northwest"`` -> ``"North-West"``; unknown values are capitalised."""

    name = DIRECTION_NAMES.get(orientation.lower())
    if name is not None:
        return name
    return orientation[:1].upper() + orientation[1:]


def _find_key(names: Iterable[str], formatted: str) -> Optional[str]:
    lowered = [(name, name.lower()) for name in names]
    # Leading word first so "East" never picks up "North-East Door".
    for name, low in lowered:
        if low.startswith(formatted + " "):
            return name
    for name, low in lowered:
        if low.startswith(formatted + "-"):
            return name
    for name, low in lowered:
        if formatted in low:
            return name
    return None


def expected_door_name(door_names: Iterable[str], orientation: str) -> str:
    """
    Name the door a room should have in ``orientation``.

    Door names follow ``"<Direction> Door"`` or ``"<Direction> Morph Ball Hole"``;
    the closest existing name decides which suffix applies.
    """

    formatted = format_direction(orientation)
    key = _find_key(list(door_names), formatted.lower())
    is_morph_ball = key is not None and MORPH_BALL_HOLE.lower() in key.lower()
    return f"{formatted} {MORPH_BALL_HOLE if is_morph_ball else 'Door'}"


def match_door_connection(
    door_connections: Mapping[str, ResolvedConnection],
    orientation: str,
) -> Optional[Tuple[str, ResolvedConnection]]:
    name = expected_door_name(door_connections.keys(), orientation)
    connection = door_connections.get(name)
    if connection is None:
        return None
    return name, connection


__all__ = [
    "DIRECTION_NAMES",
    "MORPH_BALL_HOLE",
    "expected_door_name",
    "format_direction",
    "match_door_connection",
]
