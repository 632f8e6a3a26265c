"""
Composite room addressing.

Some rooms pack several logical sub-rooms under one display name, joined with
``" / "`` (``"North Hall / South Hall"``). A node belongs to the sub-room whose
name its own name starts with.
"""

from __future__ import annotations

from typing import FrozenSet, List, Optional

from .models import ConnectionEndpoint

SEPARATOR = " / "

# Single rooms whose names happen to contain the separator.
COMPOSITE_EXCEPTIONS: FrozenSet[str] = frozenset(
    {
        "PYR-TRO Elevator / PYR Entrance Lobby",
    }
)


def is_composite(room_name: Optional[str]) -> bool:
    if not room_name:
        return False
    if room_name in COMPOSITE_EXCEPTIONS:
        return False
    return SEPARATOR in room_name


def composite_segments(room_name: str) -> List[str]:
    """Return the sub-room names in declaration order (one entry if not composite)."""

    if not is_composite(room_name):
        return [room_name]
    return room_name.split(SEPARATOR)


def subroom_of(target_node: ConnectionEndpoint) -> Optional[str]:
    """
    Name the sub-room of a composite room that ``target_node`` sits in.

    Returns ``None`` when the room is not composite or no segment is a literal
    prefix of the node name. The first matching segment wins.
    """

    room_name = target_node.room_name
    node_name = target_node.node_name
    if not room_name or not node_name:
        return None
    if not is_composite(room_name):
        return None
    for segment in composite_segments(room_name):
        if node_name.startswith(segment):
            return segment or None
    return None


__all__ = [
    "COMPOSITE_EXCEPTIONS",
    "SEPARATOR",
    "composite_segments",
    "is_composite",
    "subroom_of",
]
