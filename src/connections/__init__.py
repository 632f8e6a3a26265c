"""Door connection resolution: models, document loading, caching and lookup."""

from .cache import ConnectionCache, Scope, ScopeKey
from .composite import COMPOSITE_EXCEPTIONS, SEPARATOR, composite_segments, is_composite, subroom_of
from .loader import (
    Absent,
    ConnectionDocumentLoader,
    Loaded,
    LoadResult,
    area_scope_path,
    global_scope_path,
    room_scope_path,
)
from .models import (
    Connection,
    ConnectionDataError,
    ConnectionDocument,
    ConnectionEndpoint,
    Direction,
    DoorNode,
    ResolvedConnection,
    RoomIdentity,
)
from .resolver import DoorConnectionResolver, match_connection

__all__ = [
    "Absent",
    "COMPOSITE_EXCEPTIONS",
    "Connection",
    "ConnectionCache",
    "ConnectionDataError",
    "ConnectionDocument",
    "ConnectionDocumentLoader",
    "ConnectionEndpoint",
    "Direction",
    "DoorConnectionResolver",
    "DoorNode",
    "LoadResult",
    "Loaded",
    "ResolvedConnection",
    "RoomIdentity",
    "SEPARATOR",
    "Scope",
    "ScopeKey",
    "area_scope_path",
    "composite_segments",
    "global_scope_path",
    "is_composite",
    "match_connection",
    "room_scope_path",
    "subroom_of",
]
