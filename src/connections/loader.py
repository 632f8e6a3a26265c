"""
Loads connection documents from a working root.

A missing or broken connection file is an ordinary situation (an area with no
intra-area links, a half-authored subarea) so the loader never raises for it.
Every call yields either :class:`Loaded` or :class:`Absent`.
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from jsonschema import Draft7Validator

from .models import Connection, ConnectionDataError, ConnectionDocument

LOGGER = logging.getLogger(__name__)

DEFAULT_SCHEMA_PATH = Path(__file__).resolve().parent / "schemas" / "connection_document.json"

CONNECTION_DIR = "connection"
AREA_SCOPE_FILE = "intra.json"
GLOBAL_SCOPE_FILE = "inter.json"

MISSING = "missing"
UNREADABLE = "unreadable"
INVALID_JSON = "invalid-json"
INVALID_SCHEMA = "invalid-schema"


def room_scope_path(area: str, subarea: str) -> str:
    return f"{CONNECTION_DIR}/{area}/{subarea}.json"


def area_scope_path(area: str) -> str:
    return f"{CONNECTION_DIR}/{area}/{AREA_SCOPE_FILE}"


def global_scope_path() -> str:
    return f"{CONNECTION_DIR}/{GLOBAL_SCOPE_FILE}"


@lru_cache(maxsize=4)
def load_schema(path: Path = DEFAULT_SCHEMA_PATH) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def make_connection_validator(path: Optional[Path] = None) -> Draft7Validator:
    """Validator for a single entry of the ``connections`` array."""

    schema = load_schema(path or DEFAULT_SCHEMA_PATH)
    return Draft7Validator({"$ref": "#/definitions/connection", "definitions": schema.get("definitions", {})})


@dataclass(frozen=True)
class Loaded:
    document: ConnectionDocument
    path: Path
    skipped: Tuple[str, ...] = ()

    @property
    def is_loaded(self) -> bool:
        return True


@dataclass(frozen=True)
class Absent:
    path: Path
    reason: str
    detail: Optional[str] = None

    @property
    def document(self) -> None:
        return None

    @property
    def is_loaded(self) -> bool:
        return False


LoadResult = Union[Loaded, Absent]


class ConnectionDocumentLoader:
    """
    Reads connection documents relative to a working root.

    Parameters
    ----------
    root:
        Working root; logical paths such as ``connection/inter.json`` are
        resolved against it.
    validate:
        When ``True`` (default) each connection entry is checked against the
        bundled JSON schema before it is converted. Entries that fail are
        skipped and logged; the rest of the document still loads.
    schema_path:
        Optional override for the schema file.
    """

    def __init__(
        self,
        root: Path | str,
        *,
        validate: bool = True,
        schema_path: Optional[Path] = None,
    ) -> None:
        self.root = Path(root)
        self._entry_validator: Optional[Draft7Validator] = (
            make_connection_validator(schema_path) if validate else None
        )

    def resolve_path(self, logical_path: str) -> Path:
        return self.root / logical_path

    async def load(self, logical_path: str) -> LoadResult:
        path = self.resolve_path(logical_path)
        try:
            text = await asyncio.to_thread(path.read_text, encoding="utf-8")
        except FileNotFoundError:
            LOGGER.debug("No connection document at %s", path)
            return Absent(path, MISSING)
        except (OSError, UnicodeDecodeError) as exc:
            LOGGER.warning("Unable to read connection document %s: %s", path, exc)
            return Absent(path, UNREADABLE, str(exc))
        return self.parse(text, path)

    def parse(self, text: str, path: Path) -> LoadResult:
        """Turn raw file contents into a load result."""

        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            LOGGER.warning("Connection document %s is not valid JSON: %s", path, exc)
            return Absent(path, INVALID_JSON, str(exc))

        if not isinstance(payload, Mapping):
            detail = f"expected an object, got {type(payload).__name__}"
            LOGGER.warning("Connection document %s is malformed: %s", path, detail)
            return Absent(path, INVALID_SCHEMA, detail)
        entries = payload.get("connections")
        if not isinstance(entries, list):
            detail = "'connections' must be a list"
            LOGGER.warning("Connection document %s is malformed: %s", path, detail)
            return Absent(path, INVALID_SCHEMA, detail)

        connections: List[Connection] = []
        skipped: List[str] = []
        for index, entry in enumerate(entries):
            problem = self._check_entry(entry)
            if problem is None:
                try:
                    connections.append(Connection.from_payload(entry))
                    continue
                except ConnectionDataError as exc:
                    problem = "; ".join(exc.errors) or str(exc)
            skipped.append(f"connections[{index}]: {problem}")

        if skipped:
            LOGGER.warning(
                "Skipped %d malformed connection(s) in %s: %s",
                len(skipped),
                path,
                "; ".join(skipped[:5]),
            )
        return Loaded(document=ConnectionDocument(tuple(connections)), path=path, skipped=tuple(skipped))

    def _check_entry(self, entry: Any) -> Optional[str]:
        if self._entry_validator is None:
            return None
        errors = list(self._entry_validator.iter_errors(entry))
        if not errors:
            return None
        return "; ".join(err.message for err in errors[:3])


__all__ = [
    "Absent",
    "ConnectionDocumentLoader",
    "DEFAULT_SCHEMA_PATH",
    "INVALID_JSON",
    "INVALID_SCHEMA",
    "LoadResult",
    "Loaded",
    "MISSING",
    "UNREADABLE",
    "area_scope_path",
    "global_scope_path",
    "load_schema",
    "make_connection_validator",
    "room_scope_path",
]
