#!/usr/bin/env python3
"""
Tabulate where every door of a room leads.

Each door is resolved against the room, area and global connection documents
of the working root; doors without a connection are listed as such.

Example:
    python scripts/door_report.py \
        --root ~/worlds/fusion \
        --room "AQA/Upper East AQA/AQA-ARC Elevator" \
        --output reports/aqa_arc_elevator.csv
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from connections.models import ResolvedConnection
from editor import EditorConfig, EditorSession
from rooms.room_file import LoadedRoom, RoomLoadError

LOGGER = logging.getLogger("door_report")
NO_CONNECTION = "no connection"
REPORT_COLUMNS = [
    "door",
    "node_id",
    "orientation",
    "status",
    "target_room",
    "target_area",
    "target_subarea",
    "target_subroom",
    "position",
    "direction",
    "connection_type",
]


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Report the destination of every door in a room.")
    parser.add_argument(
        "--root",
        type=Path,
        help="Working root containing region/ and connection/. Defaults to $ROOMEDIT_WORKING_ROOT.",
    )
    parser.add_argument(
        "--room",
        required=True,
        help="Room to inspect as area/subarea/roomName.",
    )
    parser.add_argument(
        "--output",
        type=Path,
        help="Optional CSV or JSON destination (chosen by suffix). Prints the table when omitted.",
    )
    parser.add_argument(
        "--no-validate",
        action="store_true",
        help="Skip JSON schema validation of connection documents.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging (shows which scope each door resolved from).",
    )
    return parser.parse_args(argv)


def _row(door_name: str, node_id: int, orientation: str, resolved: Optional[ResolvedConnection]) -> Dict[str, Any]:
    row: Dict[str, Any] = {column: None for column in REPORT_COLUMNS}
    row.update({"door": door_name, "node_id": node_id, "orientation": orientation})
    if resolved is None:
        row["status"] = NO_CONNECTION
        return row
    row.update(
        {
            "status": "connected",
            "target_room": resolved.target_room,
            "target_area": resolved.target_area,
            "target_subarea": resolved.target_subarea,
            "target_subroom": resolved.target_subroom,
            "position": resolved.position,
            "direction": resolved.direction.value,
            "connection_type": resolved.connection_type,
        }
    )
    return row


async def build_report(session: EditorSession, room: LoadedRoom) -> pd.DataFrame:
    rows: List[Dict[str, Any]] = []
    for door in room.door_nodes():
        resolved = await session.resolve_door(door)
        rows.append(_row(door.name, door.id, door.door_orientation, resolved))
    return pd.DataFrame(rows, columns=REPORT_COLUMNS)


def write_report(report: pd.DataFrame, output_path: Path) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    if output_path.suffix.lower() == ".json":
        report.to_json(output_path, orient="records", indent=2)
    else:
        report.to_csv(output_path, index=False)


async def run(args: argparse.Namespace) -> int:
    config = EditorConfig.from_env()
    if args.root is not None:
        config.working_root = args.root
    if args.no_validate:
        config.validate_documents = False
    if config.working_root is None:
        LOGGER.error("No working root given (use --root or set the environment variable).")
        return 1

    session = await EditorSession.open(config)
    try:
        room = await session.open_room_path(args.room)
    except (RoomLoadError, ValueError) as exc:
        LOGGER.error("%s", exc)
        return 1

    report = await build_report(session, room)
    connected = int((report["status"] != NO_CONNECTION).sum())
    LOGGER.info("Resolved %d of %d door(s) in %s", connected, len(report), room.identity.room_name)

    if args.output is not None:
        write_report(report, args.output)
        LOGGER.info("Wrote %s rows to %s", len(report), args.output)
    else:
        with pd.option_context("display.max_rows", None, "display.max_columns", None, "display.width", 200):
            print(report)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
    )
    return asyncio.run(run(args))


if __name__ == "__main__":
    raise SystemExit(main())
