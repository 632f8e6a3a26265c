from __future__ import annotations

import asyncio
import json
from pathlib import Path

import pytest

from editor import EditorConfig, EditorSession
from editor.config import ENV_VALIDATE_DOCUMENTS, ENV_WORKING_ROOT
from rooms.catalog import UnknownAreaError
from rooms.directions import match_door_connection


def _write(root: Path, relative: str, payload) -> None:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload), encoding="utf-8")


def _endpoint(roomid, nodeid, room_name, node_name, area, subarea, position):
    return {
        "roomid": roomid,
        "nodeid": nodeid,
        "roomName": room_name,
        "nodeName": node_name,
        "area": area,
        "subarea": subarea,
        "position": position,
    }


def _build_world(root: Path, *, target_room: str = "Y") -> None:
    _write(
        root,
        "region/AQA/Upper East AQA/AQA-ARC Elevator.json",
        {
            "id": 100,
            "name": "AQA-ARC Elevator",
            "area": "AQA",
            "subarea": "Upper East AQA",
            "nodes": [
                {"id": 5, "nodeType": "door", "name": "East Door", "doorOrientation": "right"},
                {"id": 6, "nodeType": "door", "name": "West Door", "doorOrientation": "left"},
            ],
        },
    )
    _write(
        root,
        f"region/AQA/Other/{target_room}.json",
        {"id": 200, "name": target_room, "area": "AQA", "subarea": "Other", "nodes": []},
    )
    _write(
        root,
        "region/ARC/Upper ARC/Far Room.json",
        {"id": 300, "name": "Far Room", "nodes": []},
    )
    _write(
        root,
        "connection/AQA/Upper East AQA.json",
        {
            "connections": [
                {
                    "direction": "Bidirectional",
                    "connectionType": "HorizontalDoor",
                    "nodes": [
                        _endpoint(100, 5, "AQA-ARC Elevator", "AQA-ARC Elevator - East Door", "AQA", "Upper East AQA", "left"),
                        _endpoint(200, 9, target_room, f"{target_room} - West Door", "AQA", "Other", "right"),
                    ],
                }
            ]
        },
    )
    _write(
        root,
        "connection/inter.json",
        {
            "connections": [
                {
                    "direction": "Forward",
                    "connectionType": "HorizontalDoor",
                    "nodes": [
                        _endpoint(100, 6, "AQA-ARC Elevator", "AQA-ARC Elevator - West Door", "AQA", "Upper East AQA", "right"),
                        # No area/subarea: navigation falls back to a name search.
                        _endpoint(300, 1, "Far Room", "Far Room - East Door", "", "", "left"),
                    ],
                }
            ]
        },
    )


def test_requires_working_root() -> None:
    session = EditorSession()
    with pytest.raises(RuntimeError):
        asyncio.run(session.open_room("AQA", "Upper East AQA", "AQA-ARC Elevator"))


def test_door_connections_for_open_room(working_root: Path) -> None:
    _build_world(working_root)

    async def scenario():
        session = await EditorSession.open(EditorConfig(working_root=working_root))
        await session.navigate_to_area("AQA")
        return session, await session.door_connections()

    session, connections = asyncio.run(scenario())

    assert sorted(connections) == ["East Door", "West Door"]
    assert connections["East Door"].target_room == "Y"
    assert connections["West Door"].target_room == "Far Room"
    assert match_door_connection(connections, "right")[0] == "East Door"
    assert len(session.catalog) == 3


def test_navigate_through_door_uses_area_and_subarea(working_root: Path) -> None:
    _build_world(working_root)

    async def scenario():
        session = await EditorSession.open(EditorConfig(working_root=working_root))
        room = await session.open_room_path("AQA/Upper East AQA/AQA-ARC Elevator")
        door = room.find_door(5)
        resolved = await session.resolve_door(door)
        return await session.navigate_through_door(resolved)

    target = asyncio.run(scenario())

    assert target is not None
    assert target.identity.room_id == 200


def test_navigate_through_door_searches_by_name(working_root: Path) -> None:
    _build_world(working_root)

    async def scenario():
        session = await EditorSession.open(EditorConfig(working_root=working_root))
        room = await session.open_room_path("AQA/Upper East AQA/AQA-ARC Elevator")
        resolved = await session.resolve_door(room.find_door(6))
        target = await session.navigate_through_door(resolved)
        return session, target

    session, target = asyncio.run(scenario())

    assert target is not None
    assert target.identity.room_id == 300
    assert session.current_room is target


def test_navigate_to_room_uses_catalog(working_root: Path, monkeypatch) -> None:
    _build_world(working_root)

    async def no_search(root, room_name):
        raise AssertionError(f"filesystem search for {room_name}")

    monkeypatch.setattr("editor.session.find_room_by_name", no_search)

    async def scenario():
        session = await EditorSession.open(EditorConfig(working_root=working_root))
        return await session.navigate_to_room("Far Room")

    target = asyncio.run(scenario())

    assert target.identity.room_id == 300


def test_navigate_to_room_falls_back_outside_catalog(working_root: Path) -> None:
    _build_world(working_root)
    _write(working_root, "region/ZZZ/Hidden/Annex.json", {"id": 400, "name": "Annex", "nodes": []})

    async def scenario():
        session = await EditorSession.open(EditorConfig(working_root=working_root))
        assert session.catalog.find_by_name("Annex") is None
        return await session.navigate_to_room("Annex"), await session.navigate_to_room("Nowhere")

    found, missing = asyncio.run(scenario())

    assert found.identity.room_id == 400
    assert found.identity.area == "ZZZ"
    assert missing is None


def test_navigate_through_missing_connection(working_root: Path) -> None:
    _build_world(working_root)
    session = asyncio.run(EditorSession.open(EditorConfig(working_root=working_root)))

    assert asyncio.run(session.navigate_through_door(None)) is None


def test_unknown_area(working_root: Path) -> None:
    session = asyncio.run(EditorSession.open(EditorConfig(working_root=working_root)))

    with pytest.raises(UnknownAreaError):
        asyncio.run(session.navigate_to_area("XYZ"))


def test_changing_working_root_invalidates_cache(tmp_path: Path) -> None:
    first_root = tmp_path / "first"
    second_root = tmp_path / "second"
    _build_world(first_root, target_room="Y")
    _build_world(second_root, target_room="Q")

    async def scenario():
        session = await EditorSession.open(EditorConfig(working_root=first_root))
        await session.navigate_to_area("AQA")
        before = await session.door_connections()
        assert len(session.cache) > 0

        await session.set_working_root(second_root)
        assert len(session.cache) == 0
        assert session.current_room is None

        await session.navigate_to_area("AQA")
        after = await session.door_connections()
        return before, after

    before, after = asyncio.run(scenario())

    assert before["East Door"].target_room == "Y"
    assert after["East Door"].target_room == "Q"


def test_config_from_env(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv(ENV_WORKING_ROOT, str(tmp_path))
    monkeypatch.setenv(ENV_VALIDATE_DOCUMENTS, "0")

    config = EditorConfig.from_env()

    assert config.working_root == tmp_path
    assert config.validate_documents is False


def test_config_defaults(monkeypatch) -> None:
    monkeypatch.delenv(ENV_WORKING_ROOT, raising=False)
    monkeypatch.delenv(ENV_VALIDATE_DOCUMENTS, raising=False)

    config = EditorConfig.from_env()

    assert config.working_root is None
    assert config.validate_documents is True
    assert "AQA" in config.areas
