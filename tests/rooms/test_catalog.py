from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from rooms.catalog import (
    AREA_START_ROOMS,
    AREAS,
    UnknownAreaError,
    build_room_catalog,
    find_room_by_name,
    start_room_path,
)


def _room(name: str, *doors: dict) -> dict:
    return {"id": 1, "name": name, "roomAddress": "0x0", "nodes": list(doors)}


def _door(name: str, orientation: str) -> dict:
    return {"id": 9, "nodeType": "door", "name": name, "doorOrientation": orientation, "nodeAddress": "0x9"}


def test_catalog_collects_rooms_and_doors(working_root: Path, write_json) -> None:
    write_json("region/AQA/Upper East AQA/Zeta.json", _room("Zeta", _door("East Door", "right")))
    write_json("region/AQA/Lower AQA/Alpha.json", _room("Alpha"))
    write_json("region/NOC/Upper NOC/Mid.json", _room("Mid", _door("West Door", "left"), {"id": 2, "nodeType": "item"}))

    catalog = asyncio.run(build_room_catalog(working_root))

    assert len(catalog) == 3
    assert [room.name for room in catalog.rooms()] == ["Alpha", "Mid", "Zeta"]
    mid = catalog.rooms()[1]
    assert (mid.area, mid.subarea, mid.file_stem) == ("NOC", "Upper NOC", "Mid")
    assert [door.orientation for door in mid.doors] == ["left"]


def test_catalog_skips_broken_files_and_unknown_areas(working_root: Path, write_json, caplog) -> None:
    write_json("region/AQA/Sub/Good.json", _room("Good"))
    write_json("region/AQA/Sub/NoNodes.json", {"name": "NoNodes"})
    write_json("region/ZZZ/Sub/Elsewhere.json", _room("Elsewhere"))
    broken = working_root / "region" / "AQA" / "Sub" / "Broken.json"
    broken.write_text("{", encoding="utf-8")

    with caplog.at_level("WARNING"):
        catalog = asyncio.run(build_room_catalog(working_root))

    assert [room.name for room in catalog.rooms()] == ["Good"]
    assert "Failed to load room file" in caplog.text


def test_catalog_find_by_name(working_root: Path, write_json) -> None:
    write_json("region/AQA/Upper East AQA/North Hall _ South Hall.json", _room("North Hall / South Hall"))
    write_json("region/NOC/Upper NOC/Renamed.json", _room("Old Name"))

    catalog = asyncio.run(build_room_catalog(working_root))

    assert catalog.find_by_name("North Hall / South Hall") == ("AQA", "Upper East AQA", "North Hall / South Hall")
    assert catalog.find_by_name("Renamed") == ("NOC", "Upper NOC", "Renamed")
    assert catalog.find_by_name("Old Name") == ("NOC", "Upper NOC", "Renamed")
    assert catalog.find_by_name("Missing") is None


def test_catalog_without_region_is_empty(working_root: Path) -> None:
    catalog = asyncio.run(build_room_catalog(working_root, ["AQA"]))
    assert len(catalog) == 0


def test_find_room_by_name_searches_all_areas(working_root: Path, write_json) -> None:
    write_json("region/ZZZ/Hidden/Secret _ Annex.json", _room("Secret / Annex"))

    found = asyncio.run(find_room_by_name(working_root, "Secret / Annex"))

    assert found == ("ZZZ", "Hidden", "Secret / Annex")
    assert asyncio.run(find_room_by_name(working_root, "Missing")) is None


def test_start_rooms_cover_every_area() -> None:
    assert set(AREA_START_ROOMS) == set(AREAS)
    assert start_room_path("AQA") == "AQA/Upper East AQA/AQA-ARC Elevator"
    with pytest.raises(UnknownAreaError):
        start_room_path("XYZ")
