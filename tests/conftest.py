import json
import sys
from pathlib import Path

import pytest


ROOT_PATH = Path(__file__).resolve().parents[1]
SRC_PATH = ROOT_PATH / "src"
for entry in (str(SRC_PATH), str(ROOT_PATH)):
    if entry not in sys.path:
        sys.path.insert(0, entry)


def _write_json(root: Path, relative: str, payload) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


@pytest.fixture
def working_root(tmp_path: Path) -> Path:
    root = tmp_path / "world"
    root.mkdir()
    return root


@pytest.fixture
def write_json(working_root: Path):
    """Write a JSON payload relative to the working root and return its path."""

    def _write(relative: str, payload) -> Path:
        return _write_json(working_root, relative, payload)

    return _write
