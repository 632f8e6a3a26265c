"""Configuration for an editor session."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

from rooms.catalog import AREAS

ENV_WORKING_ROOT = "ROOMEDIT_WORKING_ROOT"
ENV_VALIDATE_DOCUMENTS = "ROOMEDIT_VALIDATE_DOCUMENTS"


@dataclass
class EditorConfig:
    """Configuration for :class:`editor.session.EditorSession`."""

    working_root: Optional[Path] = None
    validate_documents: bool = True
    areas: Tuple[str, ...] = field(default_factory=lambda: tuple(AREAS))

    @classmethod
    def from_env(cls) -> "EditorConfig":
        root = os.getenv(ENV_WORKING_ROOT)
        return cls(
            working_root=Path(root) if root else None,
            validate_documents=os.getenv(ENV_VALIDATE_DOCUMENTS, "1") != "0",
        )


__all__ = ["ENV_VALIDATE_DOCUMENTS", "ENV_WORKING_ROOT", "EditorConfig"]
