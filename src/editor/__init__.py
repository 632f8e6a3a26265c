"""Editor session wiring for the door connection engine."""

from .config import EditorConfig
from .session import EditorSession

__all__ = ["EditorConfig", "EditorSession"]
