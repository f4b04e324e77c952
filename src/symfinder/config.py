"""Application configuration defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_TOOL = "cscope"
DEFAULT_DATABASE = "cscope.out"
DEFAULT_CHUNK_SIZE = 1024


def _get_default_editor() -> str:
    """Pick the editor used to open results, following the usual Unix variables."""
    return os.environ.get("VISUAL") or os.environ.get("EDITOR") or "vi"


def _get_default_index_dir() -> Path | None:
    value = os.environ.get("SYMFINDER_INDEX_DIR")
    if not value:
        return None
    return Path(value)


@dataclass(slots=True)
class AppConfig:
    index_dir: Path | None = None
    tool: str = DEFAULT_TOOL
    database_name: str = DEFAULT_DATABASE
    chunk_size: int = DEFAULT_CHUNK_SIZE
    timeout: float | None = None
    split_horizontal: bool = True
    editor: str | None = None

    def __post_init__(self) -> None:
        if self.index_dir is None:
            self.index_dir = _get_default_index_dir()
        if self.editor is None:
            self.editor = _get_default_editor()
        if self.chunk_size <= 0:
            raise ValueError("chunk_size must be positive")

    def resolve_database_path(self, index_dir: Path | None = None) -> Path:
        base = index_dir if index_dir is not None else self.index_dir
        if base is None:
            raise ValueError("No index directory configured")
        return Path(base) / self.database_name
