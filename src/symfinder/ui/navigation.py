"""Open search hits in an external editor."""

from __future__ import annotations

import logging
import shlex
import subprocess
from pathlib import Path

LOGGER = logging.getLogger(__name__)


def editor_command(editor: str, path: Path, line: int) -> list[str]:
    """Build ``<editor> +<line> <path>``; ``editor`` may carry its own arguments."""
    command = shlex.split(editor)
    if line > 0:
        command.append(f"+{line}")
    command.append(str(path))
    return command


def open_file_at_line(path: Path, line: int, editor: str, *, wait: bool = True) -> None:
    path = Path(path).expanduser()
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    command = editor_command(editor, path, line)
    LOGGER.debug("Opening %s at line %d with %s", path, line, command[0])
    try:
        proc = subprocess.Popen(command)
    except OSError as exc:
        LOGGER.error("Unable to open %s: %s", path, exc)
        raise
    if wait:
        proc.wait()
