"""Index directory resolution and validation."""

from __future__ import annotations

import errno
import os
import stat
from pathlib import Path

from symfinder.config import DEFAULT_DATABASE
from symfinder.errors import ValidationError, ValidationErrorKind


def home_directory() -> str:
    """Return ``$HOME``, falling back to the password database entry."""
    home = os.environ.get("HOME")
    if home:
        return home
    import pwd

    return pwd.getpwuid(os.getuid()).pw_dir


def expand_index_directory(candidate: str) -> Path:
    """Expand a leading ``~`` and require an absolute path.

    ``~`` is always the current user's home: ``~src`` means ``$HOME/src``.
    """
    if candidate.startswith("~"):
        rest = candidate[1:]
        if rest.startswith("/"):
            rest = rest[1:]
        return Path(home_directory()) / rest
    if candidate.startswith("/"):
        return Path(candidate)
    raise ValidationError(ValidationErrorKind.NOT_ABSOLUTE, "Please provide absolute path.")


def _stat(path: Path, missing: ValidationError, failed: ValidationError) -> os.stat_result:
    try:
        return path.stat()
    except OSError as exc:
        if exc.errno == errno.ENOENT:
            raise missing from exc
        raise failed from exc


def validate_index_directory(candidate: str, database_name: str = DEFAULT_DATABASE) -> Path:
    """Resolve ``candidate`` and check it holds a cscope database file."""
    directory = expand_index_directory(candidate.strip())

    info = _stat(
        directory,
        ValidationError(ValidationErrorKind.NOT_FOUND, "Symbol directory doesn't exist"),
        ValidationError(ValidationErrorKind.STAT_FAILED, "Unknown error in checking symbol directory"),
    )
    if not stat.S_ISDIR(info.st_mode):
        raise ValidationError(ValidationErrorKind.NOT_A_DIRECTORY, "Symbol path is not a directory")

    database = directory / database_name
    info = _stat(
        database,
        ValidationError(ValidationErrorKind.DATABASE_MISSING, f"Not cscope database found at: {directory}"),
        ValidationError(ValidationErrorKind.STAT_FAILED, "Unknown error in checking cscope database"),
    )
    if not stat.S_ISREG(info.st_mode):
        raise ValidationError(
            ValidationErrorKind.DATABASE_NOT_REGULAR_FILE, f"{database} is not a regular file"
        )
    return directory
