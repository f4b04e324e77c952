"""Core SymFinder data models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import Tuple


class Operation(IntEnum):
    """cscope line-oriented query codes (``-L<code>``)."""

    SYMBOL = 0
    GLOBAL_DEFINITION = 1
    CALLED_BY = 2
    CALLING = 3
    TEXT = 4
    EGREP = 6
    FILE = 7
    INCLUDING = 8
    ASSIGNMENTS = 9

    @property
    def prompt(self) -> str:
        return _PROMPTS[self]

    @classmethod
    def from_code(cls, code: int) -> "Operation":
        try:
            return cls(code)
        except ValueError:
            raise ValueError(f"Unknown cscope operation code: {code}") from None


_PROMPTS = {
    Operation.SYMBOL: "Symbol: ",
    Operation.GLOBAL_DEFINITION: "Symbol (definition): ",
    Operation.CALLED_BY: "Functions called by: ",
    Operation.CALLING: "Functions calling: ",
    Operation.TEXT: "Text string: ",
    Operation.EGREP: "Egrep pattern: ",
    Operation.FILE: "File: ",
    Operation.INCLUDING: "Files #including: ",
    Operation.ASSIGNMENTS: "Assignments to: ",
}


@dataclass(frozen=True, slots=True)
class QueryRecord:
    """One parsed line of cscope output."""

    file: str
    scope: str
    line: int
    context: str
    truncated: bool = False


@dataclass(frozen=True, slots=True)
class Location:
    """Navigable source position."""

    path: Path
    line: int


@dataclass(frozen=True, slots=True)
class ResultSet:
    """Records of one query together with the raw output they came from."""

    records: Tuple[QueryRecord, ...]
    raw: bytes
    line_count: int
    generation: int = 0
    index_directory: Path | None = None

    def __len__(self) -> int:
        return len(self.records)
