"""Turn captured indexer output into an ordered result set."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from symfinder.errors import OutOfMemory
from symfinder.models import QueryRecord, ResultSet
from symfinder.query.parser import parse_line

LOGGER = logging.getLogger(__name__)


def decode_output(raw: bytes) -> str:
    """Decode indexer output, keeping undecodable bytes as surrogates."""
    return raw.decode("utf-8", errors="surrogateescape")


def printable(text: str) -> str:
    """Text safe to print or serialize; undecodable bytes become U+FFFD."""
    return text.encode("utf-8", errors="surrogateescape").decode("utf-8", errors="replace")


def count_lines(raw: bytes) -> int:
    """Number of lines in ``raw``, counting a trailing line without newline."""
    if not raw:
        return 0
    count = raw.count(b"\n")
    if not raw.endswith(b"\n"):
        count += 1
    return count


def build_records(raw: bytes, line_count: int) -> List[QueryRecord]:
    """Parse every non-empty line of ``raw`` in order.

    ``line_count`` bounds the number of records produced; lines beyond it are
    dropped with a warning.
    """
    records: List[QueryRecord] = []
    try:
        for token in decode_output(raw).split("\n"):
            if not token:
                continue
            if len(records) >= line_count:
                LOGGER.warning("Output has more lines than expected (%d), ignoring the rest", line_count)
                break
            records.append(parse_line(token))
    except MemoryError as exc:
        raise OutOfMemory("Unable to allocate the result buffer") from exc
    return records


def build_result_set(
    raw: bytes, *, generation: int = 0, index_directory: Path | None = None
) -> ResultSet:
    line_count = count_lines(raw)
    records = build_records(raw, line_count)
    return ResultSet(
        records=tuple(records),
        raw=raw,
        line_count=line_count,
        generation=generation,
        index_directory=index_directory,
    )
