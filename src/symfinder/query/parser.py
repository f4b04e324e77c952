"""Parse single lines of cscope line-oriented output.

Each line has the shape ``<file> <scope> <line> <context...>``. The first three
fields end at a single space; the context runs to the end of the line. Field
sizes are bounded and overflowing text is cut rather than rejected, so every
line yields a record. Truncation points match the classic fixed-size buffers
used by cscope front-ends:

* file keeps at most ``FILE_CAPACITY - 1`` bytes,
* scope keeps at most ``SCOPE_CAPACITY - 1`` bytes,
* the line number is read from at most ``LINE_DIGITS`` bytes,
* an overflowing context keeps ``CONTEXT_CAPACITY - 2`` bytes.

Bounds apply to the UTF-8 bytes of each field. Lines are expected to be
decoded with ``surrogateescape`` so undecodable bytes survive the round trip.
"""

from __future__ import annotations

import re
from typing import Tuple

from symfinder.models import QueryRecord

FILE_CAPACITY = 1024
SCOPE_CAPACITY = 256
LINE_DIGITS = 7
CONTEXT_CAPACITY = 1024

_SEPARATOR = " "
_CONTEXT_TERMINATORS = ("\n", "\0")
_ATOI = re.compile(r"\s*([+-]?\d+)")
_ENCODING = "utf-8"
_ERRORS = "surrogateescape"


def _byte_length(text: str) -> int:
    return len(text.encode(_ENCODING, _ERRORS))


def _clip(text: str, limit: int) -> str:
    """Keep the first ``limit`` bytes of ``text``."""
    return text.encode(_ENCODING, _ERRORS)[:limit].decode(_ENCODING, _ERRORS)


def _take_field(line: str, start: int, limit: int) -> Tuple[str, int, bool]:
    """Consume up to the next separator, keeping at most ``limit`` bytes.

    Returns the kept text, the position after the separator and whether the
    field was cut. When no separator is left the rest of the line is consumed
    and the position is the end of the line.
    """
    end = line.find(_SEPARATOR, start)
    if end < 0:
        end = len(line)
        next_start = end
    else:
        next_start = end + 1
    raw = line[start:end]
    if _byte_length(raw) > limit:
        return _clip(raw, limit), next_start, True
    return raw, next_start, False


def _take_context(line: str, start: int) -> Tuple[str, bool]:
    context = line[start:]
    for terminator in _CONTEXT_TERMINATORS:
        cut = context.find(terminator)
        if cut >= 0:
            context = context[:cut]
    if _byte_length(context) > CONTEXT_CAPACITY - 1:
        return _clip(context, CONTEXT_CAPACITY - 2), True
    return context, False


def atoi(text: str) -> int:
    """C ``atoi``: leading whitespace, optional sign, digits; 0 when nothing parses."""
    match = _ATOI.match(text)
    return int(match.group(1)) if match else 0


def parse_line(line: str) -> QueryRecord:
    """Split one output line into a :class:`QueryRecord`."""
    file, pos, file_cut = _take_field(line, 0, FILE_CAPACITY - 1)
    scope, pos, scope_cut = _take_field(line, pos, SCOPE_CAPACITY - 1)
    digits, pos, _ = _take_field(line, pos, LINE_DIGITS)
    context, context_cut = _take_context(line, pos)
    return QueryRecord(
        file=file,
        scope=scope,
        line=atoi(digits),
        context=context,
        truncated=file_cut or scope_cut or context_cut,
    )
