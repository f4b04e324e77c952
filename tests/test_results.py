"""Tests for the result set builder."""

from __future__ import annotations

import logging
from pathlib import Path
from unittest.mock import patch

import pytest

from symfinder.errors import OutOfMemory
from symfinder.query.results import (
    build_records,
    build_result_set,
    count_lines,
    decode_output,
    printable,
)


class TestCountLines:
    """Test count_lines helper."""

    def test_empty(self) -> None:
        """No bytes, no lines."""
        assert count_lines(b"") == 0

    def test_terminated_lines(self) -> None:
        """Each newline ends one line."""
        assert count_lines(b"a\nb\nc\n") == 3

    def test_trailing_partial_line(self) -> None:
        """A last line without newline still counts."""
        assert count_lines(b"a\nb") == 2


class TestBuildRecords:
    """Test build_records."""

    def test_records_in_input_order(self) -> None:
        """N lines give N records in the same order."""
        raw = b"".join(f"f{i}.c s {i + 1} line {i}\n".encode() for i in range(25))

        records = build_records(raw, count_lines(raw))

        assert len(records) == 25
        assert [r.file for r in records] == [f"f{i}.c" for i in range(25)]
        assert [r.line for r in records] == list(range(1, 26))

    def test_empty_output(self) -> None:
        """Empty output gives no records."""
        assert build_records(b"", 0) == []

    def test_blank_lines_skipped(self) -> None:
        """Adjacent newlines do not produce empty records."""
        raw = b"\n\na.c f 1 x\n\n\nb.c g 2 y\n"

        records = build_records(raw, count_lines(raw))

        assert [r.file for r in records] == ["a.c", "b.c"]

    def test_line_count_bounds_output(self, caplog: pytest.LogCaptureFixture) -> None:
        """Never produces more records than the hint allows."""
        raw = b"a.c f 1 x\nb.c g 2 y\nc.c h 3 z\n"

        with caplog.at_level(logging.WARNING):
            records = build_records(raw, 2)

        assert [r.file for r in records] == ["a.c", "b.c"]
        assert "more lines than expected" in caplog.text

    def test_invalid_utf8_round_trips(self) -> None:
        """Undecodable bytes survive parsing and encode back unchanged."""
        records = build_records(b"caf\xe9.c f 1 caf\xe9\n", 1)

        assert records[0].file.encode("utf-8", "surrogateescape") == b"caf\xe9.c"
        assert records[0].context.encode("utf-8", "surrogateescape") == b"caf\xe9"
        assert printable(records[0].context) == "caf\N{REPLACEMENT CHARACTER}"

    def test_memory_error_becomes_out_of_memory(self) -> None:
        """Allocation failures surface as OutOfMemory."""
        with patch("symfinder.query.results.parse_line", side_effect=MemoryError):
            with pytest.raises(OutOfMemory):
                build_records(b"a.c f 1 x\n", 1)


class TestBuildResultSet:
    """Test build_result_set."""

    def test_keeps_raw_output_with_records(self) -> None:
        """Records and raw output travel together."""
        raw = b"src/foo.c main 42 int foo(void) {\n"

        results = build_result_set(raw, generation=3, index_directory=Path("/idx"))

        assert results.raw == raw
        assert results.line_count == 1
        assert results.generation == 3
        assert results.index_directory == Path("/idx")
        assert results.records[0].file == "src/foo.c"

    def test_decode_output(self) -> None:
        """Output is decoded as UTF-8."""
        assert decode_output("é".encode()) == "é"


class TestPrintable:
    """Test printable helper."""

    def test_valid_text_unchanged(self) -> None:
        """Decodable text is returned as is."""
        assert printable("int café;") == "int café;"

    def test_surrogates_replaced(self) -> None:
        """Escaped bytes become replacement characters."""
        assert printable(decode_output(b"x\xffy")) == "x\N{REPLACEMENT CHARACTER}y"
