"""Shared fixtures for SymFinder tests."""

from __future__ import annotations

from pathlib import Path
from typing import List, Sequence

import pytest

from symfinder.query.runner import RunOutput

SAMPLE_OUTPUT = (
    b"src/foo.c main 42 int foo(void) {\n"
    b"src/bar.c bar_init 7 foo();\n"
    b"include/foo.h <global> 3 int foo(void);\n"
)


class FakeRunner:
    """Stands in for ProcessRunner, replaying queued outputs or errors."""

    def __init__(self) -> None:
        self.outputs: List[object] = []
        self.calls: List[List[str]] = []

    def queue(self, *outputs: object) -> "FakeRunner":
        self.outputs.extend(outputs)
        return self

    def run(self, argv: Sequence[str]) -> RunOutput:
        self.calls.append(list(argv))
        outcome = self.outputs.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return RunOutput(data=outcome, length=len(outcome))


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def index_dir(tmp_path: Path) -> Path:
    """Directory with an (empty) cscope database and the files it mentions."""
    directory = tmp_path / "proj"
    (directory / "src").mkdir(parents=True)
    (directory / "include").mkdir()
    (directory / "cscope.out").write_text("cscope 15 $HOME/proj 0000000123\n")
    (directory / "src" / "foo.c").write_text("int foo(void) {\n")
    (directory / "src" / "bar.c").write_text("foo();\n")
    (directory / "include" / "foo.h").write_text("int foo(void);\n")
    return directory


@pytest.fixture
def sample_output() -> bytes:
    return SAMPLE_OUTPUT
