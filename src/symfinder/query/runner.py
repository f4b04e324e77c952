"""Run the indexer and capture its standard output."""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
import threading
from dataclasses import dataclass
from typing import IO, Sequence

from symfinder.config import DEFAULT_CHUNK_SIZE
from symfinder.errors import EmptyResult, OutOfMemory, QueryTimeout, SpawnFailure, StreamReadError

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RunOutput:
    data: bytes
    length: int


class ProcessRunner:
    """Spawn a command and read everything it writes to stdout.

    Output is read in ``chunk_size`` pieces into a growing buffer until a short
    read signals end of input. The exit status of the child is never inspected:
    only the stream content matters, and an empty stream is an error.
    """

    def __init__(self, *, chunk_size: int = DEFAULT_CHUNK_SIZE, timeout: float | None = None) -> None:
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self.chunk_size = chunk_size
        self.timeout = timeout

    def run(self, argv: Sequence[str]) -> RunOutput:
        command = list(argv)
        LOGGER.debug("Running: %s", " ".join(shlex.quote(part) for part in command))
        try:
            proc = subprocess.Popen(
                command,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
            )
        except (OSError, ValueError) as exc:
            LOGGER.error("Unable to start %s: %s", command[0] if command else "<empty>", exc)
            raise SpawnFailure(f"Unable to start {command[0] if command else '<empty>'}: {exc}") from exc

        timed_out = threading.Event()
        timer = None
        if self.timeout is not None:
            timer = threading.Timer(self.timeout, self._kill, args=(proc, timed_out))
            timer.daemon = True
            timer.start()

        try:
            buffer = self._read_all(proc.stdout)
        finally:
            if timer is not None:
                timer.cancel()
            proc.stdout.close()
            returncode = proc.wait()
            LOGGER.debug("%s exited with status %s", command[0], returncode)

        if timed_out.is_set() and self._killed(returncode):
            LOGGER.error("%s timed out after %ss", command[0], self.timeout)
            raise QueryTimeout(f"{command[0]} timed out after {self.timeout}s")
        if not buffer:
            raise EmptyResult(f"{command[0]} produced no output")

        LOGGER.debug("Captured %d bytes from %s", len(buffer), command[0])
        return RunOutput(data=bytes(buffer), length=len(buffer))

    def _read_all(self, stream: IO[bytes]) -> bytearray:
        buffer = bytearray()
        while True:
            try:
                chunk = stream.read(self.chunk_size)
                buffer += chunk
            except MemoryError as exc:
                raise OutOfMemory("Unable to grow the output buffer") from exc
            except OSError as exc:
                LOGGER.error("Failed reading indexer output: %s", exc)
                raise StreamReadError(f"Failed reading indexer output: {exc}") from exc
            if len(chunk) < self.chunk_size:
                return buffer

    @staticmethod
    def _kill(proc: subprocess.Popen, timed_out: threading.Event) -> None:
        # A child that already exited has written all of its output.
        if proc.poll() is not None:
            return
        timed_out.set()
        proc.kill()

    @staticmethod
    def _killed(returncode: int) -> bool:
        """Whether the child ended by our kill rather than a normal exit."""
        if os.name == "posix":
            return returncode < 0
        return True
