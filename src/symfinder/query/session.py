"""Query session: builds indexer commands and keeps the current result set."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Tuple

from symfinder.config import AppConfig
from symfinder.errors import QueryError, QueryFailed, ValidationError, ValidationErrorKind
from symfinder.models import Location, Operation, QueryRecord, ResultSet
from symfinder.query.results import build_result_set
from symfinder.query.runner import ProcessRunner
from symfinder.utils.paths import validate_index_directory

LOGGER = logging.getLogger(__name__)


class QuerySession:
    """Single active query context.

    A failed query leaves the previous result set in place. A successful one
    replaces it wholesale and bumps ``generation`` so views rendered from older
    results can be told apart.
    """

    def __init__(self, config: AppConfig | None = None, *, runner: ProcessRunner | None = None) -> None:
        self.config = config or AppConfig()
        self.runner = runner or ProcessRunner(
            chunk_size=self.config.chunk_size, timeout=self.config.timeout
        )
        self.index_directory: Path | None = None
        self.operation = Operation.SYMBOL
        self.symbol: str | None = None
        self._results: ResultSet | None = None
        self._generation = 0

    @property
    def results(self) -> ResultSet | None:
        return self._results

    @property
    def records(self) -> Tuple[QueryRecord, ...]:
        return self._results.records if self._results is not None else ()

    @property
    def generation(self) -> int:
        return self._generation

    def set_index_directory(self, candidate: str) -> Path:
        """Validate and store the index directory; reset it on any error."""
        try:
            directory = validate_index_directory(candidate, self.config.database_name)
        except ValidationError as exc:
            self.index_directory = None
            LOGGER.warning("Rejected index directory %r: %s", candidate, exc.message)
            raise
        self.index_directory = directory
        LOGGER.info("Using index directory %s", directory)
        return directory

    def build_command(self, operation: Operation, symbol: str, index_directory: Path) -> List[str]:
        database = self.config.resolve_database_path(Path(index_directory))
        return [
            self.config.tool,
            "-p8",
            "-d",
            "-f",
            str(database),
            f"-L{int(operation)}",
            symbol,
        ]

    def execute_query(
        self,
        symbol: str,
        operation: Operation = Operation.SYMBOL,
        index_directory: Path | None = None,
    ) -> ResultSet:
        """Run one query and make its records the current result set."""
        directory = Path(index_directory) if index_directory is not None else self.index_directory
        if directory is None:
            raise ValidationError(ValidationErrorKind.NOT_SET, "Symbol directory is not set")

        operation = Operation(operation)
        LOGGER.info("Query %s for %r in %s", operation.name, symbol, directory)

        command = self.build_command(operation, symbol, directory)
        try:
            output = self.runner.run(command)
            results = build_result_set(
                output.data, generation=self._generation + 1, index_directory=directory
            )
        except QueryError as exc:
            LOGGER.error("Query for %r failed: %s", symbol, exc)
            raise QueryFailed(exc) from exc

        self._generation = results.generation
        self._results = results
        self.operation = operation
        self.symbol = symbol
        LOGGER.info("Query returned %d records", len(results))
        return results

    def select_record(self, index: int, *, generation: int | None = None) -> Location | None:
        """Resolve record ``index`` to a location, or ``None`` when out of range."""
        results = self._results
        if results is None or results.index_directory is None:
            return None
        if generation is not None and generation != results.generation:
            LOGGER.debug("Ignoring selection from stale generation %s", generation)
            return None
        if index < 0 or index >= len(results.records):
            return None
        record = results.records[index]
        return Location(path=results.index_directory / record.file, line=record.line)
