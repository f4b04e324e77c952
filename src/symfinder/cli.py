"""Command line interface for SymFinder."""

from __future__ import annotations

import logging
from typing import Optional

import typer
from rich.columns import Columns
from rich.console import Console, RenderableType
from rich.table import Table

from symfinder.config import AppConfig
from symfinder.errors import QueryFailed, ValidationError
from symfinder.models import Location, Operation, ResultSet
from symfinder.query.results import printable
from symfinder.query.session import QuerySession
from symfinder.ui.listing import ResultListView
from symfinder.ui.navigation import open_file_at_line
from symfinder.web.app import app as web_app


console = Console()
app = typer.Typer(help="SymFinder - browse cscope query results")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _parse_operation(code: int) -> Operation:
    try:
        return Operation.from_code(code)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _open_session(index_dir: Optional[str], config: AppConfig) -> QuerySession:
    session = QuerySession(config)
    candidate = index_dir if index_dir is not None else config.index_dir
    if candidate is None:
        raise typer.BadParameter("No index directory given, use --dir or set SYMFINDER_INDEX_DIR")
    try:
        session.set_index_directory(str(candidate))
    except ValidationError as exc:
        raise typer.BadParameter(exc.message) from exc
    return session


def render_results(results: ResultSet, *, split_horizontal: bool = True) -> RenderableType:
    """Render records as one table, or as locations beside contexts."""
    if split_horizontal:
        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("#", justify="right")
        table.add_column("File")
        table.add_column("Scope")
        table.add_column("Line", justify="right")
        table.add_column("Context")
        for index, record in enumerate(results.records):
            table.add_row(
                str(index),
                printable(record.file),
                printable(record.scope),
                str(record.line),
                printable(record.context),
            )
        return table

    locations = Table(show_header=True, header_style="bold magenta")
    locations.add_column("#", justify="right")
    locations.add_column("File")
    locations.add_column("Line", justify="right")
    contexts = Table(show_header=True, header_style="bold magenta")
    contexts.add_column("Scope")
    contexts.add_column("Context")
    for index, record in enumerate(results.records):
        locations.add_row(str(index), printable(record.file), str(record.line))
        contexts.add_row(printable(record.scope), printable(record.context))
    return Columns([locations, contexts])


def _opener(config: AppConfig):
    def _open(location: Location) -> None:
        open_file_at_line(location.path, location.line, config.editor)

    return _open


def _activate(view: ResultListView, index: int) -> None:
    try:
        location = view.activate(index)
    except FileNotFoundError as exc:
        console.print(f"[red]{printable(str(exc))}[/red]")
        return
    if location is None:
        console.print(f"[yellow]No entry {index}.[/yellow]")


def _run_query(
    symbol: str,
    operation: Operation,
    index_dir: Optional[str],
    select: Optional[int],
    vertical: bool,
    verbose: bool,
) -> None:
    _setup_logging(verbose)
    config = AppConfig(split_horizontal=not vertical)
    session = _open_session(index_dir, config)

    try:
        results = session.execute_query(symbol, operation)
    except QueryFailed as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1)

    if not results.records:
        console.print("[yellow]No matches found.[/yellow]")
        return

    console.print(render_results(results, split_horizontal=config.split_horizontal))
    if select is not None:
        _activate(ResultListView(session, _opener(config)), select)


@app.command()
def query(
    symbol: str = typer.Argument(..., help="Symbol, text or pattern to look up"),
    op: int = typer.Option(0, "--op", help="cscope query code (0-9)"),
    index_dir: Optional[str] = typer.Option(None, "--dir", help="Directory holding cscope.out"),
    select: Optional[int] = typer.Option(None, "--select", help="Open entry number in the editor"),
    vertical: bool = typer.Option(False, "--vertical", help="Show locations beside contexts"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Run any cscope line-oriented query."""
    _run_query(symbol, _parse_operation(op), index_dir, select, vertical, verbose)


@app.command("find-symbol")
def find_symbol(
    symbol: str = typer.Argument(..., help="Symbol to look up"),
    index_dir: Optional[str] = typer.Option(None, "--dir", help="Directory holding cscope.out"),
    select: Optional[int] = typer.Option(None, "--select", help="Open entry number in the editor"),
    vertical: bool = typer.Option(False, "--vertical", help="Show locations beside contexts"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Find all occurrences of a symbol."""
    _run_query(symbol, Operation.SYMBOL, index_dir, select, vertical, verbose)


@app.command("find-definition")
def find_definition(
    symbol: str = typer.Argument(..., help="Symbol to look up"),
    index_dir: Optional[str] = typer.Option(None, "--dir", help="Directory holding cscope.out"),
    select: Optional[int] = typer.Option(None, "--select", help="Open entry number in the editor"),
    vertical: bool = typer.Option(False, "--vertical", help="Show locations beside contexts"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Find the global definition of a symbol."""
    _run_query(symbol, Operation.GLOBAL_DEFINITION, index_dir, select, vertical, verbose)


@app.command()
def interactive(
    index_dir: Optional[str] = typer.Option(None, "--dir", help="Directory holding cscope.out"),
    vertical: bool = typer.Option(False, "--vertical", help="Show locations beside contexts"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Prompt for queries and open selected results in the editor."""
    _setup_logging(verbose)
    config = AppConfig(split_horizontal=not vertical)
    session = QuerySession(config)

    candidate = index_dir if index_dir is not None else config.index_dir
    while session.index_directory is None:
        if candidate is None:
            candidate = typer.prompt("Symbol File Directory")
        try:
            session.set_index_directory(str(candidate))
        except ValidationError as exc:
            console.print(f"[red]{exc.message}[/red]")
            candidate = None

    view: ResultListView | None = None
    while True:
        choice = typer.prompt("Operation (0-9, q to quit)", default="0")
        if choice.strip().lower() == "q":
            return
        try:
            operation = Operation.from_code(int(choice))
        except ValueError:
            console.print(f"[red]Unknown operation: {choice}[/red]")
            continue

        symbol = typer.prompt(operation.prompt.rstrip().rstrip(":"))
        try:
            results = session.execute_query(symbol, operation)
        except QueryFailed as exc:
            console.print(f"[red]{exc}[/red]")
        else:
            view = ResultListView(session, _opener(config))
            console.print(render_results(results, split_horizontal=config.split_horizontal))

        if view is None or not len(view):
            continue
        while True:
            entry = typer.prompt(
                "Entry number (blank for a new query, q to quit)", default="", show_default=False
            )
            entry = entry.strip().lower()
            if not entry:
                break
            if entry == "q":
                return
            try:
                index = int(entry)
            except ValueError:
                console.print(f"[red]Not a number: {entry}[/red]")
                continue
            _activate(view, index)


@app.command()
def web(
    host: str = typer.Option("127.0.0.1", help="Host interface"),
    port: int = typer.Option(8000, help="Server port"),
    index_dir: Optional[str] = typer.Option(None, "--dir", help="Directory holding cscope.out"),
) -> None:
    """Start the web interface."""
    try:
        import uvicorn
    except ImportError as exc:  # pragma: no cover - defensive
        raise typer.BadParameter(
            "uvicorn is not installed. Install the web extras with \"python -m pip install '.[web]'\""
        ) from exc

    config = AppConfig()
    session = QuerySession(config)
    candidate = index_dir if index_dir is not None else config.index_dir
    if candidate is not None:
        try:
            session.set_index_directory(str(candidate))
        except ValidationError as exc:
            console.print(f"[yellow]Warning: {exc.message}, set it from the web API.[/yellow]")
    web_app.state.session = session

    console.print(f"Starting web interface on http://{host}:{port}")
    uvicorn.run(
        web_app,
        host=host,
        port=port,
        reload=False,
        log_level="info",
    )
