"""Command line interface for phonedir."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from phonedir.config import AppConfig
from phonedir.directory.extractor import load_directory
from phonedir.directory.search import search_directory
from phonedir.errors import DirectoryError
from phonedir.ingestion.source import open_source
from phonedir.models import PersonnelRecord
from phonedir.web.app import app as web_app, configure


console = Console()
app = typer.Typer(help="phonedir - searchable internal phone directory")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _load(config: AppConfig) -> List[PersonnelRecord]:
    location = config.resolve_source(Path.cwd())
    try:
        return load_directory(open_source(location, timeout=config.http_timeout))
    except DirectoryError as exc:
        console.print(f"[red]{exc.user_message}[/red] ({exc.detail})")
        raise typer.Exit(code=1) from exc


@app.command()
def parse(
    source: Optional[str] = typer.Argument(None, help="Spreadsheet path or URL."),
    limit: int = typer.Option(0, help="Show at most this many records (0 = all)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Parse the directory spreadsheet and list its records."""
    _setup_logging(verbose)
    records = _load(AppConfig(source=source))
    if not records:
        console.print("[yellow]No records found.[/yellow]")
        return

    shown = records[:limit] if limit > 0 else records
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Id")
    table.add_column("Name")
    table.add_column("Department")
    table.add_column("Extension")
    for record in shown:
        table.add_row(record.id, record.name, record.department, record.extension)

    console.print(table)
    console.print(f"Records: {len(records)}")


@app.command()
def search(
    query: str = typer.Argument(..., help="Name, surname, department or extension"),
    source: Optional[str] = typer.Option(None, "--source", help="Spreadsheet path or URL"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Search the directory and print results grouped by department."""
    _setup_logging(verbose)
    records = _load(AppConfig(source=source))
    outcome = search_directory(query, records)
    if not outcome.results:
        console.print("[yellow]No matches found.[/yellow]")
        return

    for group in outcome.groups:
        table = Table(title=group.department, show_header=True, header_style="bold magenta")
        table.add_column("Score")
        table.add_column("Name")
        table.add_column("Extension")
        for person in group.personnel:
            table.add_row(str(person.search_score), person.name, person.extension)
        console.print(table)


@app.command()
def web(
    host: str = typer.Option(AppConfig().host, help="Host interface"),
    port: int = typer.Option(AppConfig().port, help="Server port"),
    source: Optional[str] = typer.Option(None, "--source", help="Spreadsheet path or URL"),
) -> None:
    """Start the web interface."""
    try:
        import uvicorn
    except ImportError as exc:  # pragma: no cover - optional extra
        raise typer.BadParameter(
            "uvicorn is not installed. Install the web extras with \"python -m pip install '.[web]'\""
        ) from exc

    config = AppConfig(source=source)
    location = config.resolve_source(Path.cwd())
    if not config.is_remote and not Path(location).exists():
        console.print("[yellow]Warning: directory file not found, searches will fail until it exists.[/yellow]")

    configure(config)
    console.print(f"Starting web interface on http://{host}:{port} (directory: {location})")
    uvicorn.run(
        web_app,
        host=host,
        port=port,
        reload=False,
        log_level="info",
    )
