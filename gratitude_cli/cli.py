"""Typer-based CLI for Gratitude: flag library usage, then say thanks."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .cli_config import config_app
from .cli_watch import watch
from .detector import parse_import_statements
from .display import ConsoleNotifier, render_document
from .engine import extract
from .models import OTHER_LANGUAGE, SUPPORTED_LANGUAGES, Document
from .session import GratitudeSession

console = Console()

app = typer.Typer(
    help="🙌 Gratitude CLI: flag library-usage lines and thank their authors.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.add_typer(config_app, name="config")
app.command("watch")(watch)


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        typer.echo(f"Gratitude CLI v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Log engine decisions to stderr."),
):
    """Gratitude CLI: find the lines where your code leans on someone else's library."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        )


def _load_document(path: Path, language: Optional[str]) -> Document:
    if language is not None and language not in SUPPORTED_LANGUAGES | {OTHER_LANGUAGE}:
        raise typer.BadParameter(
            f"Unknown language '{language}'. Choose from: {', '.join(sorted(SUPPORTED_LANGUAGES))}"
        )
    try:
        return Document.from_path(path, language)
    except OSError as exc:
        console.print(f"[red]✗[/red] Could not read {path}: {exc}")
        raise typer.Exit(1)


@app.command("scan")
def scan(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Source file to scan."),
    language: Optional[str] = typer.Option(None, "--language", "-l", help="Override the language tag."),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON."),
    lines_only: bool = typer.Option(False, "--lines-only", help="Print 0-based line numbers only."),
    only_flagged: bool = typer.Option(False, "--only-flagged", help="Hide lines without a gutter icon."),
):
    """Flag import lines and the lines that use what they import."""
    document = _load_document(path, language)

    if as_json or lines_only:
        result = extract(document)
        if as_json:
            typer.echo(json.dumps({
                "file": str(path),
                "language": document.language_id,
                "line_numbers": result.sorted_lines(),
                "has_import": result.has_any_import,
                "bindings": [
                    {"name": b.bound_name, "module": b.source_module, "line": b.line}
                    for b in result.bindings
                ],
            }, indent=2))
        else:
            for line_number in result.sorted_lines():
                typer.echo(line_number)
        return

    session = GratitudeSession(notifier=ConsoleNotifier(console))
    result = session.refresh(document)
    render_document(console, document, session.state.decorations, only_decorated=only_flagged)

    if not result.has_any_import:
        console.print(f"[dim]No library imports found ({document.language_id}).[/dim]")
        return
    names = ", ".join(sorted(result.bound_names)) or "-"
    console.print(
        f"[green]✓[/green] {len(result.line_numbers)} flagged line(s), "
        f"{len(result.statement_lines)} import statement(s). Names: {names}"
    )


@app.command("hover")
def hover(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Source file."),
    line: int = typer.Argument(..., min=1, help="1-based line number."),
    language: Optional[str] = typer.Option(None, "--language", "-l", help="Override the language tag."),
):
    """Show the hover tooltip for a line, if it has one."""
    document = _load_document(path, language)
    session = GratitudeSession(notifier=ConsoleNotifier(console))
    session.refresh(document)
    tooltip = session.hover(line - 1)
    if tooltip is None:
        typer.echo(f"Line {line}: no tooltip")
        raise typer.Exit(code=0)
    typer.echo(f"Line {line}: {tooltip.message}")


@app.command("statements")
def statements(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Source file."),
    language: Optional[str] = typer.Option(None, "--language", "-l", help="Override the language tag."),
):
    """Count import statements the way the new-import detector does."""
    document = _load_document(path, language)
    found = parse_import_statements(document)
    typer.echo(f"{len(found)} import statement(s)")
    for statement in found:
        typer.echo(f"  {statement.strip()}")


@app.command("thanks")
def thanks(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Source file."),
    line: int = typer.Argument(..., min=1, help="1-based line to say thanks for."),
    language: Optional[str] = typer.Option(None, "--language", "-l", help="Override the language tag."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Accept every follow-up without prompting."),
    open_links: bool = typer.Option(False, "--open", help="Open follow-up links in the browser."),
):
    """🙌 Say thanks for a library-usage line."""
    document = _load_document(path, language)
    session = GratitudeSession(notifier=ConsoleNotifier(console, assume_yes=True if yes else None))
    session.open_document(document)

    try:
        if not session.has_import:
            console.print("[red]✗[/red] No library imports found in this file.")
            raise typer.Exit(1)
        if (line - 1) not in session.state.result.line_numbers:
            console.print(f"[red]✗[/red] Line {line} does not use an imported library.")
            raise typer.Exit(1)

        try:
            outcome = session.say_thanks(document, line)
        except ValueError as exc:
            raise typer.BadParameter(str(exc))

        for url in (outcome.say_more_url, outcome.survey_url):
            if url:
                typer.echo(url)
                if open_links:
                    typer.launch(url)
    finally:
        session.close()
        session.flush()


if __name__ == "__main__":
    app()
