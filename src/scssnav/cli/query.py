"""scssnav query commands - definition, complete, check, links.

Positions are zero-based, matching what editors send over the wire.
"""

import json
import sys
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.table import Table

from scssnav.cli.utils import run_with_engine
from scssnav.index.models import (
    CompletionItem,
    Diagnostic,
    DocumentLink,
    Location,
    Position,
    Severity,
)
from scssnav.index.ops import NavigatorEngine

_FILE = click.Path(exists=True, dir_okay=False, path_type=Path)


def location_to_dict(location: Location) -> dict[str, Any]:
    return {
        "path": location.path,
        "uri": location.uri,
        "line": location.line,
        "column": location.column,
    }


def completion_to_dict(item: CompletionItem) -> dict[str, Any]:
    return {
        "label": item.label,
        "insert_text": item.insert_text,
        "kind": item.kind.value,
        "detail": item.detail,
        "source_file": item.source_file,
        "documentation": item.documentation,
        "is_snippet": item.is_snippet,
        "replace_start": item.replace_start,
    }


def diagnostic_to_dict(path: str, diagnostic: Diagnostic) -> dict[str, Any]:
    return {
        "path": path,
        "line": diagnostic.range.start.line,
        "start": diagnostic.range.start.character,
        "end": diagnostic.range.end.character,
        "severity": diagnostic.severity.value,
        "code": diagnostic.code,
        "message": diagnostic.message,
        "source": diagnostic.source,
    }


def link_to_dict(link: DocumentLink) -> dict[str, Any]:
    return {
        "line": link.range.start.line,
        "start": link.range.start.character,
        "end": link.range.end.character,
        "target": link.target,
    }


@click.command()
@click.argument("file", type=_FILE)
@click.argument("line", type=click.IntRange(min=0))
@click.argument("column", type=click.IntRange(min=0))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def definition_command(
    ctx: click.Context, file: Path, line: int, column: int, as_json: bool
) -> None:
    """Show where the symbol or import at LINE:COLUMN of FILE is declared."""

    async def _query(engine: NavigatorEngine) -> Location | None:
        return await engine.definition(str(file), Position(line, column))

    location = run_with_engine(ctx, _query)

    if as_json:
        click.echo(json.dumps(location_to_dict(location) if location else None))
        return
    if location is None:
        click.echo("No definition found")
        return
    click.echo(f"{location.path}:{location.line}:{location.column}")


@click.command()
@click.argument("file", type=_FILE)
@click.argument("line", type=click.IntRange(min=0))
@click.argument("column", type=click.IntRange(min=0))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def complete_command(ctx: click.Context, file: Path, line: int, column: int, as_json: bool) -> None:
    """List completion items at LINE:COLUMN of FILE."""

    async def _query(engine: NavigatorEngine) -> list[CompletionItem]:
        return await engine.completion(str(file), Position(line, column))

    items = run_with_engine(ctx, _query)

    if as_json:
        click.echo(json.dumps([completion_to_dict(i) for i in items], indent=2))
        return
    if not items:
        click.echo("No completions")
        return

    table = Table(show_header=True, box=None, padding=(0, 2), pad_edge=False)
    table.add_column("Label", style="cyan", no_wrap=True)
    table.add_column("Kind")
    table.add_column("Detail", style="dim")
    for item in items:
        table.add_row(item.label, item.kind.value, item.detail)
    Console().print(table)


@click.command()
@click.argument("files", nargs=-1, required=True, type=_FILE)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def check_command(ctx: click.Context, files: tuple[Path, ...], as_json: bool) -> None:
    """Report unresolved imports and symbols in FILES.

    Exits with status 1 when any error-severity diagnostic is found.
    """

    async def _query(engine: NavigatorEngine) -> list[tuple[str, list[Diagnostic]]]:
        results: list[tuple[str, list[Diagnostic]]] = []
        for file in files:
            results.append((str(file.resolve()), await engine.diagnostics(str(file))))
        return results

    results = run_with_engine(ctx, _query)
    has_errors = any(d.severity is Severity.ERROR for _, diags in results for d in diags)

    if as_json:
        click.echo(
            json.dumps(
                [diagnostic_to_dict(path, d) for path, diags in results for d in diags],
                indent=2,
            )
        )
    else:
        console = Console()
        total = 0
        for path, diagnostics in results:
            for d in diagnostics:
                total += 1
                color = "red" if d.severity is Severity.ERROR else "yellow"
                console.print(
                    f"{path}:{d.range.start.line}:{d.range.start.character} "
                    f"[{color}]{d.severity.value}[/{color}] {d.message} [dim]({d.code})[/dim]",
                    highlight=False,
                    soft_wrap=True,
                )
        if total == 0:
            console.print("[green]No problems found[/green]")

    if has_errors:
        sys.exit(1)


@click.command()
@click.argument("file", type=_FILE)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def links_command(ctx: click.Context, file: Path, as_json: bool) -> None:
    """List the import paths in FILE and the files they resolve to."""

    async def _query(engine: NavigatorEngine) -> list[DocumentLink]:
        return await engine.document_links(str(file))

    links = run_with_engine(ctx, _query)

    if as_json:
        click.echo(json.dumps([link_to_dict(link) for link in links], indent=2))
        return
    for link in links:
        click.echo(f"{link.range.start.line}:{link.range.start.character} -> {link.target}")
