"""scssnav repos command - show repository contexts and their aliases."""

import json

import click
from rich.console import Console
from rich.table import Table

from scssnav.cli.utils import run_with_engine
from scssnav.index.models import RepositoryContext
from scssnav.index.ops import NavigatorEngine


def _make_alias_table(context: RepositoryContext) -> Table:
    table = Table(show_header=False, box=None, padding=(0, 1), pad_edge=False)
    table.add_column("Pattern", style="cyan", no_wrap=True)
    table.add_column("Roots")
    for pattern, roots in sorted(context.aliases.items()):
        table.add_row(pattern, ", ".join(roots))
    return table


@click.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def repos_command(ctx: click.Context, as_json: bool) -> None:
    """Show configured repositories, alias maps and configuration sources."""

    async def _query(engine: NavigatorEngine) -> list[RepositoryContext]:
        return list(engine.contexts.values())

    contexts = run_with_engine(ctx, _query)

    if as_json:
        click.echo(
            json.dumps(
                [
                    {
                        "root": c.root_path,
                        "aliases": c.aliases,
                        "config_sources": list(c.config_sources),
                    }
                    for c in contexts
                ],
                indent=2,
            )
        )
        return

    console = Console()
    if not contexts:
        console.print("[yellow]No repositories configured[/yellow]")
        return

    for context in contexts:
        console.print(f"[bold]{context.root_path}[/bold]", highlight=False, soft_wrap=True)
        for source in context.config_sources:
            console.print(f"  [dim]config[/dim] {source}", highlight=False, soft_wrap=True)
        if context.aliases:
            console.print(_make_alias_table(context))
        else:
            console.print("  [dim]no aliases[/dim]")
        console.print()
