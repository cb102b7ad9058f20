"""SCSS Navigator CLI - scssnav command."""

from pathlib import Path

import click

from scssnav.cli.query import check_command, complete_command, definition_command, links_command
from scssnav.cli.repos import repos_command
from scssnav.cli.utils import find_workspace_root
from scssnav.cli.watch import watch_command
from scssnav.config.loader import load_config
from scssnav.core.errors import ScssNavError
from scssnav.core.logging import configure_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="scssnav")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option(
    "--workspace",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Workspace root (default: nearest .scssnav/.git ancestor of the cwd)",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, workspace: Path | None) -> None:
    """SCSS Navigator - cross-file definitions and completion for SCSS."""
    ctx.ensure_object(dict)
    root = workspace.resolve() if workspace is not None else find_workspace_root()
    try:
        config = load_config(root)
    except ScssNavError as e:
        raise click.ClickException(str(e)) from e

    ctx.obj["verbose"] = verbose
    ctx.obj["workspace"] = root
    ctx.obj["config"] = config
    if verbose:
        configure_logging(level="DEBUG")
    else:
        configure_logging(config=config.logging)


cli.add_command(definition_command, name="definition")
cli.add_command(complete_command, name="complete")
cli.add_command(check_command, name="check")
cli.add_command(links_command, name="links")
cli.add_command(repos_command, name="repos")
cli.add_command(watch_command, name="watch")


if __name__ == "__main__":
    cli()
