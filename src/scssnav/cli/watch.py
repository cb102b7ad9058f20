"""scssnav watch command - re-check stylesheets as they change."""

import asyncio
import contextlib
from pathlib import Path

import click
from rich.console import Console

from scssnav.cli.utils import run_with_engine
from scssnav.daemon.watcher import FileWatcher
from scssnav.index.models import Severity
from scssnav.index.ops import NavigatorEngine


@click.command()
@click.pass_context
def watch_command(ctx: click.Context) -> None:
    """Watch the workspace and print diagnostics for changed stylesheets.

    Press Ctrl+C to stop.
    """
    console = Console()
    workspace: Path = ctx.obj["workspace"]

    async def _watch(engine: NavigatorEngine) -> None:
        async def on_change(paths: list[Path], structural: bool) -> None:
            changed = await engine.apply_changes([str(p) for p in paths], structural=structural)
            for path in changed:
                if not Path(path).is_file():
                    continue
                diagnostics = await engine.diagnostics(path)
                if not diagnostics:
                    console.print(f"[green]ok[/green] {path}", highlight=False, soft_wrap=True)
                for d in diagnostics:
                    color = "red" if d.severity is Severity.ERROR else "yellow"
                    console.print(
                        f"{path}:{d.range.start.line}:{d.range.start.character} "
                        f"[{color}]{d.message}[/{color}]",
                        highlight=False,
                        soft_wrap=True,
                    )

        watcher_config = engine.config.watcher
        watcher = FileWatcher(
            repo_root=workspace,
            on_change=on_change,
            config_file_names=frozenset(engine.config.resolver.config_file_names),
            debounce_window=watcher_config.debounce_sec,
            max_debounce_wait=watcher_config.max_debounce_wait_sec,
        )
        await watcher.start()
        console.print(f"Watching [bold]{workspace}[/bold] (Ctrl+C to stop)", highlight=False)
        try:
            await asyncio.Event().wait()
        finally:
            await watcher.stop()

    with contextlib.suppress(KeyboardInterrupt):
        run_with_engine(ctx, _watch)
