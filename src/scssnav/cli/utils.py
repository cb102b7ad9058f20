"""CLI utilities."""

import asyncio
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import TypeVar

import click

from scssnav.config.loader import WORKSPACE_CONFIG_DIR
from scssnav.config.models import NavigatorConfig
from scssnav.core.errors import ScssNavError
from scssnav.index.ops import NavigatorEngine

T = TypeVar("T")


def find_workspace_root(start_path: Path | None = None) -> Path:
    """Find the workspace root from the given path.

    Walks up the directory tree looking for a .scssnav or .git directory.
    Falls back to the starting directory when neither exists.
    """
    if start_path is None:
        start_path = Path.cwd()

    start = start_path.resolve()
    current = start
    while True:
        if (current / WORKSPACE_CONFIG_DIR).is_dir() or (current / ".git").exists():
            return current
        if current == current.parent:
            return start
        current = current.parent


def run_with_engine(
    ctx: click.Context,
    fn: Callable[[NavigatorEngine], Awaitable[T]],
) -> T:
    """Build and initialize an engine, run ``fn`` against it, tear it down.

    Raises:
        click.ClickException: On any ScssNavError.
    """
    workspace: Path = ctx.obj["workspace"]
    config: NavigatorConfig = ctx.obj["config"]

    async def _run() -> T:
        engine = NavigatorEngine(workspace, config)
        await engine.initialize()
        try:
            return await fn(engine)
        finally:
            engine.shutdown()

    try:
        return asyncio.run(_run())
    except ScssNavError as e:
        raise click.ClickException(str(e)) from e
