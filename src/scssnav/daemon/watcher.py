"""File watcher using watchfiles for async filesystem monitoring.

Design:
- One recursive awatch over the workspace root
- Only stylesheets and alias-configuration files pass the filter
- Vendor, VCS and cache directories are pruned
- Sliding-window debounce batches bursts (editor save storms, branch switches)
- Batches are delivered to an async callback together with a flag telling
  whether any file was created or deleted
"""

from __future__ import annotations

import asyncio
import contextlib
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from pathlib import Path

import structlog
from watchfiles import Change, awatch

from scssnav.config.constants import PRUNED_DIRS, STYLESHEET_EXTENSIONS

logger = structlog.get_logger()

ChangeCallback = Callable[[list[Path], bool], Awaitable[None]]

DEBOUNCE_WINDOW_SEC = 0.3
MAX_DEBOUNCE_WAIT_SEC = 2.0


def is_relevant_path(path: Path, repo_root: Path, config_file_names: frozenset[str]) -> bool:
    """True for stylesheets and alias configs outside pruned directories."""
    try:
        rel_path = path.relative_to(repo_root)
    except ValueError:
        return False
    if any(part in PRUNED_DIRS for part in rel_path.parts[:-1]):
        return False
    return path.suffix in STYLESHEET_EXTENSIONS or path.name in config_file_names


@dataclass
class FileWatcher:
    """
    Async file watcher with sliding-window debouncing.

    - Changes are buffered until ``debounce_window`` of quiet time
    - ``max_debounce_wait`` caps the delay under continuous changes
    - ``on_change`` receives absolute paths and a structural flag
    """

    repo_root: Path
    on_change: ChangeCallback
    config_file_names: frozenset[str] = frozenset({"tsconfig.json"})
    debounce_window: float = DEBOUNCE_WINDOW_SEC
    max_debounce_wait: float = MAX_DEBOUNCE_WAIT_SEC

    _watch_task: asyncio.Task[None] | None = field(default=None, init=False)
    _stop_event: asyncio.Event = field(default_factory=asyncio.Event, init=False)
    # Debouncing state
    _pending_changes: set[Path] = field(default_factory=set, init=False)
    _pending_structural: bool = field(default=False, init=False)
    _last_change_time: float = field(default=0.0, init=False)
    _first_change_time: float = field(default=0.0, init=False)
    _debounce_task: asyncio.Task[None] | None = field(default=None, init=False)

    def __post_init__(self) -> None:
        self.repo_root = self.repo_root.resolve()

    @property
    def is_running(self) -> bool:
        return self._watch_task is not None and not self._watch_task.done()

    async def start(self) -> None:
        """Start watching for file changes."""
        if self._watch_task is not None:
            return

        self._stop_event.clear()
        self._watch_task = asyncio.create_task(self._watch_loop())
        logger.info(
            "file_watcher_started",
            repo_root=str(self.repo_root),
            debounce_window=self.debounce_window,
        )

    async def stop(self) -> None:
        """Stop watching; pending changes are flushed first."""
        self._stop_event.set()

        if self._debounce_task is not None and not self._debounce_task.done():
            self._debounce_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._debounce_task
            self._debounce_task = None

        if self._pending_changes:
            await self._flush_pending()

        if self._watch_task is not None:
            self._watch_task.cancel()
            with contextlib.suppress(asyncio.CancelledError, asyncio.TimeoutError):
                await asyncio.wait_for(self._watch_task, timeout=2.0)
            self._watch_task = None

        logger.info("file_watcher_stopped")

    def _watch_filter(self, _change: Change, path: str) -> bool:
        return is_relevant_path(Path(path), self.repo_root, self.config_file_names)

    def _queue_change(self, path: Path, structural: bool = False) -> None:
        """Queue a change for debounced delivery."""
        now = time.monotonic()

        if not self._pending_changes:
            self._first_change_time = now

        self._pending_changes.add(path)
        self._pending_structural = self._pending_structural or structural
        self._last_change_time = now

    def _should_flush(self) -> bool:
        if not self._pending_changes:
            return False

        now = time.monotonic()
        time_since_last = now - self._last_change_time
        time_since_first = now - self._first_change_time

        # Quiet window elapsed or max wait exceeded
        return time_since_last >= self.debounce_window or time_since_first >= self.max_debounce_wait

    async def _flush_pending(self) -> None:
        if not self._pending_changes:
            return

        paths = sorted(self._pending_changes)
        structural = self._pending_structural
        self._pending_changes.clear()
        self._pending_structural = False
        self._first_change_time = 0.0
        self._last_change_time = 0.0

        logger.info("changes_detected", count=len(paths), structural=structural)
        try:
            await self.on_change(paths, structural)
        except Exception:
            logger.exception("change_callback_failed", count=len(paths))

    async def _debounce_flush_loop(self) -> None:
        try:
            while not self._stop_event.is_set():
                await asyncio.sleep(0.05)
                if self._should_flush():
                    await self._flush_pending()
        except asyncio.CancelledError:
            pass

    def handle_changes(self, changes: set[tuple[Change, str]]) -> int:
        """Queue a raw awatch batch. Returns the number of queued paths."""
        queued = 0
        for change_type, path_str in changes:
            path = Path(path_str)
            if not is_relevant_path(path, self.repo_root, self.config_file_names):
                continue
            self._queue_change(path, structural=change_type != Change.modified)
            logger.debug("path_queued", path=str(path), change_type=change_type.name)
            queued += 1
        return queued

    async def _watch_loop(self) -> None:
        self._debounce_task = asyncio.create_task(self._debounce_flush_loop())
        try:
            while not self._stop_event.is_set():
                try:
                    async for changes in awatch(
                        self.repo_root,
                        watch_filter=self._watch_filter,
                        stop_event=self._stop_event,
                        ignore_permission_denied=True,
                    ):
                        self.handle_changes(changes)
                except asyncio.CancelledError:
                    raise
                except Exception as e:
                    if self._stop_event.is_set():
                        return
                    logger.error("watcher_error", error=str(e))
                    await asyncio.sleep(1.0)
        except asyncio.CancelledError:
            pass
        finally:
            if self._debounce_task:
                self._debounce_task.cancel()
