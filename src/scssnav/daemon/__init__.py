"""File watching for the navigation engine."""

from scssnav.daemon.watcher import FileWatcher

__all__ = ["FileWatcher"]
