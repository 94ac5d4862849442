"""Change watching for the attribute dump."""

from .watcher import ChangeEvent, DebouncedChangeHandler, FileWatcher, WatchError, watch_loop

__all__ = ["ChangeEvent", "DebouncedChangeHandler", "FileWatcher", "WatchError", "watch_loop"]
