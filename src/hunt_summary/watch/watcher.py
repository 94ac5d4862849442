"""Debounced change notifications for the attribute dump and the loop that consumes them.

The watchdog observer thread feeds a :class:`DebouncedChangeHandler`, which
collapses bursts of writes into one :class:`ChangeEvent` on an unbounded
queue. :func:`watch_loop` drains that queue on the caller's thread, one event
at a time, so pipeline runs never overlap.
"""

import os
import queue
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional, Union

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from ..errors import HuntSummaryError, WatchUnavailable
from ..hunt_logging import get_logger

logger = get_logger(__name__)

# Reading the dump ourselves emits opened/closed_no_write; those must not retrigger a run
TRIGGER_EVENT_TYPES = frozenset({"created", "modified", "moved", "closed"})


@dataclass(frozen=True)
class ChangeEvent:
    """The watched file changed; ``burst`` raw events were collapsed into this one."""

    path: Path
    burst: int = 1


@dataclass(frozen=True)
class WatchError:
    """The notification source reported a problem."""

    message: str


def _normalize(path: Union[str, bytes, Path]) -> str:
    return os.path.normcase(os.path.abspath(os.fsdecode(path)))


class DebouncedChangeHandler(FileSystemEventHandler):
    """Turn raw events for one file into debounced :class:`ChangeEvent` items."""

    def __init__(
        self,
        target: Path,
        events: "queue.Queue[Any]",
        debounce_seconds: float = 2.0,
        timer_factory: Callable[..., Any] = threading.Timer,
    ):
        super().__init__()
        self.target = Path(target)
        self.events = events
        self.debounce_seconds = debounce_seconds
        self._timer_factory = timer_factory
        self._target_key = _normalize(self.target)
        self._parent_key = _normalize(self.target.parent)
        self._lock = threading.Lock()
        self._timer = None
        self._pending = 0

    def _touches_target(self, event: FileSystemEvent) -> bool:
        paths = [event.src_path]
        dest = getattr(event, "dest_path", None)
        if dest:
            paths.append(dest)
        return any(_normalize(p) == self._target_key for p in paths)

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            if event.event_type == "deleted" and _normalize(event.src_path) == self._parent_key:
                self.events.put(WatchError(f"watched directory '{self.target.parent}' was removed"))
            return
        if event.event_type not in TRIGGER_EVENT_TYPES or not self._touches_target(event):
            return

        with self._lock:
            self._pending += 1
            if self._timer is not None:
                self._timer.cancel()
            self._timer = self._timer_factory(self.debounce_seconds, self.flush)
            self._timer.daemon = True
            self._timer.start()

    def flush(self) -> None:
        """Emit the pending burst, if any, as a single event."""
        with self._lock:
            burst, self._pending = self._pending, 0
            self._timer = None
        if burst:
            logger.debug("Change detected", path=str(self.target), burst=burst)
            self.events.put(ChangeEvent(path=self.target, burst=burst))

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = None
            self._pending = 0


class FileWatcher:
    """Watch one file through its parent directory.

    The parent is watched rather than the file itself because the game client
    replaces the dump instead of writing it in place.
    """

    def __init__(
        self,
        path: Union[str, Path],
        debounce_seconds: float = 2.0,
        events: Optional["queue.Queue[Any]"] = None,
        observer_factory: Callable[[], Any] = Observer,
    ):
        self.path = Path(path).absolute()
        self.events: "queue.Queue[Any]" = events if events is not None else queue.Queue()
        self.handler = DebouncedChangeHandler(self.path, self.events, debounce_seconds)
        self._observer_factory = observer_factory
        self._observer = None

    def start(self) -> "FileWatcher":
        """Start the observer thread.

        Raises:
            WatchUnavailable: if the file cannot be read or its directory
                cannot be watched.
        """
        directory = self.path.parent
        if not directory.is_dir():
            raise WatchUnavailable(self.path, f"directory '{directory}' does not exist")
        try:
            with self.path.open("rb"):
                pass
        except OSError as e:
            raise WatchUnavailable(self.path, e.strerror or str(e)) from e
        observer = self._observer_factory()
        try:
            observer.schedule(self.handler, str(directory), recursive=False)
            observer.start()
        except OSError as e:
            raise WatchUnavailable(self.path, e.strerror or str(e)) from e
        self._observer = observer
        logger.info("Watching for changes", path=str(self.path), debounce_s=self.handler.debounce_seconds)
        return self

    def stop(self) -> None:
        self.handler.cancel()
        if self._observer is not None:
            self._observer.stop()
            self._observer.join()
            self._observer = None

    def __enter__(self) -> "FileWatcher":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()


def watch_loop(
    events: "queue.Queue[Any]",
    run_once: Callable[[], Any],
    *,
    on_result: Optional[Callable[[Any], None]] = None,
    max_events: Optional[int] = None,
    poll_interval: float = 1.0,
) -> int:
    """Run ``run_once`` for every queued change, in arrival order.

    Blocks on the queue until ``max_events`` items were consumed, forever when
    it is ``None``. A ``None`` item stops the loop. Pipeline errors are logged
    and the loop waits for the next change.

    Returns:
        Number of items consumed.
    """
    consumed = 0
    while max_events is None or consumed < max_events:
        try:
            # Bounded waits keep Ctrl-C responsive on Windows
            item = events.get(timeout=poll_interval)
        except queue.Empty:
            continue
        if item is None:
            break
        consumed += 1

        if isinstance(item, WatchError):
            logger.error("Watch error", error=item.message)
            continue

        try:
            result = run_once()
        except HuntSummaryError as e:
            logger.warning("Run failed, waiting for next change", error=str(e), change=consumed, exc_info=True)
            continue

        if on_result is not None:
            on_result(result)
    return consumed
