"""Snapshot serialization and de-duplicated promotion of CSV files.

Every run stages its CSV under a fixed name in the output directory. The
staged bytes are promoted to a timestamp-named file only when they differ from
the most recently modified snapshot already there, so re-saves of the same
match never produce a second file.
"""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Protocol, Sequence, Tuple

from ..config import DEFAULT_TEMP_FILE
from ..errors import OutputUnavailable
from ..hunt_logging import get_logger
from ..models.rows import PlayerRecord

logger = get_logger(__name__)

SNAPSHOT_SUFFIX = ".csv"
TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"


def serialize_snapshot(header_row: Sequence[str], rows: Iterable[PlayerRecord], zero_based: bool = False) -> bytes:
    """Render rows as comma-separated text.

    Values are written verbatim with no quoting, rows are joined by a single
    newline and there is no trailing newline.
    """
    lines = [",".join(header_row)]
    lines.extend(",".join(row.cells(zero_based)) for row in rows)
    return "\n".join(lines).encode("utf-8")


class SnapshotStore(Protocol):
    """Directory access needed by :class:`SnapshotWriter`."""

    def path_for(self, name: str) -> Path: ...

    def ensure_dir(self) -> None: ...

    def write_bytes(self, name: str, content: bytes) -> None: ...

    def read_bytes(self, name: str) -> bytes: ...

    def exists(self, name: str) -> bool: ...

    def rename(self, source: str, target: str) -> None: ...

    def list_candidates(self, exclude: str) -> List[Tuple[str, float]]:
        """``(name, mtime)`` of every snapshot file except ``exclude``."""
        ...


class LocalSnapshotStore:
    """:class:`SnapshotStore` over a directory on disk."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def path_for(self, name: str) -> Path:
        return self.directory / name

    def ensure_dir(self) -> None:
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OutputUnavailable(self.directory, e.strerror or str(e)) from e

    def write_bytes(self, name: str, content: bytes) -> None:
        path = self.path_for(name)
        try:
            path.write_bytes(content)
        except OSError as e:
            raise OutputUnavailable(path, e.strerror or str(e)) from e

    def read_bytes(self, name: str) -> bytes:
        path = self.path_for(name)
        try:
            return path.read_bytes()
        except OSError as e:
            raise OutputUnavailable(path, e.strerror or str(e)) from e

    def exists(self, name: str) -> bool:
        return self.path_for(name).exists()

    def rename(self, source: str, target: str) -> None:
        target_path = self.path_for(target)
        try:
            self.path_for(source).rename(target_path)
        except OSError as e:
            raise OutputUnavailable(target_path, e.strerror or str(e)) from e

    def list_candidates(self, exclude: str) -> List[Tuple[str, float]]:
        try:
            entries = list(self.directory.iterdir())
        except OSError as e:
            raise OutputUnavailable(self.directory, e.strerror or str(e)) from e

        candidates = []
        for entry in entries:
            if entry.name == exclude or entry.suffix.lower() != SNAPSHOT_SUFFIX:
                continue
            try:
                stat = entry.stat()
            except OSError:
                # Deleted between listing and stat
                continue
            if entry.is_file():
                candidates.append((entry.name, stat.st_mtime))
        return candidates


@dataclass(frozen=True)
class SnapshotOutcome:
    """Result of staging one snapshot."""

    promoted: bool
    path: Path
    content: bytes
    previous: Optional[str] = None


class SnapshotWriter:
    """Stage snapshots and promote the novel ones."""

    def __init__(
        self,
        store: SnapshotStore,
        staging_name: str = DEFAULT_TEMP_FILE,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.store = store
        self.staging_name = staging_name
        self.clock = clock

    def latest_snapshot(self) -> Optional[str]:
        """Name of the most recently modified snapshot, ties broken by name."""
        candidates = self.store.list_candidates(exclude=self.staging_name)
        if not candidates:
            return None
        name, _ = max(candidates, key=lambda c: (c[1], c[0]))
        return name

    def write(self, content: bytes) -> SnapshotOutcome:
        """Stage ``content`` and promote it if it differs from the latest snapshot.

        Raises:
            OutputUnavailable: if the directory, staging file, or rename fails.
        """
        self.store.ensure_dir()
        self.store.write_bytes(self.staging_name, content)

        previous = self.latest_snapshot()
        if previous is not None and self.store.read_bytes(previous) == content:
            logger.info("Snapshot unchanged", latest=previous)
            return SnapshotOutcome(
                promoted=False,
                path=self.store.path_for(self.staging_name),
                content=content,
                previous=previous,
            )

        target = self._promoted_name()
        self.store.rename(self.staging_name, target)
        path = self.store.path_for(target)
        logger.info("Snapshot promoted", path=str(path), previous=previous, bytes=len(content))
        return SnapshotOutcome(promoted=True, path=path, content=content, previous=previous)

    def _promoted_name(self) -> str:
        stem = self.clock().strftime(TIMESTAMP_FORMAT)
        name = f"{stem}{SNAPSHOT_SUFFIX}"
        counter = 1
        while self.store.exists(name):
            name = f"{stem}_{counter}{SNAPSHOT_SUFFIX}"
            counter += 1
        return name
