"""Snapshot storage."""

from .snapshots import (
    LocalSnapshotStore,
    SnapshotOutcome,
    SnapshotStore,
    SnapshotWriter,
    serialize_snapshot,
)

__all__ = [
    "LocalSnapshotStore",
    "SnapshotOutcome",
    "SnapshotStore",
    "SnapshotWriter",
    "serialize_snapshot",
]
