"""Snapshot persistence for PowerSchool Grade Watch."""

from ps_watch.store.snapshot_store import SnapshotStore

__all__ = ["SnapshotStore"]
