"""Snapshot projection and diffing."""

from ps_watch.core.diff import (
    ChangeEvent,
    ChangeType,
    DiffResult,
    diff_assignments,
    diff_classes,
)
from ps_watch.core.projector import project
from ps_watch.core.terms import TermWindow, select_term_window

__all__ = [
    "ChangeEvent",
    "ChangeType",
    "DiffResult",
    "diff_assignments",
    "diff_classes",
    "project",
    "TermWindow",
    "select_term_window",
]
