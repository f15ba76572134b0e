"""
Snapshot diffing.

Compares the previous and current generation of class or assignment
records by id and describes what was added, removed or regraded.

Events come out in the order the new records are listed, followed by
removals in the order the old records were listed. Grades are compared
as plain strings.
"""

from enum import Enum
from typing import Dict, List, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field

from ps_watch.models import AssignmentRecord, ClassRecord, SnapshotKind

Record = Union[ClassRecord, AssignmentRecord]


class ChangeType(str, Enum):
    """Kinds of change between two snapshots."""
    ADDED = "added"
    REMOVED = "removed"
    GRADE_CHANGED = "grade_changed"


class ChangeEvent(BaseModel):
    """
    A single record's change between two snapshots.

    Attributes:
        change_type: What happened to the record
        kind: Collection the record belongs to
        name: Class or assignment name
        class_name: Owning class for assignments, empty for classes
        old_grade: Grade before, empty for additions
        new_grade: Grade after, empty for removals
    """
    model_config = ConfigDict(frozen=True)

    change_type: ChangeType
    kind: SnapshotKind
    name: str
    class_name: str = ""
    old_grade: str = ""
    new_grade: str = ""

    def describe(self) -> str:
        """Human readable one-line description."""
        if self.kind == SnapshotKind.CLASSES:
            if self.change_type == ChangeType.GRADE_CHANGED:
                return f"Grade changed for {self.name}: {self.old_grade} -> {self.new_grade}"
            if self.change_type == ChangeType.ADDED:
                return f"New class added: {self.name} with grade {self.new_grade}"
            return f"Class removed: {self.name}"

        if self.change_type == ChangeType.GRADE_CHANGED:
            return (
                f"Grade changed for assignment '{self.name}' in class "
                f"{self.class_name}: {self.old_grade} -> {self.new_grade}"
            )
        if self.change_type == ChangeType.ADDED:
            return (
                f"New assignment added: '{self.name}' in class "
                f"{self.class_name} with grade {self.new_grade}"
            )
        return f"Assignment removed: '{self.name}' from class {self.class_name}"


class DiffResult(BaseModel):
    """Changes found in one collection kind."""
    kind: SnapshotKind
    events: List[ChangeEvent] = Field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return bool(self.events)

    def message(self) -> Optional[str]:
        """
        Join all events into one notification.

        Returns:
            str or None: Newline separated descriptions, None if nothing changed
        """
        if not self.events:
            return None
        return "\n".join(event.describe() for event in self.events)


def _class_name(record: Record) -> str:
    return getattr(record, "class_name", "")


def diff_records(
    kind: SnapshotKind,
    old: Sequence[Record],
    new: Sequence[Record],
) -> DiffResult:
    """
    Reconcile two generations of records keyed on id.

    Args:
        kind: Collection kind of both sequences
        old: Records from the previous snapshot
        new: Records from the current poll

    Returns:
        DiffResult: Ordered change events
    """
    # Working copy, entries are deleted as new records account for them
    remaining: Dict[int, Record] = {record.id: record for record in old}
    events: List[ChangeEvent] = []

    for record in new:
        previous = remaining.pop(record.id, None)
        if previous is None:
            events.append(ChangeEvent(
                change_type=ChangeType.ADDED,
                kind=kind,
                name=record.name,
                class_name=_class_name(record),
                new_grade=record.grade,
            ))
        elif previous.grade != record.grade:
            events.append(ChangeEvent(
                change_type=ChangeType.GRADE_CHANGED,
                kind=kind,
                name=record.name,
                class_name=_class_name(record),
                old_grade=previous.grade,
                new_grade=record.grade,
            ))

    for record in remaining.values():
        events.append(ChangeEvent(
            change_type=ChangeType.REMOVED,
            kind=kind,
            name=record.name,
            class_name=_class_name(record),
            old_grade=record.grade,
        ))

    return DiffResult(kind=kind, events=events)


def diff_classes(old: Sequence[ClassRecord], new: Sequence[ClassRecord]) -> DiffResult:
    """Diff class grades."""
    return diff_records(SnapshotKind.CLASSES, old, new)


def diff_assignments(
    old: Sequence[AssignmentRecord],
    new: Sequence[AssignmentRecord],
) -> DiffResult:
    """Diff assignment grades."""
    return diff_records(SnapshotKind.ASSIGNMENTS, old, new)
