"""
Record projection.

Turns the raw PowerSchool student record into the class and assignment
records that get diffed and saved, limited to the active reporting terms.
"""

import logging
from datetime import datetime
from typing import Dict, List

from ps_watch.core.terms import DEFAULT_TERM_PREFIX, TermWindow, select_term_window
from ps_watch.models import AssignmentRecord, ClassRecord, Snapshot, StudentRecord

logger = logging.getLogger(__name__)


def format_score(score: str) -> str:
    """Format a raw numeric score for display."""
    return f"{score}%"


def build_classes(student: StudentRecord, window: TermWindow) -> List[ClassRecord]:
    """
    Build one class record per final grade in an active term.

    Args:
        student: Upstream student record
        window: Active terms

    Returns:
        List[ClassRecord]: Classes in upstream final-grade order
    """
    titles: Dict[int, str] = {section.id: section.title for section in student.sections}

    return [
        ClassRecord(
            id=final_grade.section_id,
            name=titles.get(final_grade.section_id, ""),
            grade=final_grade.grade,
        )
        for final_grade in student.final_grades
        if window.is_active(final_grade.reporting_term_id)
    ]


def build_assignments(
    student: StudentRecord,
    window: TermWindow,
    classes: List[ClassRecord],
) -> List[AssignmentRecord]:
    """
    Build one assignment record per graded assignment inside the window.

    Ungraded assignments (empty or missing score) are left out entirely,
    so an assignment whose score is cleared drops out of the snapshot.

    Args:
        student: Upstream student record
        window: Date window due dates must fall strictly inside
        classes: Class records built for the same poll, used for class names

    Returns:
        List[AssignmentRecord]: Assignments in upstream order
    """
    scores: Dict[int, str] = {}
    for score in student.assignment_scores:
        if score.score != "":
            scores[score.assignment_id] = format_score(score.score)

    assignments: List[AssignmentRecord] = []
    for assignment in student.assignments:
        if not window.contains(assignment.due_date):
            continue
        if assignment.id not in scores:
            continue

        class_name = next(
            (cls.name for cls in classes if cls.id == assignment.section_id),
            "",
        )
        assignments.append(AssignmentRecord(
            id=assignment.id,
            name=assignment.name,
            grade=scores[assignment.id],
            class_id=assignment.section_id,
            class_name=class_name,
        ))

    return assignments


def project(
    student: StudentRecord,
    now: datetime,
    prefix: str = DEFAULT_TERM_PREFIX,
) -> Snapshot:
    """
    Build the snapshot for the current poll.

    Args:
        student: Upstream student record
        now: Current instant, used to pick the active terms
        prefix: Reporting term title prefix to track

    Returns:
        Snapshot: New classes and assignments
    """
    window = select_term_window(student.reporting_terms, now, prefix)
    if window.is_empty:
        logger.info("No active reporting term, no assignments will be tracked")
    else:
        logger.debug(
            f"Active terms {sorted(window.term_ids)}: "
            f"{window.begin.isoformat()} to {window.end.isoformat()}"
        )

    classes = build_classes(student, window)
    assignments = build_assignments(student, window, classes)
    return Snapshot(classes=classes, assignments=assignments)
