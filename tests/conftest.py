"""Shared fixtures for PowerSchool Grade Watch tests."""

from datetime import datetime

import pytest

from ps_watch.config import Settings
from ps_watch.models import (
    AssignmentScore,
    FinalGrade,
    RawAssignment,
    ReportingTerm,
    Section,
    StudentRecord,
)


@pytest.fixture
def settings(tmp_path):
    """Settings that never read the environment's .env file."""
    return Settings(
        _env_file=None,
        powerschool_url="https://district.powerschool.com/",
        powerschool_username="parent",
        powerschool_password="secret",
        discord_webhook_url="https://discord.com/api/webhooks/1/abc",
        classes_snapshot_file=str(tmp_path / "classes.json"),
        assignments_snapshot_file=str(tmp_path / "assignments.json"),
        poll_interval_seconds=0.01,
    )


@pytest.fixture
def now():
    return datetime(2024, 2, 1)


@pytest.fixture
def terms():
    """A running quarter overlapping a running semester."""
    return [
        ReportingTerm(id=10, title="Q1", start_date=datetime(2024, 1, 1), end_date=datetime(2024, 3, 15)),
        ReportingTerm(id=20, title="S1", start_date=datetime(2024, 1, 1), end_date=datetime(2024, 6, 1)),
    ]


@pytest.fixture
def student(terms):
    """
    Student with two sections graded in Q1 and S1.

    Assignment 100 is graded and inside Q1, 101 is ungraded, 102 is due
    after Q1 ends.
    """
    return StudentRecord(
        sections=[
            Section(id=1, title="Math"),
            Section(id=2, title="Art"),
        ],
        reporting_terms=terms,
        final_grades=[
            FinalGrade(section_id=1, reporting_term_id=10, grade="A"),
            FinalGrade(section_id=2, reporting_term_id=10, grade="B+"),
            FinalGrade(section_id=1, reporting_term_id=20, grade="A-"),
        ],
        assignments=[
            RawAssignment(id=100, name="Quiz 1", section_id=1, due_date=datetime(2024, 2, 15)),
            RawAssignment(id=101, name="Quiz 2", section_id=1, due_date=datetime(2024, 2, 20)),
            RawAssignment(id=102, name="Final Project", section_id=2, due_date=datetime(2024, 6, 1)),
        ],
        assignment_scores=[
            AssignmentScore(assignment_id=100, score="95"),
            AssignmentScore(assignment_id=101, score=""),
            AssignmentScore(assignment_id=102, score="88"),
        ],
    )
