"""
Data models for PowerSchool Grade Watch.

Defines Pydantic models for:
- Upstream student data (sections, reporting terms, final grades,
  assignments, assignment scores)
- Snapshot records (classes and assignments) that are persisted and diffed
"""

from datetime import datetime
from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class SnapshotKind(str, Enum):
    """The two independently persisted record collections."""
    CLASSES = "classes"
    ASSIGNMENTS = "assignments"


# ----- Upstream records -----

class Section(BaseModel):
    """A course section the student is enrolled in."""
    model_config = ConfigDict(frozen=True)

    id: int
    title: str = ""


class ReportingTerm(BaseModel):
    """
    A named grading period.

    Quarter terms are titled "Q1".."Q4"; semester, year and progress
    periods overlap the same dates under other titles.
    """
    model_config = ConfigDict(frozen=True)

    id: int
    title: str
    start_date: datetime
    end_date: datetime


class FinalGrade(BaseModel):
    """The grade a section carries for one reporting term."""
    model_config = ConfigDict(frozen=True)

    section_id: int
    reporting_term_id: int
    grade: str = ""


class RawAssignment(BaseModel):
    """An assignment as listed by PowerSchool, graded or not."""
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    section_id: int
    due_date: datetime


class AssignmentScore(BaseModel):
    """Score for one assignment. An empty score means not yet graded."""
    model_config = ConfigDict(frozen=True)

    assignment_id: int
    score: str = ""


class StudentRecord(BaseModel):
    """Everything the upstream client returns for one student."""
    sections: List[Section] = Field(default_factory=list)
    reporting_terms: List[ReportingTerm] = Field(default_factory=list)
    final_grades: List[FinalGrade] = Field(default_factory=list)
    assignments: List[RawAssignment] = Field(default_factory=list)
    assignment_scores: List[AssignmentScore] = Field(default_factory=list)


# ----- Snapshot records -----

class ClassRecord(BaseModel):
    """
    Current grade of one class.

    Attributes:
        id: Section id, stable across polls
        name: Course title for display
        grade: Grade string exactly as PowerSchool reports it
    """
    model_config = ConfigDict(frozen=True)

    id: int
    name: str = ""
    grade: str = ""


class AssignmentRecord(BaseModel):
    """
    A graded assignment.

    Attributes:
        id: Assignment id, stable across polls
        name: Assignment name
        grade: Formatted score (e.g. "95%")
        class_id: Section id of the owning class
        class_name: Copy of the owning class name, empty if it was not found
    """
    model_config = ConfigDict(frozen=True)

    id: int
    name: str = ""
    grade: str = ""
    class_id: int
    class_name: str = ""


class Snapshot(BaseModel):
    """One generation of class and assignment records."""
    classes: List[ClassRecord] = Field(default_factory=list)
    assignments: List[AssignmentRecord] = Field(default_factory=list)
