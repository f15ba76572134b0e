"""
Reporting term selection.

Works out which grading periods are running right now and the date window
assignments must fall in to be tracked.
"""

from datetime import datetime
from typing import FrozenSet, Iterable

from pydantic import BaseModel, ConfigDict

from ps_watch.models import ReportingTerm

DEFAULT_TERM_PREFIX = "Q"

# Bounds of the inverted window used when no term is active
_FAR_FUTURE = datetime(2100, 1, 1)
_FAR_PAST = datetime(2000, 1, 1)


class TermWindow(BaseModel):
    """
    Active reporting terms and the date range they cover.

    When nothing is active, begin lies after end so that no date is
    ever contained.
    """
    model_config = ConfigDict(frozen=True)

    term_ids: FrozenSet[int]
    begin: datetime
    end: datetime

    @property
    def is_empty(self) -> bool:
        return self.begin >= self.end

    def contains(self, instant: datetime) -> bool:
        """True if instant lies strictly between begin and end."""
        return self.begin < instant < self.end

    def is_active(self, term_id: int) -> bool:
        return term_id in self.term_ids


def is_active_term(term: ReportingTerm, now: datetime, prefix: str = DEFAULT_TERM_PREFIX) -> bool:
    """
    Check whether a term is a currently running quarter.

    Semester and year terms overlap the same dates, so the title prefix
    is what keeps them out.
    """
    return term.start_date < now < term.end_date and term.title.startswith(prefix)


def select_term_window(
    terms: Iterable[ReportingTerm],
    now: datetime,
    prefix: str = DEFAULT_TERM_PREFIX,
) -> TermWindow:
    """
    Select the active terms and derive the assignment window.

    The window spans the earliest start to the latest end of all active
    terms, so overlapping quarter views widen it rather than the first
    match winning.

    Args:
        terms: Reporting terms from PowerSchool
        now: Current instant, compared with the term dates
        prefix: Required title prefix

    Returns:
        TermWindow: Active term ids and their combined date range
    """
    tz = now.tzinfo
    begin = _FAR_FUTURE.replace(tzinfo=tz)
    end = _FAR_PAST.replace(tzinfo=tz)
    active = set()

    for term in terms:
        if not is_active_term(term, now, prefix):
            continue
        active.add(term.id)
        if term.start_date < begin:
            begin = term.start_date
        if term.end_date > end:
            end = term.end_date

    return TermWindow(term_ids=frozenset(active), begin=begin, end=end)
