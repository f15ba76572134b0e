"""Unit tests for reporting term window selection."""

from datetime import datetime, timezone

from ps_watch.core.terms import is_active_term, select_term_window
from ps_watch.models import ReportingTerm


def test_only_quarter_terms_are_active(terms, now):
    window = select_term_window(terms, now)

    assert window.term_ids == frozenset({10})
    assert window.begin == datetime(2024, 1, 1)
    assert window.end == datetime(2024, 3, 15)
    assert not window.is_empty


def test_window_contains_is_strict(terms, now):
    window = select_term_window(terms, now)

    assert window.contains(datetime(2024, 2, 15))
    assert not window.contains(datetime(2024, 6, 1))
    assert not window.contains(datetime(2024, 1, 1))
    assert not window.contains(datetime(2024, 3, 15))


def test_term_boundaries_are_exclusive():
    term = ReportingTerm(id=1, title="Q2", start_date=datetime(2024, 3, 16), end_date=datetime(2024, 6, 1))

    assert not is_active_term(term, datetime(2024, 3, 16))
    assert not is_active_term(term, datetime(2024, 6, 1))
    assert is_active_term(term, datetime(2024, 3, 17))


def test_overlapping_quarters_widen_the_window():
    terms = [
        ReportingTerm(id=1, title="Q3", start_date=datetime(2024, 3, 1), end_date=datetime(2024, 5, 1)),
        ReportingTerm(id=2, title="Q3 Mid", start_date=datetime(2024, 2, 1), end_date=datetime(2024, 4, 1)),
        ReportingTerm(id=3, title="Q4", start_date=datetime(2024, 5, 1), end_date=datetime(2024, 6, 30)),
    ]

    window = select_term_window(terms, datetime(2024, 3, 10))

    assert window.term_ids == frozenset({1, 2})
    assert window.begin == datetime(2024, 2, 1)
    assert window.end == datetime(2024, 5, 1)


def test_no_active_term_gives_inverted_window(terms):
    window = select_term_window(terms, datetime(2024, 7, 1))

    assert window.term_ids == frozenset()
    assert window.is_empty
    assert window.begin > window.end
    assert not window.contains(datetime(2024, 7, 1))
    assert not window.contains(datetime(2050, 1, 1))


def test_empty_window_keeps_timezone_of_now():
    window = select_term_window([], datetime(2024, 7, 1, tzinfo=timezone.utc))

    assert window.begin.tzinfo is timezone.utc
    assert not window.contains(datetime(2024, 7, 1, tzinfo=timezone.utc))


def test_custom_prefix(terms, now):
    window = select_term_window(terms, now, prefix="S")

    assert window.term_ids == frozenset({20})
    assert window.end == datetime(2024, 6, 1)
