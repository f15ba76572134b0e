"""Unit tests for the PowerSchool client and payload parsing."""

from datetime import datetime, timezone
from unittest.mock import Mock

import pytest
import requests

from ps_watch.auth.powerschool_session import (
    PowerSchoolError,
    PowerSchoolSession,
    parse_date,
    parse_student_data,
)

STUDENT_PAYLOAD = {
    "sections": [
        {"id": 1, "schoolCourseTitle": "Math"},
        {"id": 2, "schoolCourseTitle": None},
    ],
    "reportingTerms": [
        {"id": 10, "title": "Q1", "startDate": "2024-01-01", "endDate": "2024-03-15"},
        {"id": 11, "title": "S1", "startDate": 1704067200000, "endDate": 1717200000000},
        {"id": 12, "title": "Broken", "startDate": None, "endDate": "2024-03-15"},
    ],
    "finalGrades": [
        {"sectionid": 1, "reportingTermId": 10, "grade": "A"},
        {"sectionid": 2, "reportingTermId": 10, "grade": None},
    ],
    "assignments": [
        {"id": 100, "name": "Quiz 1", "sectionid": 1, "dueDate": "2024-02-15T00:00:00"},
        {"id": 101, "name": "No date", "sectionid": 1},
    ],
    "assignmentScores": [
        {"assignmentId": 100, "score": "95"},
        {"assignmentId": 101, "score": None},
    ],
}


def _response(body, status_code=200):
    response = Mock(status_code=status_code)
    response.json.return_value = body
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(f"{status_code} error")
    return response


@pytest.fixture
def client(settings):
    client = PowerSchoolSession(settings)
    client.session = Mock()
    return client


def test_parse_date_formats():
    assert parse_date(1704067200000) == datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert parse_date("2024-02-15") == datetime(2024, 2, 15, tzinfo=timezone.utc)
    assert parse_date("2024-02-15T08:00:00+02:00").utcoffset().total_seconds() == 7200
    assert parse_date("") is None
    assert parse_date(None) is None
    assert parse_date("not a date") is None


def test_parse_student_data_maps_fields():
    student = parse_student_data(STUDENT_PAYLOAD)

    assert [(s.id, s.title) for s in student.sections] == [(1, "Math"), (2, "")]
    assert [t.title for t in student.reporting_terms] == ["Q1", "S1"]
    assert student.reporting_terms[1].start_date == datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert [(g.section_id, g.reporting_term_id, g.grade) for g in student.final_grades] == [
        (1, 10, "A"), (2, 10, ""),
    ]
    assert [a.id for a in student.assignments] == [100]
    assert student.assignments[0].due_date == datetime(2024, 2, 15, tzinfo=timezone.utc)
    assert [(s.assignment_id, s.score) for s in student.assignment_scores] == [(100, "95"), (101, "")]


def test_parse_student_data_tolerates_missing_lists():
    student = parse_student_data({})

    assert student.sections == []
    assert student.reporting_terms == []
    assert student.assignment_scores == []


def test_service_url(settings, client):
    assert client.service_url == (
        "https://district.powerschool.com/pearson-rest/services/PublicPortalServiceJSON"
    )


def test_login_and_get_student(client):
    client.session.post.side_effect = [
        _response({"return": {"userSessionVO": {"userId": 5, "studentIDs": [42]}}}),
        _response({"return": {"studentDataVOs": [STUDENT_PAYLOAD]}}),
    ]

    with client:
        assert client.is_authenticated
        student = client.get_student()

    assert not client.is_authenticated
    assert student.sections[0].title == "Math"

    login_call, data_call = client.session.post.call_args_list
    assert login_call.kwargs["json"]["loginToPublicPortal"]["username"] == "parent"
    assert data_call.kwargs["json"]["getStudentData"]["studentIDs"] == [42]


def test_login_rejected(client):
    client.session.post.return_value = _response({
        "return": {"userSessionVO": None, "messageVOs": [{"description": "Invalid login"}]}
    })

    with pytest.raises(PowerSchoolError, match="Invalid login"):
        client.login()
    assert not client.is_authenticated


def test_network_failure_raises_powerschool_error(client):
    client.session.post.side_effect = requests.exceptions.ConnectionError("unreachable")

    with pytest.raises(PowerSchoolError):
        client.get_student()


def test_http_error_raises_powerschool_error(client):
    client.session.post.return_value = _response({}, status_code=401)

    with pytest.raises(PowerSchoolError):
        client.login()


def test_unexpected_response_shape(client):
    client.session.post.side_effect = [
        _response({"return": {"userSessionVO": {"studentIDs": 42}}}),
        _response({"return": {"studentDataVOs": []}}),
    ]

    with pytest.raises(PowerSchoolError, match="no students"):
        client.get_student()
