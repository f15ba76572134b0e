"""
PowerSchool session management and student data retrieval.

Talks to the PowerSchool public portal JSON service used by the mobile
app: logs in with the parent account, then pulls the full student record
(sections, reporting terms, final grades, assignments and scores).
"""

import logging
from datetime import datetime, timezone, tzinfo
from typing import Any, Dict, List, Optional

import requests
from dateutil import parser as date_parser
from dateutil.tz import gettz
from pydantic import ValidationError
from requests.auth import HTTPDigestAuth

from ps_watch.config import Settings, get_settings
from ps_watch.models import (
    AssignmentScore,
    FinalGrade,
    RawAssignment,
    ReportingTerm,
    Section,
    StudentRecord,
)

logger = logging.getLogger(__name__)


class PowerSchoolError(Exception):
    """Raised when PowerSchool cannot be reached or rejects the request."""
    pass


class PowerSchoolSession:
    """
    Manages authenticated sessions with the PowerSchool public portal.

    The service sits behind HTTP digest auth with the well-known mobile
    app account; the parent credentials go in the login call itself.
    """

    SERVICE_USER = "pearson"
    SERVICE_PASSWORD = "m0bApP5"

    # userType 2 is a parent/guardian account
    PARENT_USER_TYPE = "2"

    def __init__(self, settings: Optional[Settings] = None):
        """
        Initialize PowerSchool session.

        Args:
            settings: Optional settings instance, will use default if not provided
        """
        self.settings = settings or get_settings()
        self.service_url = self.settings.powerschool_service_url
        self.timeout = self.settings.request_timeout
        self.timezone = gettz(self.settings.timezone)

        self.session = requests.Session()
        self.session.auth = HTTPDigestAuth(self.SERVICE_USER, self.SERVICE_PASSWORD)
        self.session.headers.update({
            "Accept": "application/json",
            "Content-Type": "application/json",
        })

        self._user_session: Optional[Dict[str, Any]] = None
        self._student_ids: List[int] = []

    @property
    def is_authenticated(self) -> bool:
        """Check if session is authenticated."""
        return self._user_session is not None

    def _call(self, method: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Invoke one service method and return its "return" object.

        Raises:
            PowerSchoolError: On network errors, HTTP errors or bad payloads
        """
        try:
            response = self.session.post(
                self.service_url,
                params={"response": "application/json"},
                json={method: payload},
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as e:
            raise PowerSchoolError(f"{method} request failed: {e}") from e
        except ValueError as e:
            raise PowerSchoolError(f"{method} returned invalid JSON: {e}") from e

        result = data.get("return") if isinstance(data, dict) else None
        if not isinstance(result, dict):
            raise PowerSchoolError(f"{method} returned an unexpected response")
        return result

    def login(self) -> bool:
        """
        Authenticate with the parent account.

        Returns:
            bool: True if login successful

        Raises:
            PowerSchoolError: If login fails
        """
        logger.info(f"Logging in to {self.settings.powerschool_url}")

        result = self._call("loginToPublicPortal", {
            "username": self.settings.powerschool_username,
            "password": self.settings.powerschool_password,
            "userType": self.PARENT_USER_TYPE,
        })

        user_session = result.get("userSessionVO")
        if not user_session:
            messages = [m.get("description", "") for m in result.get("messageVOs") or []]
            raise PowerSchoolError(
                "Login failed - " + ("; ".join(filter(None, messages)) or "no session returned")
            )

        student_ids = user_session.get("studentIDs") or []
        if not isinstance(student_ids, list):
            student_ids = [student_ids]
        if not student_ids:
            raise PowerSchoolError("Login succeeded but the account has no students")

        self._user_session = user_session
        self._student_ids = student_ids
        logger.info(f"Login successful for user: {self.settings.powerschool_username}")
        return True

    def get_student(self) -> StudentRecord:
        """
        Fetch the student record, logging in first if needed.

        Only the first student on the account is tracked.

        Returns:
            StudentRecord: Typed student data

        Raises:
            PowerSchoolError: If the request fails or returns no student
        """
        if not self.is_authenticated:
            self.login()

        result = self._call("getStudentData", {
            "userSessionVO": self._user_session,
            "studentIDs": self._student_ids,
            "qil": {"includes": "1"},
        })

        students = result.get("studentDataVOs") or []
        if not isinstance(students, list):
            students = [students]
        if not students:
            raise PowerSchoolError("getStudentData returned no students")

        try:
            return parse_student_data(students[0], self.timezone)
        except ValidationError as e:
            raise PowerSchoolError(f"Unexpected student data: {e}") from e

    def logout(self) -> None:
        """Forget the current session."""
        self._user_session = None
        self._student_ids = []
        self.session.cookies.clear()

    def __enter__(self) -> "PowerSchoolSession":
        """Context manager entry - login."""
        self.login()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - logout."""
        self.logout()


def parse_date(value: Any, tz: Optional[tzinfo] = None) -> Optional[datetime]:
    """
    Parse a PowerSchool date.

    Dates come either as epoch milliseconds or as date strings.

    Args:
        value: Raw value from the payload
        tz: Timezone applied to strings that carry none

    Returns:
        datetime or None if missing or unparseable
    """
    if value is None or value == "":
        return None

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)

    try:
        parsed = date_parser.parse(str(value))
    except (ValueError, OverflowError) as e:
        logger.debug(f"Could not parse date '{value}': {e}")
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=tz or timezone.utc)
    return parsed


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _items(payload: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
    items = payload.get(key) or []
    if isinstance(items, dict):
        items = [items]
    return [item for item in items if isinstance(item, dict)]


def parse_student_data(payload: Dict[str, Any], tz: Optional[tzinfo] = None) -> StudentRecord:
    """
    Map a studentDataVO payload to a StudentRecord.

    Entries missing an id, or a date they cannot do without, are skipped.

    Args:
        payload: One element of studentDataVOs
        tz: Timezone for naive date strings

    Returns:
        StudentRecord: Typed student data
    """
    sections = [
        Section(id=item["id"], title=_text(item.get("schoolCourseTitle")))
        for item in _items(payload, "sections")
        if item.get("id") is not None
    ]

    terms: List[ReportingTerm] = []
    for item in _items(payload, "reportingTerms"):
        start = parse_date(item.get("startDate"), tz)
        end = parse_date(item.get("endDate"), tz)
        if item.get("id") is None or start is None or end is None:
            logger.debug(f"Skipping reporting term without id or dates: {item.get('title')}")
            continue
        terms.append(ReportingTerm(
            id=item["id"],
            title=_text(item.get("title")),
            start_date=start,
            end_date=end,
        ))

    final_grades = [
        FinalGrade(
            section_id=item["sectionid"],
            reporting_term_id=item["reportingTermId"],
            grade=_text(item.get("grade")),
        )
        for item in _items(payload, "finalGrades")
        if item.get("sectionid") is not None and item.get("reportingTermId") is not None
    ]

    assignments: List[RawAssignment] = []
    for item in _items(payload, "assignments"):
        due = parse_date(item.get("dueDate"), tz)
        if item.get("id") is None or item.get("sectionid") is None or due is None:
            logger.debug(f"Skipping assignment without id, section or due date: {item.get('name')}")
            continue
        assignments.append(RawAssignment(
            id=item["id"],
            name=_text(item.get("name")),
            section_id=item["sectionid"],
            due_date=due,
        ))

    scores = [
        AssignmentScore(
            assignment_id=item["assignmentId"],
            score=_text(item.get("score")),
        )
        for item in _items(payload, "assignmentScores")
        if item.get("assignmentId") is not None
    ]

    return StudentRecord(
        sections=sections,
        reporting_terms=terms,
        final_grades=final_grades,
        assignments=assignments,
        assignment_scores=scores,
    )
