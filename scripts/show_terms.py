"""Log in and print the reporting terms, active window and projected records."""

from datetime import datetime

from dateutil.tz import gettz

from ps_watch.auth import PowerSchoolSession
from ps_watch.config import get_settings
from ps_watch.core import project, select_term_window

settings = get_settings()
now = datetime.now(gettz(settings.timezone))

with PowerSchoolSession(settings) as session:
    student = session.get_student()

print(f"Now: {now.isoformat()}\n")
print(f"Reporting terms ({len(student.reporting_terms)}):")
for term in student.reporting_terms:
    print(f"  {term.id:>8}  {term.title:<10} {term.start_date.date()} -> {term.end_date.date()}")

window = select_term_window(student.reporting_terms, now, settings.term_title_prefix)
if window.is_empty:
    print("\nNo active term.")
else:
    print(f"\nActive terms: {sorted(window.term_ids)}")
    print(f"Window: {window.begin.isoformat()} -> {window.end.isoformat()}")

snapshot = project(student, now, settings.term_title_prefix)
print(f"\nClasses ({len(snapshot.classes)}):")
for cls in snapshot.classes:
    print(f"  - {cls.name}: {cls.grade}")
print(f"\nGraded assignments ({len(snapshot.assignments)}):")
for assignment in snapshot.assignments:
    print(f"  - [{assignment.class_name}] {assignment.name}: {assignment.grade}")
