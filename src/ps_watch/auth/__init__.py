"""PowerSchool authentication and data retrieval."""

from ps_watch.auth.powerschool_session import PowerSchoolError, PowerSchoolSession

__all__ = ["PowerSchoolError", "PowerSchoolSession"]
