"""Error taxonomy shared by the store, services and HTTP layer.

Every error carries the HTTP status it maps to; the app registers a single
handler that turns them into ``{"success": false, "error": ...}``.
"""

from __future__ import annotations


class StudyBuddyError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(StudyBuddyError):
    status_code = 400


class NotFoundError(StudyBuddyError):
    status_code = 404


class ServiceError(StudyBuddyError):
    """Database or language-model failure."""

    status_code = 500


class CalendarError(StudyBuddyError):
    """Google Calendar API failure."""

    status_code = 500


class MalformedEventError(CalendarError):
    """A tagged calendar event failed validation."""


class CalendarRateLimitedError(CalendarError):
    status_code = 503

    def __init__(self, message: str, retry_after: float):
        super().__init__(message)
        self.retry_after = retry_after


class CalendarNotConnectedError(CalendarError):
    status_code = 503


class CalendarNotConfiguredError(CalendarError):
    status_code = 503
