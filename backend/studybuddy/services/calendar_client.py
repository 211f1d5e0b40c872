from __future__ import annotations

import logging
import time
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from googleapiclient.errors import HttpError

from ..core.errors import CalendarError, CalendarRateLimitedError
from ..core.timeutils import to_rfc3339

logger = logging.getLogger(__name__)

DEFAULT_RETRY_AFTER_SECONDS = 5.0
MAX_RESULTS = 250


def _status_of(exc: HttpError) -> Optional[int]:
    resp = getattr(exc, "resp", None)
    return getattr(resp, "status", None)


def _retry_after(exc: HttpError) -> float:
    resp = getattr(exc, "resp", None)
    raw = resp.get("retry-after") if hasattr(resp, "get") else None
    try:
        return float(raw) if raw is not None else DEFAULT_RETRY_AFTER_SECONDS
    except (TypeError, ValueError):
        return DEFAULT_RETRY_AFTER_SECONDS


class GoogleCalendarClient:
    """
    Thin wrapper over a Calendar v3 ``service`` object.

    On HTTP 429 the client sleeps for the Retry-After hint once and raises
    CalendarRateLimitedError; retrying is left to the caller. Other HTTP
    errors surface as CalendarError.
    """

    def __init__(self, service, calendar_id: str = "primary", sleep: Callable[[float], None] = time.sleep):
        self.service = service
        self.calendar_id = calendar_id
        self._sleep = sleep

    def _raise_for(self, action: str, exc: HttpError) -> None:
        status = _status_of(exc)
        if status == 429:
            wait = _retry_after(exc)
            logger.warning("Calendar rate limited during %s; waiting %.1fs", action, wait)
            self._sleep(wait)
            raise CalendarRateLimitedError(f"Google Calendar rate limit hit during {action}", wait) from exc
        logger.error("Calendar %s failed with HTTP %s", action, status)
        raise CalendarError(f"Google Calendar {action} failed (HTTP {status})") from exc

    def _execute(self, action: str, request) -> Any:
        try:
            return request.execute()
        except HttpError as e:
            self._raise_for(action, e)

    def list_events(self, time_min: Optional[datetime] = None, time_max: Optional[datetime] = None) -> List[Dict[str, Any]]:
        params: Dict[str, Any] = dict(
            calendarId=self.calendar_id,
            maxResults=MAX_RESULTS,
            singleEvents=True,
            orderBy="startTime",
        )
        if time_min is not None:
            params["timeMin"] = to_rfc3339(time_min)
        if time_max is not None:
            params["timeMax"] = to_rfc3339(time_max)
        res = self._execute("list", self.service.events().list(**params))
        return res.get("items", [])

    def insert_event(self, body: Dict[str, Any]) -> str:
        res = self._execute("insert", self.service.events().insert(calendarId=self.calendar_id, body=body))
        event_id = (res or {}).get("id")
        if not event_id:
            raise CalendarError("Failed to create event - no ID returned")
        logger.info("Created calendar event %s", event_id)
        return event_id

    def update_event(self, event_id: str, body: Dict[str, Any]) -> None:
        self._execute(
            "update",
            self.service.events().update(calendarId=self.calendar_id, eventId=event_id, body=body),
        )
        logger.info("Updated calendar event %s", event_id)

    def delete_event(self, event_id: str) -> None:
        try:
            self.service.events().delete(calendarId=self.calendar_id, eventId=event_id).execute()
        except HttpError as e:
            if _status_of(e) in (404, 410):
                logger.info("Calendar event %s already gone", event_id)
                return
            self._raise_for("delete", e)
        logger.info("Deleted calendar event %s", event_id)
