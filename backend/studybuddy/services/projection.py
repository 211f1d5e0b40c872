"""Mapping between local tasks and Google Calendar events."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Dict, Optional

import pydantic

from ..core.errors import MalformedEventError
from ..core.timeutils import to_rfc3339
from ..db.models import Priority, Status, Task
from ..schemas.events import CalendarEvent, TaggedEvent, TaskEventMetadata, UntaggedEvent

TASK_ID_KEY = "studyBuddyTaskId"
DEFAULT_DURATION_MINUTES = 30

# Google Calendar event colorIds: 11 Tomato, 5 Banana, 10 Basil.
PRIORITY_COLORS: Dict[Priority, str] = {
    Priority.high: "11",
    Priority.medium: "5",
    Priority.low: "10",
}
COLOR_PRIORITIES: Dict[str, Priority] = {color: p for p, color in PRIORITY_COLORS.items()}
BASELINE_COLOR = "1"


def priority_to_color(priority: Any) -> str:
    try:
        return PRIORITY_COLORS[Priority(priority)]
    except (ValueError, KeyError):
        return BASELINE_COLOR


def color_to_priority(color_id: Optional[str]) -> Priority:
    return COLOR_PRIORITIES.get(color_id or "", Priority.medium)


def _default_description(task: Task) -> str:
    priority = getattr(task.priority, "value", task.priority)
    return (
        "Nhiệm vụ từ StudyBuddy\n"
        f"Ưu tiên: {priority}\n"
        f"Thời gian ước tính: {task.estimate_minutes} phút"
    )


def task_to_event(task: Task, time_zone: str = "UTC") -> Dict[str, Any]:
    """Build the Calendar API event body for a task."""
    start = task.deadline
    end = start + timedelta(minutes=task.estimate_minutes or DEFAULT_DURATION_MINUTES)
    priority = getattr(task.priority, "value", task.priority)
    status = getattr(task.status, "value", task.status)
    return {
        "summary": task.title,
        "description": task.description or _default_description(task),
        "start": {"dateTime": to_rfc3339(start), "timeZone": time_zone},
        "end": {"dateTime": to_rfc3339(end), "timeZone": time_zone},
        "colorId": priority_to_color(task.priority),
        "extendedProperties": {
            "private": {
                TASK_ID_KEY: task.id,
                "priority": priority,
                "status": status,
            },
        },
    }


def parse_event(raw: Dict[str, Any]) -> CalendarEvent:
    """
    Classify a raw Calendar API event.

    Events without a task id are untagged and ignored by sync. Tagged events
    must validate; anything else raises MalformedEventError.
    """
    private = ((raw.get("extendedProperties") or {}).get("private") or {})
    if not private.get(TASK_ID_KEY):
        return UntaggedEvent(id=raw.get("id"))
    try:
        return TaggedEvent(
            id=raw.get("id"),
            summary=raw.get("summary"),
            description=raw.get("description"),
            start=(raw.get("start") or {}).get("dateTime"),
            end=(raw.get("end") or {}).get("dateTime"),
            color_id=raw.get("colorId"),
            updated=raw.get("updated"),
            metadata=TaskEventMetadata.model_validate(private),
        )
    except pydantic.ValidationError as e:
        raise MalformedEventError(
            f"Malformed calendar event {raw.get('id')!r} for task {private.get(TASK_ID_KEY)!r}: {e}"
        ) from e


def event_duration_minutes(event: TaggedEvent) -> int:
    end = event.end or event.start + timedelta(minutes=DEFAULT_DURATION_MINUTES)
    minutes = round((end - event.start).total_seconds() / 60)
    if minutes <= 0:
        raise MalformedEventError(f"Calendar event {event.id!r} has a non-positive duration")
    return minutes


def event_to_task_fields(event: TaggedEvent, calendar_id: str, synced_at: datetime) -> Dict[str, Any]:
    """Mutable task fields carried by a tagged event."""
    return {
        "title": event.summary,
        "description": event.description,
        "deadline": event.start,
        "priority": color_to_priority(event.color_id),
        "estimate_minutes": event_duration_minutes(event),
        "status": event.metadata.status or Status.todo,
        "google_event_id": event.id,
        "google_calendar_id": calendar_id,
        "last_synced_at": synced_at,
    }
