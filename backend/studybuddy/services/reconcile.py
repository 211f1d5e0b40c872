"""Google Calendar <-> task store synchronisation.

``reconcile`` pulls tagged events into the store: unknown task ids become new
tasks, known ones are overwritten when the event changed after the last sync.
Remote deletions are never propagated, so ``deleted`` is always 0.

A failure on any event aborts the pass. Tasks written before the failure stay
written; each store call commits on its own.

``push_task`` and ``remove_task_event`` go the other way, one task at a time.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlmodel import Session

from ..core.errors import ValidationError
from ..core.timeutils import EPOCH, utc_now
from ..db import crud
from ..db.models import Task
from ..schemas.calendar import SyncStats
from ..schemas.events import TaggedEvent
from .calendar_auth import CalendarSession
from .projection import event_to_task_fields, parse_event, task_to_event

logger = logging.getLogger(__name__)

DEFAULT_HORIZON_DAYS = 30


def reconcile(
    session: Session,
    calendar: CalendarSession,
    horizon_days: int = DEFAULT_HORIZON_DAYS,
    now: Optional[datetime] = None,
) -> SyncStats:
    if horizon_days < 0:
        raise ValidationError("horizonDays must be >= 0")
    now = now or utc_now()
    stats = SyncStats()

    raw_events = calendar.client.list_events(now, now + timedelta(days=horizon_days))
    tagged = [ev for ev in map(parse_event, raw_events) if isinstance(ev, TaggedEvent)]
    logger.info("Sync: %d events in window, %d tagged", len(raw_events), len(tagged))

    for event in tagged:
        task = crud.get_task(session, event.task_id)
        if task is None:
            fields = event_to_task_fields(event, calendar.calendar_id, synced_at=now)
            crud.create_task(session, Task(id=event.task_id, **fields))
            stats.created += 1
            logger.debug("Sync: created task %s from event %s", event.task_id, event.id)
            continue

        remote_updated = event.updated or EPOCH
        last_synced = task.last_synced_at or EPOCH
        if remote_updated > last_synced:
            fields = event_to_task_fields(event, calendar.calendar_id, synced_at=now)
            crud.update_task_fields(session, task, **fields)
            stats.updated += 1
            logger.debug("Sync: updated task %s from event %s", task.id, event.id)

    logger.info("Google Calendar sync completed: %s", stats.model_dump())
    return stats


def push_task(session: Session, calendar: CalendarSession, task: Task) -> str:
    """Create or update the task's calendar event. Returns the event id."""
    body = task_to_event(task, calendar.time_zone)
    if task.google_event_id:
        calendar.client.update_event(task.google_event_id, body)
        crud.update_task_fields(session, task, last_synced_at=utc_now())
        return task.google_event_id

    event_id = calendar.client.insert_event(body)
    crud.update_task_fields(
        session,
        task,
        google_event_id=event_id,
        google_calendar_id=calendar.calendar_id,
        last_synced_at=utc_now(),
    )
    return event_id


def remove_task_event(session: Session, calendar: CalendarSession, task: Task) -> bool:
    """Delete the task's calendar event, if any. Returns whether one existed."""
    if not task.google_event_id:
        return False
    calendar.client.delete_event(task.google_event_id)
    crud.update_task_fields(
        session,
        task,
        google_event_id=None,
        google_calendar_id=None,
        last_synced_at=utc_now(),
    )
    return True
