import uuid
from datetime import datetime
from enum import Enum
from typing import Optional
from sqlalchemy import Column, DateTime
from sqlmodel import SQLModel, Field

from ..core.timeutils import utc_now

class Priority(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"

class Status(str, Enum):
    todo = "todo"
    doing = "doing"
    done = "done"

def new_task_id() -> str:
    return uuid.uuid4().hex

def _utc_column(**kw) -> Column:
    # Values are naive UTC; see core.timeutils.
    return Column(DateTime(timezone=False), **kw)

class Task(SQLModel, table=True):
    id: str = Field(default_factory=new_task_id, primary_key=True)
    title: str
    description: Optional[str] = None
    deadline: datetime = Field(sa_column=_utc_column(index=True, nullable=False))
    priority: Priority = Field(default=Priority.medium)
    estimate_minutes: int
    status: Status = Field(default=Status.todo, index=True)

    # Google Calendar sync
    google_event_id: Optional[str] = None
    google_calendar_id: Optional[str] = None
    last_synced_at: Optional[datetime] = Field(default=None, sa_column=_utc_column(nullable=True))

    created_at: datetime = Field(default_factory=utc_now, sa_column=_utc_column(nullable=False))
    updated_at: datetime = Field(default_factory=utc_now, sa_column=_utc_column(nullable=False))
