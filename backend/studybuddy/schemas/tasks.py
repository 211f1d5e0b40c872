from datetime import datetime
from typing import Annotated, List, Optional
from pydantic import AfterValidator, BaseModel, ConfigDict, field_serializer
from pydantic.alias_generators import to_camel

from ..core.timeutils import to_naive_utc, to_rfc3339
from ..db.models import Priority, Status

class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

def _clean_title(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Tiêu đề là bắt buộc")
    return v

def _clean_description(v: str) -> Optional[str]:
    return v.strip() or None

def _check_estimate(v: int) -> int:
    if v <= 0:
        raise ValueError("Thời gian ước tính phải lớn hơn 0")
    return v

Title = Annotated[str, AfterValidator(_clean_title)]
Description = Annotated[str, AfterValidator(_clean_description)]
Estimate = Annotated[int, AfterValidator(_check_estimate)]
Deadline = Annotated[datetime, AfterValidator(to_naive_utc)]

class TaskIn(CamelModel):
    title: Title
    description: Optional[Description] = None
    deadline: Deadline
    priority: Priority = Priority.medium
    estimate_minutes: Estimate
    status: Status = Status.todo

class TaskUpdate(CamelModel):
    title: Optional[Title] = None
    description: Optional[Description] = None
    deadline: Optional[Deadline] = None
    priority: Optional[Priority] = None
    estimate_minutes: Optional[Estimate] = None
    status: Optional[Status] = None

    def changes(self) -> dict:
        """Fields the client sent. Only description may be cleared with null."""
        data = self.model_dump(exclude_unset=True)
        return {k: v for k, v in data.items() if v is not None or k == "description"}

class TaskOut(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: Optional[str] = None
    deadline: datetime
    priority: Priority
    estimate_minutes: int
    status: Status
    google_event_id: Optional[str] = None
    google_calendar_id: Optional[str] = None
    last_synced_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    @field_serializer("deadline", "last_synced_at", "created_at", "updated_at")
    def _utc(self, v: Optional[datetime]) -> Optional[str]:
        return to_rfc3339(v) if v is not None else None

class TaskEnvelope(CamelModel):
    success: bool = True
    task: TaskOut

class TaskListEnvelope(CamelModel):
    success: bool = True
    tasks: List[TaskOut]

class MessageEnvelope(CamelModel):
    success: bool = True
    message: str
