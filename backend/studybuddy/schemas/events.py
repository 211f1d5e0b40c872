"""Google Calendar events as StudyBuddy reads them.

An event is either tagged (its private extended properties carry a task id)
or untagged. Tagged events are validated strictly; see
``services.projection.parse_event``.
"""

from datetime import datetime
from typing import Annotated, Literal, Optional, Union
from pydantic import AfterValidator, BaseModel, ConfigDict, Field, StringConstraints

from ..core.timeutils import to_naive_utc
from ..db.models import Priority, Status

UtcDatetime = Annotated[datetime, AfterValidator(to_naive_utc)]

class TaskEventMetadata(BaseModel):
    """``extendedProperties.private`` of an event created by StudyBuddy."""

    model_config = ConfigDict(extra="ignore")

    studyBuddyTaskId: str = Field(min_length=1)
    priority: Optional[Priority] = None
    status: Optional[Status] = None

class TaggedEvent(BaseModel):
    kind: Literal["tagged"] = "tagged"
    id: str
    summary: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
    description: Optional[str] = None
    start: UtcDatetime
    end: Optional[UtcDatetime] = None
    color_id: Optional[str] = None
    updated: Optional[UtcDatetime] = None
    metadata: TaskEventMetadata

    @property
    def task_id(self) -> str:
        return self.metadata.studyBuddyTaskId

class UntaggedEvent(BaseModel):
    kind: Literal["untagged"] = "untagged"
    id: Optional[str] = None

CalendarEvent = Annotated[Union[TaggedEvent, UntaggedEvent], Field(discriminator="kind")]
