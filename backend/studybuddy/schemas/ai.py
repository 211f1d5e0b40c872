from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict

from .tasks import CamelModel

class SuggestionTask(CamelModel):
    """Loose view of a task as the UI sends it; extra keys are ignored."""

    model_config = ConfigDict(extra="ignore")

    title: str
    deadline: datetime
    priority: str = "medium"
    status: str = "todo"
    estimate_minutes: Optional[int] = None

class SuggestionIn(BaseModel):
    tasks: List[SuggestionTask] = []

class SuggestionOut(BaseModel):
    success: bool = True
    suggestion: str
    fallback: bool = False
