from typing import List
from pydantic import BaseModel

from .tasks import CamelModel

class DailyCompletion(BaseModel):
    date: str  # YYYY-MM-DD
    completed: int

class PriorityStats(BaseModel):
    low: int = 0
    medium: int = 0
    high: int = 0

class AnalyticsOut(CamelModel):
    success: bool = True
    total: int
    completed: int
    pending: int
    overdue: int
    completion_rate: int
    average_completion_time: int
    weekly_data: List[DailyCompletion]
    priority_stats: PriorityStats
