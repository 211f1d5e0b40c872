import math
from datetime import datetime, timedelta
from typing import Iterable, Optional

from ..core.timeutils import utc_now
from ..db.models import Priority, Status, Task
from ..schemas.analytics import AnalyticsOut, DailyCompletion, PriorityStats

TREND_DAYS = 7

def _round(x: float) -> int:
    # half up, not banker's rounding
    return math.floor(x + 0.5)

def compute_analytics(tasks: Iterable[Task], now: Optional[datetime] = None) -> AnalyticsOut:
    tasks = list(tasks)
    now = now or utc_now()

    total = len(tasks)
    done = [t for t in tasks if t.status == Status.done]
    completed = len(done)
    pending = total - completed
    overdue = sum(1 for t in tasks if t.status != Status.done and t.deadline < now)

    completion_rate = _round(completed / total * 100) if total else 0
    average_time = _round(sum(t.estimate_minutes for t in done) / completed) if completed else 0

    # Completion day approximated by the last modification of a done task.
    today = now.date()
    weekly = []
    for offset in range(TREND_DAYS - 1, -1, -1):
        day = today - timedelta(days=offset)
        weekly.append(DailyCompletion(
            date=day.isoformat(),
            completed=sum(1 for t in done if t.updated_at.date() == day),
        ))

    priority_stats = PriorityStats(**{
        p.value: sum(1 for t in tasks if t.priority == p) for p in Priority
    })

    return AnalyticsOut(
        total=total,
        completed=completed,
        pending=pending,
        overdue=overdue,
        completion_rate=completion_rate,
        average_completion_time=average_time,
        weekly_data=weekly,
        priority_stats=priority_stats,
    )
