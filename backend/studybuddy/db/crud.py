from typing import List, Optional
from sqlmodel import Session, select
from ..core.errors import ValidationError
from ..core.timeutils import utc_now
from .models import Priority, Status, Task

MUTABLE_FIELDS = {
    "title", "description", "deadline", "priority", "estimate_minutes", "status",
    "google_event_id", "google_calendar_id", "last_synced_at",
}

def check_invariants(task: Task) -> None:
    if not (task.title or "").strip():
        raise ValidationError("Tiêu đề là bắt buộc")
    if task.deadline is None:
        raise ValidationError("Hạn chót là bắt buộc")
    if task.estimate_minutes is None or task.estimate_minutes <= 0:
        raise ValidationError("Thời gian ước tính phải lớn hơn 0")
    try:
        task.priority = Priority(task.priority)
        task.status = Status(task.status)
    except ValueError as e:
        raise ValidationError(str(e)) from e

def get_task(session: Session, task_id: str) -> Optional[Task]:
    return session.get(Task, task_id)

def create_task(session: Session, task: Task) -> Task:
    check_invariants(task)
    session.add(task)
    session.commit()
    session.refresh(task)
    return task

def update_task_fields(session: Session, task: Task, **fields) -> Task:
    unknown = set(fields) - MUTABLE_FIELDS
    if unknown:
        raise ValueError(f"Not updatable: {', '.join(sorted(unknown))}")
    for key, value in fields.items():
        setattr(task, key, value)
    try:
        check_invariants(task)
    except ValidationError:
        session.rollback()
        raise
    task.updated_at = utc_now()
    session.add(task)
    session.commit()
    session.refresh(task)
    return task

def list_tasks(
    session: Session,
    status: Optional[Status] = None,
    priority: Optional[Priority] = None,
) -> List[Task]:
    stmt = select(Task)
    if status is not None:
        stmt = stmt.where(Task.status == status)
    if priority is not None:
        stmt = stmt.where(Task.priority == priority)
    stmt = stmt.order_by(Task.deadline.asc(), Task.created_at.desc())
    return list(session.exec(stmt).all())

def delete_task(session: Session, task: Task) -> None:
    session.delete(task)
    session.commit()
