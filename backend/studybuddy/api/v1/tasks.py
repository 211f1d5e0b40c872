import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session
from ...core.errors import NotFoundError
from ...db.session import get_session
from ...db.models import Priority, Status, Task
from ...db.crud import create_task, delete_task, get_task, list_tasks, update_task_fields
from ...schemas.tasks import MessageEnvelope, TaskEnvelope, TaskIn, TaskListEnvelope, TaskOut, TaskUpdate
from ...services.reconcile import remove_task_event
from ..deps import get_connector, require_calendar

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tasks", tags=["tasks"])

def get_task_or_404(task_id: str, session: Session) -> Task:
    task = get_task(session, task_id)
    if task is None:
        raise NotFoundError("Không tìm thấy nhiệm vụ")
    return task

@router.get("", response_model=TaskListEnvelope)
def list_all(
    status: Optional[Status] = None,
    priority: Optional[Priority] = None,
    session: Session = Depends(get_session),
):
    return TaskListEnvelope(tasks=[TaskOut.model_validate(t) for t in list_tasks(session, status=status, priority=priority)])

@router.post("", response_model=TaskEnvelope, status_code=201)
def create(body: TaskIn, session: Session = Depends(get_session)):
    task = create_task(session, Task(**body.model_dump()))
    logger.info("Created task %s", task.id)
    return TaskEnvelope(task=TaskOut.model_validate(task))

@router.get("/{task_id}", response_model=TaskEnvelope)
def get_one(task_id: str, session: Session = Depends(get_session)):
    return TaskEnvelope(task=TaskOut.model_validate(get_task_or_404(task_id, session)))

@router.api_route("/{task_id}", methods=["PUT", "PATCH"], response_model=TaskEnvelope)
def update(task_id: str, body: TaskUpdate, session: Session = Depends(get_session)):
    task = get_task_or_404(task_id, session)
    task = update_task_fields(session, task, **body.changes())
    return TaskEnvelope(task=TaskOut.model_validate(task))

@router.delete("/{task_id}", response_model=MessageEnvelope)
def delete(
    task_id: str,
    delete_event: bool = Query(False, alias="deleteEvent"),
    session: Session = Depends(get_session),
    connector=Depends(get_connector),
):
    task = get_task_or_404(task_id, session)
    if delete_event and task.google_event_id:
        remove_task_event(session, require_calendar(connector), task)
    delete_task(session, task)
    logger.info("Deleted task %s", task_id)
    return MessageEnvelope(message="Xóa nhiệm vụ thành công")
