
from fastapi import APIRouter, Depends, Query
from sqlmodel import Session
from ...core.errors import ValidationError
from ...db.session import get_session
from ...schemas.calendar import AuthCodeIn, AuthUrlOut, StatusOut, SyncOut, SyncTaskOut
from ...schemas.tasks import MessageEnvelope
from ...services.calendar_auth import CalendarConnector, CalendarSession
from ...services.reconcile import DEFAULT_HORIZON_DAYS, push_task, reconcile, remove_task_event
from ..deps import get_connector, require_calendar
from .tasks import get_task_or_404

router = APIRouter(prefix="/google-calendar", tags=["google-calendar"])

@router.get("/auth-url", response_model=AuthUrlOut)
def auth_url(connector: CalendarConnector = Depends(get_connector)):
    return AuthUrlOut(
        auth_url=connector.auth_url(),
        message="Visit this URL to authorize the application",
    )

@router.post("/auth-code", response_model=MessageEnvelope)
def auth_code(body: AuthCodeIn, connector: CalendarConnector = Depends(get_connector)):
    if not (body.code or "").strip():
        raise ValidationError("Mã xác thực là bắt buộc")
    connector.handle_auth_code(body.code.strip())
    return MessageEnvelope(message="Xác thực thành công. Google Calendar đã được kết nối.")

@router.post("/sync", response_model=SyncOut)
def sync(
    horizon_days: int = Query(DEFAULT_HORIZON_DAYS, alias="horizonDays"),
    session: Session = Depends(get_session),
    calendar: CalendarSession = Depends(require_calendar),
):
    stats = reconcile(session, calendar, horizon_days=horizon_days)
    return SyncOut(stats=stats, message="Đồng bộ thành công với Google Calendar")

@router.post("/sync-task/{task_id}", response_model=SyncTaskOut)
def sync_task(
    task_id: str,
    session: Session = Depends(get_session),
    calendar: CalendarSession = Depends(require_calendar),
):
    task = get_task_or_404(task_id, session)
    event_id = push_task(session, calendar, task)
    return SyncTaskOut(event_id=event_id, message="Đồng bộ nhiệm vụ thành công với Google Calendar")

@router.delete("/sync-task/{task_id}", response_model=MessageEnvelope)
def unsync_task(
    task_id: str,
    session: Session = Depends(get_session),
    calendar: CalendarSession = Depends(require_calendar),
):
    task = get_task_or_404(task_id, session)
    remove_task_event(session, calendar, task)
    return MessageEnvelope(message="Xóa nhiệm vụ khỏi Google Calendar thành công")

@router.get("/status", response_model=StatusOut)
def calendar_status(connector: CalendarConnector = Depends(get_connector)):
    initialized = connector.connect() is not None
    return StatusOut(
        initialized=initialized,
        message="Google Calendar service đã sẵn sàng" if initialized
        else "Google Calendar service chưa được khởi tạo",
    )
