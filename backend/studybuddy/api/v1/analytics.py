from fastapi import APIRouter, Depends
from sqlmodel import Session
from ...db.session import get_session
from ...db.crud import list_tasks
from ...schemas.analytics import AnalyticsOut
from ...services.analytics import compute_analytics

router = APIRouter(tags=["analytics"])

@router.get("/analytics", response_model=AnalyticsOut)
def analytics(session: Session = Depends(get_session)):
    return compute_analytics(list_tasks(session))
