from fastapi import Depends, Request

from ..core.config import Settings
from ..core.errors import CalendarNotConnectedError
from ..services.calendar_auth import CalendarConnector, CalendarSession

def get_settings(request: Request) -> Settings:
    return request.app.state.settings

def get_connector(request: Request) -> CalendarConnector:
    return request.app.state.calendar

def require_calendar(connector: CalendarConnector = Depends(get_connector)) -> CalendarSession:
    session = connector.connect()
    if session is None:
        raise CalendarNotConnectedError(
            "Dịch vụ Google Calendar chưa được khởi tạo. Vui lòng xác thực trước."
        )
    return session
