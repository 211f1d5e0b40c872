from typing import Optional
from pydantic import BaseModel

from .tasks import CamelModel

class AuthCodeIn(BaseModel):
    code: Optional[str] = None

class SyncStats(BaseModel):
    created: int = 0
    updated: int = 0
    deleted: int = 0

class AuthUrlOut(CamelModel):
    success: bool = True
    auth_url: str
    message: str

class SyncOut(CamelModel):
    success: bool = True
    stats: SyncStats
    message: str

class SyncTaskOut(CamelModel):
    success: bool = True
    event_id: str
    message: str

class StatusOut(CamelModel):
    success: bool = True
    initialized: bool
    message: str
