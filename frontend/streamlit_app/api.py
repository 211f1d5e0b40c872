# frontend/streamlit_app/api.py
import os
from datetime import datetime, timedelta, timezone

import requests

API = os.getenv("API_URL", "http://localhost:8000/api/v1")
TIMEOUT = 30


class ApiError(Exception):
    pass


def _call(method: str, path: str, **kwargs) -> dict:
    r = requests.request(method, f"{API}{path}", timeout=TIMEOUT, **kwargs)
    try:
        data = r.json()
    except ValueError:
        raise ApiError(f"{method} {path}: HTTP {r.status_code}") from None
    if not r.ok or data.get("success") is False:
        raise ApiError(data.get("error") or f"{method} {path}: HTTP {r.status_code}")
    return data


def list_tasks(status: str | None = None, priority: str | None = None) -> list[dict]:
    params = {k: v for k, v in {"status": status, "priority": priority}.items() if v}
    return _call("GET", "/tasks", params=params)["tasks"]


def create_task(payload: dict) -> dict:
    return _call("POST", "/tasks", json=payload)["task"]


def update_task(task_id: str, changes: dict) -> dict:
    return _call("PUT", f"/tasks/{task_id}", json=changes)["task"]


def delete_task(task_id: str, delete_event: bool = False) -> dict:
    return _call("DELETE", f"/tasks/{task_id}", params={"deleteEvent": str(delete_event).lower()})


def analytics() -> dict:
    return _call("GET", "/analytics")


def suggestion(tasks: list[dict]) -> str:
    return _call("POST", "/ai/suggestion", json={"tasks": tasks})["suggestion"]


def calendar_status() -> bool:
    return _call("GET", "/google-calendar/status")["initialized"]


def calendar_auth_url() -> str:
    return _call("GET", "/google-calendar/auth-url")["authUrl"]


def calendar_auth_code(code: str) -> None:
    _call("POST", "/google-calendar/auth-code", json={"code": code})


def calendar_sync(horizon_days: int = 30) -> dict:
    return _call("POST", "/google-calendar/sync", params={"horizonDays": horizon_days})["stats"]


def calendar_sync_task(task_id: str) -> str:
    return _call("POST", f"/google-calendar/sync-task/{task_id}")["eventId"]


def parse_deadline(iso: str) -> datetime:
    return datetime.fromisoformat(iso.replace("Z", "+00:00"))


def upcoming_deadlines(tasks: list[dict], now: datetime | None = None, days: int = 3, limit: int = 5) -> list[dict]:
    """Open tasks that are overdue or due within ``days``, earliest first."""
    now = now or datetime.now(timezone.utc)
    horizon = now + timedelta(days=days)
    due = [t for t in tasks if t["status"] != "done" and parse_deadline(t["deadline"]) < horizon]
    return sorted(due, key=lambda t: parse_deadline(t["deadline"]))[:limit]
