"""OAuth wiring for Google Calendar.

A CalendarConnector lives on ``app.state`` for the process lifetime and hands
out a CalendarSession once a usable token exists. Handlers receive the
session through a dependency, so nothing here is module-level state.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow
from googleapiclient.discovery import build

from ..core.config import Settings
from ..core.errors import CalendarError, CalendarNotConfiguredError
from .calendar_client import GoogleCalendarClient

logger = logging.getLogger(__name__)

SCOPES = [
    "https://www.googleapis.com/auth/calendar.events",
    "https://www.googleapis.com/auth/calendar",
]


@dataclass
class CalendarSession:
    client: GoogleCalendarClient
    calendar_id: str
    time_zone: str


def build_calendar_service(creds: Credentials):
    return build("calendar", "v3", credentials=creds, cache_discovery=False)


class CalendarConnector:
    def __init__(
        self,
        settings: Settings,
        service_builder: Callable[[Credentials], Any] = build_calendar_service,
    ):
        self.settings = settings
        self._service_builder = service_builder
        self._flow: Optional[Flow] = None
        self._session: Optional[CalendarSession] = None

    @property
    def session(self) -> Optional[CalendarSession]:
        return self._session

    @property
    def is_connected(self) -> bool:
        return self._session is not None

    # ----- client secrets / token storage -----
    def _client_config(self) -> Dict[str, Any]:
        raw = self.settings.GOOGLE_CREDENTIALS_CONTENT
        if not raw:
            path = Path(self.settings.GOOGLE_CREDENTIALS_PATH)
            if not path.exists():
                raise CalendarNotConfiguredError(
                    f"Google OAuth client secrets not found at {path}"
                )
            raw = path.read_text(encoding="utf-8")
        try:
            config = json.loads(raw)
        except json.JSONDecodeError as e:
            raise CalendarNotConfiguredError(f"Invalid Google client secrets: {e}") from e
        if "installed" not in config and "web" not in config:
            raise CalendarNotConfiguredError("Google client secrets must contain 'installed' or 'web'")
        return config

    def _redirect_uri(self, config: Dict[str, Any]) -> str:
        if self.settings.GOOGLE_REDIRECT_URI:
            return self.settings.GOOGLE_REDIRECT_URI
        section = config.get("installed") or config.get("web") or {}
        uris = section.get("redirect_uris") or ["http://localhost"]
        return uris[0]

    def _load_token_info(self) -> Optional[Dict[str, Any]]:
        raw = self.settings.GOOGLE_TOKEN_CONTENT
        if not raw:
            path = Path(self.settings.GOOGLE_TOKEN_PATH)
            if not path.exists():
                return None
            raw = path.read_text(encoding="utf-8")
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Stored Google token is not valid JSON; manual authorization required")
            return None

    def _save_token(self, creds: Credentials) -> None:
        data = creds.to_json()
        if self.settings.is_production:
            # No writable filesystem in production deployments.
            logger.warning(
                "Production environment detected. Save this token as the GOOGLE_TOKEN_CONTENT "
                "environment variable:\n%s", data,
            )
            return
        token_path = Path(self.settings.GOOGLE_TOKEN_PATH)
        token_path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = token_path.with_suffix(".tmp")
        try:
            tmp_path.write_text(data, encoding="utf-8")
            os.replace(tmp_path, token_path)
        finally:
            if tmp_path.exists():
                tmp_path.unlink()

    def _open_session(self, creds: Credentials) -> CalendarSession:
        calendar_id = self.settings.GOOGLE_CALENDAR_ID
        service = self._service_builder(creds)
        self._session = CalendarSession(
            client=GoogleCalendarClient(service, calendar_id),
            calendar_id=calendar_id,
            time_zone=self.settings.GOOGLE_TIMEZONE,
        )
        logger.info("Google Calendar session ready (calendar=%s)", calendar_id)
        return self._session

    # ----- OAuth -----
    def _new_flow(self) -> Flow:
        config = self._client_config()
        return Flow.from_client_config(config, scopes=SCOPES, redirect_uri=self._redirect_uri(config))

    def auth_url(self) -> str:
        """Consent URL for offline access. The flow is kept for the code exchange."""
        self._flow = self._new_flow()
        url, _state = self._flow.authorization_url(
            access_type="offline",
            prompt="consent",
            include_granted_scopes="true",
        )
        return url

    def handle_auth_code(self, code: str) -> CalendarSession:
        flow = self._flow or self._new_flow()
        try:
            flow.fetch_token(code=code)
        except Exception as e:
            logger.error("Google authorization code exchange failed: %s", e)
            raise CalendarError("Không thể xử lý mã xác thực") from e
        self._flow = None
        creds = flow.credentials
        self._save_token(creds)
        return self._open_session(creds)

    def connect(self) -> Optional[CalendarSession]:
        """Return the active session, building it from the stored token if needed."""
        if self._session is not None:
            return self._session
        info = self._load_token_info()
        if info is None:
            logger.info("No Google token stored; manual authorization required")
            return None
        try:
            creds = Credentials.from_authorized_user_info(info, SCOPES)
        except ValueError as e:
            logger.warning("Stored Google token is incomplete: %s", e)
            return None
        if not creds.valid:
            if not (creds.expired and creds.refresh_token):
                logger.warning("Stored Google token is invalid and cannot be refreshed")
                return None
            try:
                creds.refresh(Request())
            except GoogleAuthError as e:
                logger.warning("Google token refresh failed: %s", e)
                return None
            self._save_token(creds)
        return self._open_session(creds)
