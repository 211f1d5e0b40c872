import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from .core.config import Settings, settings as default_settings
from .core.errors import StudyBuddyError
from .core.logging_setup import setup_logging
from .db.session import init_db, make_engine
from .services.calendar_auth import CalendarConnector
from .api.v1 import ai, analytics, calendar, health, tasks

logger = logging.getLogger(__name__)

def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})

def _first_validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    err = errors[0]
    field = ".".join(str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path"))
    msg = err.get("msg", "Invalid value").removeprefix("Value error, ")
    return f"{field}: {msg}" if field else msg

def create_app(s: Optional[Settings] = None, engine=None, connector: Optional[CalendarConnector] = None) -> FastAPI:
    s = s or default_settings
    setup_logging(level=s.LOG_LEVEL, log_dir=s.LOG_DIR or None)
    engine = engine if engine is not None else make_engine(s.DATABASE_URL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        init_db(engine)
        logger.info("%s started (db=%s)", s.APP_NAME, engine.url)
        yield

    app = FastAPI(title=s.APP_NAME, lifespan=lifespan)
    app.state.settings = s
    app.state.engine = engine
    app.state.calendar = connector or CalendarConnector(s)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=s.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.exception_handler(StudyBuddyError)
    async def studybuddy_error(request: Request, exc: StudyBuddyError):
        log = logger.error if exc.status_code >= 500 else logger.info
        log("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
        return _error(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(request: Request, exc: RequestValidationError):
        message = _first_validation_message(exc)
        logger.info("%s %s -> 400: %s", request.method, request.url.path, message)
        return _error(400, message)

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _error(500, "Internal server error")

    app.include_router(health.router, prefix=s.API_V1_PREFIX)
    app.include_router(tasks.router, prefix=s.API_V1_PREFIX)
    app.include_router(analytics.router, prefix=s.API_V1_PREFIX)
    app.include_router(ai.router, prefix=s.API_V1_PREFIX)
    app.include_router(calendar.router, prefix=s.API_V1_PREFIX)
    return app

app = create_app()
