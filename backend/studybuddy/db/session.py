from pathlib import Path

from fastapi import Request
from sqlmodel import SQLModel, create_engine, Session

def make_engine(database_url: str):
    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    return create_engine(database_url, echo=False, connect_args=connect_args)

def init_db(bind) -> None:
    from . import models  # noqa: F401
    db_file = bind.url.database
    if bind.url.get_backend_name() == "sqlite" and db_file and db_file != ":memory:":
        Path(db_file).parent.mkdir(parents=True, exist_ok=True)
    SQLModel.metadata.create_all(bind)

def get_session(request: Request):
    with Session(request.app.state.engine) as session:
        yield session
