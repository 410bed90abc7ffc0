# barbershop/db.py

from fastapi import Request
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine, Session

from .config import Settings

IN_MEMORY_URLS = ("sqlite://", "sqlite:///:memory:")


def build_engine(settings: Settings):
    if settings.database_url.startswith("sqlite"):
        # check_same_thread is required for SQLite + FastAPI; writers wait on each other instead of failing
        kwargs = {"connect_args": {"check_same_thread": False, "timeout": 30}}
        if settings.database_url in IN_MEMORY_URLS:
            # One shared connection, so one shared transaction: single-threaded scripts only
            kwargs["poolclass"] = StaticPool
    else:
        kwargs = {}
    return create_engine(settings.database_url, echo=settings.sql_echo, **kwargs)


def create_db_and_tables(engine) -> None:
    SQLModel.metadata.create_all(engine)


# Dependency: one session per request
def get_session(request: Request):
    with Session(request.app.state.engine) as session:
        yield session
