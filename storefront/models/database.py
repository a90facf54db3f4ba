"""Engine, session factory and table creation for the catalog database."""

import uuid
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from storefront.config import settings

Base = declarative_base()


def build_engine(database_url: str, echo: bool = False, **kwargs) -> Engine:
    """Create an engine for ``database_url``.

    SQLite connections are opened with ``check_same_thread=False`` since
    FastAPI may resolve a request's session and run its handler on
    different threads.
    """
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(database_url, connect_args=connect_args, echo=echo, **kwargs)


def build_session_factory(bind: Engine) -> sessionmaker:
    """Session factory; sessions never flush implicitly before queries."""
    return sessionmaker(bind=bind, autoflush=False)


engine = build_engine(settings.database_url, echo=settings.debug)
SessionLocal = build_session_factory(engine)


def generate_uuid() -> str:
    """Primary key default for every table."""
    return str(uuid.uuid4())


@contextmanager
def session_scope(factory: sessionmaker = SessionLocal) -> Iterator[Session]:
    """Open a session and always close it.

    Commits are left to the services.
    """
    db = factory()
    try:
        yield db
    finally:
        db.close()


def get_db() -> Iterator[Session]:
    """Request-scoped session dependency."""
    with session_scope() as db:
        yield db


def create_tables(bind: Engine | None = None) -> None:
    """Create the categories and products tables if they do not exist."""
    from storefront.models import category, product  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
