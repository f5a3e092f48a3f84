"""Database engine and session management for Taskboard."""

from typing import Generator

from sqlmodel import Session, SQLModel, create_engine

from ..config import get_settings


def get_engine():
    """Create the database engine from DATABASE_URL."""
    settings = get_settings()
    connect_args = {}
    if settings.database_url.startswith("sqlite"):
        # Requests may be served from a different thread than the one
        # that opened the connection.
        connect_args["check_same_thread"] = False
    return create_engine(settings.database_url, echo=settings.sql_echo, connect_args=connect_args)


engine = get_engine()


def init_db() -> None:
    """Create all database tables."""
    # Import models so they're registered with SQLModel.metadata
    from .. import models  # noqa: F401

    SQLModel.metadata.create_all(engine)


def get_session() -> Generator[Session, None, None]:
    """Get a database session.

    Yields:
        Session: Database session

    Usage:
        def endpoint(db: Session = Depends(get_session)):
            ...
    """
    with Session(engine) as session:
        yield session
