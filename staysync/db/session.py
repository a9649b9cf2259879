"""
Database session management.

The engine and session factory live on a ``Database`` object created by the
application factory and stored on ``app.state``; nothing is created at import
time, so each app (and each test) owns its own connection pool.
"""

from contextlib import contextmanager
from typing import Generator, Iterator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from staysync.config.settings import Settings
from staysync.core.logging import get_logger

logger = get_logger(__name__)


def build_engine(url: str, echo: bool = False, pool_size: int = 10, max_overflow: int = 10) -> Engine:
    """
    Create an engine suited to the URL's backend.

    SQLite URLs share a single connection across threads so in-memory
    databases survive between sessions; other backends get a sized pool.
    """
    if url.startswith("sqlite"):
        return create_engine(
            url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(
        url,
        echo=echo,
        pool_pre_ping=True,
        pool_size=pool_size,
        max_overflow=max_overflow,
    )


class Database:
    """Owns the engine and session factory for one application instance."""

    def __init__(self, url: str, echo: bool = False, pool_size: int = 10, max_overflow: int = 10):
        self.url = url
        self.engine = build_engine(url, echo=echo, pool_size=pool_size, max_overflow=max_overflow)
        self.session_factory = sessionmaker(
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
            bind=self.engine,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(
            settings.get_database_url(),
            echo=settings.DB_ECHO,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_POOL_OVERFLOW,
        )

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Standalone session for work outside a request (cron, audit)."""
        db = self.session_factory()
        try:
            yield db
        finally:
            db.close()

    def dispose(self) -> None:
        self.engine.dispose()


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    Dependency function that yields a database session from the current app.

    Usage in FastAPI endpoints:
        @router.get("/items/")
        def read_items(db: Session = Depends(get_db)):
            ...
    """
    database: Database = request.app.state.database
    db = database.session_factory()
    try:
        yield db
    finally:
        db.close()
