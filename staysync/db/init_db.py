"""Database initialization helpers."""

from sqlalchemy.engine import Engine

from staysync.core.logging import get_logger
from staysync.models import Base

logger = get_logger(__name__)


def init_db(engine: Engine) -> None:
    """
    Create all tables for development and tests.

    Production deployments manage the schema with migrations instead.
    """
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ensured", extra={"tables": len(Base.metadata.tables)})


def drop_db(engine: Engine) -> None:
    Base.metadata.drop_all(bind=engine)
