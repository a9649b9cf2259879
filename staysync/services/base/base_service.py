"""
Base service class providing common functionality for all services.
"""

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from staysync.core.exceptions import ConflictError, ErrorCode
from staysync.core.logging import get_logger


class BaseService:
    """
    Base service with common behaviors:
    - Shared logger and db session
    - Transaction management with automatic rollback

    Services raise ``BaseAppException`` subclasses; the API layer renders
    them through the global exception handlers.
    """

    def __init__(self, db_session: Session):
        """
        Initialize base service.

        Args:
            db_session: SQLAlchemy database session
        """
        self.db: Session = db_session
        self._logger = get_logger(self.__class__.__name__)

    # -------------------------------------------------------------------------
    # Transaction Management
    # -------------------------------------------------------------------------

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """
        Context manager for database transactions with automatic rollback.

        Yields:
            The database session

        Example:
            with self.transaction():
                self.rooms.update(room, {"status": RoomStatus.OCCUPIED})
                self.residents.create(resident)
                # commit on success, rollback on any exception
        """
        try:
            yield self.db
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            self._logger.warning("Transaction rolled back on integrity error", extra={"error": str(e.orig)})
            raise ConflictError(
                "Operation conflicts with existing data",
                error_code=ErrorCode.DUPLICATE_ENTRY,
            ) from e
        except Exception:
            self.db.rollback()
            self._logger.debug("Transaction rolled back")
            raise
