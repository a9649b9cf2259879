"""
Base repository with standardized CRUD operations and error handling.

Provides the foundation for all domain repositories. Repositories flush but
never commit; transaction boundaries belong to the service layer.
"""

from typing import Any, Dict, Generic, List, Optional, Sequence, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from staysync.core.exceptions import ConflictError, ErrorCode
from staysync.core.logging import get_logger
from staysync.models.base import BaseModel

logger = get_logger(__name__)

ModelType = TypeVar("ModelType", bound=BaseModel)


class BaseRepository(Generic[ModelType]):
    """
    Generic repository.

    Organization scoped models are always read through ``get_in_org`` /
    ``list_in_org`` so one tenant can never see another tenant's rows.
    """

    def __init__(self, model: Type[ModelType], db: Session):
        """
        Initialize repository.

        Args:
            model: SQLAlchemy model class
            db: Database session
        """
        self.model = model
        self.db = db

    # ==================== Create Operations ====================

    def create(self, entity: ModelType) -> ModelType:
        """
        Add an entity and flush it so generated values are populated.

        Args:
            entity: Model instance to persist

        Returns:
            The persisted entity
        """
        self.db.add(entity)
        try:
            self.db.flush()
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError(
                f"{self.model.__name__} conflicts with existing data",
                error_code=ErrorCode.DUPLICATE_ENTRY,
                details={"error": str(e.orig)},
            ) from e
        return entity

    # ==================== Read Operations ====================

    def get_by_id(self, entity_id: Any) -> Optional[ModelType]:
        return self.db.get(self.model, entity_id)

    def get_in_org(self, entity_id: Any, organization_id: str) -> Optional[ModelType]:
        stmt = select(self.model).where(
            self.model.id == entity_id,
            self.model.organization_id == organization_id,
        )
        return self.db.scalars(stmt).first()

    def list_in_org(
        self,
        organization_id: str,
        order_by: Optional[Sequence[Any]] = None,
        limit: Optional[int] = None,
        **filters: Any,
    ) -> List[ModelType]:
        stmt = select(self.model).where(self.model.organization_id == organization_id)
        for field, value in filters.items():
            if value is not None:
                stmt = stmt.where(getattr(self.model, field) == value)
        if order_by:
            stmt = stmt.order_by(*order_by)
        if limit:
            stmt = stmt.limit(limit)
        return list(self.db.scalars(stmt).all())

    # ==================== Update / Delete ====================

    def update(self, entity: ModelType, data: Dict[str, Any]) -> ModelType:
        """Apply ``data`` to the entity and flush."""
        for field, value in data.items():
            if not hasattr(entity, field):
                logger.warning(f"Ignoring unknown field '{field}' for {self.model.__name__}")
                continue
            setattr(entity, field, value)
        self.db.flush()
        return entity

    def delete(self, entity: ModelType) -> None:
        self.db.delete(entity)
        self.db.flush()
