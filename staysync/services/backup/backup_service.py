"""
Full-database JSON backup and restore.

Restore deletes every table in reverse dependency order, then inserts the
backup in dependency order. Each table is committed on its own: a failure
part-way leaves the database partially restored, and the raised
``BackupRestoreError`` names the tables that were completed.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple, Type

from sqlalchemy import Date, DateTime, Enum as SAEnum, Numeric, delete, inspect as sa_inspect, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from staysync.core.exceptions import BackupFormatError, BackupRestoreError
from staysync.models import (
    AuditLog,
    BaseModel,
    Billing,
    Booking,
    CentralMeter,
    Expense,
    Issue,
    LineBotState,
    Organization,
    RecurringExpense,
    Resident,
    Room,
    SystemConfig,
    User,
)
from staysync.services.audit.audit_service import to_json_safe
from staysync.services.base import BaseService
from staysync.utils.date_utils import utc_now

BACKUP_VERSION = "1.0"

# Dependency order: every table only references tables listed before it
BACKUP_TABLES: List[Tuple[str, Type[BaseModel]]] = [
    ("organizations", Organization),
    ("users", User),
    ("rooms", Room),
    ("systemConfigs", SystemConfig),
    ("residents", Resident),
    ("billing", Billing),
    ("expenses", Expense),
    ("recurringExpenses", RecurringExpense),
    ("issues", Issue),
    ("bookings", Booking),
    ("centralMeters", CentralMeter),
    ("lineBotStates", LineBotState),
    ("auditLogs", AuditLog),
]


def serialize_row(instance: BaseModel) -> Dict[str, Any]:
    mapper = sa_inspect(type(instance))
    return to_json_safe({attr.key: getattr(instance, attr.key) for attr in mapper.column_attrs})


def deserialize_row(model: Type[BaseModel], row: Dict[str, Any]) -> Dict[str, Any]:
    """Convert a JSON row back to Python values by column type; unknown keys are dropped."""
    values: Dict[str, Any] = {}
    for attr in sa_inspect(model).column_attrs:
        if attr.key not in row:
            continue
        value = row[attr.key]
        column_type = attr.columns[0].type
        if value is not None:
            if isinstance(column_type, SAEnum) and column_type.enum_class is not None:
                value = column_type.enum_class(value)
            elif isinstance(column_type, DateTime):
                value = datetime.fromisoformat(value)
            elif isinstance(column_type, Date):
                value = date.fromisoformat(value)
            elif isinstance(column_type, Numeric):
                value = Decimal(str(value))
        values[attr.key] = value
    return values


def validate_backup(backup: Any) -> Dict[str, List[Dict[str, Any]]]:
    """
    Check the backup has exactly the expected shape.

    Raises:
        BackupFormatError: On a missing/extra section or a non-list table
    """
    if not isinstance(backup, dict) or not isinstance(backup.get("metadata"), dict):
        raise BackupFormatError("Backup must contain a metadata object")
    data = backup.get("data")
    if not isinstance(data, dict):
        raise BackupFormatError("Backup must contain a data object")

    expected = {name for name, _ in BACKUP_TABLES}
    missing = sorted(expected - set(data))
    unexpected = sorted(set(data) - expected)
    if missing or unexpected:
        raise BackupFormatError(
            f"Backup tables do not match: missing {missing or 'none'}, unexpected {unexpected or 'none'}"
        )
    for name, rows in data.items():
        if not isinstance(rows, list) or not all(isinstance(row, dict) for row in rows):
            raise BackupFormatError(f"Backup table '{name}' must be a list of objects")
    return data


class BackupService(BaseService):
    def __init__(self, db_session: Session):
        super().__init__(db_session)

    def export(self, source: Optional[str] = None, now: Optional[datetime] = None) -> Dict[str, Any]:
        """Dump every table to a JSON-ready document."""
        data: Dict[str, List[Dict[str, Any]]] = {}
        for name, model in BACKUP_TABLES:
            rows = self.db.scalars(select(model)).all()
            data[name] = [serialize_row(row) for row in rows]

        metadata: Dict[str, Any] = {
            "version": BACKUP_VERSION,
            "exportDate": (now or utc_now()).isoformat(),
            "totalRecords": sum(len(rows) for rows in data.values()),
        }
        if source:
            metadata["source"] = source

        self._logger.info(
            "Backup exported",
            extra={"total_records": metadata["totalRecords"], "source": source or "manual"},
        )
        return {"metadata": metadata, "data": data}

    def restore(self, backup: Any) -> Dict[str, int]:
        """
        Replace the whole database with ``backup``.

        Returns:
            Number of rows inserted per table

        Raises:
            BackupFormatError: If the backup shape is invalid (nothing is touched)
            BackupRestoreError: If a step fails; earlier steps stay committed
        """
        data = validate_backup(backup)
        metadata = backup["metadata"]
        self._logger.warning(
            "Starting database restore",
            extra={"export_date": metadata.get("exportDate"), "total_records": metadata.get("totalRecords")},
        )

        completed: List[str] = []
        for name, model in reversed(BACKUP_TABLES):
            self._run_step(f"delete:{name}", completed, lambda model=model: self.db.execute(delete(model)))

        # Deleted rows may still sit in the identity map under the ids about to be inserted
        self.db.expunge_all()

        results: Dict[str, int] = {}
        for name, model in BACKUP_TABLES:
            rows = data[name]

            def insert_rows(model=model, rows=rows):
                self.db.add_all([model(**deserialize_row(model, row)) for row in rows])

            self._run_step(name, completed, insert_rows)
            results[name] = len(rows)

        self._logger.warning("Database restore completed", extra={"results": results})
        return results

    def _run_step(self, step: str, completed: List[str], action) -> None:
        try:
            action()
            self.db.commit()
        except (SQLAlchemyError, ValueError, TypeError) as e:
            self.db.rollback()
            self._logger.error(
                f"Restore step failed: {e}",
                exc_info=True,
                extra={"step": step, "completed": list(completed)},
            )
            raise BackupRestoreError(
                f"Restore failed at '{step}'; the database is partially restored",
                completed=list(completed),
                failed_table=step,
            ) from e
        completed.append(step)


__all__ = ["BackupService", "BACKUP_TABLES", "BACKUP_VERSION", "validate_backup"]
