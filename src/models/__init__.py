"""SQLAlchemy base model with common fields and model exports."""

from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Protocol, runtime_checkable

from sqlalchemy import DateTime, inspect
from sqlalchemy.orm import Mapped, declarative_base, mapped_column

# Base class for all models
Base = declarative_base()

# Columns maintained by the persistence layer itself; never part of an audit snapshot
BOOKKEEPING_COLUMNS = frozenset({"id", "created_at", "updated_at", "deleted_at"})


def to_audit_value(value: Any) -> Any:
    """Convert a column value into a JSON-serializable scalar."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    return value


@runtime_checkable
class Identifiable(Protocol):
    """Entities that know how to describe themselves in audit summaries."""

    def display_label(self) -> str: ...


class BaseModel:
    """Base model with common timestamp fields."""

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    def audit_snapshot(self) -> dict[str, Any]:
        """Project mapped column attributes into a flat audit map.

        Bookkeeping columns and relationships are left out.
        """
        mapper = inspect(type(self))
        return {
            attr.key: to_audit_value(getattr(self, attr.key))
            for attr in mapper.column_attrs
            if attr.key not in BOOKKEEPING_COLUMNS
        }


class SoftDeleteMixin:
    """Marks an entity as soft-deletable (deleted rows keep a deleted_at timestamp)."""

    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, index=True
    )

    @property
    def is_trashed(self) -> bool:
        return self.deleted_at is not None


# Import models to register them with Base (after Base is defined)
# This must be after Base declaration to avoid circular imports
from src.models.agency import Agency  # noqa: E402
from src.models.audit_log import AuditAction, AuditLog, AuditLogImmutableError  # noqa: E402
from src.models.care_plan import CarePlan  # noqa: E402
from src.models.medication import Medication  # noqa: E402
from src.models.resident import Resident  # noqa: E402
from src.models.shift import Shift  # noqa: E402
from src.models.user import User  # noqa: E402

__all__ = [
    "Base",
    "BaseModel",
    "BOOKKEEPING_COLUMNS",
    "Identifiable",
    "SoftDeleteMixin",
    "to_audit_value",
    "Agency",
    "AuditAction",
    "AuditLog",
    "AuditLogImmutableError",
    "CarePlan",
    "Medication",
    "Resident",
    "Shift",
    "User",
]
