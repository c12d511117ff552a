"""Persistence operations that record an audit entry in the same transaction."""

import logging
from datetime import datetime, timezone
from typing import Any, TypeVar

from sqlalchemy import inspect
from sqlalchemy.orm import Session

from src.models import BOOKKEEPING_COLUMNS, BaseModel, SoftDeleteMixin
from src.models.audit_log import AuditLog
from src.services.change_auditor import ChangeAuditor
from src.services.request_context import RequestContext

logger = logging.getLogger(__name__)

EntityT = TypeVar("EntityT", bound=BaseModel)


class AuditedRepository:
    """Create/update/delete/restore entities with audit logging.

    Each operation performs the mutation, hands the entity to ChangeAuditor and
    commits once. If anything fails, including the audit write, the session is
    rolled back and the error re-raised, so no mutation is committed without
    its audit entry.
    """

    def __init__(
        self,
        db_session: Session,
        context: RequestContext,
        auditor: ChangeAuditor | None = None,
    ):
        """Initialize with database session and request context."""
        self.db = db_session
        self.context = context
        self.auditor = auditor or ChangeAuditor()

    def create(self, entity: EntityT) -> EntityT:
        """Persist a new entity and record its creation.

        Returns:
            The persisted entity (with primary key assigned)
        """

        def mutate() -> AuditLog:
            self.db.add(entity)
            self.db.flush()
            return self.auditor.created(self.db, self.context, entity)

        self._in_transaction(mutate, f"create {type(entity).__name__}")
        self.db.refresh(entity)
        return entity

    def update(self, entity: EntityT, **changes: Any) -> EntityT:
        """Apply attribute changes and record the observable difference.

        Args:
            entity: Persisted entity
            **changes: Column attribute values to set

        Raises:
            ValueError: If a change names something that is not an updatable column
        """
        columns = {attr.key for attr in inspect(type(entity)).column_attrs}
        unknown = sorted(key for key in changes if key not in columns or key in BOOKKEEPING_COLUMNS)
        if unknown:
            raise ValueError(
                f"Cannot update {type(entity).__name__}: unknown fields {', '.join(unknown)}"
            )

        original = entity.audit_snapshot()

        def mutate() -> AuditLog | None:
            for key, value in changes.items():
                setattr(entity, key, value)
            self.db.flush()
            return self.auditor.updated(self.db, self.context, entity, original)

        self._in_transaction(mutate, f"update {type(entity).__name__}#{entity.id}")
        return entity

    def delete(self, entity: EntityT) -> EntityT:
        """Delete an entity (soft delete when it supports it) and record it."""

        def mutate() -> AuditLog:
            if isinstance(entity, SoftDeleteMixin):
                entity.deleted_at = datetime.now(timezone.utc)
                self.db.flush()
                return self.auditor.deleted(self.db, self.context, entity)

            # Snapshot must be recorded while the row still exists
            audit = self.auditor.deleted(self.db, self.context, entity)
            self.db.delete(entity)
            self.db.flush()
            return audit

        self._in_transaction(mutate, f"delete {type(entity).__name__}#{entity.id}")
        return entity

    def restore(self, entity: EntityT) -> EntityT:
        """Restore a soft-deleted entity and record it.

        Raises:
            ValueError: If the entity is not soft-deletable or not deleted
        """
        if not isinstance(entity, SoftDeleteMixin):
            raise ValueError(f"{type(entity).__name__} does not support restore")
        if entity.deleted_at is None:
            raise ValueError(f"{type(entity).__name__}#{entity.id} is not deleted")

        def mutate() -> AuditLog:
            entity.deleted_at = None
            self.db.flush()
            return self.auditor.restored(self.db, self.context, entity)

        self._in_transaction(mutate, f"restore {type(entity).__name__}#{entity.id}")
        return entity

    def _in_transaction(self, mutate, description: str):
        try:
            audit = mutate()
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.error(f"Failed to {description}; transaction rolled back", exc_info=True)
            raise
        if audit is not None:
            logger.info(f"Committed {description} (audit_log_id={audit.id})")
        return audit


__all__ = ["AuditedRepository"]
