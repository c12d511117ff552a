"""Audit service for persisting audit log entries."""

import logging
from typing import Any

from sqlalchemy.orm import Session

from src.models.audit_log import AuditAction, AuditLog
from src.services.request_context import RequestContext

logger = logging.getLogger(__name__)


class AuditService:
    """Append-only writer for the audit log table.

    Provides a single static method; entries are never updated or deleted.
    """

    @staticmethod
    def log(
        db: Session,
        *,
        action: AuditAction,
        subject_type: str,
        subject_id: int | None,
        context: RequestContext,
        summary: str,
        before: dict[str, Any] | None = None,
        after: dict[str, Any] | None = None,
    ) -> AuditLog:
        """Create audit log entry and flush it within the caller's transaction.

        Args:
            db: Database session (the same one carrying the audited mutation)
            action: Action performed
            subject_type: Type of entity ("Resident", "User", etc.)
            subject_id: Primary key of the entity, None when there is none
            context: Actor and origin of the operation
            summary: Human-readable description
            before: Previous values (empty maps are stored as NULL)
            after: New values (empty maps are stored as NULL)

        Returns:
            Created AuditLog object

        Raises:
            sqlalchemy.exc.SQLAlchemyError: If the write fails (not handled here)
        """
        audit = AuditLog(
            actor_id=context.actor_id,
            action=action,
            subject_type=subject_type,
            subject_id=subject_id,
            before=before or None,
            after=after or None,
            origin_address=context.origin_address,
            origin_agent=context.origin_agent,
            summary=summary,
        )
        db.add(audit)
        db.flush()
        logger.info(
            f"Audit {action.value}: {subject_type}#{subject_id} by actor={context.actor_id}"
        )
        return audit


__all__ = ["AuditService"]
