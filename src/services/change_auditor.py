"""Change auditor: turns entity lifecycle events into audit log entries.

The persistence layer calls one of the four entry points (created, updated,
deleted, restored) with the entity and an explicit RequestContext. Attribute
maps are redacted before they are diffed or stored, so credential fields can
never reach either side of an entry.
"""

import logging
from typing import Any, Mapping

from sqlalchemy.orm import Session

from src.models import BaseModel, Identifiable
from src.models.audit_log import AuditAction, AuditLog
from src.services.audit_service import AuditService
from src.services.request_context import RequestContext

logger = logging.getLogger(__name__)

REDACTED_FIELDS = frozenset(
    {
        "password",
        "remember_token",
        "two_factor_secret",
        "two_factor_recovery_codes",
    }
)


def redact(attributes: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of attributes without denylisted fields."""
    return {key: value for key, value in attributes.items() if key not in REDACTED_FIELDS}


def changed_keys(original: Mapping[str, Any], current: Mapping[str, Any]) -> set[str]:
    """Keys whose values differ between the two redacted maps.

    A key present on only one side counts as changed.
    """
    original = redact(original)
    current = redact(current)
    return {
        key
        for key in original.keys() | current.keys()
        if key not in original or key not in current or original[key] != current[key]
    }


def diff(
    original: Mapping[str, Any], current: Mapping[str, Any]
) -> tuple[dict[str, Any], dict[str, Any]]:
    """Compute (before, after) maps restricted to the changed keys.

    Both maps always carry the same key set; a key missing on one side maps to None.
    """
    original = redact(original)
    current = redact(current)
    keys = sorted(changed_keys(original, current))
    before = {key: original.get(key) for key in keys}
    after = {key: current.get(key) for key in keys}
    return before, after


def subject_identifier(
    entity: Any, attributes: Mapping[str, Any], subject_id: Any = None
) -> str:
    """Pick a human-readable identifier for an entity.

    Priority: name, title, "first_name last_name", display_label(), "#<id>".
    """
    if attributes.get("name") is not None:
        return str(attributes["name"])

    if attributes.get("title") is not None:
        return str(attributes["title"])

    first_name = attributes.get("first_name")
    last_name = attributes.get("last_name")
    if first_name is not None and last_name is not None:
        return f"{first_name} {last_name}"

    if isinstance(entity, Identifiable):
        return entity.display_label()

    return f"#{subject_id}"


def describe(subject_type: str, identifier: str, action: AuditAction) -> str:
    """Compose "<Type> '<identifier>' was <action>"."""
    return f"{subject_type} '{identifier}' was {action.value}"


class ChangeAuditor:
    """Records created/updated/deleted/restored events for any BaseModel entity."""

    def __init__(self, store: type[AuditService] | AuditService = AuditService):
        self.store = store

    def created(self, db: Session, context: RequestContext, entity: BaseModel) -> AuditLog:
        """Record creation: after = redacted post-create snapshot."""
        return self._record(db, context, entity, AuditAction.CREATED, {}, entity.audit_snapshot())

    def updated(
        self,
        db: Session,
        context: RequestContext,
        entity: BaseModel,
        original: Mapping[str, Any],
    ) -> AuditLog | None:
        """Record an update if any observable field changed.

        Args:
            db: Database session
            context: Actor and origin
            entity: Entity in its post-update state
            original: Snapshot taken before the mutation

        Returns:
            Created AuditLog, or None when nothing observable changed
        """
        before, after = diff(original, entity.audit_snapshot())
        if not after:
            logger.debug(
                f"Skipping audit for {type(entity).__name__}#{entity.id}: no observable changes"
            )
            return None
        return self._write(db, context, entity, AuditAction.UPDATED, before, after)

    def deleted(self, db: Session, context: RequestContext, entity: BaseModel) -> AuditLog:
        """Record deletion: before = redacted snapshot at deletion time."""
        return self._record(db, context, entity, AuditAction.DELETED, entity.audit_snapshot(), {})

    def restored(self, db: Session, context: RequestContext, entity: BaseModel) -> AuditLog:
        """Record restoration: after = redacted snapshot after restore."""
        return self._record(db, context, entity, AuditAction.RESTORED, {}, entity.audit_snapshot())

    def _record(
        self,
        db: Session,
        context: RequestContext,
        entity: BaseModel,
        action: AuditAction,
        before: Mapping[str, Any],
        after: Mapping[str, Any],
    ) -> AuditLog:
        return self._write(db, context, entity, action, redact(before), redact(after))

    def _write(
        self,
        db: Session,
        context: RequestContext,
        entity: BaseModel,
        action: AuditAction,
        before: dict[str, Any],
        after: dict[str, Any],
    ) -> AuditLog:
        subject_type = type(entity).__name__
        identifier = subject_identifier(entity, entity.audit_snapshot(), entity.id)
        return self.store.log(
            db,
            action=action,
            subject_type=subject_type,
            subject_id=entity.id,
            context=context,
            summary=describe(subject_type, identifier, action),
            before=before,
            after=after,
        )


__all__ = [
    "REDACTED_FIELDS",
    "ChangeAuditor",
    "changed_keys",
    "describe",
    "diff",
    "redact",
    "subject_identifier",
]
