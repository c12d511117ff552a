"""Audit log model for tracking entity lifecycle and authentication events."""

from enum import Enum as PyEnum
from typing import Any, Optional

from sqlalchemy import JSON, Enum, ForeignKey, Index, String, Text, event
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models import Base, BaseModel


class AuditAction(str, PyEnum):
    """Enumeration for audited actions."""

    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    RESTORED = "restored"
    LOGIN = "login"
    LOGOUT = "logout"
    LOGIN_FAILED = "login_failed"


ACTION_LABELS = {
    AuditAction.CREATED: "Created",
    AuditAction.UPDATED: "Updated",
    AuditAction.DELETED: "Deleted",
    AuditAction.RESTORED: "Restored",
    AuditAction.LOGIN: "Logged In",
    AuditAction.LOGOUT: "Logged Out",
    AuditAction.LOGIN_FAILED: "Failed Login",
}

ACTION_COLORS = {
    AuditAction.CREATED: "green",
    AuditAction.UPDATED: "blue",
    AuditAction.DELETED: "red",
    AuditAction.RESTORED: "amber",
    AuditAction.LOGIN: "green",
    AuditAction.LOGOUT: "zinc",
    AuditAction.LOGIN_FAILED: "red",
}


class AuditLogImmutableError(RuntimeError):
    """Raised when application code tries to modify or remove an audit record."""


class AuditLog(Base, BaseModel):
    """Audit log entry for one observed mutation or authentication event.

    Records who (actor_id) did what (action) to which entity
    (subject_type, subject_id), the changed attribute values on both sides
    (before, after), and where the request came from. Rows are append-only.
    """

    __tablename__ = "audit_logs"

    actor_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id"), nullable=True, index=True
    )
    """User who performed the action. None for system or unauthenticated events."""

    action: Mapped[AuditAction] = mapped_column(
        Enum(
            AuditAction,
            native_enum=False,
            length=32,
            values_callable=lambda members: [member.value for member in members],
        ),
        nullable=False,
        index=True,
    )

    subject_type: Mapped[str] = mapped_column(String(100), nullable=False)
    """Entity type being audited: "Resident", "User", etc."""

    subject_id: Mapped[int | None] = mapped_column(nullable=True)
    """Primary key of the audited entity. None when no subject exists (failed login)."""

    before: Mapped[dict[str, Any] | None] = mapped_column("old_values", JSON, nullable=True)
    """Previous values of the changed fields. None when empty."""

    after: Mapped[dict[str, Any] | None] = mapped_column("new_values", JSON, nullable=True)
    """New values of the changed fields. None when empty."""

    origin_address: Mapped[str | None] = mapped_column(String(45), nullable=True)
    origin_agent: Mapped[str | None] = mapped_column(Text, nullable=True)

    summary: Mapped[str] = mapped_column(String(500), nullable=False)

    actor: Mapped[Optional["User"]] = relationship("User", foreign_keys=[actor_id])  # noqa: F821

    __table_args__ = (
        Index("idx_audit_subject", "subject_type", "subject_id"),
        Index("idx_audit_created_at", "created_at"),
    )

    @property
    def occurred_at(self):
        return self.created_at

    @property
    def before_values(self) -> dict[str, Any]:
        return self.before or {}

    @property
    def after_values(self) -> dict[str, Any]:
        return self.after or {}

    @property
    def action_label(self) -> str:
        return ACTION_LABELS.get(self.action, str(self.action.value).capitalize())

    @property
    def action_color(self) -> str:
        return ACTION_COLORS.get(self.action, "zinc")

    @property
    def subject_name(self) -> str | None:
        return self.subject_type or None

    @property
    def changes_summary(self) -> str:
        """Short description of what changed, for log listings."""
        if self.action == AuditAction.CREATED:
            return "New record created"

        if self.action == AuditAction.DELETED:
            return "Record deleted"

        if self.action == AuditAction.UPDATED and self.before and self.after:
            changed = [
                key for key, value in self.after.items() if self.before.get(key) != value
            ]
            if not changed:
                return "No visible changes"

            fields = ", ".join(name.replace("_", " ") for name in changed[:3])
            return f"Changed: {fields}" + ("..." if len(changed) > 3 else "")

        return self.summary or self.action_label

    def changed_fields(self) -> list[dict[str, Any]]:
        """Return per-field rows of old and new values.

        Creation and deletion list every captured field; other actions only
        list fields whose value differs.
        """
        if not self.before and not self.after:
            return []

        before = self.before_values
        after = self.after_values
        keys = list(dict.fromkeys([*before.keys(), *after.keys()]))
        list_all = self.action in (AuditAction.CREATED, AuditAction.DELETED)

        rows = []
        for key in keys:
            old = before.get(key)
            new = after.get(key)
            if list_all or old != new:
                rows.append({"field": key, "old": old, "new": new})
        return rows

    def __repr__(self) -> str:
        return (
            f"<AuditLog(id={self.id}, action={self.action.value}, "
            f"subject_type={self.subject_type}, subject_id={self.subject_id}, "
            f"actor_id={self.actor_id}, created_at={self.created_at})>"
        )


@event.listens_for(AuditLog, "before_update")
def _reject_update(mapper, connection, target: AuditLog) -> None:
    raise AuditLogImmutableError(f"Audit log {target.id} is immutable")


@event.listens_for(AuditLog, "before_delete")
def _reject_delete(mapper, connection, target: AuditLog) -> None:
    raise AuditLogImmutableError(f"Audit log {target.id} cannot be deleted")


__all__ = ["AuditAction", "AuditLog", "AuditLogImmutableError", "ACTION_LABELS", "ACTION_COLORS"]
