"""Read-only queries over the audit log for the admin log pages."""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, timezone

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, joinedload

from src.models.audit_log import ACTION_LABELS, AuditAction, AuditLog
from src.models.user import User

logger = logging.getLogger(__name__)

DEFAULT_PER_PAGE = 20


@dataclass
class AuditLogFilter:
    """Filters for the audit log listing. Unset fields are ignored."""

    term: str | None = None
    """Matches the summary or the actor's name (substring)."""

    actor_id: int | None = None
    subject_type: str | None = None
    action: AuditAction | None = None
    date_from: date | None = None
    date_to: date | None = None
    """Inclusive calendar dates (UTC)."""

    page: int = 1
    per_page: int = DEFAULT_PER_PAGE


@dataclass
class AuditLogPage:
    """One page of audit log entries, newest first."""

    items: list[AuditLog] = field(default_factory=list)
    total: int = 0
    page: int = 1
    per_page: int = DEFAULT_PER_PAGE

    @property
    def pages(self) -> int:
        return max(1, -(-self.total // self.per_page))


class AuditLogService:
    """Service for browsing audit log entries."""

    def __init__(self, db_session: Session):
        """Initialize with database session."""
        self.db = db_session

    def search(self, filters: AuditLogFilter | None = None) -> AuditLogPage:
        """List entries matching filters, newest first.

        Raises:
            ValueError: If page or per_page is not positive
        """
        filters = filters or AuditLogFilter()
        if filters.page < 1 or filters.per_page < 1:
            raise ValueError("page and per_page must be positive")

        conditions = []
        if filters.term:
            pattern = f"%{filters.term}%"
            conditions.append(
                or_(
                    AuditLog.summary.like(pattern),
                    AuditLog.actor.has(User.name.like(pattern)),
                )
            )
        if filters.actor_id is not None:
            conditions.append(AuditLog.actor_id == filters.actor_id)
        if filters.subject_type:
            conditions.append(AuditLog.subject_type == filters.subject_type)
        if filters.action is not None:
            conditions.append(AuditLog.action == filters.action)
        if filters.date_from is not None:
            conditions.append(AuditLog.created_at >= _start_of_day(filters.date_from))
        if filters.date_to is not None:
            conditions.append(
                AuditLog.created_at < _start_of_day(filters.date_to + timedelta(days=1))
            )

        total = self.db.scalar(select(func.count(AuditLog.id)).where(*conditions)) or 0
        items = (
            self.db.execute(
                select(AuditLog)
                .options(joinedload(AuditLog.actor))
                .where(*conditions)
                .order_by(AuditLog.id.desc())
                .offset((filters.page - 1) * filters.per_page)
                .limit(filters.per_page)
            )
            .scalars()
            .all()
        )
        logger.debug(f"Audit log search matched {total} entries (page {filters.page})")
        return AuditLogPage(
            items=list(items), total=total, page=filters.page, per_page=filters.per_page
        )

    def get(self, record_id: int) -> AuditLog | None:
        """Get audit log entry by ID."""
        return self.db.get(AuditLog, record_id)

    def history_for(self, subject_type: str, subject_id: int) -> list[AuditLog]:
        """All entries for one subject, oldest first."""
        return list(
            self.db.execute(
                select(AuditLog)
                .where(AuditLog.subject_type == subject_type, AuditLog.subject_id == subject_id)
                .order_by(AuditLog.id.asc())
            )
            .scalars()
            .all()
        )

    def subject_types(self) -> list[str]:
        """Distinct subject types present in the log, for filter dropdowns."""
        return list(
            self.db.execute(
                select(AuditLog.subject_type).distinct().order_by(AuditLog.subject_type)
            )
            .scalars()
            .all()
        )

    @staticmethod
    def actions() -> dict[str, str]:
        """Action values mapped to their display labels."""
        return {action.value: label for action, label in ACTION_LABELS.items()}


def _start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


__all__ = ["AuditLogFilter", "AuditLogPage", "AuditLogService", "DEFAULT_PER_PAGE"]
