"""Audit trail for authentication outcomes (login, logout, failed login)."""

import logging
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.orm import Session

from src.models.audit_log import AuditAction, AuditLog
from src.models.user import User
from src.services.audit_service import AuditService
from src.services.change_auditor import redact
from src.services.config import get_settings
from src.services.request_context import RequestContext

logger = logging.getLogger(__name__)

USER_SUBJECT = User.__name__


@dataclass(frozen=True)
class LoginSucceeded:
    """A user signed in."""

    user: User


@dataclass(frozen=True)
class LoggedOut:
    """A user signed out. The user is None when the session was already gone."""

    user: User | None = None


@dataclass(frozen=True)
class LoginFailed:
    """A sign-in attempt was rejected; credentials are the submitted form fields."""

    credentials: dict[str, Any] = field(default_factory=dict)


AuthEvent = LoginSucceeded | LoggedOut | LoginFailed


class AuthenticationAuditor:
    """Records authentication events.

    Shares redaction and storage with ChangeAuditor, but has no diffing:
    login and logout entries carry no before/after values.
    """

    def __init__(
        self,
        store: type[AuditService] | AuditService = AuditService,
        unknown_identifier: str | None = None,
    ):
        self.store = store
        self.unknown_identifier = unknown_identifier or get_settings().failed_login_placeholder

    def handle(self, db: Session, context: RequestContext, event: AuthEvent) -> AuditLog | None:
        """Dispatch an authentication event to its handler."""
        if isinstance(event, LoginSucceeded):
            return self.handle_login(db, context, event.user)
        if isinstance(event, LoggedOut):
            return self.handle_logout(db, context, event.user)
        if isinstance(event, LoginFailed):
            return self.handle_failed(db, context, event.credentials)
        raise TypeError(f"Unsupported authentication event: {type(event).__name__}")

    def handle_login(self, db: Session, context: RequestContext, user: User) -> AuditLog:
        """Record a successful login.

        Raises:
            ValueError: If no user is given
        """
        if user is None:
            raise ValueError("Login event requires an authenticated user")
        return self._log_user_event(db, context, user, AuditAction.LOGIN, "User logged in")

    def handle_logout(
        self, db: Session, context: RequestContext, user: User | None
    ) -> AuditLog | None:
        """Record a logout; skipped when the user is unknown."""
        if user is None:
            logger.debug("Skipping logout audit: no user on the session")
            return None
        return self._log_user_event(db, context, user, AuditAction.LOGOUT, "User logged out")

    def handle_failed(
        self, db: Session, context: RequestContext, credentials: dict[str, Any] | None = None
    ) -> AuditLog:
        """Record a failed login with the attempted identifier only."""
        email = (credentials or {}).get("email") or self.unknown_identifier
        logger.warning(f"Failed login attempt for '{email}' from {context.origin_address}")

        return self.store.log(
            db,
            action=AuditAction.LOGIN_FAILED,
            subject_type=USER_SUBJECT,
            subject_id=None,
            context=RequestContext(
                actor_id=None,
                origin_address=context.origin_address,
                origin_agent=context.origin_agent,
            ),
            summary=f"Failed login attempt for '{email}'",
            after=redact({"email": email}),
        )

    def _log_user_event(
        self,
        db: Session,
        context: RequestContext,
        user: User,
        action: AuditAction,
        summary: str,
    ) -> AuditLog:
        return self.store.log(
            db,
            action=action,
            subject_type=USER_SUBJECT,
            subject_id=user.id,
            context=context.with_actor(user),
            summary=summary,
        )


__all__ = [
    "AuthEvent",
    "AuthenticationAuditor",
    "LoggedOut",
    "LoginFailed",
    "LoginSucceeded",
]
