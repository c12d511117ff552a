"""Explicit per-request context passed into the audit entry points.

The request-handling layer builds one RequestContext per request and hands it
to the auditors; nothing in the audit path looks up the current user or
request globally.
"""

from dataclasses import dataclass
from typing import Any

from fastapi import Request


@dataclass(frozen=True)
class RequestContext:
    """Actor and network origin of the operation being audited."""

    actor_id: int | None = None
    """Authenticated user performing the operation (None for system/unauthenticated)."""

    origin_address: str | None = None
    """Client IP address."""

    origin_agent: str | None = None
    """Client User-Agent string."""

    @classmethod
    def system(cls) -> "RequestContext":
        """Context for mutations caused outside any request (jobs, CLI, seeding)."""
        return cls(actor_id=None, origin_address=None, origin_agent=None)

    @classmethod
    def from_request(cls, request: Request, actor: Any = None) -> "RequestContext":
        """Build context from an incoming request.

        Args:
            request: FastAPI/Starlette request
            actor: Authenticated user (anything with an ``id``), or None

        Returns:
            RequestContext with client host and User-Agent (None when unavailable)
        """
        client = request.client
        return cls(
            actor_id=getattr(actor, "id", None) if actor is not None else None,
            origin_address=client.host if client else None,
            origin_agent=request.headers.get("user-agent"),
        )

    def with_actor(self, actor: Any) -> "RequestContext":
        """Return a copy attributed to another actor (e.g. right after login)."""
        return RequestContext(
            actor_id=getattr(actor, "id", None) if actor is not None else None,
            origin_address=self.origin_address,
            origin_agent=self.origin_agent,
        )


def get_request_context(request: Request) -> RequestContext:
    """FastAPI dependency: context for the current request.

    Authentication middleware stores the signed-in user on ``request.state.user``.
    """
    return RequestContext.from_request(request, getattr(request.state, "user", None))


__all__ = ["RequestContext", "get_request_context"]
