"""FastAPI dependencies: caller identity and shared services.

Authentication happens upstream.  The gateway forwards the verified user as
``X-User-Id`` and ``X-User-Role`` headers and this service trusts them; the
role is never read from a request body.
"""

from __future__ import annotations

import asyncio
import sqlite3
from collections.abc import Awaitable, Callable
from typing import Any

import structlog
from fastapi import Depends, Header, HTTPException, Request
from pydantic import BaseModel

from appointments.domain.types import UserRole

logger = structlog.get_logger()


class Identity(BaseModel):
    """The authenticated caller."""

    user_id: str
    role: UserRole


def get_services(request: Request) -> dict[str, Any]:
    """Return the services dict built at startup."""
    services: dict[str, Any] = request.app.state.services
    return services


async def get_identity(
    x_user_id: str | None = Header(default=None),
    x_user_role: str | None = Header(default=None),
) -> Identity:
    """Resolve the caller from gateway headers.

    Raises:
        HTTPException: 401 when either header is missing or the role is unknown.
    """
    if not x_user_id or not x_user_role:
        raise HTTPException(status_code=401, detail="Not authorized")
    try:
        role = UserRole(x_user_role.strip().lower())
    except ValueError:
        raise HTTPException(status_code=401, detail="Not authorized") from None
    return Identity(user_id=x_user_id.strip(), role=role)


def require_role(*allowed: UserRole) -> Callable[..., Awaitable[Identity]]:
    """Build a dependency that admits only callers with one of *allowed* roles.

    Refused callers get a 403 and an ``unauthorized_access`` audit entry.
    """

    async def dependency(
        request: Request,
        identity: Identity = Depends(get_identity),
    ) -> Identity:
        if identity.role in allowed:
            return identity

        logger.warning(
            "forbidden_role",
            path=request.url.path,
            role=identity.role.value,
            allowed=[r.value for r in allowed],
        )
        audit_logger = get_services(request).get("audit_logger")
        if audit_logger is not None:
            try:
                await asyncio.to_thread(
                    audit_logger.log_refusal,
                    code="forbidden",
                    detail=(
                        f"Forbidden role: {identity.role.value}. "
                        f"Allowed: {', '.join(r.value for r in allowed)}"
                    ),
                    actor_id=identity.user_id,
                    actor_role=identity.role.value,
                    action=f"{request.method} {request.url.path}",
                )
            except sqlite3.Error:
                logger.exception("audit_write_failed", actor_id=identity.user_id)
        raise HTTPException(status_code=403, detail="Forbidden: Insufficient role access")

    return dependency
