"""Audit logging middleware — records every state-changing request to audit_log."""

import logging
import time
from collections.abc import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from hmsnova.core.config import settings
from hmsnova.core.deps import TENANT_HEADER
from hmsnova.db.base import async_session_factory
from hmsnova.domain.audit import AuditLog

logger = logging.getLogger(__name__)

# Methods that mutate state
_WRITE_METHODS = {"POST", "PUT", "PATCH", "DELETE"}


class AuditMiddleware(BaseHTTPMiddleware):
    """Logs all write operations.

    The row is written in its own session once the handler has produced a
    response. Failures in audit logging are logged and never raised to the
    caller. ``app.state.audit_session_factory`` overrides the session factory.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start = time.monotonic()
        response = await call_next(request)
        duration_ms = round((time.monotonic() - start) * 1000)

        if request.method in _WRITE_METHODS:
            await self._record(request, response.status_code, duration_ms)

        return response

    async def _record(self, request: Request, status_code: int, duration_ms: int) -> None:
        try:
            tenant_id = (request.headers.get(TENANT_HEADER) or "").strip() or settings.default_tenant_id
            path = request.url.path

            # e.g. /api/v1/chemicals/<uuid> → chemicals, <uuid>
            parts = [p for p in path.strip("/").split("/") if p]
            entity_id = next((p for p in reversed(parts) if len(p) == 36), None)

            factory = getattr(request.app.state, "audit_session_factory", async_session_factory)
            async with factory() as session:
                session.add(
                    AuditLog(
                        tenant_id=tenant_id,
                        user_id=None,
                        ip_address=request.client.host if request.client else None,
                        user_agent=request.headers.get("user-agent"),
                        action=f"{request.method}:{status_code}",
                        resource=path[:200],
                        metadata_json={"entity_id": entity_id, "duration_ms": duration_ms},
                        description=f"{request.method} {path} → {status_code} ({duration_ms}ms)",
                    )
                )
                await session.commit()
        except Exception as exc:
            logger.error("Audit log write failed for %s %s: %s", request.method, request.url.path, exc)
