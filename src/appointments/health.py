"""Liveness and readiness probes.

``GET /health`` answers as long as the process runs.  ``GET /ready`` answers
200 only when the inquiry store and the audit database both respond, and
503 with the per-check results otherwise.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse


async def _probe(check: Callable[[], Any] | None) -> str:
    if check is None:
        return "fail"
    try:
        await asyncio.to_thread(check)
    except Exception:
        return "fail"
    return "ok"


def register_health_routes(app: FastAPI) -> None:
    """Add ``/health`` and ``/ready`` to *app*."""

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "healthy"}

    @app.get("/ready")
    async def ready(request: Request) -> JSONResponse:
        services: dict[str, Any] = request.app.state.services
        store = services.get("store")
        audit_conn = services.get("audit_conn")

        checks = {
            "inquiry_store": await _probe(store.ping if store is not None else None),
            "audit_db": await _probe(
                (lambda: audit_conn.execute("SELECT 1")) if audit_conn is not None else None
            ),
        }

        all_ok = all(result == "ok" for result in checks.values())
        return JSONResponse(
            content={"status": "ready" if all_ok else "not_ready", "checks": checks},
            status_code=200 if all_ok else 503,
        )
