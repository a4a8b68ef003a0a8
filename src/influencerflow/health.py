"""Health and readiness endpoints for container orchestration.

Provides two top-level routes:

- ``GET /health`` -- Liveness probe.  Returns 200 if the process is alive.
- ``GET /ready``  -- Readiness probe.  Returns 200 when the database answers a
  ping, 503 otherwise.  Optional clients are reported as ``ok`` or
  ``disabled`` and never fail readiness.
"""

from __future__ import annotations

import asyncio
import sqlite3
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse


def register_health_routes(app: FastAPI) -> None:
    """Register ``/health`` and ``/ready`` endpoints on *app*.

    Args:
        app: The FastAPI application instance.
    """

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Liveness probe -- always returns 200 if the process is running."""
        return {"status": "healthy"}

    @app.get("/ready")
    async def ready(request: Request) -> JSONResponse:
        """Readiness probe -- pings the database and reports optional clients."""
        services: dict[str, Any] = request.app.state.services
        checks: dict[str, str] = {}

        db = services.get("db")
        if db is not None:
            try:
                await asyncio.to_thread(db.ping)
                checks["database"] = "ok"
            except sqlite3.Error:
                checks["database"] = "fail"
        else:
            checks["database"] = "fail"

        checks["email"] = "ok" if services.get("resend_client") is not None else "disabled"

        all_ok = checks["database"] == "ok"
        status = "ready" if all_ok else "not_ready"
        code = 200 if all_ok else 503

        return JSONResponse(content={"status": status, "checks": checks}, status_code=code)
