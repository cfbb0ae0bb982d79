"""Health check endpoints.

Learn: ``/`` is a bare liveness probe; ``/health`` also verifies the
database is reachable through the store handle.
"""

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

from bookshelf import __version__

router = APIRouter()


@router.get("/", response_class=PlainTextResponse)
async def root():
    return "Server is running!"


@router.get("/health")
async def health_check(request: Request):
    """Check server health and database connectivity."""
    checks = {"server": "ok", "version": __version__}

    try:
        await request.app.state.database.ping()
        checks["database"] = "ok"
    except Exception as e:
        checks["database"] = f"error: {e}"

    status = "healthy" if checks["database"] == "ok" else "degraded"
    return {"status": status, **checks}
