"""Health check endpoint.

Learn: Simple GET endpoint that verifies the server is running and the
record store was loaded.
"""

from fastapi import APIRouter, Depends

from usergate import __version__
from usergate.auth.dependencies import get_store
from usergate.db.store import UserStore

router = APIRouter()


@router.get("/health")
async def health_check(store: UserStore = Depends(get_store)):
    """Check server health and store availability."""
    checks = {"server": "ok", "version": __version__}
    checks["store"] = "ok" if store.loaded else "error: not loaded"

    status = "healthy" if all(
        v == "ok" for k, v in checks.items() if k != "version"
    ) else "degraded"

    return {"status": status, **checks}
