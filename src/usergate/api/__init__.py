"""API route aggregation.

All routers registered here get mounted in main.py.

Learn: Authentication is applied per route (Depends(get_current_user))
rather than per router, because the users router mixes open routes
(register, login, lookups) with bearer-only ones (logout, status, PUT,
DELETE).
"""

from fastapi import APIRouter

from usergate.api.health import router as health_router
from usergate.api.users import router as users_router

api_router = APIRouter(prefix="/api")

api_router.include_router(health_router, tags=["health"])
api_router.include_router(users_router, tags=["users"])
