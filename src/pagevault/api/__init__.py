"""API route aggregation.

All routers registered here get mounted in main.py.

Learn: Health and auth routes are open. Page routes declare
get_current_user on each handler because they need the identity it
returns for owner scoping, not just the yes/no gate.
"""

from fastapi import APIRouter

from pagevault.api.auth import router as auth_router
from pagevault.api.health import router as health_router
from pagevault.api.pages import router as pages_router

api_router = APIRouter(prefix="/api")

api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])
api_router.include_router(pages_router, tags=["pages"])
