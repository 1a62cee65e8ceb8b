"""API route aggregation.

All routers registered here get mounted in main.py under /api/v1.

Learn: Health, registration and login are open. Profile and todos are
protected at the include_router level; the users router guards only its
delete route, since registration must stay open.
"""

from fastapi import APIRouter, Depends

from tasklist.api.health import router as health_router
from tasklist.api.profile import router as profile_router
from tasklist.api.sessions import router as sessions_router
from tasklist.api.todos import router as todos_router
from tasklist.api.users import router as users_router
from tasklist.auth.dependencies import get_current_user

# All protected routers require authentication
_auth = [Depends(get_current_user)]

api_router = APIRouter(prefix="/api/v1")

# Open routes — no auth required
api_router.include_router(health_router, tags=["health"])
api_router.include_router(sessions_router, tags=["sessions"])
api_router.include_router(users_router, tags=["users"])

# Protected routes — require a valid bearer token
api_router.include_router(profile_router, tags=["profile"], dependencies=_auth)
api_router.include_router(todos_router, tags=["todos"], dependencies=_auth)
