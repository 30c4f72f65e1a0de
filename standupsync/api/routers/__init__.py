"""FastAPI routers for the StandupSync API."""

from standupsync.api.routers.auth import router as auth_router
from standupsync.api.routers.health import router as health_router
from standupsync.api.routers.slack import router as slack_router
from standupsync.api.routers.standups import router as standups_router
from standupsync.api.routers.users import router as users_router

__all__ = [
    "auth_router",
    "health_router",
    "slack_router",
    "standups_router",
    "users_router",
]
