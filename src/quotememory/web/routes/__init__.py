"""Route handlers for Web API."""

from quotememory.web.routes.health import router as health_router
from quotememory.web.routes.quotes import router as quotes_router
from quotememory.web.routes.practice import router as practice_router
from quotememory.web.routes.subscription import router as subscription_router

__all__ = [
    "health_router",
    "quotes_router",
    "practice_router",
    "subscription_router",
]
