from showcase_api.routers.health import router as health_router
from showcase_api.routers.notifications import router as notifications_router

__all__ = [
    "health_router",
    "notifications_router",
]
