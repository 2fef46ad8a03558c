from chatgate.web.routers.auth import router as auth_router
from chatgate.web.routers.chat import router as chat_router
from chatgate.web.routers.health import router as health_router

__all__ = [
    "auth_router",
    "chat_router",
    "health_router",
]
