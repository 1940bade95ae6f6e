# Routers package
from . import auth_router
from . import user_router
from . import quiz_router
from . import contact_router

__all__ = [
    "auth_router",
    "user_router",
    "quiz_router",
    "contact_router",
]
