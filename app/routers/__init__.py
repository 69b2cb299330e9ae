# Routers package
from . import (
    health_router,
    context_router,
    session_router
)
