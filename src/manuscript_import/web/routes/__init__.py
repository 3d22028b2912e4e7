"""Route handlers for Web API."""

from manuscript_import.web.routes.health import router as health_router
from manuscript_import.web.routes.imports import router as imports_router

__all__ = [
    "health_router",
    "imports_router",
]
