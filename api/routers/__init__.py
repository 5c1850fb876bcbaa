"""API routers package."""

from .admin import router as admin_router
from .common import router as common_router
from .resources import create_resource_router

__all__ = [
    "admin_router",
    "common_router",
    "create_resource_router",
]
