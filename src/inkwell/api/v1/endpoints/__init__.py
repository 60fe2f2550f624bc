# src/inkwell/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .posts import router as posts_router
from .system import router as system_router
from .uploads import router as uploads_router

__all__ = [
    "posts_router",
    "system_router",
    "uploads_router",
]
