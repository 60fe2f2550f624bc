# src/inkwell/models/__init__.py
"""SQLAlchemy models for the Inkwell application."""

from .post import Post

__all__ = ["Post"]
