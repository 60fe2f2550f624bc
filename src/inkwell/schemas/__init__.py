"""Pydantic schemas for the Inkwell API."""

from .common import Pagination
from .post import PostCreate, PostRead, PostUpdate

__all__ = ["Pagination", "PostCreate", "PostRead", "PostUpdate"]
