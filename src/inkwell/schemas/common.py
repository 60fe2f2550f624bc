"""Shared Pydantic schemas for common API elements."""
from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, Field


class Pagination(BaseModel):
    """Pagination metadata returned alongside a page of results."""

    total: int = Field(..., ge=0, description="Total number of records.")
    page: int = Field(..., ge=1, description="1-based page number.")
    limit: int = Field(..., ge=1, description="Maximum records per page.")
    total_pages: int = Field(..., ge=0, serialization_alias="totalPages")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def build(cls, total: int, page: int, limit: int) -> Pagination:
        """Compute ``total_pages`` as ``ceil(total / limit)``."""
        return cls(total=total, page=page, limit=limit, total_pages=math.ceil(total / limit))

    @property
    def offset(self) -> int:
        """Return the number of rows preceding this page."""
        return (self.page - 1) * self.limit

    def to_json(self) -> dict[str, int]:
        """Serialize with API field names."""
        return self.model_dump(by_alias=True)
