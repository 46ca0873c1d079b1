"""
Entity (model) definitions for operation objects.
"""

from pydantic import BaseModel, Field

__all__ = ["Operation"]


class Operation(BaseModel):
    """An operation (case) that users and user groups are granted roles on."""

    id: int
    slug: str = Field(description="A unique, URL-safe identifier of the operation.")
    name: str
