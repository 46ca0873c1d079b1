"""
Entity (model) definitions for base objects that others inherit from.
"""

from datetime import UTC, datetime

from pydantic import BaseModel, Field, field_validator

__all__ = ["BaseMetadata", "timestamp"]


def timestamp() -> str:
    """
    Get the current timestamp in the ISO format.

    Returns
    -------
    str
        A timestamp in the ISO format.
    """
    return datetime.now(UTC).isoformat()


class BaseMetadata(BaseModel):
    """Base metadata for database objects."""

    id: int = Field(default=1)
    created_at: str = Field(default_factory=timestamp)

    @field_validator("created_at", mode="before")
    @classmethod
    def format_created_at(cls, value):
        """(De)serialisation function for `created_at` timestamp."""
        if value is None:
            return timestamp()
        if isinstance(value, str):
            return value
        return value.isoformat()
