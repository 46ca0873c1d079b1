"""
Entity (model) definitions for user objects.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from .base import BaseMetadata

__all__ = ["User", "RequestContext"]


class User(BaseMetadata):
    """The user entity model used in the database and API endpoints."""

    slug: str = Field(description="A unique, URL-safe identifier of the user.")
    first_name: str = Field(default="")
    last_name: str = Field(default="")
    email: EmailStr = Field(description="Work email used to sign in.")
    admin: bool = Field(default=False, description="Whether the user is a global admin.")
    deleted_at: datetime | None = Field(default=None)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 1,
                "slug": "albus.dumbledore",
                "first_name": "Albus",
                "last_name": "Dumbledore",
                "email": "albus.dumbledore@hogwarts.edu",
                "admin": True,
            }
        }
    )

    @property
    def is_admin(self) -> bool:
        """Check if the user is a global admin."""
        return self.admin


class RequestContext(BaseModel):
    """
    The identity of the caller, constructed once per request and passed
    explicitly to every service function.
    """

    user_id: int = Field(description="ID of the authenticated user.")
    is_admin: bool = Field(default=False, description="Whether the caller is a global admin.")

    @classmethod
    def for_user(cls, user: User) -> "RequestContext":
        """Build a request context from an authenticated user."""
        return cls(user_id=user.id, is_admin=user.is_admin)
