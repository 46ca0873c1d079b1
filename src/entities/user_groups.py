"""
Entity (model) definitions for user group objects.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .base import BaseMetadata
from .utils import OperationRole

__all__ = [
    "UserGroup",
    "SlugMapRow",
    "UserGroupAdminView",
    "UserGroupSummary",
    "UserGroupOperationRole",
]


class UserGroup(BaseMetadata):
    """The user group entity model used in the database."""

    slug: str = Field(description="A unique, URL-safe identifier of the group.")
    name: str = Field(description="Name of the user group.")
    deleted_at: datetime | None = Field(default=None)

    @property
    def deleted(self) -> bool:
        """Check if the group has been soft-deleted."""
        return self.deleted_at is not None


class SlugMapRow(BaseModel):
    """
    A row of the flat group-to-member join. A group without members is
    represented by exactly one row with `user_slug` set to None.
    """

    user_slug: str | None = Field(default=None)
    group_slug: str
    group_name: str
    deleted: datetime | None = Field(default=None)


class UserGroupAdminView(BaseModel):
    """A user group together with the slugs of its members."""

    name: str
    slug: str
    deleted: bool = Field(default=False)
    user_slugs: list[str] = Field(
        default_factory=list,
        description="Slugs of the group members, order carries no meaning.",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Gryffindor",
                "slug": "gryffindor",
                "deleted": False,
                "user_slugs": ["harry.potter", "ron.weasley", "hermione.granger"],
            }
        }
    )


class UserGroupSummary(BaseModel):
    """Minimal public representation of a user group."""

    slug: str
    name: str


class UserGroupOperationRole(BaseModel):
    """A user group and the role it holds on an operation."""

    user_group: UserGroupSummary
    role: OperationRole
