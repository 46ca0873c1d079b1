"""
Dataclasses used to define query parameters and inputs of service functions.
"""

from pydantic import BaseModel, Field, computed_field

__all__ = [
    "Pagination",
    "CreateUserGroupInput",
    "ModifyUserGroupInput",
    "ListUserGroupsForAdminInput",
    "ListUserGroupsInput",
    "ListUserGroupsForOperationInput",
]

SLUG_PATTERN = r"^[A-Za-z0-9][A-Za-z0-9._-]*$"


class Pagination(BaseModel):
    """A container class for pagination parameters."""

    page: int = Field(default=1, gt=0)
    page_size: int = Field(default=10, gt=0, le=10_000)

    @computed_field
    def offset(self) -> int:
        """An offset of the first item on the current page."""
        return self.page_size * (self.page - 1)


class CreateUserGroupInput(BaseModel):
    """Parameters for creating a user group with its initial members."""

    name: str = Field(min_length=1, description="Display name of the group.")
    slug: str = Field(pattern=SLUG_PATTERN, description="Unique, URL-safe identifier.")
    user_slugs: list[str] = Field(default_factory=list)


class ModifyUserGroupInput(BaseModel):
    """
    Parameters for modifying a user group. The group is identified by `slug`.
    A user slug listed in both `users_to_add` and `users_to_remove` ends up
    removed from the group.
    """

    slug: str = Field(description="Slug of the group to modify.")
    name: str | None = Field(default=None, min_length=1, description="New display name.")
    users_to_add: list[str] = Field(default_factory=list)
    users_to_remove: list[str] = Field(default_factory=list)


class ListUserGroupsForAdminInput(BaseModel):
    """Parameters for the paginated admin listing of user groups."""

    pagination: Pagination = Field(default_factory=Pagination)
    include_deleted: bool = Field(default=False)


class ListUserGroupsInput(BaseModel):
    """Parameters for a free-text search over group names."""

    query: str = Field(default="")
    include_deleted: bool = Field(default=False)


class ListUserGroupsForOperationInput(BaseModel):
    """Parameters for listing user groups attached to an operation."""

    operation_slug: str
