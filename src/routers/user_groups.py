"""
Routers for managing user groups.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, status
from psycopg import AsyncCursor
from pydantic import BaseModel, Field

from .. import database as db
from ..dependencies import get_context
from ..entities import (
    CreateUserGroupInput,
    GroupPage,
    ListUserGroupsForAdminInput,
    ListUserGroupsForOperationInput,
    ListUserGroupsInput,
    ModifyUserGroupInput,
    Pagination,
    RequestContext,
    UserGroupAdminView,
    UserGroupOperationRole,
    UserGroupSummary,
)
from ..services import user_groups as service

admin_router = APIRouter(prefix="/admin/user-groups", tags=["user groups"])
router = APIRouter(prefix="/user-groups", tags=["user groups"])
operation_router = APIRouter(prefix="/operations", tags=["operations"])


class UserGroupUpdate(BaseModel):
    """Body of a user group modification request."""

    name: str | None = Field(default=None, min_length=1)
    users_to_add: list[str] = Field(default_factory=list)
    users_to_remove: list[str] = Field(default_factory=list)


@admin_router.get("", response_model=GroupPage)
async def list_user_groups_for_admin(
    page: int = Query(default=1, gt=0),
    page_size: int = Query(default=10, gt=0, le=10_000),
    include_deleted: bool = Query(default=False),
    ctx: RequestContext = Depends(get_context),
    cursor: AsyncCursor = Depends(db.yield_cursor),
):
    """List user groups with the slugs of their members."""
    pagination = Pagination(page=page, page_size=page_size)
    data = ListUserGroupsForAdminInput(pagination=pagination, include_deleted=include_deleted)
    return await service.list_user_groups_for_admin(ctx, cursor, data)


@admin_router.post("", response_model=UserGroupAdminView, status_code=status.HTTP_201_CREATED)
async def create_user_group(
    data: CreateUserGroupInput,
    ctx: RequestContext = Depends(get_context),
    cursor: AsyncCursor = Depends(db.yield_cursor),
):
    """Create a user group with its initial members."""
    return await service.create_user_group(ctx, cursor, data)


@admin_router.put("/{slug}", response_model=UserGroupAdminView)
async def modify_user_group(
    slug: Annotated[str, Path(description="The slug of the group to modify")],
    update: UserGroupUpdate,
    ctx: RequestContext = Depends(get_context),
    cursor: AsyncCursor = Depends(db.yield_cursor),
):
    """
    Rename a user group and add or remove its members. A user listed in both
    `users_to_add` and `users_to_remove` is removed.
    """
    data = ModifyUserGroupInput(slug=slug, **update.model_dump())
    return await service.modify_user_group(ctx, cursor, data)


@admin_router.delete("/{slug}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user_group(
    slug: Annotated[str, Path(description="The slug of the group to delete")],
    ctx: RequestContext = Depends(get_context),
    cursor: AsyncCursor = Depends(db.yield_cursor),
):
    """Mark a user group as deleted. Its members are kept."""
    await service.delete_user_group(ctx, cursor, slug)


@router.get("", response_model=list[UserGroupSummary])
async def list_user_groups(
    query: str = Query(default="", description="A substring of the group name."),
    include_deleted: bool = Query(default=False),
    ctx: RequestContext = Depends(get_context),
    cursor: AsyncCursor = Depends(db.yield_cursor),
):
    """Search user groups by name."""
    data = ListUserGroupsInput(query=query, include_deleted=include_deleted)
    groups = await service.list_user_groups(ctx, cursor, data)
    return [UserGroupSummary(slug=group.slug, name=group.name) for group in groups]


@operation_router.get("/{operation_slug}/user-groups", response_model=list[UserGroupOperationRole])
async def list_user_groups_for_operation(
    operation_slug: Annotated[str, Path(description="The slug of the operation")],
    ctx: RequestContext = Depends(get_context),
    cursor: AsyncCursor = Depends(db.yield_cursor),
):
    """List user groups attached to an operation together with their roles."""
    data = ListUserGroupsForOperationInput(operation_slug=operation_slug)
    return await service.list_user_groups_for_operation(ctx, cursor, data)
