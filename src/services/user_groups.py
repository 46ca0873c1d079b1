"""
Permission-gated administration of user groups and their memberships.

Every function takes an explicit `RequestContext` describing the caller and a
database cursor. Privilege checks run before any statement is executed and
all writes of a single call share one transaction.
"""

import logging

import psycopg
from psycopg import AsyncCursor

from .. import database as db
from .. import exceptions
from ..dependencies import require_global_admin, require_operation_admin
from ..entities import (
    CreateUserGroupInput,
    GroupPage,
    ListUserGroupsForAdminInput,
    ListUserGroupsForOperationInput,
    ListUserGroupsInput,
    ModifyUserGroupInput,
    Pagination,
    RequestContext,
    SlugMapRow,
    UserGroup,
    UserGroupAdminView,
    UserGroupOperationRole,
)

__all__ = [
    "create_user_group",
    "modify_user_group",
    "delete_user_group",
    "list_user_groups_for_admin",
    "list_user_groups",
    "list_user_groups_for_operation",
    "sort_users_into_groups",
]

logger = logging.getLogger(__name__)


def sort_users_into_groups(rows: list[SlugMapRow], pagination: Pagination) -> GroupPage:
    """
    Fold flat slug map rows into one view per group and paginate the groups.

    Groups keep the order in which they first appear in `rows`. A row without
    a user slug still makes its group appear, with no members. Pagination
    applies to the list of groups, not to the rows.

    Parameters
    ----------
    rows : list[SlugMapRow]
        Rows as returned by `get_slug_map`.
    pagination : Pagination
        The page to return.

    Returns
    -------
    GroupPage
        The requested page of groups and the total number of distinct groups.
    """
    groups: dict[str, UserGroupAdminView] = {}
    members: dict[str, dict[str, None]] = {}
    for row in rows:
        if (view := groups.get(row.group_slug)) is None:
            view = UserGroupAdminView(name=row.group_name, slug=row.group_slug)
            groups[row.group_slug] = view
            members[row.group_slug] = {}
        if row.deleted is not None:
            view.deleted = True
        if row.user_slug:
            members[row.group_slug][row.user_slug] = None
    for slug, view in groups.items():
        view.user_slugs = list(members[slug])
    return GroupPage.from_groups(list(groups.values()), pagination)


def _to_view(group: UserGroup, user_slugs: list[str]) -> UserGroupAdminView:
    return UserGroupAdminView(
        name=group.name,
        slug=group.slug,
        deleted=group.deleted,
        user_slugs=user_slugs,
    )


async def create_user_group(
    ctx: RequestContext,
    cursor: AsyncCursor,
    data: CreateUserGroupInput,
) -> UserGroupAdminView:
    """
    Create a user group with its initial members.

    Parameters
    ----------
    ctx : RequestContext
        The caller, who must be a global admin.
    cursor : AsyncCursor
        An async database cursor.
    data : CreateUserGroupInput
        Name, slug and member slugs of the new group.

    Returns
    -------
    UserGroupAdminView
        The created group.

    Raises
    ------
    PermissionDenied
        If the caller is not a global admin.
    Conflict
        If a group with the slug already exists.
    NotFound
        If any of the member slugs does not belong to a user.
    DatabaseError
        If the database fails; nothing is written in that case.
    """
    require_global_admin(ctx)
    try:
        async with db.transaction(cursor):
            if await db.user_group_slug_exists(cursor, data.slug):
                raise exceptions.Conflict(f"User group {data.slug!r} already exists")
            group_id = await db.create_user_group(cursor, data.name, data.slug)
            await db.add_users_to_group(cursor, data.user_slugs, group_id)
            user_slugs = await db.get_group_user_slugs(cursor, group_id)
    except psycopg.errors.UniqueViolation as e:
        raise exceptions.Conflict(f"User group {data.slug!r} already exists") from e
    except psycopg.Error as e:
        raise exceptions.DatabaseError(f"Cannot create user group {data.slug!r}") from e
    logger.info("User %s created user group %s with %s members", ctx.user_id, data.slug, len(user_slugs))
    return UserGroupAdminView(name=data.name, slug=data.slug, user_slugs=user_slugs)


async def modify_user_group(
    ctx: RequestContext,
    cursor: AsyncCursor,
    data: ModifyUserGroupInput,
) -> UserGroupAdminView:
    """
    Rename a user group and converge its membership in one transaction.

    Additions are applied before removals, so the final membership is
    `(current | users_to_add) - users_to_remove`. Adding a present member or
    removing an absent one has no effect.

    Parameters
    ----------
    ctx : RequestContext
        The caller, who must be a global admin.
    cursor : AsyncCursor
        An async database cursor.
    data : ModifyUserGroupInput
        The group slug, an optional new name and the membership changes.

    Returns
    -------
    UserGroupAdminView
        The group as it is after the modification.

    Raises
    ------
    PermissionDenied
        If the caller is not a global admin.
    NotFound
        If the group or any of the user slugs does not exist.
    DatabaseError
        If the database fails; nothing is written in that case.
    """
    require_global_admin(ctx)
    try:
        async with db.transaction(cursor):
            if (group := await db.read_user_group(cursor, data.slug)) is None:
                raise exceptions.NotFound(f"User group {data.slug!r} not found")
            if data.name is not None and data.name != group.name:
                await db.update_user_group_name(cursor, group.id, data.name)
                group.name = data.name
            await db.add_users_to_group(cursor, data.users_to_add, group.id)
            await db.remove_users_from_group(cursor, data.users_to_remove, group.id)
            user_slugs = await db.get_group_user_slugs(cursor, group.id)
    except psycopg.Error as e:
        raise exceptions.DatabaseError(f"Cannot modify user group {data.slug!r}") from e
    logger.info(
        "User %s modified user group %s: +%s -%s",
        ctx.user_id,
        data.slug,
        data.users_to_add,
        data.users_to_remove,
    )
    return _to_view(group, user_slugs)


async def delete_user_group(ctx: RequestContext, cursor: AsyncCursor, slug: str) -> None:
    """
    Soft-delete a user group. Its membership rows are left in place.

    Raises
    ------
    PermissionDenied
        If the caller is not a global admin.
    NotFound
        If there is no live group with the slug.
    DatabaseError
        If the database fails.
    """
    require_global_admin(ctx)
    try:
        async with db.transaction(cursor):
            if (group := await db.read_user_group(cursor, slug)) is None:
                raise exceptions.NotFound(f"User group {slug!r} not found")
            if not await db.delete_user_group(cursor, group.id):
                raise exceptions.NotFound(f"User group {slug!r} not found")
    except psycopg.Error as e:
        raise exceptions.DatabaseError(f"Cannot delete user group {slug!r}") from e
    logger.info("User %s deleted user group %s", ctx.user_id, slug)


async def list_user_groups_for_admin(
    ctx: RequestContext,
    cursor: AsyncCursor,
    data: ListUserGroupsForAdminInput,
) -> GroupPage:
    """List user groups with their members, one page at a time."""
    require_global_admin(ctx)
    try:
        rows = await db.get_slug_map(cursor, data.include_deleted)
    except psycopg.Error as e:
        raise exceptions.DatabaseError("Cannot list user groups") from e
    return sort_users_into_groups(rows, data.pagination)


async def list_user_groups(
    ctx: RequestContext,
    cursor: AsyncCursor,
    data: ListUserGroupsInput,
) -> list[UserGroup]:
    """
    Search user groups by name.

    An empty or whitespace-only query matches nothing. `%`, `_` and `*` in
    the query are matched as literal characters.

    Raises
    ------
    PermissionDenied
        If the caller is not a global admin.
    DatabaseError
        If the database fails.
    """
    require_global_admin(ctx)
    query = data.query.strip()
    if not query:
        return []
    try:
        groups = await db.search_user_groups(cursor, query, data.include_deleted)
    except psycopg.Error as e:
        raise exceptions.DatabaseError(f"Cannot search user groups for {query!r}") from e
    logger.debug("Query %r matched %s user groups", query, len(groups))
    return groups


async def list_user_groups_for_operation(
    ctx: RequestContext,
    cursor: AsyncCursor,
    data: ListUserGroupsForOperationInput,
) -> list[UserGroupOperationRole]:
    """
    List the user groups attached to an operation with their roles.

    Results are ordered by group name and then slug. The operation is looked
    up before the role check because roles are keyed by operation ID, so any
    authenticated caller can tell an unknown slug (NotFound) from one they
    may not administer (PermissionDenied). Operation slugs are not treated
    as secret.

    Raises
    ------
    NotFound
        If the operation does not exist.
    PermissionDenied
        If the caller is not an admin of the operation.
    DatabaseError
        If the database fails.
    """
    try:
        if (operation := await db.read_operation(cursor, data.operation_slug)) is None:
            raise exceptions.NotFound(f"Operation {data.operation_slug!r} not found")
        await require_operation_admin(ctx, cursor, operation)
        return await db.list_user_group_roles_for_operation(cursor, operation.id)
    except psycopg.Error as e:
        raise exceptions.DatabaseError(
            f"Cannot list user groups for operation {data.operation_slug!r}"
        ) from e
