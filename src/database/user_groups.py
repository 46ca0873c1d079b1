"""
CRUD operations for user group entities and their memberships.
"""

import logging

from psycopg import AsyncCursor

from ..entities import SlugMapRow, UserGroup
from .users import resolve_user_ids

__all__ = [
    "read_user_group",
    "user_group_slug_exists",
    "create_user_group",
    "update_user_group_name",
    "delete_user_group",
    "add_users_to_group",
    "remove_users_from_group",
    "get_group_user_slugs",
    "get_slug_map",
    "search_user_groups",
]

logger = logging.getLogger(__name__)

SQL_SELECT_USER_GROUP = """
    SELECT
        id,
        slug,
        name,
        created_at,
        deleted_at
    FROM
        user_groups
"""


def escape_like(value: str) -> str:
    """
    Escape LIKE metacharacters so that the value is matched literally.

    Parameters
    ----------
    value : str
        Raw user input.

    Returns
    -------
    str
        The value with backslashes, `%` and `_` escaped with a backslash.
    """
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


async def read_user_group(
    cursor: AsyncCursor,
    slug: str,
    include_deleted: bool = False,
) -> UserGroup | None:
    """
    Read a user group from the database using its slug.

    Parameters
    ----------
    cursor : AsyncCursor
        An async database cursor.
    slug : str
        The slug of the user group to read.
    include_deleted : bool, optional
        If True, soft-deleted groups are returned as well, by default False.

    Returns
    -------
    UserGroup | None
        The user group if found, otherwise None.
    """
    query = f"{SQL_SELECT_USER_GROUP} WHERE slug = %s AND (%s OR deleted_at IS NULL);"
    await cursor.execute(query, (slug, include_deleted))
    if (row := await cursor.fetchone()) is None:
        return None
    return UserGroup(**row)


async def user_group_slug_exists(cursor: AsyncCursor, slug: str) -> bool:
    """Check if any group, deleted or not, already uses the slug."""
    await cursor.execute("SELECT 1 FROM user_groups WHERE slug = %s;", (slug,))
    return await cursor.fetchone() is not None


async def create_user_group(cursor: AsyncCursor, name: str, slug: str) -> int:
    """
    Insert a new user group without members.

    Parameters
    ----------
    cursor : AsyncCursor
        An async database cursor.
    name : str
        Display name of the group.
    slug : str
        Unique slug of the group.

    Returns
    -------
    int
        The ID of the created user group.
    """
    query = """
        INSERT INTO user_groups (
            name,
            slug
        )
        VALUES (
            %(name)s,
            %(slug)s
        )
        RETURNING
            id
        ;
    """
    await cursor.execute(query, {"name": name, "slug": slug})
    row = await cursor.fetchone()
    if row is None:
        raise ValueError("Failed to create user group")
    return row["id"]


async def update_user_group_name(cursor: AsyncCursor, group_id: int, name: str) -> None:
    """Rename a user group."""
    query = "UPDATE user_groups SET name = %s WHERE id = %s;"
    await cursor.execute(query, (name, group_id))


async def delete_user_group(cursor: AsyncCursor, group_id: int) -> bool:
    """
    Soft-delete a user group by setting its deletion timestamp.

    Membership rows are kept so that the group's members remain queryable.

    Parameters
    ----------
    cursor : AsyncCursor
        An async database cursor.
    group_id : int
        The ID of the user group to delete.

    Returns
    -------
    bool
        True if a live group was marked as deleted, False otherwise.
    """
    query = """
        UPDATE
            user_groups
        SET
            deleted_at = NOW()
        WHERE
            id = %s
            AND deleted_at IS NULL
        RETURNING
            id
        ;
    """
    await cursor.execute(query, (group_id,))
    return await cursor.fetchone() is not None


async def add_users_to_group(cursor: AsyncCursor, user_slugs: list[str], group_id: int) -> None:
    """
    Add users to a group. Users who are already members are skipped.

    Parameters
    ----------
    cursor : AsyncCursor
        An async database cursor, normally inside a transaction.
    user_slugs : list[str]
        Slugs of the users to add.
    group_id : int
        The ID of the group.

    Raises
    ------
    NotFound
        If any slug does not resolve to a user. Nothing is written in that case.
    """
    user_ids = await resolve_user_ids(cursor, user_slugs)
    if not user_ids:
        return
    query = """
        INSERT INTO group_user_map (group_id, user_id)
        SELECT %s, unnest(%s::integer[])
        ON CONFLICT (group_id, user_id) DO NOTHING
        ;
    """
    await cursor.execute(query, (group_id, list(user_ids.values())))
    logger.debug("Added %s users to group %s", cursor.rowcount, group_id)


async def remove_users_from_group(cursor: AsyncCursor, user_slugs: list[str], group_id: int) -> None:
    """
    Remove users from a group. Users who are not members are skipped.

    Parameters
    ----------
    cursor : AsyncCursor
        An async database cursor, normally inside a transaction.
    user_slugs : list[str]
        Slugs of the users to remove.
    group_id : int
        The ID of the group.

    Raises
    ------
    NotFound
        If any slug does not resolve to a user. Nothing is written in that case.
    """
    user_ids = await resolve_user_ids(cursor, user_slugs)
    if not user_ids:
        return
    query = "DELETE FROM group_user_map WHERE group_id = %s AND user_id = ANY(%s);"
    await cursor.execute(query, (group_id, list(user_ids.values())))
    logger.debug("Removed %s users from group %s", cursor.rowcount, group_id)


async def get_group_user_slugs(cursor: AsyncCursor, group_id: int) -> list[str]:
    """Get the slugs of all members of a group, ordered by slug."""
    query = """
        SELECT
            u.slug
        FROM
            group_user_map m
        JOIN
            users u ON u.id = m.user_id
        WHERE
            m.group_id = %s
        ORDER BY
            u.slug
        ;
    """
    await cursor.execute(query, (group_id,))
    return [row["slug"] async for row in cursor]


async def get_slug_map(cursor: AsyncCursor, include_deleted: bool = False) -> list[SlugMapRow]:
    """
    Get a flat join of user groups and their members.

    Each member produces one row; a group without members produces a single
    row whose `user_slug` is None, so that empty groups are not lost.

    Parameters
    ----------
    cursor : AsyncCursor
        An async database cursor.
    include_deleted : bool, optional
        If True, rows of soft-deleted groups are included, by default False.

    Returns
    -------
    list[SlugMapRow]
        Rows ordered by group name, group slug and user slug.
    """
    query = """
        SELECT
            u.slug AS user_slug,
            g.slug AS group_slug,
            g.name AS group_name,
            g.deleted_at AS deleted
        FROM
            user_groups g
        LEFT JOIN
            group_user_map m ON m.group_id = g.id
        LEFT JOIN
            users u ON u.id = m.user_id
        WHERE
            %(include_deleted)s OR g.deleted_at IS NULL
        ORDER BY
            g.name,
            g.slug,
            u.slug
        ;
    """
    await cursor.execute(query, {"include_deleted": include_deleted})
    rows = [SlugMapRow(**row) async for row in cursor]
    logger.debug("Fetched %s slug map rows (include_deleted=%s)", len(rows), include_deleted)
    return rows


async def search_user_groups(
    cursor: AsyncCursor,
    query: str,
    include_deleted: bool = False,
) -> list[UserGroup]:
    """
    Search user groups by a case-insensitive substring of their name.

    Wildcard characters in the query are matched literally.

    Parameters
    ----------
    cursor : AsyncCursor
        An async database cursor.
    query : str
        A non-empty search string.
    include_deleted : bool, optional
        If True, soft-deleted groups are eligible, by default False.

    Returns
    -------
    list[UserGroup]
        Matching groups ordered by name.
    """
    sql = f"""
        {SQL_SELECT_USER_GROUP}
        WHERE
            name ILIKE %(pattern)s ESCAPE '\\'
            AND (%(include_deleted)s OR deleted_at IS NULL)
        ORDER BY
            name,
            slug
        ;
    """
    params = {"pattern": f"%{escape_like(query)}%", "include_deleted": include_deleted}
    await cursor.execute(sql, params)
    return [UserGroup(**row) async for row in cursor]
