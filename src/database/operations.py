"""
Read operations for operations and the roles granted on them.
"""

from psycopg import AsyncCursor

from ..entities import Operation, OperationRole, UserGroupOperationRole, UserGroupSummary

__all__ = [
    "read_operation",
    "read_user_operation_role",
    "list_user_group_roles_for_operation",
]


async def read_operation(cursor: AsyncCursor, slug: str) -> Operation | None:
    """
    Read an operation from the database using its slug.

    Parameters
    ----------
    cursor : AsyncCursor
        An async database cursor.
    slug : str
        The slug of the operation.

    Returns
    -------
    Operation | None
        The operation if found, otherwise None.
    """
    query = "SELECT id, slug, name FROM operations WHERE slug = %s;"
    await cursor.execute(query, (slug,))
    if (row := await cursor.fetchone()) is None:
        return None
    return Operation(**row)


async def read_user_operation_role(
    cursor: AsyncCursor,
    operation_id: int,
    user_id: int,
) -> OperationRole | None:
    """
    Read the role a user holds directly on an operation.

    Returns
    -------
    OperationRole | None
        The role, or None if the user has no direct access to the operation.
    """
    query = """
        SELECT
            role
        FROM
            user_operation_permissions
        WHERE
            operation_id = %s
            AND user_id = %s
        ;
    """
    await cursor.execute(query, (operation_id, user_id))
    if (row := await cursor.fetchone()) is None:
        return None
    return OperationRole(row["role"])


async def list_user_group_roles_for_operation(
    cursor: AsyncCursor,
    operation_id: int,
) -> list[UserGroupOperationRole]:
    """
    List the live user groups attached to an operation with their roles.

    Parameters
    ----------
    cursor : AsyncCursor
        An async database cursor.
    operation_id : int
        The ID of the operation.

    Returns
    -------
    list[UserGroupOperationRole]
        One entry per group permission row, ordered by group name and slug.
    """
    query = """
        SELECT
            g.slug,
            g.name,
            p.role
        FROM
            user_group_operation_permissions p
        JOIN
            user_groups g ON g.id = p.group_id
        WHERE
            p.operation_id = %s
            AND g.deleted_at IS NULL
        ORDER BY
            g.name,
            g.slug
        ;
    """
    await cursor.execute(query, (operation_id,))
    return [
        UserGroupOperationRole(
            user_group=UserGroupSummary(slug=row["slug"], name=row["name"]),
            role=OperationRole(row["role"]),
        )
        async for row in cursor
    ]
