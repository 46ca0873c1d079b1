"""
Read operations for user entities.
"""

import logging

from psycopg import AsyncCursor

from .. import exceptions
from ..entities import User

__all__ = [
    "read_user_by_email",
    "resolve_user_ids",
]

logger = logging.getLogger(__name__)


async def read_user_by_email(cursor: AsyncCursor, email: str) -> User | None:
    """
    Read a user from the database using an email address.

    Parameters
    ----------
    cursor : AsyncCursor
        An async database cursor.
    email : str
        An email address.

    Returns
    -------
    user : User
        A user object if found, otherwise None.
    """
    query = "SELECT * FROM users WHERE email = %s AND deleted_at IS NULL;"
    await cursor.execute(query, (email,))
    if (row := await cursor.fetchone()) is None:
        return None
    return User(**row)


async def resolve_user_ids(cursor: AsyncCursor, slugs: list[str]) -> dict[str, int]:
    """
    Resolve user slugs to user IDs.

    Parameters
    ----------
    cursor : AsyncCursor
        An async database cursor.
    slugs : list[str]
        Slugs of the users to resolve. Duplicates are allowed.

    Returns
    -------
    dict[str, int]
        A mapping of every distinct slug to its user ID.

    Raises
    ------
    NotFound
        If any of the slugs does not belong to an existing user.
    """
    distinct = list(dict.fromkeys(slugs))
    if not distinct:
        return {}
    query = "SELECT id, slug FROM users WHERE slug = ANY(%s);"
    await cursor.execute(query, (distinct,))
    ids = {row["slug"]: row["id"] async for row in cursor}
    if missing := [slug for slug in distinct if slug not in ids]:
        logger.warning("Unknown user slugs: %s", missing)
        raise exceptions.NotFound(f"Users not found: {', '.join(missing)}")
    return ids
