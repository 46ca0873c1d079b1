"""
Functions used for dependency injection and role-based access control.
"""

import logging

from fastapi import Depends
from psycopg import AsyncCursor

from . import database as db
from . import exceptions
from .authentication import authenticate_user
from .entities import Operation, OperationRole, RequestContext, User

logger = logging.getLogger(__name__)

__all__ = [
    "get_context",
    "require_global_admin",
    "require_operation_admin",
]


async def get_context(user: User = Depends(authenticate_user)) -> RequestContext:
    """Build the request context passed to every service call."""
    return RequestContext.for_user(user)


def require_global_admin(ctx: RequestContext) -> None:
    """
    Require that the caller is a global admin.

    Raises
    ------
    PermissionDenied
        If the caller is not a global admin.
    """
    if not ctx.is_admin:
        logger.warning("Permission denied: user %s attempted an admin action", ctx.user_id)
        raise exceptions.PermissionDenied()
    logger.debug("Admin permission granted for user %s", ctx.user_id)


async def require_operation_admin(
    ctx: RequestContext,
    cursor: AsyncCursor,
    operation: Operation,
) -> None:
    """
    Require that the caller holds the admin role on a specific operation.

    Being a global admin is not sufficient on its own.

    Raises
    ------
    PermissionDenied
        If the caller is not an admin of the operation.
    """
    role = await db.read_user_operation_role(cursor, operation.id, ctx.user_id)
    if role != OperationRole.ADMIN:
        logger.warning(
            "Permission denied: user %s with role %s is not an admin of operation %s",
            ctx.user_id,
            role,
            operation.slug,
        )
        raise exceptions.PermissionDenied()
