"""
Dependencies for API authentication using signed JWT tokens.

Tokens are issued by the main application's sign-in flow; this service only
verifies them and looks up the corresponding user.
"""

import logging
import os
from typing import Optional

import jwt
from fastapi import Depends, Security
from fastapi.security import APIKeyHeader
from psycopg import AsyncCursor

from . import database as db
from . import exceptions
from .entities import User

logger = logging.getLogger(__name__)

api_key_header = APIKeyHeader(
    name="access_token",
    description="The access token issued at sign-in.",
    auto_error=False,
)


def decode_token(token: str) -> dict:
    """
    Decode and verify a payload of a JSON Web Token (JWT).

    Parameters
    ----------
    token : str
        A JSON Web Token signed with the shared `JWT_SECRET`.

    Returns
    -------
    payload : dict
        The decoded payload that should include the user's email.
    """
    payload = jwt.decode(
        jwt=token,
        key=os.environ["JWT_SECRET"],
        algorithms=["HS256"],
        options={"verify_signature": True, "verify_exp": True},
    )
    return payload


async def authenticate_user(
    token: Optional[str] = Security(api_key_header),
    cursor: AsyncCursor = Depends(db.yield_cursor),
) -> User:
    """
    Authenticate a user with a valid JWT token.

    The function is used for dependency injection in endpoints to authenticate incoming requests.

    Parameters
    ----------
    token : str
        A valid signed JWT carrying an `email` claim.
    cursor : AsyncCursor
        An async database cursor.

    Returns
    -------
    user : User
        Pydantic model for a User object (if authentication succeeded).
    """
    logger.debug("Authenticating user with token")

    # local development signs in as a preconfigured user without a token
    if os.environ.get("ENV_MODE") == "local" and not token:
        email = os.environ.get("TEST_USER_EMAIL", "test.user@example.org")
        logger.info("LOCAL MODE: No token provided, using %s", email)
    else:
        if not token:
            raise exceptions.not_authenticated
        try:
            payload = decode_token(token)
        except jwt.exceptions.PyJWTError as e:
            raise exceptions.not_authenticated from e
        if (email := payload.get("email")) is None:
            raise exceptions.not_authenticated

    if (user := await db.read_user_by_email(cursor, str(email))) is None:
        raise exceptions.not_authenticated
    return user
