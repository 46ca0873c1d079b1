"""
Tests for authenticating users with signed JWT tokens and building the
request context.
"""

import os
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, patch

import jwt
import pytest
from fastapi import HTTPException

from src.authentication import authenticate_user
from src.dependencies import get_context
from src.entities import User

pytestmark = pytest.mark.asyncio

HARRY = User(id=2, slug="harry.potter", email="harry.potter@hogwarts.edu")


def make_token(payload: dict, secret: str | None = None) -> str:
    return jwt.encode(payload, secret or os.environ["JWT_SECRET"], algorithm="HS256")


@pytest.fixture(autouse=True)
def not_local(monkeypatch):
    monkeypatch.delenv("ENV_MODE", raising=False)


async def test_valid_token(mock_cursor):
    token = make_token({"email": HARRY.email, "exp": datetime.now(UTC) + timedelta(minutes=5)})
    with patch("src.database.read_user_by_email", AsyncMock(return_value=HARRY)) as mock_read:
        user = await authenticate_user(token, mock_cursor)
    assert user == HARRY
    mock_read.assert_awaited_once_with(mock_cursor, HARRY.email)


@pytest.mark.parametrize(
    "token",
    [
        None,
        "",
        "not-a-jwt",
        make_token({"email": "harry.potter@hogwarts.edu"}, secret="another-secret"),
        make_token({"email": "harry.potter@hogwarts.edu", "exp": datetime(2020, 1, 1, tzinfo=UTC)}),
        make_token({"name": "Harry Potter"}),
    ],
)
async def test_invalid_token(mock_cursor, token):
    with pytest.raises(HTTPException) as info:
        await authenticate_user(token, mock_cursor)
    assert info.value.status_code == 401


async def test_unknown_user(mock_cursor):
    token = make_token({"email": "nobody@hogwarts.edu"})
    with patch("src.database.read_user_by_email", AsyncMock(return_value=None)):
        with pytest.raises(HTTPException) as info:
            await authenticate_user(token, mock_cursor)
    assert info.value.status_code == 401


async def test_local_mode_without_token(mock_cursor, monkeypatch):
    monkeypatch.setenv("ENV_MODE", "local")
    monkeypatch.setenv("TEST_USER_EMAIL", HARRY.email)
    with patch("src.database.read_user_by_email", AsyncMock(return_value=HARRY)):
        assert await authenticate_user(None, mock_cursor) == HARRY


async def test_get_context():
    admin = User(id=1, slug="albus.dumbledore", email="albus.dumbledore@hogwarts.edu", admin=True)
    ctx = await get_context(admin)
    assert ctx.user_id == 1
    assert ctx.is_admin
    ctx = await get_context(HARRY)
    assert ctx.user_id == 2
    assert not ctx.is_admin
