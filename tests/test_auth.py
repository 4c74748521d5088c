"""Tests for JWT handling and current-user resolution."""

import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials
from jose import JWTError

from app.utils import auth
from app.utils.security import create_access_token, decode_access_token


class FakeUsers:
    def __init__(self, users):
        self.users = users

    async def find_one(self, query):
        return next((u for u in self.users if u["email"] == query["email"]), None)


class FakeDatabase:
    def __init__(self, users):
        self.users = FakeUsers(users)


@pytest.fixture
def fake_db(monkeypatch):
    db = FakeDatabase([{"_id": "user-1", "email": "jane@example.com"}])
    monkeypatch.setattr(auth, "get_db", lambda: db)
    return db


def _bearer(token):
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


def test_token_round_trip():
    token = create_access_token({"sub": "jane@example.com"})
    payload = decode_access_token(token)

    assert payload["sub"] == "jane@example.com"
    assert "exp" in payload


def test_expired_token_is_rejected():
    token = create_access_token({"sub": "jane@example.com"}, expires_minutes=-1)

    with pytest.raises(JWTError):
        decode_access_token(token)


@pytest.mark.asyncio
async def test_get_current_user(fake_db):
    user = await auth.get_current_user(_bearer(create_access_token({"sub": "jane@example.com"})))
    assert user["_id"] == "user-1"


@pytest.mark.asyncio
@pytest.mark.parametrize("token", [
    "not-a-jwt",
    create_access_token({"role": "jobseeker"}),
    create_access_token({"sub": "ghost@example.com"}),
])
async def test_get_current_user_rejects_bad_tokens(fake_db, token):
    with pytest.raises(HTTPException) as exc_info:
        await auth.get_current_user(_bearer(token))

    assert exc_info.value.status_code == 401
