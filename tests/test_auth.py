from unittest.mock import AsyncMock
from uuid import UUID

import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from attendance_api.auth import create_access_token, decode_access_token, get_current_user
from attendance_api.errors import Forbidden
from attendance_api.roles import Role
from tests.conftest import REGION_A


def bearer(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


def user_row(role):
    return {
        "id": UUID("33333333-3333-3333-3333-333333333333"),
        "email": "manager@example.com",
        "full_name": "Region Manager",
        "role": role,
        "region_id": UUID(REGION_A),
    }


class TestTokens:

    def test_round_trip_keeps_claims(self):
        token = create_access_token({"email": "manager@example.com"})

        assert decode_access_token(token)["email"] == "manager@example.com"

    def test_malformed_token_is_unauthorized(self):
        with pytest.raises(HTTPException) as exc_info:
            decode_access_token("not.a.token")

        assert exc_info.value.status_code == 401


class TestGetCurrentUser:

    async def test_legacy_role_is_normalized(self):
        db = AsyncMock()
        db.fetch_one.return_value = user_row("Regional Manager")

        caller = await get_current_user(bearer(create_access_token({"email": "manager@example.com"})), db)

        assert caller["role"] is Role.REGION_MANAGER
        assert caller["region_id"] == REGION_A
        assert caller["id"] == "33333333-3333-3333-3333-333333333333"

    async def test_unknown_role_is_forbidden(self):
        db = AsyncMock()
        db.fetch_one.return_value = user_row("owner")

        with pytest.raises(Forbidden):
            await get_current_user(bearer(create_access_token({"email": "manager@example.com"})), db)

    async def test_unknown_user_is_unauthorized(self):
        db = AsyncMock()
        db.fetch_one.return_value = None

        with pytest.raises(HTTPException) as exc_info:
            await get_current_user(bearer(create_access_token({"email": "ghost@example.com"})), db)

        assert exc_info.value.status_code == 401

    async def test_token_without_email_is_unauthorized(self):
        db = AsyncMock()

        with pytest.raises(HTTPException) as exc_info:
            await get_current_user(bearer(create_access_token({"sub": "123"})), db)

        assert exc_info.value.status_code == 401
        db.fetch_one.assert_not_called()
