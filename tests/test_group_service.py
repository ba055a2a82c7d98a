from unittest.mock import AsyncMock
from uuid import UUID

import pytest
from asyncpg.exceptions import UniqueViolationError

from attendance_api.errors import Conflict, NotFound
from attendance_api.roles import MembershipRole
from attendance_api.schemas.group import AddMemberRequest
from attendance_api.services.group_service import GroupService
from tests.conftest import GROUP_A, REGION_A

USER_ID = "dddddddd-dddd-dddd-dddd-dddddddddddd"


class TestAddMember:

    async def test_duplicate_membership_is_a_conflict(self):
        db = AsyncMock()
        db.fetch_one.side_effect = [
            {"id": UUID(GROUP_A), "region_id": UUID(REGION_A)},
            {"id": UUID(USER_ID)},
            UniqueViolationError("duplicate key value violates unique constraint"),
        ]

        with pytest.raises(Conflict):
            await GroupService(db).add_member(GROUP_A, AddMemberRequest(user_id=USER_ID))

    async def test_unknown_user(self):
        db = AsyncMock()
        db.fetch_one.side_effect = [{"id": UUID(GROUP_A)}, None]

        with pytest.raises(NotFound) as exc_info:
            await GroupService(db).add_member(GROUP_A, AddMemberRequest(user_id=USER_ID))

        assert exc_info.value.detail == "User not found"

    async def test_role_is_stored_canonically(self):
        db = AsyncMock()
        db.fetch_one.side_effect = [
            {"id": UUID(GROUP_A)},
            {"id": UUID(USER_ID)},
            {"id": UUID(int=1), "user_id": UUID(USER_ID), "group_id": UUID(GROUP_A), "role": "admin"},
        ]

        await GroupService(db).add_member(GROUP_A, AddMemberRequest(user_id=USER_ID, role="admin"))

        _, params = db.fetch_one.await_args.args
        assert params["role"] == MembershipRole.ADMIN.value
        assert params["group_id"] == GROUP_A


class TestRemoveMember:

    async def test_missing_membership(self):
        db = AsyncMock()
        db.fetch_one.return_value = None

        with pytest.raises(NotFound):
            await GroupService(db).remove_member(GROUP_A, USER_ID)
