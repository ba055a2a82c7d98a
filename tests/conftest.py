"""
Shared fixtures: callers for each role, a fixed clock and an API client
whose auth and services are overridden so no database is needed.
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from attendance_api.auth import get_current_user
from attendance_api.dependencies import (
    get_analytics_service,
    get_attendance_service,
    get_event_service,
    get_group_service,
    get_scope_authorizer,
    get_user_service,
)
from attendance_api.main import app
from attendance_api.roles import Role

REGION_A = "11111111-1111-1111-1111-111111111111"
REGION_B = "22222222-2222-2222-2222-222222222222"
GROUP_A = "aaaaaaaa-aaaa-aaaa-aaaa-aaaaaaaaaaaa"
GROUP_B = "bbbbbbbb-bbbb-bbbb-bbbb-bbbbbbbbbbbb"

FIXED_NOW = datetime(2024, 3, 6, 12, 0, tzinfo=timezone.utc)


def make_caller(role: Role, user_id="99999999-9999-9999-9999-999999999999", region_id=None) -> dict:
    return {
        "id": user_id,
        "email": f"{role.value}@example.com",
        "full_name": role.value.replace("_", " ").title(),
        "role": role,
        "region_id": region_id,
    }


@pytest.fixture
def super_admin():
    return make_caller(Role.SUPER_ADMIN)


@pytest.fixture
def region_manager():
    return make_caller(Role.REGION_MANAGER, region_id=REGION_A)


@pytest.fixture
def group_admin():
    return make_caller(Role.ADMIN, user_id="33333333-3333-3333-3333-333333333333", region_id=REGION_A)


@pytest.fixture
def member():
    return make_caller(Role.USER, region_id=REGION_A)


@pytest.fixture
def analytics_service():
    return AsyncMock()


@pytest.fixture
def attendance_service():
    return AsyncMock()


@pytest.fixture
def event_service():
    return AsyncMock()


@pytest.fixture
def scope_authorizer():
    return AsyncMock()


@pytest.fixture
def group_service():
    return AsyncMock()


@pytest.fixture
def user_service():
    return AsyncMock()


@pytest.fixture
def api(analytics_service, attendance_service, event_service, scope_authorizer, group_service, user_service):
    """
    Client factory: api(caller) returns a TestClient acting as caller.

    The client is not used as a context manager, so startup never
    connects to PostgreSQL.
    """
    def build(caller: dict, raise_server_exceptions: bool = True) -> TestClient:
        async def current_user():
            return caller

        app.dependency_overrides[get_current_user] = current_user
        app.dependency_overrides[get_analytics_service] = lambda: analytics_service
        app.dependency_overrides[get_attendance_service] = lambda: attendance_service
        app.dependency_overrides[get_event_service] = lambda: event_service
        app.dependency_overrides[get_scope_authorizer] = lambda: scope_authorizer
        app.dependency_overrides[get_group_service] = lambda: group_service
        app.dependency_overrides[get_user_service] = lambda: user_service
        return TestClient(app, raise_server_exceptions=raise_server_exceptions)

    yield build
    app.dependency_overrides.clear()
