"""
API tests for the users router: visibility, self-service updates and
region-limited listing.
"""

from uuid import UUID

from attendance_api.errors import NotFound
from tests.conftest import GROUP_A, REGION_A, REGION_B

SELF_ID = "99999999-9999-9999-9999-999999999999"
OTHER_ID = "dddddddd-dddd-dddd-dddd-dddddddddddd"


def user_row(user_id=OTHER_ID, region_id=REGION_A, **extra):
    row = {
        "id": UUID(user_id),
        "email": "jane@example.com",
        "full_name": "Jane Doe",
        "role": "user",
        "region_id": UUID(region_id) if region_id else None,
    }
    row.update(extra)
    return row


class TestListUsers:

    def test_region_manager_is_limited_to_own_region(self, api, user_service, region_manager):
        user_service.list_users.return_value = [user_row()]

        response = api(region_manager).get("/api/users", params={"search": "jane"})

        assert response.status_code == 200
        assert response.json()[0]["full_name"] == "Jane Doe"
        user_service.list_users.assert_awaited_once_with("jane", REGION_A, limit=100, offset=0)

    def test_super_admin_lists_everyone(self, api, user_service, super_admin):
        user_service.list_users.return_value = []

        response = api(super_admin).get("/api/users", params={"limit": 10, "offset": 20})

        assert response.status_code == 200
        user_service.list_users.assert_awaited_once_with(None, None, limit=10, offset=20)

    def test_group_admin_cannot_list(self, api, user_service, group_admin):
        response = api(group_admin).get("/api/users")

        assert response.status_code == 403
        user_service.list_users.assert_not_called()


class TestGetUser:

    def test_region_manager_sees_users_of_own_region(self, api, user_service, region_manager):
        user_service.find_user.return_value = user_row()

        response = api(region_manager).get(f"/api/users/{OTHER_ID}")

        assert response.status_code == 200
        assert response.json()["email"] == "jane@example.com"

    def test_region_manager_cannot_see_other_regions(self, api, user_service, region_manager):
        user_service.find_user.return_value = user_row(region_id=REGION_B)

        response = api(region_manager).get(f"/api/users/{OTHER_ID}")

        assert response.status_code == 403

    def test_missing_user_is_forbidden_unless_super_admin(self, api, user_service, member, super_admin):
        user_service.find_user.return_value = None

        assert api(member).get(f"/api/users/{OTHER_ID}").status_code == 403
        assert api(super_admin).get(f"/api/users/{OTHER_ID}").status_code == 404

    def test_member_sees_themself(self, api, user_service, member):
        user_service.find_user.return_value = user_row(user_id=SELF_ID)

        response = api(member).get(f"/api/users/{SELF_ID}")

        assert response.status_code == 200


class TestUpdateUser:

    def test_own_profile(self, api, user_service, member):
        user_service.update_user.return_value = user_row(user_id=SELF_ID, location="Nairobi")

        response = api(member).put(f"/api/users/{SELF_ID}", json={"location": "Nairobi"})

        assert response.status_code == 200
        assert response.json()["location"] == "Nairobi"

    def test_someone_elses_profile(self, api, user_service, region_manager):
        response = api(region_manager).put(f"/api/users/{OTHER_ID}", json={"location": "Nairobi"})

        assert response.status_code == 403
        assert response.json()["detail"] == "You can only update your own profile"
        user_service.update_user.assert_not_called()

    def test_invalid_gender(self, api, member):
        response = api(member).put(f"/api/users/{SELF_ID}", json={"gender": "unknown"})

        assert response.status_code == 422


class TestDeleteUser:

    def test_requires_super_admin(self, api, user_service, region_manager):
        response = api(region_manager).delete(f"/api/users/{OTHER_ID}")

        assert response.status_code == 403
        user_service.delete_user.assert_not_called()

    def test_super_admin_deletes(self, api, user_service, super_admin):
        response = api(super_admin).delete(f"/api/users/{OTHER_ID}")

        assert response.status_code == 204
        user_service.delete_user.assert_awaited_once_with(UUID(OTHER_ID))

    def test_unknown_user(self, api, user_service, super_admin):
        user_service.delete_user.side_effect = NotFound("User not found")

        response = api(super_admin).delete(f"/api/users/{OTHER_ID}")

        assert response.status_code == 404
        assert response.json() == {"error": "not_found", "detail": "User not found"}


class TestUserGroups:

    def test_lists_memberships(self, api, user_service, member):
        user_service.find_user.return_value = user_row(user_id=SELF_ID)
        user_service.user_groups.return_value = [
            {"id": UUID(GROUP_A), "name": "Kilimani Fellowship", "region_id": UUID(REGION_A), "role": "admin"}
        ]

        response = api(member).get(f"/api/users/{SELF_ID}/groups")

        assert response.status_code == 200
        assert response.json()[0]["role"] == "admin"

    def test_other_members_groups_are_hidden(self, api, user_service, member):
        user_service.find_user.return_value = user_row()

        response = api(member).get(f"/api/users/{OTHER_ID}/groups")

        assert response.status_code == 403
        user_service.user_groups.assert_not_called()
