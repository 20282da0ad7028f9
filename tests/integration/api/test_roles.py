"""Integration tests for role endpoints."""

from collections.abc import Awaitable, Callable
from uuid import uuid4

import pytest
from httpx import AsyncClient

from gatekeeper.core.permissions.models import Permission, Role
from gatekeeper.modules.users.models import User
from tests.factories.rbac import PermissionCreateFactory, RoleCreateFactory


pytestmark = pytest.mark.integration

ROLES = "/api/v1/roles"


async def create_permission(client: AsyncClient, headers: dict[str, str]) -> dict:
    payload = PermissionCreateFactory.build().model_dump(mode="json")
    response = await client.post("/api/v1/permissions", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


async def create_role(
    client: AsyncClient, headers: dict[str, str], permission_ids: list[str] | None = None
) -> dict:
    payload = RoleCreateFactory.build().model_dump(mode="json")
    payload["permission_ids"] = permission_ids or []
    response = await client.post(ROLES, json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestRoleCrud:
    """Tests for creating, reading, updating and deleting roles."""

    async def test_create_role_with_permissions(
        self, client: AsyncClient, admin_headers: dict[str, str]
    ):
        permission = await create_permission(client, admin_headers)

        role = await create_role(client, admin_headers, [permission["id"]])

        assert [p["id"] for p in role["permissions"]] == [permission["id"]]

    async def test_create_duplicate_name(
        self, client: AsyncClient, admin_headers: dict[str, str]
    ):
        response = await client.post(ROLES, json={"name": "Admin"}, headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["message"] == "Role already exists with this name"

    async def test_create_with_unknown_permission_creates_nothing(
        self, client: AsyncClient, admin_headers: dict[str, str]
    ):
        response = await client.post(
            ROLES,
            json={"name": "Broken", "permission_ids": [str(uuid4())]},
            headers=admin_headers,
        )
        assert response.status_code == 400

        roles = await client.get(ROLES, headers=admin_headers)
        assert "Broken" not in [r["name"] for r in roles.json()]

    async def test_get_unknown_role(self, client: AsyncClient, admin_headers: dict[str, str]):
        response = await client.get(f"{ROLES}/{uuid4()}", headers=admin_headers)

        assert response.status_code == 404
        assert response.json()["message"] == "Role not found"

    async def test_rename_to_own_name_is_noop(
        self, client: AsyncClient, admin_headers: dict[str, str]
    ):
        role = await create_role(client, admin_headers)

        response = await client.put(
            f"{ROLES}/{role['id']}",
            json={"name": role["name"], "description": "Changed"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["name"] == role["name"]
        assert response.json()["description"] == "Changed"

    async def test_rename_to_taken_name(
        self, client: AsyncClient, admin_headers: dict[str, str]
    ):
        role = await create_role(client, admin_headers)

        response = await client.put(
            f"{ROLES}/{role['id']}", json={"name": "User"}, headers=admin_headers
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Role name is already taken"

    async def test_delete_unassigned_role(
        self, client: AsyncClient, admin_headers: dict[str, str]
    ):
        permission = await create_permission(client, admin_headers)
        role = await create_role(client, admin_headers, [permission["id"]])

        response = await client.delete(f"{ROLES}/{role['id']}", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["message"] == "Role deleted successfully"
        assert (
            await client.get(f"{ROLES}/{role['id']}", headers=admin_headers)
        ).status_code == 404

    async def test_delete_role_in_use_reports_count(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
        make_role: Callable[..., Awaitable[Role]],
        make_user: Callable[..., Awaitable[User]],
    ):
        role = await make_role("Support")
        await make_user("s1@example.com", role_id=role.id)
        await make_user("s2@example.com", role_id=role.id)

        response = await client.delete(f"{ROLES}/{role.id}", headers=admin_headers)

        assert response.status_code == 400
        data = response.json()
        assert data["message"] == "Cannot delete role that is assigned to users"
        assert data["count"] == 2

    async def test_delete_succeeds_after_users_reassigned(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
        make_role: Callable[..., Awaitable[Role]],
        make_user: Callable[..., Awaitable[User]],
    ):
        role = await make_role("Support")
        user = await make_user("s1@example.com", role_id=role.id)

        blocked = await client.delete(f"{ROLES}/{role.id}", headers=admin_headers)
        assert blocked.status_code == 400

        reassigned = await client.put(
            f"/api/v1/users/{user.id}", json={"role_id": None}, headers=admin_headers
        )
        assert reassigned.status_code == 200

        response = await client.delete(f"{ROLES}/{role.id}", headers=admin_headers)
        assert response.status_code == 200


class TestRolePermissionLinks:
    """Tests for linking and unlinking permissions."""

    async def test_add_permissions(self, client: AsyncClient, admin_headers: dict[str, str]):
        role = await create_role(client, admin_headers)
        first = await create_permission(client, admin_headers)
        second = await create_permission(client, admin_headers)

        response = await client.post(
            f"{ROLES}/{role['id']}/permissions",
            json={"permission_ids": [first["id"], second["id"], first["id"]]},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert {p["id"] for p in response.json()["permissions"]} == {
            first["id"],
            second["id"],
        }

    async def test_add_unknown_permission_links_nothing(
        self, client: AsyncClient, admin_headers: dict[str, str]
    ):
        role = await create_role(client, admin_headers)
        known = await create_permission(client, admin_headers)
        missing = str(uuid4())

        response = await client.post(
            f"{ROLES}/{role['id']}/permissions",
            json={"permission_ids": [known["id"], missing]},
            headers=admin_headers,
        )

        assert response.status_code == 400
        data = response.json()
        assert data["message"] == "One or more permissions do not exist"
        assert data["invalid_permission_ids"] == [missing]

        role_after = await client.get(f"{ROLES}/{role['id']}", headers=admin_headers)
        assert role_after.json()["permissions"] == []

    async def test_add_already_linked_permission(
        self, client: AsyncClient, admin_headers: dict[str, str]
    ):
        permission = await create_permission(client, admin_headers)
        role = await create_role(client, admin_headers, [permission["id"]])

        response = await client.post(
            f"{ROLES}/{role['id']}/permissions",
            json={"permission_ids": [permission["id"]]},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["permission_ids"] == [permission["id"]]

    async def test_add_empty_list_rejected(
        self, client: AsyncClient, admin_headers: dict[str, str]
    ):
        role = await create_role(client, admin_headers)

        response = await client.post(
            f"{ROLES}/{role['id']}/permissions",
            json={"permission_ids": []},
            headers=admin_headers,
        )

        assert response.status_code == 400

    async def test_remove_permission(self, client: AsyncClient, admin_headers: dict[str, str]):
        permission = await create_permission(client, admin_headers)
        role = await create_role(client, admin_headers, [permission["id"]])

        response = await client.delete(
            f"{ROLES}/{role['id']}/permissions/{permission['id']}",
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Permission removed from role successfully"
        role_after = await client.get(f"{ROLES}/{role['id']}", headers=admin_headers)
        assert role_after.json()["permissions"] == []

    async def test_remove_unlinked_permission(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
        make_permission: Callable[..., Awaitable[Permission]],
    ):
        role = await create_role(client, admin_headers)
        permission = await make_permission("reports", "read")

        response = await client.delete(
            f"{ROLES}/{role['id']}/permissions/{permission.id}",
            headers=admin_headers,
        )

        assert response.status_code == 404
        assert response.json()["message"] == "Permission not assigned to this role"