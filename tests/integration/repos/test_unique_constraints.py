"""Integration tests for unique-key violations raised at flush time.

These writes skip the services' existence checks, as a concurrent request
that passed the same check would, so only the database constraint stops
the duplicate.
"""

from collections.abc import Awaitable, Callable

import pytest

from gatekeeper.core.database import Database
from gatekeeper.core.errors.exceptions import ConflictError
from gatekeeper.core.permissions.models import Permission, Role, RolePermission
from gatekeeper.core.permissions.repos import (
    PermissionRepository,
    RolePermissionRepository,
    RoleRepository,
)
from gatekeeper.modules.users.models import User
from gatekeeper.modules.users.repos import UserRepository


pytestmark = pytest.mark.integration


class TestUniqueConstraints:
    """A duplicate that slips past the service check is a 400 conflict."""

    async def test_duplicate_user_email(
        self, database: Database, make_user: Callable[..., Awaitable[User]]
    ):
        await make_user("race@example.com")

        async with database.session_factory() as session:
            with pytest.raises(ConflictError) as exc_info:
                await UserRepository(session).create(
                    User(email="race@example.com", password_hash="x")
                )

        assert exc_info.value.status_code == 400
        assert exc_info.value.error_code == "email_exists"

    async def test_duplicate_role_name(
        self, database: Database, make_role: Callable[..., Awaitable[Role]]
    ):
        await make_role("Editor")

        async with database.session_factory() as session:
            with pytest.raises(ConflictError) as exc_info:
                await RoleRepository(session).create(Role(name="Editor"))

        assert exc_info.value.error_code == "role_exists"

    async def test_duplicate_permission_name(
        self,
        database: Database,
        make_permission: Callable[..., Awaitable[Permission]],
    ):
        await make_permission("reports", "read")

        async with database.session_factory() as session:
            with pytest.raises(ConflictError) as exc_info:
                await PermissionRepository(session).create(
                    Permission(name="reports:read", resource="reports", action="read")
                )

        assert exc_info.value.error_code == "permission_exists"

    async def test_duplicate_role_permission_link(
        self,
        database: Database,
        make_permission: Callable[..., Awaitable[Permission]],
        make_role: Callable[..., Awaitable[Role]],
    ):
        permission = await make_permission("reports", "read")
        role = await make_role("Reporter", [permission])

        async with database.session_factory() as session:
            with pytest.raises(ConflictError) as exc_info:
                await RolePermissionRepository(session).create(
                    RolePermission(role_id=role.id, permission_id=permission.id)
                )

        assert exc_info.value.error_code == "permissions_already_assigned"
