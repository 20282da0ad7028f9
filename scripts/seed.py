#!/usr/bin/env python
"""
Seed the database with the base permissions, roles and an admin account.

Creates:
- CRUD permissions for users, roles and permissions (twelve in total)
- "Admin" role holding every permission
- "User" role holding the read permissions
- admin@example.com assigned to the Admin role

Running the script twice is safe: existing rows are kept.

Usage:
    python scripts/seed.py
    python scripts/seed.py --admin-password 'S3cure!pass'
"""

import argparse
import asyncio
import sys
from typing import TypedDict


# Add src to path for imports
sys.path.insert(0, "src")

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from gatekeeper.config import settings
from gatekeeper.core.auth.backend import hash_password
from gatekeeper.core.database import Database
from gatekeeper.core.permissions.models import Permission, Role, RolePermission
from gatekeeper.modules.users.models import User


# ============================================================
# Type Definitions
# ============================================================


class PermissionData(TypedDict):
    name: str
    resource: str
    action: str
    description: str


class RoleData(TypedDict):
    description: str
    actions: list[str]


class AdminData(TypedDict):
    email: str
    password: str
    first_name: str
    last_name: str
    role: str


# ============================================================
# Seed Data Definitions
# ============================================================

# (name prefix, resource) for every protected resource
RESOURCES: list[tuple[str, str]] = [
    ("user", "users"),
    ("role", "roles"),
    ("permission", "permissions"),
]

ACTIONS: list[str] = ["create", "read", "update", "delete"]

STANDARD_PERMISSIONS: list[PermissionData] = [
    {
        "name": f"{prefix}:{action}",
        "resource": resource,
        "action": action,
        "description": f"{action.capitalize()} {resource}",
    }
    for prefix, resource in RESOURCES
    for action in ACTIONS
]

ROLE_DEFINITIONS: dict[str, RoleData] = {
    "Admin": {
        "description": "System administrator with full access",
        "actions": ACTIONS,
    },
    "User": {
        "description": "Regular user with limited access",
        "actions": ["read"],
    },
}

DEFAULT_ADMIN: AdminData = {
    "email": "admin@example.com",
    "password": "Admin@123",
    "first_name": "Admin",
    "last_name": "User",
    "role": "Admin",
}


# ============================================================
# Seed Functions
# ============================================================


async def seed_permissions(session: AsyncSession) -> dict[str, Permission]:
    """Create the standard permissions and return them by name."""
    permissions_map: dict[str, Permission] = {}

    for perm_data in STANDARD_PERMISSIONS:
        result = await session.execute(
            select(Permission).where(Permission.name == perm_data["name"])
        )
        permission = result.scalar_one_or_none()

        if permission is None:
            permission = Permission(
                name=perm_data["name"],
                resource=perm_data["resource"],
                action=perm_data["action"],
                description=perm_data["description"],
            )
            session.add(permission)
            print(f"  Created permission: {perm_data['name']}")

        permissions_map[perm_data["name"]] = permission

    await session.flush()
    return permissions_map


async def seed_roles(
    session: AsyncSession,
    permissions_map: dict[str, Permission],
) -> dict[str, Role]:
    """Create the standard roles, link their permissions, return them by name."""
    roles_map: dict[str, Role] = {}

    for role_name, role_data in ROLE_DEFINITIONS.items():
        result = await session.execute(select(Role).where(Role.name == role_name))
        role = result.scalar_one_or_none()

        if role is None:
            role = Role(name=role_name, description=role_data["description"])
            session.add(role)
            await session.flush()
            print(f"  Created role: {role_name}")

        linked_result = await session.execute(
            select(RolePermission.permission_id).where(RolePermission.role_id == role.id)
        )
        linked = set(linked_result.scalars().all())
        for permission in permissions_map.values():
            if permission.action in role_data["actions"] and permission.id not in linked:
                session.add(RolePermission(role_id=role.id, permission_id=permission.id))

        roles_map[role_name] = role

    await session.flush()
    return roles_map


async def seed_admin(
    session: AsyncSession,
    roles_map: dict[str, Role],
    password: str | None = None,
) -> User | None:
    """Create the admin account unless it already exists."""
    result = await session.execute(select(User).where(User.email == DEFAULT_ADMIN["email"]))
    if result.scalar_one_or_none() is not None:
        print(f"  User already exists: {DEFAULT_ADMIN['email']}")
        return None

    user = User(
        email=DEFAULT_ADMIN["email"],
        password_hash=hash_password(password or DEFAULT_ADMIN["password"]),
        first_name=DEFAULT_ADMIN["first_name"],
        last_name=DEFAULT_ADMIN["last_name"],
        role_id=roles_map[DEFAULT_ADMIN["role"]].id,
    )
    session.add(user)
    await session.flush()
    print(f"  Created user: {user.email} (role: {DEFAULT_ADMIN['role']})")
    return user


async def seed_all(session: AsyncSession, admin_password: str | None = None) -> None:
    """Run every seed step inside the given session."""
    print("Creating permissions...")
    permissions_map = await seed_permissions(session)
    print("Creating roles...")
    roles_map = await seed_roles(session, permissions_map)
    print("Creating admin user...")
    await seed_admin(session, roles_map, admin_password)


async def main(admin_password: str | None) -> None:
    """Seed the configured database."""
    database = Database.from_settings(settings)
    try:
        async with database.session_factory() as session:
            await seed_all(session, admin_password)
            await session.commit()
    finally:
        await database.dispose()

    print("Database seeded successfully")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed database with base RBAC data")
    parser.add_argument(
        "--admin-password",
        default=None,
        help=f"Password for {DEFAULT_ADMIN['email']} (default: {DEFAULT_ADMIN['password']})",
    )
    args = parser.parse_args()

    asyncio.run(main(args.admin_password))
