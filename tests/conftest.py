"""Pytest configuration and shared fixtures."""

import os


# Settings are read at import time, so the test environment goes first
os.environ.setdefault("SECRET_KEY", "test-secret-key-that-is-long-enough-for-hs256")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from collections.abc import AsyncGenerator, Awaitable, Callable
from pathlib import Path
from uuid import UUID

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from gatekeeper.core.auth.backend import hash_password
from gatekeeper.core.database import Base, Database
from gatekeeper.core.permissions.models import Permission, Role, RolePermission
from gatekeeper.main import create_app
from gatekeeper.modules.users.models import User, UserSession  # noqa: F401
from scripts.seed import DEFAULT_ADMIN, seed_all


DEFAULT_PASSWORD = "Secret@123"


@pytest.fixture
async def database(tmp_path: Path) -> AsyncGenerator[Database, None]:
    """Create a throwaway SQLite database with every table."""
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")

    async with database.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield database

    await database.dispose()


@pytest.fixture
async def db(database: Database) -> AsyncGenerator[AsyncSession, None]:
    """Provide a session for arranging test data.

    Fixtures commit what they create so requests served by the app,
    which open their own sessions, can see it.
    """
    async with database.session_factory() as session:
        yield session


@pytest.fixture
def app(database: Database):
    """Create test application instance bound to the test database."""
    return create_app(database=database)


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Provide async HTTP client for API testing."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client


# ============================================================
# Data Fixtures
# ============================================================


@pytest.fixture
async def seeded(db: AsyncSession) -> None:
    """Load the standard permissions, roles and admin account."""
    await seed_all(db)
    await db.commit()


@pytest.fixture
def make_permission(db: AsyncSession) -> Callable[..., Awaitable[Permission]]:
    """Return a helper that persists a permission."""

    async def _make(
        resource: str,
        action: str,
        name: str | None = None,
        description: str | None = None,
    ) -> Permission:
        permission = Permission(
            name=name or f"{resource}:{action}",
            resource=resource,
            action=action,
            description=description,
        )
        db.add(permission)
        await db.commit()
        return permission

    return _make


@pytest.fixture
def make_role(db: AsyncSession) -> Callable[..., Awaitable[Role]]:
    """Return a helper that persists a role linked to the given permissions."""

    async def _make(name: str, permissions: list[Permission] | None = None) -> Role:
        role = Role(name=name)
        db.add(role)
        await db.flush()
        for permission in permissions or []:
            db.add(RolePermission(role_id=role.id, permission_id=permission.id))
        await db.commit()
        return role

    return _make


@pytest.fixture
def make_user(db: AsyncSession) -> Callable[..., Awaitable[User]]:
    """Return a helper that persists a user."""

    async def _make(
        email: str,
        password: str = DEFAULT_PASSWORD,
        role_id: UUID | None = None,
        is_active: bool = True,
    ) -> User:
        user = User(
            email=email,
            password_hash=hash_password(password),
            role_id=role_id,
            is_active=is_active,
        )
        db.add(user)
        await db.commit()
        return user

    return _make


@pytest.fixture
def login(client: AsyncClient) -> Callable[..., Awaitable[dict[str, str]]]:
    """Return a helper that logs in and builds Authorization headers."""

    async def _login(email: str, password: str = DEFAULT_PASSWORD) -> dict[str, str]:
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": email, "password": password},
        )
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['token']}"}

    return _login


@pytest.fixture
async def admin_headers(
    seeded: None, login: Callable[..., Awaitable[dict[str, str]]]
) -> dict[str, str]:
    """Authorization headers for the seeded admin account."""
    return await login(DEFAULT_ADMIN["email"], DEFAULT_ADMIN["password"])
