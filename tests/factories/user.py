"""User schema factories for tests."""

from uuid import uuid4

from polyfactory import Use
from polyfactory.factories.pydantic_factory import ModelFactory

from gatekeeper.modules.users.schemas import UserCreate, UserUpdate


def unique_email() -> str:
    """Generate a unique email."""
    return f"user-{uuid4().hex[:8]}@example.com"


class UserCreateFactory(ModelFactory[UserCreate]):
    """Factory for creating UserCreate schemas without a role."""

    __model__ = UserCreate

    email = Use(unique_email)
    first_name = "Test"
    last_name = Use(lambda: f"User {uuid4().hex[:4]}")
    password = "Secret@123"
    role_id = None
    is_active = True


class UserUpdateFactory(ModelFactory[UserUpdate]):
    """Factory for UserUpdate payloads touching only the names."""

    __model__ = UserUpdate

    email = None
    first_name = "Updated"
    last_name = "Name"
    role_id = None
    is_active = None
