"""Unit tests for AuthService."""

from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest

from gatekeeper.core.auth.backend import hash_token
from gatekeeper.core.auth.service import AuthService
from gatekeeper.core.errors import UnauthorizedError
from gatekeeper.modules.users.models import User, UserSession


pytestmark = pytest.mark.unit


def make_mock_user(
    email="test@example.com",
    password_hash="hashedpwd",
    is_active=True,
):
    """Create a mock User for testing."""
    user = MagicMock(spec=User)
    user.id = uuid4()
    user.email = email
    user.password_hash = password_hash
    user.is_active = is_active
    return user


def make_service(user=None):
    """Build an AuthService around mocked repositories."""
    service = AuthService.__new__(AuthService)
    service.db = AsyncMock()
    service.user_repo = AsyncMock()
    service.user_repo.get_by_email.return_value = user
    service.session_repo = AsyncMock()
    service.users = AsyncMock()
    service.users.get_user.return_value = user
    return service


class TestAuthServiceLogin:
    """Tests for AuthService.login method."""

    async def test_unknown_email_raises_invalid_credentials(self):
        service = make_service(user=None)

        with patch("gatekeeper.core.auth.service.pwd_context") as mock_ctx:
            with pytest.raises(UnauthorizedError) as exc_info:
                await service.login("nobody@example.com", "Secret@123")

        assert exc_info.value.message == "Invalid credentials"
        assert exc_info.value.error_code == "invalid_credentials"
        mock_ctx.dummy_verify.assert_called_once()

    async def test_wrong_password_raises_same_error_as_unknown_email(self):
        service = make_service(user=make_mock_user())

        with patch("gatekeeper.core.auth.service.verify_password", return_value=False):
            with pytest.raises(UnauthorizedError) as exc_info:
                await service.login("test@example.com", "Wrong@123")

        assert exc_info.value.message == "Invalid credentials"
        assert exc_info.value.error_code == "invalid_credentials"
        service.session_repo.create.assert_not_awaited()

    async def test_inactive_user_cannot_log_in(self):
        service = make_service(user=make_mock_user(is_active=False))

        with patch("gatekeeper.core.auth.service.verify_password", return_value=True):
            with pytest.raises(UnauthorizedError) as exc_info:
                await service.login("test@example.com", "Secret@123")

        assert exc_info.value.error_code == "account_inactive"
        service.session_repo.create.assert_not_awaited()

    async def test_success_records_session_for_issued_token(self):
        user = make_mock_user()
        service = make_service(user=user)

        with patch("gatekeeper.core.auth.service.verify_password", return_value=True):
            returned_user, token = await service.login("test@example.com", "Secret@123")

        assert returned_user is user
        assert token.token_type == "bearer"
        assert token.expires_in > 0

        service.session_repo.create.assert_awaited_once()
        stored: UserSession = service.session_repo.create.await_args.args[0]
        assert stored.user_id == user.id
        assert stored.token_hash == hash_token(token.access_token)
        assert stored.expires_at == token.expires_at


class TestAuthServiceLogout:
    """Tests for AuthService.logout method."""

    async def test_logout_deletes_session_by_token_hash(self):
        service = make_service()
        service.session_repo.delete_by_token_hash.return_value = 1

        deleted = await service.logout("some-token")

        assert deleted == 1
        service.session_repo.delete_by_token_hash.assert_awaited_once_with(
            hash_token("some-token")
        )

    async def test_logout_unknown_token_is_not_an_error(self):
        service = make_service()
        service.session_repo.delete_by_token_hash.return_value = 0

        assert await service.logout("already-gone") == 0


class TestAuthServiceRegister:
    """Tests for AuthService.register method."""

    async def test_register_delegates_to_user_service(self):
        created = make_mock_user(email="new@example.com")
        service = make_service()
        service.users.add_user.return_value = created
        role_id = uuid4()

        user = await service.register(
            email="new@example.com",
            password="Secret@123",
            first_name="New",
            role_id=role_id,
        )

        assert user is created
        service.users.add_user.assert_awaited_once_with(
            email="new@example.com",
            password="Secret@123",
            first_name="New",
            last_name=None,
            role_id=role_id,
        )
