"""Unit tests for the request logging middleware helpers."""

from unittest.mock import patch

import pytest
from fastapi import Request
from sqlalchemy.orm.exc import DetachedInstanceError

from gatekeeper.core.auth.context import Identity, RequestContext
from gatekeeper.core.logging.middleware import (
    _caller_fields,
    _level_for,
    get_client_ip,
)


pytestmark = pytest.mark.unit


class ExpiredInstance:
    """Stands in for an ORM object whose session has been closed."""

    def __getattr__(self, name: str):
        raise DetachedInstanceError(f"Instance is not bound to a Session ({name})")


def make_request(headers: dict[str, str] | None = None) -> Request:
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/api/v1/users",
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
        "client": ("10.0.0.1", 5000),
    }
    return Request(scope)


class TestCallerFields:
    """Tests for _caller_fields."""

    def test_no_context(self):
        assert _caller_fields(make_request()) == {}

    def test_anonymous_request(self):
        request = make_request()
        request.state.context = RequestContext(request_id="req-1")

        assert _caller_fields(request) == {}

    def test_reads_copied_values_not_orm_attributes(self):
        request = make_request()
        request.state.context = RequestContext(
            request_id="req-1",
            identity=Identity(
                user=ExpiredInstance(),
                role=ExpiredInstance(),
                permissions=(),
                token="token",
                user_id="5b1c4a0e-0000-0000-0000-000000000001",
                role_name="Viewer",
            ),
        )

        assert _caller_fields(request) == {
            "user_id": "5b1c4a0e-0000-0000-0000-000000000001",
            "role": "Viewer",
        }

    def test_caller_without_role(self):
        request = make_request()
        request.state.context = RequestContext(
            request_id="req-1",
            identity=Identity(
                user=ExpiredInstance(),
                role=None,
                permissions=(),
                token="token",
                user_id="user-1",
            ),
        )

        assert _caller_fields(request) == {"user_id": "user-1"}


class TestLevelFor:
    """Tests for _level_for."""

    @pytest.mark.parametrize(
        ("status_code", "level"),
        [(200, "info"), (404, "info"), (401, "warning"), (403, "warning"), (500, "error")],
    )
    def test_levels(self, status_code: int, level: str):
        with patch("gatekeeper.core.logging.middleware.logger") as logger:
            assert _level_for(status_code) is getattr(logger, level)


class TestGetClientIp:
    """Tests for get_client_ip."""

    def test_forwarded_for_first_hop(self):
        request = make_request({"X-Forwarded-For": "203.0.113.7, 10.0.0.2"})

        assert get_client_ip(request) == "203.0.113.7"

    def test_real_ip(self):
        assert get_client_ip(make_request({"X-Real-IP": "203.0.113.9"})) == "203.0.113.9"

    def test_falls_back_to_peer(self):
        assert get_client_ip(make_request()) == "10.0.0.1"
