"""Unit tests for client address resolution."""

from types import SimpleNamespace

import pytest
from starlette.requests import Request

from salescrm.core.logging.middleware import get_client_ip


pytestmark = pytest.mark.unit


def make_request(trust_proxy_headers: bool, headers: dict[str, str] | None = None) -> Request:
    app = SimpleNamespace(
        state=SimpleNamespace(settings=SimpleNamespace(trust_proxy_headers=trust_proxy_headers))
    )
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/api/v1/accounts",
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
        "client": ("203.0.113.7", 51000),
        "app": app,
    }
    return Request(scope)


class TestGetClientIp:
    """Tests for get_client_ip."""

    def test_uses_socket_peer(self):
        assert get_client_ip(make_request(False)) == "203.0.113.7"

    def test_ignores_forwarded_header_by_default(self):
        request = make_request(False, {"X-Forwarded-For": "198.51.100.1"})

        assert get_client_ip(request) == "203.0.113.7"

    def test_trusted_proxy_header(self):
        request = make_request(True, {"X-Forwarded-For": "198.51.100.1, 10.0.0.2"})

        assert get_client_ip(request) == "198.51.100.1"

    def test_trusted_without_header_falls_back(self):
        assert get_client_ip(make_request(True)) == "203.0.113.7"
