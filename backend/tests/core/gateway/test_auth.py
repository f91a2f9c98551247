"""Unit tests for gateway auth: check_proxy_secret, verify_proxy_auth."""

from unittest.mock import Mock

import pytest

from statproxy.core.errors import AuthRejectedError
from statproxy.core.gateway.auth import check_proxy_secret, verify_proxy_auth
from tests.utils.settings import TEST_SECRET, make_settings


def _mock_request(**headers: str) -> Mock:
    m = Mock()
    m.headers = dict(headers)
    return m


def test_empty_secret_accepts_anything() -> None:
    assert check_proxy_secret("", None) is True
    assert check_proxy_secret("", "") is True
    assert check_proxy_secret("", "whatever") is True


def test_exact_match_accepted() -> None:
    assert check_proxy_secret("abc", "abc") is True


def test_missing_header_rejected() -> None:
    assert check_proxy_secret("abc", None) is False


def test_empty_header_rejected() -> None:
    assert check_proxy_secret("abc", "") is False


def test_case_sensitive() -> None:
    assert check_proxy_secret("abc", "ABC") is False


def test_no_trimming() -> None:
    assert check_proxy_secret("abc", " abc") is False
    assert check_proxy_secret("abc", "abc ") is False


def test_non_ascii_secret() -> None:
    assert check_proxy_secret("clé", "clé") is True
    assert check_proxy_secret("clé", "cle") is False


def test_verify_proxy_auth_accepts_configured_header() -> None:
    settings = make_settings()
    verify_proxy_auth(_mock_request(**{"X-Proxy-Auth": TEST_SECRET}), settings)


def test_verify_proxy_auth_rejects_wrong_header() -> None:
    settings = make_settings()
    with pytest.raises(AuthRejectedError) as exc_info:
        verify_proxy_auth(_mock_request(**{"X-Proxy-Auth": "nope"}), settings)
    assert exc_info.value.status_code == 401
    assert exc_info.value.kind == "auth_rejected"


def test_verify_proxy_auth_uses_configured_header_name() -> None:
    settings = make_settings(PROXY_AUTH_HEADER="X-Gateway-Key")
    verify_proxy_auth(_mock_request(**{"X-Gateway-Key": TEST_SECRET}), settings)
    with pytest.raises(AuthRejectedError):
        verify_proxy_auth(_mock_request(**{"X-Proxy-Auth": TEST_SECRET}), settings)


def test_verify_proxy_auth_disabled_without_secret() -> None:
    settings = make_settings(PROXY_SECRET="")
    verify_proxy_auth(_mock_request(), settings)
