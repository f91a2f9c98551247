import pytest
from pydantic import ValidationError

from statproxy.core.config import parse_cors
from tests.utils.settings import make_settings


def test_parse_cors_comma_separated() -> None:
    assert parse_cors("http://a.test, http://b.test") == ["http://a.test", "http://b.test"]


def test_parse_cors_list_passthrough() -> None:
    assert parse_cors(["http://a.test"]) == ["http://a.test"]


def test_settings_are_frozen() -> None:
    settings = make_settings()
    with pytest.raises(ValidationError):
        settings.PROXY_SECRET = "changed"  # type: ignore[misc]


def test_auth_enabled_follows_secret() -> None:
    assert make_settings().auth_enabled is True
    assert make_settings(PROXY_SECRET="").auth_enabled is False


def test_all_cors_origins_strip_trailing_slash() -> None:
    settings = make_settings(BACKEND_CORS_ORIGINS="http://localhost:5173/")
    assert settings.all_cors_origins == ["http://localhost:5173"]
