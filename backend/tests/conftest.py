from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from statproxy.core.config import Settings
from tests.utils.settings import TEST_SECRET, make_client, make_settings
from tests.utils.upstream import UpstreamSpy


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def spy() -> UpstreamSpy:
    return UpstreamSpy()


@pytest.fixture
def client(settings: Settings, spy: UpstreamSpy) -> Generator[TestClient, None, None]:
    with make_client(settings, spy) as c:
        yield c


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"X-Proxy-Auth": TEST_SECRET}
