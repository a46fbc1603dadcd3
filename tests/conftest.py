import pytest

from aduib_consul.app import set_registrar
from aduib_consul.utils.constant import (
    CONSUL_HOST_ENV,
    CONSUL_HTTP_ADDR_ENV,
    CONSUL_HTTP_TOKEN_ENV,
    HEALTH_PORT_ENV,
    SERVICE_PORT_ENV,
)
from aduib_consul.utils.net_utils import NetUtils


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's environment from leaking into registrar settings."""
    for name in (CONSUL_HOST_ENV, CONSUL_HTTP_ADDR_ENV, CONSUL_HTTP_TOKEN_ENV, SERVICE_PORT_ENV, HEALTH_PORT_ENV):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def reset_default_registrar():
    yield
    set_registrar(None)


@pytest.fixture
def free_port() -> int:
    return NetUtils.get_free_port()
