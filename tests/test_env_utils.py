import pytest

from aduib_consul.exceptions import ConfigError
from aduib_consul.utils.env_utils import read_port_override, resolve_port


@pytest.mark.parametrize("value", [None, "", "   ", "\t\n"])
def test_resolve_port_falls_back_to_default_when_unset_or_blank(value):
    environ = {} if value is None else {"SVC_PORT": value}
    assert resolve_port("SVC_PORT", 8100, environ) == 8100


@pytest.mark.parametrize("value, expected", [("9000", 9000), (" 9001 ", 9001), ("0", 0)])
def test_resolve_port_uses_valid_override(value, expected):
    assert resolve_port("SVC_PORT", 8100, {"SVC_PORT": value}) == expected


@pytest.mark.parametrize("value", ["abc", "80a", "-1", "8.5", "70000"])
def test_resolve_port_rejects_malformed_override(value):
    with pytest.raises(ConfigError) as exc_info:
        resolve_port("SVC_PORT", 8100, {"SVC_PORT": value})

    assert "SVC_PORT" in exc_info.value.message
    assert exc_info.value.data["env_var"] == "SVC_PORT"


def test_resolvers_read_independent_variables():
    environ = {"A_PORT": "9100", "B_PORT": " "}
    assert resolve_port("A_PORT", 8100, environ) == 9100
    assert resolve_port("B_PORT", 8101, environ) == 8101


def test_read_port_override_uses_process_environment(monkeypatch):
    monkeypatch.setenv("SVC_PORT", "7000")
    assert read_port_override("SVC_PORT") == 7000
    monkeypatch.delenv("SVC_PORT")
    assert read_port_override("SVC_PORT") is None
