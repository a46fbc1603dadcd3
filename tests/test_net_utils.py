import socket

import pytest

from aduib_consul.exceptions import IdentityError
from aduib_consul.utils.net_utils import NetUtils, local_hostname


def test_local_hostname_reports_os_hostname(monkeypatch):
    monkeypatch.setattr(socket, "gethostname", lambda: "node-7")
    assert local_hostname() == "node-7"


def test_hostname_failure_raises_identity_error(monkeypatch):
    def broken():
        raise OSError("no hostname")

    monkeypatch.setattr(socket, "gethostname", broken)
    with pytest.raises(IdentityError):
        NetUtils.get_hostname()


def test_empty_hostname_is_an_identity_error(monkeypatch):
    monkeypatch.setattr(socket, "gethostname", lambda: "")
    with pytest.raises(IdentityError):
        local_hostname()


def test_get_free_port_returns_bindable_port():
    port = NetUtils.get_free_port()
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", port))
