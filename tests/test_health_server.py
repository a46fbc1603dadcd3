import socket

import httpx
import pytest
from starlette.testclient import TestClient

from aduib_consul.discover.health import HealthCheckServer, HealthServerState, build_app
from aduib_consul.exceptions import HealthServerError


def test_healthcheck_route_answers_alive():
    client = TestClient(build_app())

    response = client.get("/healthcheck")

    assert response.status_code == 200
    assert response.text == "I am alive!"


def test_only_the_healthcheck_route_exists():
    client = TestClient(build_app())

    assert client.get("/").status_code == 404
    assert client.post("/healthcheck").status_code == 405


def test_server_serves_healthcheck_on_its_port(free_port):
    failures = []
    server = HealthCheckServer(free_port, host="127.0.0.1", on_failure=failures.append)
    server.start()
    try:
        assert server.state == HealthServerState.RUNNING
        response = httpx.get(f"http://127.0.0.1:{free_port}/healthcheck", timeout=5)
        assert response.status_code == 200
        assert response.text == "I am alive!"
    finally:
        server.stop()

    assert server.state == HealthServerState.STOPPED
    assert failures == []


def test_port_conflict_fails_at_start(free_port):
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as blocker:
        blocker.bind(("127.0.0.1", free_port))
        blocker.listen()

        server = HealthCheckServer(free_port, host="127.0.0.1", on_failure=lambda e: None)
        with pytest.raises(HealthServerError) as exc_info:
            server.start()

    assert server.state == HealthServerState.FAILED
    assert exc_info.value.data == {"port": free_port}


def test_second_listener_on_same_port_fails(free_port):
    first = HealthCheckServer(free_port, host="127.0.0.1", on_failure=lambda e: None)
    first.start()
    try:
        second = HealthCheckServer(free_port, host="127.0.0.1", on_failure=lambda e: None)
        with pytest.raises(HealthServerError):
            second.start()
        assert first.running
    finally:
        first.stop()


def test_start_twice_is_rejected(free_port):
    server = HealthCheckServer(free_port, host="127.0.0.1", on_failure=lambda e: None)
    server.start()
    try:
        with pytest.raises(HealthServerError):
            server.start()
    finally:
        server.stop()


def test_unexpected_termination_reports_failure(free_port):
    failures = []
    server = HealthCheckServer(free_port, host="127.0.0.1", on_failure=failures.append)
    server.start()

    # Shut uvicorn down behind the handle's back.
    server._server.should_exit = True
    server._thread.join(5)

    assert server.state == HealthServerState.FAILED
    assert len(failures) == 1
    assert isinstance(failures[0], HealthServerError)


def test_response_failure_is_escalated():
    failures = []
    server = HealthCheckServer(9200, on_failure=failures.append)

    async def broken_app(scope, receive, send):
        raise OSError("connection reset")

    server.app = broken_app
    client = TestClient(server._guarded_app, raise_server_exceptions=False)

    response = client.get("/healthcheck")

    assert response.status_code == 500
    assert len(failures) == 1
    assert isinstance(failures[0].cause, OSError)


def test_wildcard_listener_is_dual_stack_and_answers_ipv4(free_port):
    server = HealthCheckServer(free_port, on_failure=lambda e: None)
    server.start()
    try:
        if socket.has_ipv6:
            assert server.family in (socket.AF_INET6, socket.AF_INET)
        else:
            assert server.family == socket.AF_INET
        response = httpx.get(f"http://127.0.0.1:{free_port}/healthcheck", timeout=5)
        assert response.text == "I am alive!"
    finally:
        server.stop()


def test_explicit_ipv4_wildcard_stays_ipv4(free_port):
    server = HealthCheckServer(free_port, host="0.0.0.0", on_failure=lambda e: None)
    server.start()
    try:
        assert server.family == socket.AF_INET
    finally:
        server.stop()


def test_wildcard_falls_back_to_ipv4_without_ipv6(free_port, monkeypatch):
    monkeypatch.setattr(socket, "has_ipv6", False)
    server = HealthCheckServer(free_port, on_failure=lambda e: None)
    server.start()
    try:
        assert server.family == socket.AF_INET
    finally:
        server.stop()


def test_wildcard_port_conflict_is_not_masked_by_fallback(free_port):
    first = HealthCheckServer(free_port, on_failure=lambda e: None)
    first.start()
    try:
        second = HealthCheckServer(free_port, on_failure=lambda e: None)
        with pytest.raises(HealthServerError):
            second.start()
    finally:
        first.stop()
