"""HTTP liveness endpoint the registry polls.

The listener answers ``GET /healthcheck`` with ``200 I am alive!`` and runs
under uvicorn in a daemon thread for the rest of the process lifetime. The
socket is bound in :meth:`HealthCheckServer.start`, so a port conflict is
reported to the caller. Once running, any termination other than
:meth:`HealthCheckServer.stop` is handed to ``on_failure``, which by default
terminates the process: a dead listener would leave the registry routing
traffic to an instance it still considers healthy.
"""

from __future__ import annotations

import errno
import logging
import socket
import threading
import time
from collections.abc import Callable
from enum import StrEnum
from typing import Any

import uvicorn
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import PlainTextResponse
from starlette.routing import Route

from aduib_consul.exceptions import HealthServerError
from aduib_consul.utils.constant import HEALTHCHECK_BODY, HEALTHCHECK_PATH
from aduib_consul.utils.error_handlers import fail_fast

logger = logging.getLogger(__name__)

FailureCallback = Callable[[HealthServerError], None]

_DUAL_STACK_HOSTS = {"", "::"}
_NO_IPV6_ERRNOS = {errno.EAFNOSUPPORT, errno.EADDRNOTAVAIL, errno.EPROTONOSUPPORT}


class HealthServerState(StrEnum):
    CREATED = "created"
    STARTING = "starting"
    RUNNING = "running"
    STOPPED = "stopped"
    FAILED = "failed"


async def healthcheck(request: Request) -> PlainTextResponse:
    return PlainTextResponse(HEALTHCHECK_BODY)


def build_app() -> Starlette:
    """Starlette app exposing only the health route."""
    return Starlette(routes=[Route(HEALTHCHECK_PATH, healthcheck, methods=["GET"])])


class HealthCheckServer:
    """Handle for one health listener.

    Args:
        port: Port to listen on.
        host: Interface to bind. The default, like "::", listens on every
            IPv4 and IPv6 interface; "0.0.0.0" limits the listener to IPv4.
        on_failure: Called from the serving thread when the running listener
            dies or fails to write a response. Defaults to terminating the
            process.
        startup_timeout: Seconds :meth:`start` waits for uvicorn to come up.
    """

    def __init__(
        self,
        port: int,
        host: str = "",
        on_failure: FailureCallback | None = None,
        startup_timeout: float = 5.0,
    ) -> None:
        self.port = port
        self.host = host
        self.on_failure = on_failure or fail_fast
        self.startup_timeout = startup_timeout
        self.app = build_app()
        self.error: HealthServerError | None = None
        self.family: socket.AddressFamily | None = None
        self._state = HealthServerState.CREATED
        self._lock = threading.Lock()
        self._stopping = False
        self._server: uvicorn.Server | None = None
        self._thread: threading.Thread | None = None

    @property
    def state(self) -> HealthServerState:
        return self._state

    @property
    def running(self) -> bool:
        return self._state == HealthServerState.RUNNING

    def start(self) -> None:
        """Bind the port and serve in the background.

        Raises:
            HealthServerError: Already started, the port cannot be bound, or
                the server does not come up within ``startup_timeout``.
        """
        with self._lock:
            if self._state != HealthServerState.CREATED:
                raise HealthServerError(message=f"health server on port {self.port} already {self._state}")
            self._state = HealthServerState.STARTING

        try:
            sock = self._bind_socket()
        except OSError as e:
            self._state = HealthServerState.FAILED
            self.error = HealthServerError(
                message=f"healthcheck webserver cannot bind {self.host or '*'}:{self.port}: {e}",
                data={"port": self.port},
                cause=e,
            )
            raise self.error

        config = uvicorn.Config(
            app=self._guarded_app,
            interface="asgi3",
            log_level="warning",
            access_log=False,
            lifespan="off",
        )
        self._server = uvicorn.Server(config)
        self._thread = threading.Thread(
            target=self._serve,
            args=(sock,),
            name=f"healthcheck-{self.port}",
            daemon=True,
        )
        self._thread.start()
        self._wait_started()
        logger.info(f"Health check server listening on {self.host or '*'}:{self.port}{HEALTHCHECK_PATH}")

    def stop(self, timeout: float = 5.0) -> None:
        """Shut the listener down. Not reported as a failure."""
        with self._lock:
            self._stopping = True
            if self._state in (HealthServerState.CREATED, HealthServerState.STARTING):
                self._state = HealthServerState.STOPPED
        if self._server is not None:
            self._server.should_exit = True
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout)

    def _bind_socket(self) -> socket.socket:
        if self.host in _DUAL_STACK_HOSTS and socket.has_ipv6:
            try:
                return self._bind(socket.AF_INET6, "::")
            except OSError as e:
                if e.errno not in _NO_IPV6_ERRNOS:
                    raise
                logger.warning(f"IPv6 unavailable ({e}), health check server on port {self.port} listens on IPv4 only")
        return self._bind(socket.AF_INET, self.host or "0.0.0.0")

    def _bind(self, family: socket.AddressFamily, host: str) -> socket.socket:
        sock = socket.socket(family, socket.SOCK_STREAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            if family == socket.AF_INET6:
                sock.setsockopt(socket.IPPROTO_IPV6, socket.IPV6_V6ONLY, 0)
            sock.bind((host, self.port))
        except OSError:
            sock.close()
            raise
        self.family = family
        return sock

    def _wait_started(self) -> None:
        deadline = time.monotonic() + self.startup_timeout
        while True:
            with self._lock:
                if self._state == HealthServerState.FAILED:
                    raise self.error or HealthServerError(message=f"health server on port {self.port} failed to start")
                if self._server.started:
                    self._state = HealthServerState.RUNNING
                    return
            if time.monotonic() > deadline:
                self.stop()
                raise HealthServerError(
                    message=f"health server on port {self.port} did not start within {self.startup_timeout}s",
                    data={"port": self.port},
                )
            time.sleep(0.01)

    def _serve(self, sock: socket.socket) -> None:
        cause: BaseException | None = None
        try:
            self._server.run(sockets=[sock])
        except (Exception, SystemExit) as e:
            cause = e
        finally:
            sock.close()

        with self._lock:
            if self._stopping:
                self._state = HealthServerState.STOPPED
                logger.info(f"Health check server on port {self.port} stopped")
                return
            was_running = self._state == HealthServerState.RUNNING
            self._state = HealthServerState.FAILED
            self.error = HealthServerError(
                message=f"healthcheck webserver on port {self.port} failed",
                data={"port": self.port},
                cause=cause if isinstance(cause, Exception) else None,
            )
        if was_running:
            self.on_failure(self.error)

    async def _guarded_app(self, scope: dict[str, Any], receive: Any, send: Any) -> None:
        try:
            await self.app(scope, receive, send)
        except Exception as e:
            error = HealthServerError(
                message=f"healthcheck response on port {self.port} failed: {e}",
                data={"port": self.port},
                cause=e,
            )
            self.error = error
            self.on_failure(error)
            raise
