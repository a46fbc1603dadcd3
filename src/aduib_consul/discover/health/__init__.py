from __future__ import annotations

from .health_server import HealthCheckServer, HealthServerState, build_app

__all__ = [
    "HealthCheckServer",
    "HealthServerState",
    "build_app",
]
