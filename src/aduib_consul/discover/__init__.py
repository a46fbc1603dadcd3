"""Service registration and discovery against Consul.

Example:
    from aduib_consul.discover import RegistrationBuilder, with_http_health_check
    from aduib_consul.discover.registry import ConsulServiceRegistry

    plan = RegistrationBuilder("orders").plan(with_http_health_check(9101))
    registry = ConsulServiceRegistry("consul:8500")
    registry.register_service(plan.registration)
"""

from __future__ import annotations

from aduib_consul.discover.entities import HttpHealthCheck, ServiceInstance, ServiceRegistration
from aduib_consul.discover.health import HealthCheckServer, HealthServerState
from aduib_consul.discover.load_balance import LoadBalancerFactory, RandomLoadBalancer
from aduib_consul.discover.registration import (
    RegistrationBuilder,
    RegistrationPlan,
    build_registration,
    with_default_port,
    with_http_health_check,
    with_registration_modifier,
)
from aduib_consul.discover.registry import (
    ConsulServiceRegistry,
    InMemoryServiceRegistry,
    ServiceRegistry,
    ServiceRegistryFactory,
)

__all__ = [
    "HttpHealthCheck",
    "ServiceInstance",
    "ServiceRegistration",
    "HealthCheckServer",
    "HealthServerState",
    "LoadBalancerFactory",
    "RandomLoadBalancer",
    "RegistrationBuilder",
    "RegistrationPlan",
    "build_registration",
    "with_default_port",
    "with_http_health_check",
    "with_registration_modifier",
    "ConsulServiceRegistry",
    "InMemoryServiceRegistry",
    "ServiceRegistry",
    "ServiceRegistryFactory",
]
