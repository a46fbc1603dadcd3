"""Registration and discovery entry points.

:class:`ServiceRegistrar` sequences the three steps of a registration:

1. build the descriptor (no I/O),
2. start one health listener per requested health check,
3. submit the descriptor to the registry.

Errors surface as :class:`~aduib_consul.exceptions.RegistrarError`. With the
default ``ErrorPolicy.EXIT`` the registrar logs them and terminates the
process; ``ErrorPolicy.RAISE`` hands them to the caller instead.
"""

from __future__ import annotations

import logging

from aduib_consul.config import RegistrarConfig
from aduib_consul.discover.entities import ServiceInstance, ServiceRegistration
from aduib_consul.discover.health import HealthCheckServer
from aduib_consul.discover.health.health_server import FailureCallback
from aduib_consul.discover.registration import RegistrationBuilder, RegistrationOption
from aduib_consul.discover.registry import ServiceRegistry, ServiceRegistryFactory
from aduib_consul.utils.constant import ErrorPolicy
from aduib_consul.utils.error_handlers import apply_error_policy

logger = logging.getLogger(__name__)

_DEFAULT_REGISTRAR: ServiceRegistrar | None = None


def connect(config: RegistrarConfig | None = None) -> ServiceRegistry:
    """Create a Consul registry client from ``config`` or the environment."""
    config = config if config is not None else RegistrarConfig.from_env()
    return ServiceRegistryFactory.from_service_registry(
        "consul",
        address=config.consul_address,
        token=config.consul_token,
        timeout=config.request_timeout_seconds,
    )


class ServiceRegistrar:
    """Registers this process and queries for others.

    Args:
        config: Registrar settings; read from the environment when omitted.
        registry: Registry to talk to; a Consul client built from ``config``
            when omitted.
        error_policy: What to do with a RegistrarError.
        on_health_failure: Passed to every health listener started here.
    """

    def __init__(
        self,
        config: RegistrarConfig | None = None,
        registry: ServiceRegistry | None = None,
        error_policy: ErrorPolicy = ErrorPolicy.EXIT,
        on_health_failure: FailureCallback | None = None,
    ) -> None:
        self.error_policy = error_policy
        self.on_health_failure = on_health_failure
        self.health_servers: list[HealthCheckServer] = []
        self.registrations: list[ServiceRegistration] = []
        self._config = config
        self._registry = registry

    @property
    @apply_error_policy
    def config(self) -> RegistrarConfig:
        if self._config is None:
            self._config = RegistrarConfig.from_env()
        return self._config

    @property
    @apply_error_policy
    def registry(self) -> ServiceRegistry:
        if self._registry is None:
            self._registry = connect(self.config)
        return self._registry

    @apply_error_policy
    def register_service(self, service_name: str, *options: RegistrationOption) -> ServiceRegistration:
        """Register this instance as ``service_name``.

        Args:
            service_name: Logical service name.
            *options: Registration options, applied in order.

        Returns:
            The submitted descriptor.
        """
        plan = RegistrationBuilder(service_name, self.config).plan(*options)
        for port in plan.health_ports:
            server = HealthCheckServer(port, on_failure=self.on_health_failure)
            server.start()
            self.health_servers.append(server)
        self.registry.register_service(plan.registration)
        self.registrations.append(plan.registration)
        return plan.registration

    @apply_error_policy
    def deregister(self, service_id: str | None = None) -> None:
        """Remove ``service_id``, or every registration made by this registrar."""
        if service_id is not None:
            self.registry.unregister_service(service_id)
            self.registrations = [r for r in self.registrations if r.id != service_id]
            return
        while self.registrations:
            registration = self.registrations.pop()
            self.registry.unregister_service(registration.id)

    @apply_error_policy
    def query_all_instances(self, service_name: str) -> list[ServiceInstance]:
        """Healthy instances of ``service_name``; empty when there are none."""
        return self.registry.list_instances(service_name)

    @apply_error_policy
    def query_random_instance(self, service_name: str) -> ServiceInstance | None:
        """One healthy instance of ``service_name`` picked at random, or None."""
        return self.registry.discover_service(service_name)

    def close(self) -> None:
        """Stop the health listeners and release the registry client."""
        for server in self.health_servers:
            server.stop()
        self.health_servers.clear()
        if self._registry is not None:
            self._registry.close()


def get_registrar() -> ServiceRegistrar:
    global _DEFAULT_REGISTRAR
    if _DEFAULT_REGISTRAR is None:
        _DEFAULT_REGISTRAR = ServiceRegistrar()
    return _DEFAULT_REGISTRAR


def set_registrar(registrar: ServiceRegistrar | None) -> None:
    """Replace the registrar used by the module-level helpers."""
    global _DEFAULT_REGISTRAR
    _DEFAULT_REGISTRAR = registrar


def register_service(service_name: str, *options: RegistrationOption) -> ServiceRegistration:
    return get_registrar().register_service(service_name, *options)


def query_all_instances(service_name: str) -> list[ServiceInstance]:
    return get_registrar().query_all_instances(service_name)


def query_random_instance(service_name: str) -> ServiceInstance | None:
    return get_registrar().query_random_instance(service_name)


__all__ = [
    "ServiceRegistrar",
    "connect",
    "get_registrar",
    "query_all_instances",
    "query_random_instance",
    "register_service",
    "set_registrar",
]
