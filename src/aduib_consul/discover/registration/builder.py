from __future__ import annotations

import logging
import warnings
from collections.abc import Callable
from dataclasses import dataclass

from pydantic import ValidationError

from aduib_consul.config import RegistrarConfig
from aduib_consul.discover.entities import HttpHealthCheck, ServiceRegistration
from aduib_consul.discover.registration.options import (
    AddModifier,
    EnableHTTPHealthCheck,
    RegistrationConfig,
    RegistrationOption,
)
from aduib_consul.exceptions import ConfigError
from aduib_consul.utils.constant import DEFAULT_HEALTH_PORT
from aduib_consul.utils.net_utils import local_hostname

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegistrationPlan:
    """A built descriptor plus the health listener ports it asked for.

    ``health_ports`` holds one entry per applied health check option, in
    order. Starting the listeners is left to the caller.
    """

    registration: ServiceRegistration
    health_ports: tuple[int, ...] = ()


class RegistrationBuilder:
    """Builds a :class:`ServiceRegistration` from a service name and options.

    Building performs no network I/O and starts nothing.
    """

    def __init__(
        self,
        service_name: str,
        config: RegistrarConfig | None = None,
        identity: Callable[[], str] = local_hostname,
    ) -> None:
        self.service_name = service_name
        self.config = config if config is not None else RegistrarConfig.from_env()
        self.identity = identity

    def build_config(self, *options: RegistrationOption) -> RegistrationConfig:
        reg_config = RegistrationConfig()
        for option in options:
            reg_config.apply(option)
        if not reg_config.modifiers and self.config.legacy_auto_health_check:
            warnings.warn(
                "Registering without modifiers installs an HTTP health check on "
                f"port {DEFAULT_HEALTH_PORT}; pass with_http_health_check() explicitly",
                DeprecationWarning,
                stacklevel=2,
            )
            logger.info(f"No registration modifiers for {self.service_name}, enabling default health check")
            reg_config.apply(EnableHTTPHealthCheck(DEFAULT_HEALTH_PORT))
        return reg_config

    def plan(self, *options: RegistrationOption) -> RegistrationPlan:
        """Build the descriptor and collect the requested health listener ports.

        Raises:
            ConfigError: A port or other field set by an option or modifier
                fails validation.
            IdentityError: The local hostname cannot be resolved.
        """
        reg_config = self.build_config(*options)
        hostname = self.identity()
        port = self.config.service_port_override
        try:
            registration = ServiceRegistration(
                id=hostname,
                name=self.service_name,
                address=hostname,
                port=reg_config.default_port if port is None else port,
            )
            health_ports: list[int] = []
            for step in reg_config.modifiers:
                if isinstance(step, AddModifier):
                    step.modifier(registration)
                else:
                    health_ports.append(self._install_http_health_check(registration, step))
        except ValidationError as e:
            raise ConfigError(
                message=f"invalid registration for {self.service_name}: {e}",
                data={"service_name": self.service_name},
                cause=e,
            )
        return RegistrationPlan(registration=registration, health_ports=tuple(health_ports))

    def build(self, *options: RegistrationOption) -> ServiceRegistration:
        return self.plan(*options).registration

    def _install_http_health_check(self, registration: ServiceRegistration, step: EnableHTTPHealthCheck) -> int:
        override = self.config.health_port_override
        health_port = step.port if override is None else override
        registration.check = HttpHealthCheck.for_address(registration.address, health_port)
        return health_port


def build_registration(
    service_name: str,
    *options: RegistrationOption,
    config: RegistrarConfig | None = None,
) -> ServiceRegistration:
    """Build the registration descriptor for ``service_name``.

    Args:
        service_name: Logical service name.
        *options: Registration options, applied in order.
        config: Registrar settings; read from the environment when omitted.

    Returns:
        The populated descriptor, ready to submit.
    """
    return RegistrationBuilder(service_name, config).build(*options)
