"""Registration options.

Options are plain values applied left to right by
:class:`~aduib_consul.discover.registration.builder.RegistrationBuilder`:

- :class:`SetDefaultPort` replaces the port used when no override is set.
- :class:`AddModifier` appends a callable that edits the descriptor.
- :class:`EnableHTTPHealthCheck` appends the HTTP health check modifier and
  asks for a health listener on the resolved port.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Union

from aduib_consul.discover.entities import ServiceRegistration
from aduib_consul.utils.constant import DEFAULT_HEALTH_PORT, DEFAULT_SERVICE_PORT

RegistrationModifier = Callable[[ServiceRegistration], None]


@dataclass(frozen=True)
class SetDefaultPort:
    port: int


@dataclass(frozen=True)
class AddModifier:
    modifier: RegistrationModifier


@dataclass(frozen=True)
class EnableHTTPHealthCheck:
    port: int = DEFAULT_HEALTH_PORT


RegistrationOption = Union[SetDefaultPort, AddModifier, EnableHTTPHealthCheck]
ModifierStep = Union[AddModifier, EnableHTTPHealthCheck]


@dataclass
class RegistrationConfig:
    """Per-call state the options fold into. Discarded after the build."""

    default_port: int = DEFAULT_SERVICE_PORT
    modifiers: list[ModifierStep] = field(default_factory=list)

    def apply(self, option: RegistrationOption) -> None:
        match option:
            case SetDefaultPort(port=port):
                self.default_port = port
            case AddModifier() | EnableHTTPHealthCheck():
                self.modifiers.append(option)
            case _:
                raise TypeError(f"Unsupported registration option: {option!r}")


def with_default_port(port: int) -> SetDefaultPort:
    """Port advertised when the service port variable is not set."""
    return SetDefaultPort(port)


def with_registration_modifier(modifier: RegistrationModifier) -> AddModifier:
    """Edit the descriptor after its base fields are set.

    Passing any modifier, even a no-op, disables the legacy automatic health
    check.
    """
    return AddModifier(modifier)


def with_http_health_check(port: int = DEFAULT_HEALTH_PORT) -> EnableHTTPHealthCheck:
    """Register an HTTP check against ``/healthcheck`` and serve it on ``port``.

    The health port variable takes precedence over ``port``.
    """
    return EnableHTTPHealthCheck(port)
