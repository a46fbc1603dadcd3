from .builder import RegistrationBuilder, RegistrationPlan, build_registration
from .options import (
    AddModifier,
    EnableHTTPHealthCheck,
    RegistrationConfig,
    RegistrationModifier,
    RegistrationOption,
    SetDefaultPort,
    with_default_port,
    with_http_health_check,
    with_registration_modifier,
)

__all__ = [
    "AddModifier",
    "EnableHTTPHealthCheck",
    "RegistrationBuilder",
    "RegistrationConfig",
    "RegistrationModifier",
    "RegistrationOption",
    "RegistrationPlan",
    "SetDefaultPort",
    "build_registration",
    "with_default_port",
    "with_http_health_check",
    "with_registration_modifier",
]
