from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any

from aduib_consul.exceptions import ConfigError
from aduib_consul.utils.constant import (
    CONSUL_HOST_ENV,
    CONSUL_HTTP_ADDR_ENV,
    CONSUL_HTTP_TOKEN_ENV,
    DEFAULT_CONSUL_ADDRESS,
    HEALTH_PORT_ENV,
    SERVICE_PORT_ENV,
)
from aduib_consul.utils.env_utils import MAX_PORT, read_port_override


def _coerce_bool(value: Any, field_name: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return bool(value)
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {"1", "true", "yes", "on"}:
            return True
        if normalized in {"0", "false", "no", "off"}:
            return False
    raise TypeError(f"{field_name} must be a bool")


def _coerce_port(value: Any, field_name: str) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool):
        raise TypeError(f"{field_name} must be an int")
    if isinstance(value, str):
        if not value.strip():
            return None
        value = int(value.strip())
    if not isinstance(value, int):
        raise TypeError(f"{field_name} must be an int")
    if value < 0 or value > MAX_PORT:
        raise ValueError(f"{field_name} is out of range: {value}")
    return value


def _coerce_float(value: Any, field_name: str) -> float | None:
    if value is None:
        return None
    if isinstance(value, bool):
        raise TypeError(f"{field_name} must be a float")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        return float(value.strip())
    raise TypeError(f"{field_name} must be a float")


def _coerce_optional_str(value: Any, field_name: str) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value.strip() or None
    return str(value)


@dataclass
class RegistrarConfig:
    """Settings for registering with, and querying, the Consul registry.

    Populated once at startup, usually through :meth:`from_env`, and passed to
    the registration builder and registry client so neither reads the
    environment on its own.

    Attributes:
        consul_address: Registry endpoint, ``host:port`` or a full URL.
        consul_token: ACL token sent as ``X-Consul-Token``.
        service_port_env: Variable consulted for the advertised port override.
        health_port_env: Variable consulted for the health port override.
        service_port_override: Advertised port taking precedence over defaults.
        health_port_override: Health port taking precedence over option values.
        legacy_auto_health_check: Install the default HTTP health check when a
            registration supplies no modifiers. Deprecated behavior kept for
            callers using the zero-option form.
        request_timeout_seconds: Registry request timeout; None keeps the
            HTTP client's default.
    """

    consul_address: str = DEFAULT_CONSUL_ADDRESS
    consul_token: str | None = None
    service_port_env: str = SERVICE_PORT_ENV
    health_port_env: str = HEALTH_PORT_ENV
    service_port_override: int | None = None
    health_port_override: int | None = None
    legacy_auto_health_check: bool = True
    request_timeout_seconds: float | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **kwargs: Any) -> RegistrarConfig:
        """Build a config from environment variables.

        ``CONSUL_HOST`` wins over ``CONSUL_HTTP_ADDR``; both fall back to the
        local agent. Port variables are validated eagerly, so a malformed
        override fails here rather than at registration time.
        """
        env = os.environ if environ is None else environ
        service_port_env = kwargs.pop("service_port_env", SERVICE_PORT_ENV)
        health_port_env = kwargs.pop("health_port_env", HEALTH_PORT_ENV)
        consul_address = (
            (env.get(CONSUL_HOST_ENV) or "").strip()
            or (env.get(CONSUL_HTTP_ADDR_ENV) or "").strip()
            or DEFAULT_CONSUL_ADDRESS
        )
        return cls(
            consul_address=consul_address,
            consul_token=(env.get(CONSUL_HTTP_TOKEN_ENV) or "").strip() or None,
            service_port_env=service_port_env,
            health_port_env=health_port_env,
            service_port_override=read_port_override(service_port_env, env),
            health_port_override=read_port_override(health_port_env, env),
            **kwargs,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], environ: Mapping[str, str] | None = None) -> RegistrarConfig:
        """Build a config from a plain mapping, e.g. a parsed YAML file.

        A port override missing from ``data`` is read from the variable named
        by the matching ``*_port_env`` key, as in :meth:`from_env`.
        """
        if not isinstance(data, Mapping):
            raise ConfigError(message="Configuration must be a mapping")
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(message=f"Unknown configuration keys: {', '.join(unknown)}")
        try:
            kwargs: dict[str, Any] = {}
            if "consul_address" in data:
                kwargs["consul_address"] = _coerce_optional_str(data["consul_address"], "consul_address") or DEFAULT_CONSUL_ADDRESS
            if "consul_token" in data:
                kwargs["consul_token"] = _coerce_optional_str(data["consul_token"], "consul_token")
            for name in ("service_port_env", "health_port_env"):
                if name in data:
                    kwargs[name] = str(data[name])
            for name in ("service_port_override", "health_port_override"):
                if name in data:
                    kwargs[name] = _coerce_port(data[name], name)
            if "legacy_auto_health_check" in data:
                kwargs["legacy_auto_health_check"] = _coerce_bool(
                    data["legacy_auto_health_check"], "legacy_auto_health_check"
                )
            if "request_timeout_seconds" in data:
                kwargs["request_timeout_seconds"] = _coerce_float(
                    data["request_timeout_seconds"], "request_timeout_seconds"
                )
        except (TypeError, ValueError) as exc:
            raise ConfigError(message=str(exc), cause=exc)
        env = os.environ if environ is None else environ
        for override, env_name, default in (
            ("service_port_override", "service_port_env", SERVICE_PORT_ENV),
            ("health_port_override", "health_port_env", HEALTH_PORT_ENV),
        ):
            if override not in kwargs:
                kwargs[override] = read_port_override(kwargs.get(env_name, default), env)
        return cls(**kwargs)
