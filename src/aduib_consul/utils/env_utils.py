"""Port resolution from environment variables.

A blank or unset variable falls back to the caller's default. A variable that
is set but does not hold a port number is an operator error and raises
:class:`~aduib_consul.exceptions.ConfigError` naming the variable.
"""

from __future__ import annotations

import os
import re
from collections.abc import Mapping

from aduib_consul.exceptions import ConfigError

_PORT_PATTERN = re.compile(r"\d+")
MAX_PORT = 65535


def read_port_override(env_var: str, environ: Mapping[str, str] | None = None) -> int | None:
    """Return the port held by ``env_var``, or None when it is unset or blank.

    Args:
        env_var: Name of the environment variable to read.
        environ: Mapping to read from instead of ``os.environ``.

    Raises:
        ConfigError: The variable is set to something other than a port number.
    """
    env = os.environ if environ is None else environ
    raw = env.get(env_var)
    if raw is None or not raw.strip():
        return None
    value = raw.strip()
    if not _PORT_PATTERN.fullmatch(value):
        raise ConfigError(
            message=f"Environment variable '{env_var}' must be a port number, got {raw!r}",
            data={"env_var": env_var, "value": raw},
        )
    port = int(value)
    if port > MAX_PORT:
        raise ConfigError(
            message=f"Environment variable '{env_var}' is out of range: {port}",
            data={"env_var": env_var, "value": raw},
        )
    return port


def resolve_port(env_var: str, default: int, environ: Mapping[str, str] | None = None) -> int:
    """Resolve a port from ``env_var``, falling back to ``default``."""
    override = read_port_override(env_var, environ)
    return default if override is None else override
