from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class RegistrarError(Exception):
    """Base class for aduib-consul exceptions with a canonical error shape."""

    code: int
    message: str
    data: Any | None = None
    cause: Exception | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", (self.message,))
        if self.cause is not None:
            object.__setattr__(self, "__cause__", self.cause)
            object.__setattr__(self, "__suppress_context__", True)

    def to_error_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, "data": self.data}


@dataclass(frozen=True)
class ConfigError(RegistrarError):
    """Raised when configuration is malformed, e.g. a non-numeric port override."""

    code: int = 1000
    message: str = "Configuration error"


@dataclass(frozen=True)
class IdentityError(RegistrarError):
    """Raised when the local instance identity (hostname) cannot be resolved."""

    code: int = 1100
    message: str = "Identity error"


@dataclass(frozen=True)
class RegistryConnectionError(RegistrarError):
    """Raised when the registry client cannot be constructed."""

    code: int = 2000
    message: str = "Registry connection error"


@dataclass(frozen=True)
class RegistrationError(RegistrarError):
    """Raised when submitting or removing a registration fails."""

    code: int = 2100
    message: str = "Registration failed"


@dataclass(frozen=True)
class DiscoveryError(RegistrarError):
    """Raised when querying the registry for instances fails."""

    code: int = 2200
    message: str = "Discovery failed"


@dataclass(frozen=True)
class HealthServerError(RegistrarError):
    """Raised when the health check listener cannot start or stops unexpectedly."""

    code: int = 3000
    message: str = "Health server error"
