from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from aduib_consul.utils.constant import (
    CheckProtocol,
    HEALTHCHECK_INTERVAL_SECONDS,
    HEALTHCHECK_PATH,
    HEALTHCHECK_TIMEOUT_SECONDS,
)


def _duration(seconds: int) -> str:
    return f"{seconds}s"


class HttpHealthCheck(BaseModel):
    """HTTP check the registry runs against the instance's health listener."""
    model_config = ConfigDict(validate_assignment=True)

    url: str
    port: int = Field(ge=0, le=65535)
    protocol: CheckProtocol = CheckProtocol.HTTP
    interval_seconds: int = HEALTHCHECK_INTERVAL_SECONDS
    timeout_seconds: int = HEALTHCHECK_TIMEOUT_SECONDS
    deregister_critical_after_seconds: int | None = None

    @classmethod
    def for_address(cls, address: str, port: int) -> HttpHealthCheck:
        return cls(url=f"http://{address}:{port}{HEALTHCHECK_PATH}", port=port)

    def to_consul(self) -> dict[str, Any]:
        """Render as a Consul AgentServiceCheck payload."""
        check: dict[str, Any] = {
            "HTTP": self.url,
            "Interval": _duration(self.interval_seconds),
            "Timeout": _duration(self.timeout_seconds),
        }
        if self.deregister_critical_after_seconds is not None:
            check["DeregisterCriticalServiceAfter"] = _duration(self.deregister_critical_after_seconds)
        return check


class ServiceRegistration(BaseModel):
    """Registration descriptor submitted to the registry for one running instance."""
    model_config = ConfigDict(validate_assignment=True)

    id: str
    name: str
    address: str
    port: int = Field(ge=0, le=65535)
    check: HttpHealthCheck | None = None
    tags: list[str] = Field(default_factory=list)
    meta: dict[str, str] = Field(default_factory=dict)

    def to_consul(self) -> dict[str, Any]:
        """Render as the body of ``PUT /v1/agent/service/register``."""
        payload: dict[str, Any] = {
            "ID": self.id,
            "Name": self.name,
            "Address": self.address,
            "Port": self.port,
        }
        if self.tags:
            payload["Tags"] = list(self.tags)
        if self.meta:
            payload["Meta"] = dict(self.meta)
        if self.check is not None:
            payload["Check"] = self.check.to_consul()
        return payload


class ServiceInstance(BaseModel):
    """A healthy instance returned by discovery."""
    id: str
    name: str
    address: str
    port: int
    tags: list[str] = Field(default_factory=list)
    meta: dict[str, str] = Field(default_factory=dict)
    node: str | None = None
    node_address: str | None = None

    @property
    def url(self) -> str:
        """Constructs the URL for the service instance."""
        return f"http://{self.address}:{self.port}"

    @classmethod
    def from_registration(cls, registration: ServiceRegistration) -> ServiceInstance:
        return cls(
            id=registration.id,
            name=registration.name,
            address=registration.address,
            port=registration.port,
            tags=list(registration.tags),
            meta=dict(registration.meta),
        )

    @classmethod
    def from_consul(cls, entry: dict[str, Any]) -> ServiceInstance:
        """Parse one entry of ``GET /v1/health/service/<name>``.

        An empty service address means the service lives at the node address.
        """
        node = entry.get("Node") or {}
        service = entry.get("Service") or {}
        node_address = node.get("Address")
        return cls(
            id=service.get("ID") or "",
            name=service.get("Service") or "",
            address=service.get("Address") or node_address or "",
            port=int(service.get("Port") or 0),
            tags=list(service.get("Tags") or []),
            meta=dict(service.get("Meta") or {}),
            node=node.get("Node"),
            node_address=node_address,
        )
