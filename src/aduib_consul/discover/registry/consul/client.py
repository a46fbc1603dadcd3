"""Minimal synchronous client for the Consul agent HTTP API."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from aduib_consul.exceptions import DiscoveryError, RegistrationError, RegistryConnectionError
from aduib_consul.utils.constant import DEFAULT_CONSUL_ADDRESS

logger = logging.getLogger(__name__)

TOKEN_HEADER = "X-Consul-Token"


def normalize_address(address: str) -> str:
    """Turn ``host:port`` into a base URL; full URLs pass through."""
    address = (address or DEFAULT_CONSUL_ADDRESS).strip().rstrip("/")
    if "://" not in address:
        address = f"http://{address}"
    return address


class ConsulClient:
    """Wraps the three agent endpoints the registrar needs.

    Args:
        address: Agent address, ``host:port`` or a URL.
        token: Optional ACL token.
        timeout: Request timeout in seconds; None keeps httpx's default.
        transport: Custom httpx transport, e.g. ``httpx.MockTransport``.
    """

    def __init__(
        self,
        address: str = DEFAULT_CONSUL_ADDRESS,
        token: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = normalize_address(address)
        headers = {TOKEN_HEADER: token} if token else {}
        kwargs: dict[str, Any] = {"base_url": self.base_url, "headers": headers}
        if timeout is not None:
            kwargs["timeout"] = timeout
        if transport is not None:
            kwargs["transport"] = transport
        try:
            self._client = httpx.Client(**kwargs)
        except (httpx.InvalidURL, ValueError, TypeError) as e:
            raise RegistryConnectionError(message=f"could not create consul client for {address!r}: {e}", cause=e)

    def service_register(self, payload: dict[str, Any]) -> None:
        try:
            response = self._client.put("/v1/agent/service/register", json=payload)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise RegistrationError(
                message=f"registering {payload.get('ID')!r} to consul failed: {e}",
                data={"service_id": payload.get("ID")},
                cause=e,
            )

    def service_deregister(self, service_id: str) -> None:
        try:
            response = self._client.put(f"/v1/agent/service/deregister/{service_id}")
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise RegistrationError(
                message=f"deregistering {service_id!r} from consul failed: {e}",
                data={"service_id": service_id},
                cause=e,
            )

    def health_service(self, service_name: str, passing: bool = True) -> list[dict[str, Any]]:
        """Return the raw health entries for ``service_name``."""
        params = {"passing": "true"} if passing else {}
        try:
            response = self._client.get(f"/v1/health/service/{service_name}", params=params)
            response.raise_for_status()
            entries = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise DiscoveryError(
                message=f"searching for service {service_name!r} failed: {e}",
                data={"service_name": service_name},
                cause=e,
            )
        if entries is None:
            return []
        if not isinstance(entries, list):
            raise DiscoveryError(
                message=f"unexpected consul response for {service_name!r}: {type(entries).__name__}",
                data={"service_name": service_name},
            )
        return entries

    def close(self) -> None:
        self._client.close()
