from abc import ABC, abstractmethod

from aduib_consul.discover.entities import ServiceInstance, ServiceRegistration


class ServiceRegistry(ABC):
    """Abstract base class for a service registry."""

    @abstractmethod
    def register_service(self, registration: ServiceRegistration) -> None:
        """Registers a service instance with the registry.

        Args:
            registration: The descriptor to submit.
        """

    @abstractmethod
    def unregister_service(self, service_id: str) -> None:
        """Removes a registered instance.

        Args:
            service_id: The id the instance was registered under.
        """

    @abstractmethod
    def list_instances(self, service_name: str) -> list[ServiceInstance]:
        """Lists instances of ``service_name`` currently passing their checks.

        Returns:
            The healthy instances; empty when there are none.
        """

    @abstractmethod
    def discover_service(self, service_name: str) -> ServiceInstance | None:
        """Picks one healthy instance of ``service_name``, or None."""

    def close(self) -> None:
        """Releases client resources."""
