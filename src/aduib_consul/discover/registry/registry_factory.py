import inspect
import logging
from typing import Any

from aduib_consul.discover.registry.service_registry import ServiceRegistry

logger = logging.getLogger(__name__)


def registry(name: str):
    """Decorator to register a service registry implementation."""

    def decorator(cls: Any):
        if name:
            ServiceRegistryFactory.register_registry(name, cls)
            logger.debug(f"registered service registry: {name}")
        else:
            logger.warning("No registry name specified. Skipping registration.")
        return cls

    return decorator


class ServiceRegistryFactory:
    """Factory class for creating ServiceRegistry instances."""

    registry_classes: dict[str, Any] = {}

    @classmethod
    def from_service_registry(cls, registry_type: str, **kwargs: Any) -> ServiceRegistry:
        """Creates a ServiceRegistry instance.

        Keyword arguments the implementation does not accept are dropped.

        Args:
            registry_type: The type/name of the registry to create.
        Returns:
            An instance of the ServiceRegistry.
        """
        registry_class = cls.registry_classes.get(registry_type)
        if not registry_class:
            raise ValueError(f"Service registry '{registry_type}' not found.")

        sig = inspect.signature(registry_class.__init__)
        valid_kwargs = {k: v for k, v in kwargs.items() if k in sig.parameters}
        return registry_class(**valid_kwargs)

    @classmethod
    def register_registry(cls, name: str, service_registry) -> None:
        """Registers a ServiceRegistry class with the factory."""
        cls.registry_classes[name] = service_registry
