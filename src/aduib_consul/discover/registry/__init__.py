from .service_registry import ServiceRegistry
from .registry_factory import ServiceRegistryFactory, registry
from .in_memory import InMemoryServiceRegistry
from .consul import ConsulClient, ConsulServiceRegistry

__all__ = [
    "ServiceRegistry",
    "ServiceRegistryFactory",
    "registry",
    "InMemoryServiceRegistry",
    "ConsulClient",
    "ConsulServiceRegistry",
]
