import logging

from aduib_consul.discover.entities import ServiceInstance, ServiceRegistration
from aduib_consul.discover.load_balance import LoadBalancerFactory
from aduib_consul.discover.registry.registry_factory import registry
from aduib_consul.discover.registry.service_registry import ServiceRegistry
from aduib_consul.utils.constant import LoadBalancePolicy

logger = logging.getLogger(__name__)


@registry(name='in_memory')
class InMemoryServiceRegistry(ServiceRegistry):
    """In-memory implementation of the ServiceRegistry.

    Every registered instance counts as passing.
    """

    def __init__(self, policy: LoadBalancePolicy = LoadBalancePolicy.Random) -> None:
        self.policy = policy
        self._services: dict[str, dict[str, ServiceRegistration]] = {}

    def register_service(self, registration: ServiceRegistration) -> None:
        self._services.setdefault(registration.name, {})[registration.id] = registration
        logger.info(f"Registered service: {registration.name} ({registration.id})")

    def unregister_service(self, service_id: str) -> None:
        for instances in self._services.values():
            if instances.pop(service_id, None) is not None:
                logger.info(f"Unregistered service instance: {service_id}")
                return

    def list_instances(self, service_name: str) -> list[ServiceInstance]:
        instances = self._services.get(service_name) or {}
        return [ServiceInstance.from_registration(r) for r in instances.values()]

    def discover_service(self, service_name: str) -> ServiceInstance | None:
        return LoadBalancerFactory.get_load_balancer(self.policy).select_instance(self.list_instances(service_name))
