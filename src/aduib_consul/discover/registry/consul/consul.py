import logging

import httpx

from aduib_consul.discover.entities import ServiceInstance, ServiceRegistration
from aduib_consul.discover.load_balance import LoadBalancerFactory
from aduib_consul.discover.registry.consul.client import ConsulClient
from aduib_consul.discover.registry.registry_factory import registry
from aduib_consul.discover.registry.service_registry import ServiceRegistry
from aduib_consul.utils.constant import DEFAULT_CONSUL_ADDRESS, LoadBalancePolicy

logger = logging.getLogger(__name__)


@registry(name='consul')
class ConsulServiceRegistry(ServiceRegistry):

    def __init__(self,
                 address: str = DEFAULT_CONSUL_ADDRESS,
                 token: str | None = None,
                 timeout: float | None = None,
                 policy: LoadBalancePolicy = LoadBalancePolicy.Random,
                 transport: httpx.BaseTransport | None = None,
                 ):
        self.address = address
        self.policy = policy
        self.client = ConsulClient(address, token=token, timeout=timeout, transport=transport)

    def register_service(self, registration: ServiceRegistration) -> None:
        """Register a service instance with the consul agent."""
        self.client.service_register(registration.to_consul())
        logger.info(f"Registered {registration.name} ({registration.id}) at {registration.address}:{registration.port}")

    def unregister_service(self, service_id: str) -> None:
        self.client.service_deregister(service_id)
        logger.info(f"Deregistered {service_id}")

    def list_instances(self, service_name: str) -> list[ServiceInstance]:
        entries = self.client.health_service(service_name, passing=True)
        instances = [ServiceInstance.from_consul(entry) for entry in entries]
        logger.debug(f"Found {len(instances)} healthy instances of {service_name}")
        return instances

    def discover_service(self, service_name: str) -> ServiceInstance | None:
        instances = self.list_instances(service_name)
        return LoadBalancerFactory.get_load_balancer(self.policy).select_instance(instances)

    def close(self) -> None:
        self.client.close()
