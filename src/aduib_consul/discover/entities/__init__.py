from .service_instance import (
    HttpHealthCheck,
    ServiceInstance,
    ServiceRegistration,
)

__all__ = [
    "HttpHealthCheck",
    "ServiceInstance",
    "ServiceRegistration",
]
