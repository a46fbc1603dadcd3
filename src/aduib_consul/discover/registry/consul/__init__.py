from .client import ConsulClient
from .consul import ConsulServiceRegistry

__all__ = ["ConsulClient", "ConsulServiceRegistry"]
