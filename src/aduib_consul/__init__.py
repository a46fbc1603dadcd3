from aduib_consul.app import (
    ServiceRegistrar,
    connect,
    query_all_instances,
    query_random_instance,
    register_service,
)
from aduib_consul.config import RegistrarConfig, load_config
from aduib_consul.discover.registration import (
    with_default_port,
    with_http_health_check,
    with_registration_modifier,
)
from aduib_consul.exceptions import RegistrarError
from aduib_consul.utils.constant import ErrorPolicy
from aduib_consul.utils.net_utils import local_hostname

__all__ = [
    "ErrorPolicy",
    "RegistrarConfig",
    "RegistrarError",
    "ServiceRegistrar",
    "connect",
    "load_config",
    "local_hostname",
    "query_all_instances",
    "query_random_instance",
    "register_service",
    "with_default_port",
    "with_http_health_check",
    "with_registration_modifier",
]
