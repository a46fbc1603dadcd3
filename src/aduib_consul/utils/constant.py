from enum import IntEnum, StrEnum

CONSUL_HOST_ENV = "CONSUL_HOST"
CONSUL_HTTP_ADDR_ENV = "CONSUL_HTTP_ADDR"
CONSUL_HTTP_TOKEN_ENV = "CONSUL_HTTP_TOKEN"
DEFAULT_CONSUL_ADDRESS = "127.0.0.1:8500"

SERVICE_PORT_ENV = "PRODUCT_SERVICE_PORT"
HEALTH_PORT_ENV = "PRODUCT_HEALTH_PORT"
DEFAULT_SERVICE_PORT = 8100
DEFAULT_HEALTH_PORT = 8101

HEALTHCHECK_PATH = "/healthcheck"
HEALTHCHECK_BODY = "I am alive!"
HEALTHCHECK_INTERVAL_SECONDS = 5
HEALTHCHECK_TIMEOUT_SECONDS = 3


class ErrorPolicy(StrEnum):
    """What the facade does with a registrar error
    EXIT: log and terminate the process
    RAISE: hand the exception to the caller
    """
    EXIT = "exit"
    RAISE = "raise"


class CheckProtocol(StrEnum):
    HTTP = "http"


class LoadBalancePolicy(IntEnum):
    """Load balancer policies for discovery
    Random
    """
    Random=0
