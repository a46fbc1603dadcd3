import logging
import socket

from aduib_consul.exceptions import IdentityError

logger = logging.getLogger(__name__)


class NetUtils:
    @staticmethod
    def get_hostname() -> str:
        """Return the hostname reported by the operating system.

        Raises:
            IdentityError: The hostname cannot be read or is empty.
        """
        try:
            hostname = socket.gethostname()
        except OSError as e:
            raise IdentityError(message=f"retrieving hostname failed: {e}", cause=e)
        if not hostname:
            raise IdentityError(message="retrieving hostname failed: empty hostname")
        return hostname

    @staticmethod
    def get_free_port(host: str = "127.0.0.1") -> int:
        """Ask the OS for a currently unused TCP port on ``host``."""
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            s.bind((host, 0))
            return s.getsockname()[1]


def local_hostname() -> str:
    """Local instance identity used for both the registration id and address."""
    return NetUtils.get_hostname()
