import functools
import logging
import os
import sys
import threading
from collections.abc import Callable
from typing import Any, TypeVar

from aduib_consul.exceptions import RegistrarError
from aduib_consul.utils.constant import ErrorPolicy

logger = logging.getLogger(__name__)

T = TypeVar("T")


def fail_fast(exc: BaseException) -> None:
    """Log ``exc`` and terminate the process with status 1.

    Outside the main thread ``sys.exit`` would only end the calling thread, so
    the process is exited directly.
    """
    logger.critical("%s", exc, exc_info=exc)
    if threading.current_thread() is threading.main_thread():
        sys.exit(1)
    os._exit(1)


def apply_error_policy(func: Callable[..., T]) -> Callable[..., T]:
    """Method decorator routing RegistrarError through ``self.error_policy``."""

    @functools.wraps(func)
    def wrapper(self: Any, *args: Any, **kwargs: Any) -> T:
        try:
            return func(self, *args, **kwargs)
        except RegistrarError as e:
            if self.error_policy == ErrorPolicy.EXIT:
                fail_fast(e)
            raise

    return wrapper
