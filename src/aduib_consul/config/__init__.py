"""Configuration helpers."""

from .loader import load_config
from .models import RegistrarConfig

__all__ = [
    "RegistrarConfig",
    "load_config",
]
