"""Configuration models and loading."""

from .loader import ConfigLoader
from .models import ApplicationConfig, ContainerConfig, LoggingConfig

__all__ = [
    "ConfigLoader",
    "ApplicationConfig",
    "ContainerConfig",
    "LoggingConfig",
]
