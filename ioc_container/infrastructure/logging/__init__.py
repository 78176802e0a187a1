"""
Logging infrastructure.

This module provides centralized logging configuration for applications
bootstrapping a container.
"""

from .setup import InterceptHandler, setup_logging

__all__ = [
    "InterceptHandler",
    "setup_logging",
]
