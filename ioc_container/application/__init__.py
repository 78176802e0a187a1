"""
Application layer: registries, the resolution pipeline and the container.

This layer composes the core interfaces into a working container and
handles bootstrap from configuration.
"""

from .container import Container
from .pipeline import ResolutionPipeline
from .providers import ProviderRegistry, ServiceProvider

__all__ = [
    "Container",
    "ResolutionPipeline",
    "ProviderRegistry",
    "ServiceProvider",
]
