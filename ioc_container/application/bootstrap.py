"""
Container bootstrap from configuration.

Bootstrap is the single-threaded phase in which every registration happens:
autoload roots, aliases, then service providers.
"""

import logging
from typing import Optional, Sequence

from ..infrastructure.config.models import ContainerConfig
from .container import Container
from .current import set_container
from .providers import ProviderRegistry, ProviderSpec

logger = logging.getLogger(__name__)


def create_container(config: Optional[ContainerConfig] = None,
                     providers: Sequence[ProviderSpec] = (),
                     install: bool = False) -> Container:
    """
    Create and configure a container.

    Args:
        config: Container configuration, defaults used when omitted
        providers: Extra providers registered after the configured ones
        install: Also install the container as the process-wide container

    Returns:
        Configured container with every provider booted
    """
    if config is None:
        config = ContainerConfig()

    container = Container(cache_fakes=config.cache_fakes)

    for prefix, directory in config.autoload.items():
        container.mount_autoload(prefix, directory)

    for name, target in config.aliases.items():
        container.alias(name, target)

    registry = ProviderRegistry(container)
    registry.register_and_boot(list(config.providers) + list(providers))

    logger.info(
        f"Container ready: {len(container.get_registrations())} bindings, "
        f"{len(config.aliases)} aliases, {len(config.autoload)} autoload roots")

    if install:
        set_container(container)

    return container
