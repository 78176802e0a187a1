"""
Service providers.

A service provider groups the bindings of one feature. Providers are
loaded from classes or ``package.module:ClassName`` specifiers; every
provider's ``register`` runs before any provider's ``boot``, so ``boot``
may resolve bindings registered by other providers.
"""

import importlib
import inspect
import logging
from typing import List, Sequence, Type, Union

from ..core.exceptions import ProviderLoadError
from .container import Container

logger = logging.getLogger(__name__)

ProviderSpec = Union[str, Type["ServiceProvider"]]


class ServiceProvider:
    """
    Base class for service providers.

    Subclasses override ``register`` to add bindings and ``boot`` to run
    setup that depends on other providers' bindings.
    """

    def __init__(self, container: Container) -> None:
        self.container = container

    @property
    def name(self) -> str:
        return self.__class__.__name__

    def register(self) -> None:
        """Register bindings with the container."""
        pass

    def boot(self) -> None:
        """Run setup once every provider has registered."""
        pass


def load_provider_class(spec: ProviderSpec) -> Type[ServiceProvider]:
    """
    Resolve a provider specifier to a provider class.

    Args:
        spec: Provider class, ``module:Class`` or ``module.Class``

    Raises:
        ProviderLoadError: If the specifier cannot be imported or does not
            name a ServiceProvider subclass
    """
    if inspect.isclass(spec):
        provider_class = spec
        label = f"{spec.__module__}:{spec.__qualname__}"
    else:
        label = spec
        if ":" in spec:
            module_name, _, attr = spec.partition(":")
        else:
            module_name, _, attr = spec.rpartition(".")
        if not module_name or not attr:
            raise ProviderLoadError(spec, "expected 'module:Class'")

        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            raise ProviderLoadError(spec, str(e)) from e

        provider_class = module
        for part in attr.split("."):
            try:
                provider_class = getattr(provider_class, part)
            except AttributeError as e:
                raise ProviderLoadError(spec, f"'{module_name}' has no attribute '{attr}'") from e

    if not (inspect.isclass(provider_class) and issubclass(provider_class, ServiceProvider)):
        raise ProviderLoadError(label, "not a ServiceProvider subclass")
    return provider_class


class ProviderRegistry:
    """Loads providers and runs their register and boot phases in order."""

    def __init__(self, container: Container) -> None:
        self._container = container
        self._providers: List[ServiceProvider] = []
        self._booted = False

    @property
    def providers(self) -> List[ServiceProvider]:
        return list(self._providers)

    @property
    def booted(self) -> bool:
        return self._booted

    def register(self, specs: Sequence[ProviderSpec]) -> List[ServiceProvider]:
        """Instantiate providers and call their ``register`` hooks in order."""
        registered = []
        for spec in specs:
            provider = load_provider_class(spec)(self._container)
            logger.debug(f"Registering provider {provider.name}")
            provider.register()
            self._providers.append(provider)
            registered.append(provider)
        return registered

    def boot(self) -> None:
        """Call ``boot`` on every registered provider, once."""
        if self._booted:
            return
        for provider in self._providers:
            logger.debug(f"Booting provider {provider.name}")
            provider.boot()
        self._booted = True
        logger.info(f"Booted {len(self._providers)} service providers")

    def register_and_boot(self, specs: Sequence[ProviderSpec]) -> List[ServiceProvider]:
        providers = self.register(specs)
        self.boot()
        return providers
