"""
ioc-container - namespace based dependency injection for web applications.

Factories are registered under ``Scope/Module`` namespaces as transient or
singleton bindings, can be aliased, overridden by fakes in tests, or loaded
from autoloaded directories, and are resolved through one ordered pipeline.
"""

__version__ = "0.1.0"

# Public API exports
from .application.bootstrap import create_container
from .application.container import Container
from .application.current import container_scope, get_container, make, reset_container, set_container, use
from .application.providers import ProviderRegistry, ServiceProvider
from .core.domain.bindings import Binding, BindingMode
from .core.exceptions import (
    AmbiguousAutoloadMountError,
    CircularDependencyError,
    ContainerConfigurationError,
    ContainerNotSetError,
    CyclicAliasError,
    IocError,
    NamespaceNotFoundError,
    ProviderLoadError,
    ResolutionError,
    ResolutionErrorKind,
)
from .core.interfaces.resolution import IContainer

__all__ = [
    "create_container",
    "Container",
    "IContainer",
    "container_scope",
    "get_container",
    "make",
    "reset_container",
    "set_container",
    "use",
    "ProviderRegistry",
    "ServiceProvider",
    "Binding",
    "BindingMode",
    "AmbiguousAutoloadMountError",
    "CircularDependencyError",
    "ContainerConfigurationError",
    "ContainerNotSetError",
    "CyclicAliasError",
    "IocError",
    "NamespaceNotFoundError",
    "ProviderLoadError",
    "ResolutionError",
    "ResolutionErrorKind",
]
