"""
Namespace based IoC container.

This module provides the container facade: registration of bindings,
singletons, aliases, fakes and autoload roots, and resolution of
namespaces through the resolution pipeline.
"""

import inspect
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, Optional, Sequence, Union

from ..core.domain.bindings import Binding, BindingMode, Factory, validate_namespace
from ..core.exceptions import NamespaceNotFoundError
from ..core.interfaces.resolution import IContainer, IModuleLoader
from ..infrastructure.loaders.module_loader import ModuleLoader
from .autoload import AutoloadResolver
from .pipeline import (
    AliasResolver,
    AutoloadStep,
    BindingResolver,
    ConstructionTracker,
    FakeResolver,
    ModuleFallbackResolver,
    ResolutionPipeline,
)
from .registries import AliasTable, BindingRegistry, FakeRegistry, SingletonCache

logger = logging.getLogger(__name__)


class Container(IContainer):
    """
    IoC container resolving string namespaces.

    Resolution order (first match wins):
    1. Fake registered for the namespace
    2. Binding (transient or singleton)
    3. Alias, re-entering the pipeline with the target namespace
    4. Autoload root mapping the namespace to a module file
    5. Regular Python import of the namespace

    Registration calls are meant for a single-threaded bootstrap phase.
    Resolution is safe from concurrent threads afterwards; singleton
    factories run at most once.
    """

    def __init__(self,
                 cache_fakes: bool = False,
                 module_loader: Optional[IModuleLoader] = None) -> None:
        self._bindings = BindingRegistry()
        self._aliases = AliasTable()
        self._fakes = FakeRegistry(cache_fakes=cache_fakes)
        self._autoload = AutoloadResolver()
        self._singletons = SingletonCache()
        self._fake_values = SingletonCache()
        self._tracker = ConstructionTracker()
        self._loader = module_loader or ModuleLoader()

        self._pipeline = ResolutionPipeline([
            FakeResolver(self._fakes, self._fake_values, self._tracker),
            BindingResolver(self._bindings, self._singletons, self._tracker),
            AliasResolver(self._aliases),
            AutoloadStep(self._autoload, self._loader),
            ModuleFallbackResolver(self._loader),
        ])

    @property
    def pipeline(self) -> ResolutionPipeline:
        return self._pipeline

    @property
    def cache_fakes(self) -> bool:
        return self._fakes.cache_fakes

    @cache_fakes.setter
    def cache_fakes(self, value: bool) -> None:
        self._fakes.cache_fakes = value

    # Registration

    def bind(self, namespace: str, factory: Factory) -> None:
        """Register a transient binding; the factory runs on every resolution."""
        self._register(namespace, factory, BindingMode.TRANSIENT)

    def singleton(self, namespace: str, factory: Factory) -> None:
        """Register a singleton binding; the factory runs once."""
        self._register(namespace, factory, BindingMode.SINGLETON)

    def unbind(self, namespace: str) -> bool:
        """Remove a binding and its cached value."""
        self._singletons.invalidate(namespace)
        return self._bindings.unbind(namespace)

    def alias(self, name: str, target: str) -> None:
        """Register ``name`` as an alternate name for ``target``."""
        validate_namespace(name)
        validate_namespace(target)
        self._aliases.register(name, target)
        logger.debug(f"Registered alias {name} -> {target}")

    def fake(self, namespace: str, factory: Factory, cache: Optional[bool] = None) -> None:
        """
        Override a namespace with a fake factory.

        Args:
            namespace: Namespace to override
            factory: Callable receiving the container
            cache: Reuse the first value produced by this fake. Defaults to
                the container's ``cache_fakes`` setting.
        """
        validate_namespace(namespace)
        self._require_callable(factory)
        self._fake_values.invalidate(namespace)
        fake = self._fakes.register(namespace, factory, cache)
        logger.debug(f"Registered fake for {namespace} (cached={fake.cached})")

    def clear_fake(self, namespace: str) -> None:
        """Remove the fake for a namespace, restoring normal resolution."""
        self._fakes.clear(namespace)
        self._fake_values.invalidate(namespace)

    def clear_all_fakes(self) -> None:
        """Remove every registered fake."""
        for fake in self._fakes.clear_all():
            self._fake_values.invalidate(fake.namespace)

    # Alternate names
    restore = clear_fake
    restore_all = clear_all_fakes

    @contextmanager
    def faking(self, namespace: str, factory: Factory,
               cache: Optional[bool] = None) -> Iterator["Container"]:
        """Register a fake for the duration of a ``with`` block."""
        validate_namespace(namespace)
        self._require_callable(factory)
        previous = self._fakes.lookup(namespace)
        saved = self._fake_values.detach(namespace)
        self.fake(namespace, factory, cache)
        try:
            yield self
        finally:
            if previous is None:
                self.clear_fake(namespace)
            else:
                # Same record and cache entry, so a cached fake keeps its value
                self._fakes.restore(previous)
                self._fake_values.invalidate(namespace)
                if saved is not None:
                    self._fake_values.attach(namespace, saved)

    def mount_autoload(self, prefix: str, directory: Union[str, Path]) -> None:
        """Map a namespace prefix onto a directory of Python modules."""
        root = self._autoload.mount(prefix, directory)
        logger.info(f"Autoloading {root.prefix}/* from {root.directory}")

    autoload = mount_autoload

    # Resolution

    def resolve(self, namespace: str) -> Any:
        """Resolve a namespace through the resolution pipeline."""
        validate_namespace(namespace)
        return self._pipeline.resolve(namespace, self)

    use = resolve

    def try_resolve(self, namespace: str) -> Optional[Any]:
        """Resolve a namespace, returning None if it is not found."""
        try:
            return self.resolve(namespace)
        except NamespaceNotFoundError as e:
            if not self._is_unresolvable(namespace, e):
                raise
            return None

    def make(self, target: Any) -> Any:
        """
        Resolve and construct a target.

        Strings are resolved first. Classes are instantiated, with the
        namespaces listed in their ``inject`` attribute resolved and passed
        as positional arguments. Anything else is returned as-is.
        """
        if isinstance(target, str):
            target = self.resolve(target)

        if not inspect.isclass(target):
            return target

        dependencies: Sequence[str] = getattr(target, "inject", ()) or ()
        if isinstance(dependencies, str):
            dependencies = (dependencies,)
        args = [self.resolve(dependency) for dependency in dependencies]
        return target(*args)

    def with_dependencies(self, namespaces: Sequence[str],
                          callback: Callable[..., Any]) -> Any:
        """
        Call ``callback`` with the resolved namespaces if all of them resolve.

        Returns:
            The callback's result, or None when any namespace is missing
        """
        values = []
        for namespace in namespaces:
            try:
                values.append(self.resolve(namespace))
            except NamespaceNotFoundError as e:
                if not self._is_unresolvable(namespace, e):
                    raise
                logger.debug(f"Skipping callback, {namespace} does not resolve")
                return None
        return callback(*values)

    # Introspection

    def is_bound(self, namespace: str) -> bool:
        return namespace in self._bindings

    def has_alias(self, name: str) -> bool:
        return name in self._aliases

    def has_fake(self, namespace: str) -> bool:
        return namespace in self._fakes

    def is_cached(self, namespace: str) -> bool:
        """Check if a singleton value is cached for the current binding."""
        binding = self._bindings.lookup(namespace)
        return binding is not None and self._singletons.has(namespace, binding)

    def purge_singletons(self, namespace: Optional[str] = None) -> int:
        """Drop cached singleton values, for one namespace or all of them."""
        if namespace is not None:
            return int(self._singletons.invalidate(namespace))
        return self._singletons.purge()

    def autoload_path(self, namespace: str) -> Optional[Path]:
        return self._autoload.resolve(namespace)

    def get_registrations(self) -> Dict[str, Binding]:
        """Get all bindings (for debugging)."""
        return self._bindings.snapshot()

    def describe(self) -> Dict[str, Any]:
        """Snapshot of every registration, for display."""
        return {
            "bindings": {
                namespace: {
                    "mode": binding.mode.name.lower(),
                    "cached": self._singletons.has(namespace, binding),
                }
                for namespace, binding in sorted(self._bindings.snapshot().items())
            },
            "aliases": dict(sorted(self._aliases.snapshot().items())),
            "fakes": sorted(self._fakes.namespaces()),
            "autoload": {
                root.prefix: str(root.directory)
                for root in sorted(self._autoload.roots(), key=lambda r: r.prefix)
            },
            "pipeline": self._pipeline.order,
        }

    def _register(self, namespace: str, factory: Factory, mode: BindingMode) -> None:
        validate_namespace(namespace)
        self._require_callable(factory)
        self._singletons.invalidate(namespace)
        self._bindings.register(namespace, factory, mode)
        logger.debug(f"Registered {namespace} with {mode.name} lifetime")

    @staticmethod
    def _is_unresolvable(namespace: str, error: NamespaceNotFoundError) -> bool:
        # False when a factory failed to resolve one of its own dependencies
        origin = error.via[0] if error.via else error.namespace
        return origin == namespace

    @staticmethod
    def _require_callable(factory: Any) -> None:
        if not callable(factory):
            raise TypeError(f"Factory must be callable, got {type(factory).__name__}")
