"""
Resolution pipeline: an ordered chain of resolvers.

Each step implements ``try_resolve`` and either returns a value or MISSING.
The first step that returns a value wins. The default order is

    fake -> binding -> alias -> autoload -> module fallback

and the alias step re-enters the whole pipeline for its target.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Any, Callable, Iterator, List, Sequence, Tuple

from ..core.domain.bindings import Binding, Fake
from ..core.exceptions import CircularDependencyError, CyclicAliasError, NamespaceNotFoundError
from ..core.interfaces.resolution import (
    MISSING,
    IContainer,
    IModuleLoader,
    IResolver,
    ResolutionContext,
)
from .autoload import AutoloadResolver
from .registries import AliasTable, BindingRegistry, FakeRegistry, SingletonCache

logger = logging.getLogger(__name__)


class ConstructionTracker:
    """
    Per-thread stack of namespaces whose factories are currently running.

    A factory that resolves a namespace already on its own thread's stack
    would recurse forever (transient) or deadlock on the cache lock
    (singleton), so it is reported as a circular dependency instead.
    """

    def __init__(self) -> None:
        self._local = threading.local()

    def stack(self) -> List[str]:
        stack = getattr(self._local, "stack", None)
        if stack is None:
            stack = []
            self._local.stack = stack
        return stack

    def check(self, namespace: str) -> None:
        stack = self.stack()
        if namespace in stack:
            raise CircularDependencyError(stack[stack.index(namespace):] + [namespace])

    @contextmanager
    def constructing(self, namespace: str) -> Iterator[None]:
        self.check(namespace)
        stack = self.stack()
        stack.append(namespace)
        try:
            yield
        finally:
            stack.pop()


def _invoke(tracker: ConstructionTracker, namespace: str,
            factory: Callable[[IContainer], Any], container: IContainer) -> Any:
    # Factory errors propagate unchanged
    with tracker.constructing(namespace):
        return factory(container)


class FakeResolver(IResolver):
    """Step 1: fakes override everything else."""

    def __init__(self, fakes: FakeRegistry, cache: SingletonCache,
                 tracker: ConstructionTracker) -> None:
        self._fakes = fakes
        self._cache = cache
        self._tracker = tracker

    @property
    def name(self) -> str:
        return "fake"

    def try_resolve(self, namespace: str, context: ResolutionContext) -> Any:
        fake = self._fakes.lookup(namespace)
        if fake is None:
            return MISSING

        if not fake.cached:
            return _invoke(self._tracker, namespace, fake.factory, context.container)

        self._tracker.check(namespace)
        return self._cache.get_or_create(
            namespace, fake, lambda: self._create(fake, context))

    def _create(self, fake: Fake, context: ResolutionContext) -> Any:
        return _invoke(self._tracker, fake.namespace, fake.factory, context.container)


class BindingResolver(IResolver):
    """Step 2: registered bindings, transient or singleton."""

    def __init__(self, bindings: BindingRegistry, cache: SingletonCache,
                 tracker: ConstructionTracker) -> None:
        self._bindings = bindings
        self._cache = cache
        self._tracker = tracker

    @property
    def name(self) -> str:
        return "binding"

    def try_resolve(self, namespace: str, context: ResolutionContext) -> Any:
        binding = self._bindings.lookup(namespace)
        if binding is None:
            return MISSING

        if not binding.is_singleton:
            return _invoke(self._tracker, namespace, binding.factory, context.container)

        # Checked before taking the cache lock, which is not reentrant
        self._tracker.check(namespace)
        return self._cache.get_or_create(
            namespace, binding, lambda: self._create(binding, context))

    def _create(self, binding: Binding, context: ResolutionContext) -> Any:
        return _invoke(self._tracker, binding.namespace, binding.factory, context.container)


class AliasResolver(IResolver):
    """Step 3: follow one alias hop and re-enter the pipeline."""

    def __init__(self, aliases: AliasTable) -> None:
        self._aliases = aliases

    @property
    def name(self) -> str:
        return "alias"

    def try_resolve(self, namespace: str, context: ResolutionContext) -> Any:
        target = self._aliases.resolve_alias(namespace)
        if target is None:
            return MISSING

        if target in context.visited:
            raise CyclicAliasError(context.visited + [target])

        logger.debug(f"Alias {namespace} -> {target}")
        return context.pipeline.run(target, context)


class AutoloadStep(IResolver):
    """Step 4: load the module a mounted autoload root maps the namespace to."""

    def __init__(self, autoload: AutoloadResolver, loader: IModuleLoader) -> None:
        self._autoload = autoload
        self._loader = loader

    @property
    def name(self) -> str:
        return "autoload"

    def try_resolve(self, namespace: str, context: ResolutionContext) -> Any:
        path = self._autoload.resolve(namespace)
        if path is None:
            return MISSING

        if self._loader.find_module_file(path) is None:
            logger.debug(f"Autoload path {path} for {namespace} has no module")
            return MISSING

        return self._loader.load(path)


class ModuleFallbackResolver(IResolver):
    """Step 5: import the namespace as a regular Python module."""

    def __init__(self, loader: IModuleLoader) -> None:
        self._loader = loader

    @property
    def name(self) -> str:
        return "module"

    def try_resolve(self, namespace: str, context: ResolutionContext) -> Any:
        try:
            return self._loader.import_specifier(namespace)
        except ModuleNotFoundError:
            return MISSING


class ResolutionPipeline:
    """Runs resolvers in order until one produces a value."""

    def __init__(self, resolvers: Sequence[IResolver]) -> None:
        self._resolvers: Tuple[IResolver, ...] = tuple(resolvers)

    @property
    def resolvers(self) -> Tuple[IResolver, ...]:
        return self._resolvers

    @property
    def order(self) -> List[str]:
        return [resolver.name for resolver in self._resolvers]

    def resolve(self, namespace: str, container: IContainer) -> Any:
        """
        Resolve a namespace from a fresh resolution context.

        Raises:
            NamespaceNotFoundError: If no resolver produces a value
            CyclicAliasError: If an alias chain loops back on itself
            CircularDependencyError: If a factory depends on its own namespace
        """
        context = ResolutionContext(container=container, pipeline=self)
        return self.run(namespace, context)

    def run(self, namespace: str, context: ResolutionContext) -> Any:
        context.visited.append(namespace)
        for resolver in self._resolvers:
            value = resolver.try_resolve(namespace, context)
            if value is not MISSING:
                logger.debug(f"Resolved {namespace} via {resolver.name}")
                return value

        raise NamespaceNotFoundError(namespace, via=context.visited)
