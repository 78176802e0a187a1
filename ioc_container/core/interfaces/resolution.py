"""
Interfaces for the resolution pipeline.

These define the contracts between the container facade, the individual
resolution steps and the module-loading collaborator.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from types import ModuleType
from typing import Any, Callable, List, Optional


class _Missing:
    """Sentinel for "this resolver has nothing for the namespace"."""

    _instance: Optional["_Missing"] = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


@dataclass
class ResolutionContext:
    """State carried through one top-level ``resolve`` call.

    ``visited`` holds every namespace entered so far, in order, and is
    extended each time an alias hop re-enters the pipeline.
    ``pipeline`` is the pipeline running the resolution, used by steps that
    re-enter it.
    """
    container: "IContainer"
    pipeline: Any = None
    visited: List[str] = field(default_factory=list)


class IResolver(ABC):
    """One step of the resolution pipeline."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Short step name used in logs."""
        pass

    @abstractmethod
    def try_resolve(self, namespace: str, context: ResolutionContext) -> Any:
        """
        Attempt to resolve a namespace.

        Args:
            namespace: Namespace to resolve
            context: State of the current resolution

        Returns:
            The resolved value, or MISSING when this step does not apply
        """
        pass


class IModuleLoader(ABC):
    """Loads Python modules for the autoload and fallback steps."""

    @abstractmethod
    def find_module_file(self, path: Path) -> Optional[Path]:
        """Return the source file backing a module path, or None."""
        pass

    @abstractmethod
    def load(self, path: Path) -> ModuleType:
        """
        Load the module stored at ``path``.

        Raises:
            ModuleNotFoundError: If no module file exists for the path
        """
        pass

    @abstractmethod
    def import_specifier(self, specifier: str) -> ModuleType:
        """
        Import a module by its specifier.

        Raises:
            ModuleNotFoundError: If the module itself does not exist
        """
        pass


class IContainer(ABC):
    """Interface for namespace based IoC containers."""

    @abstractmethod
    def bind(self, namespace: str, factory: Callable[["IContainer"], Any]) -> None:
        """
        Register a transient binding.

        Args:
            namespace: Namespace to bind
            factory: Callable receiving the container, invoked on every resolution
        """
        pass

    @abstractmethod
    def singleton(self, namespace: str, factory: Callable[["IContainer"], Any]) -> None:
        """
        Register a singleton binding.

        Args:
            namespace: Namespace to bind
            factory: Callable receiving the container, invoked once
        """
        pass

    @abstractmethod
    def alias(self, name: str, target: str) -> None:
        """Register ``name`` as an alternate name for ``target``."""
        pass

    @abstractmethod
    def resolve(self, namespace: str) -> Any:
        """
        Resolve a namespace to a value.

        Args:
            namespace: Namespace to resolve

        Returns:
            Resolved value

        Raises:
            NamespaceNotFoundError: If no step resolves the namespace
            CyclicAliasError: If an alias chain loops
            CircularDependencyError: If a factory depends on itself
        """
        pass

    @abstractmethod
    def try_resolve(self, namespace: str) -> Optional[Any]:
        """Resolve a namespace, returning None when it is not found."""
        pass

    @abstractmethod
    def is_bound(self, namespace: str) -> bool:
        """Check if a binding is registered for the namespace."""
        pass


