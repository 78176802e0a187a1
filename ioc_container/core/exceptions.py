"""
Error kinds raised by the container.

The container only raises these for conditions it detects itself. Errors
raised by a registered factory are never caught or wrapped.
"""

from enum import Enum
from typing import Optional, Sequence


class IocError(Exception):
    """Base class for all container errors."""
    pass


class ResolutionErrorKind(Enum):
    """Why a resolution failed."""
    NOT_FOUND = "not_found"
    CYCLIC_ALIAS = "cyclic_alias"
    CIRCULAR_DEPENDENCY = "circular_dependency"


class ResolutionError(IocError):
    """Raised when a namespace cannot be resolved."""

    kind: ResolutionErrorKind = ResolutionErrorKind.NOT_FOUND

    def __init__(self, message: str, namespace: Optional[str] = None) -> None:
        super().__init__(message)
        self.namespace = namespace


class NamespaceNotFoundError(ResolutionError):
    """Nothing in the pipeline resolves the namespace."""

    kind = ResolutionErrorKind.NOT_FOUND

    def __init__(self, namespace: str, via: Sequence[str] = ()) -> None:
        message = f"Cannot resolve namespace '{namespace}'"
        if len(via) > 1:
            message += f" (via alias chain {' -> '.join(via)})"
        super().__init__(message, namespace)
        self.via = list(via)


class CyclicAliasError(ResolutionError):
    """An alias chain revisits a namespace."""

    kind = ResolutionErrorKind.CYCLIC_ALIAS

    def __init__(self, chain: Sequence[str]) -> None:
        super().__init__(
            f"Cyclic alias detected: {' -> '.join(chain)}", chain[0] if chain else None)
        self.chain = list(chain)


class CircularDependencyError(ResolutionError):
    """A factory resolves a namespace that is still being constructed."""

    kind = ResolutionErrorKind.CIRCULAR_DEPENDENCY

    def __init__(self, chain: Sequence[str]) -> None:
        super().__init__(
            f"Circular dependency detected: {' -> '.join(chain)}", chain[-1] if chain else None)
        self.chain = list(chain)


class ContainerConfigurationError(IocError):
    """Raised for invalid registrations detected at bootstrap time."""
    pass


class AmbiguousAutoloadMountError(ContainerConfigurationError):
    """Two autoload roots would tie for the same namespace prefix."""

    def __init__(self, prefix: str, existing: str, requested: str) -> None:
        super().__init__(
            f"Autoload prefix '{prefix}' is already mounted at {existing}, "
            f"cannot mount it again at {requested}")
        self.prefix = prefix
        self.existing = existing
        self.requested = requested


class ProviderLoadError(ContainerConfigurationError):
    """A service provider specifier cannot be imported."""

    def __init__(self, specifier: str, reason: str) -> None:
        super().__init__(f"Cannot load service provider '{specifier}': {reason}")
        self.specifier = specifier
        self.reason = reason


class ContainerNotSetError(IocError):
    """No process-wide container has been installed."""
    pass
