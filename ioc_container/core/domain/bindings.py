"""
Domain records for container registrations.

Namespaces are plain strings in ``Scope/Module`` form. They are compared
case-sensitively and never normalized.
"""

from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from typing import Any, Callable, Tuple

NAMESPACE_SEPARATOR = "/"

Factory = Callable[[Any], Any]


class BindingMode(Enum):
    """Binding lifetime options."""
    TRANSIENT = auto()  # Factory invoked on every resolution
    SINGLETON = auto()  # Factory invoked once, value cached


@dataclass(frozen=True, eq=False)
class Binding:
    """A factory registered under a namespace.

    Bindings compare by identity: a re-registration always produces a new
    binding, which is what invalidates cached singleton values.
    """
    namespace: str
    factory: Factory
    mode: BindingMode = BindingMode.TRANSIENT

    @property
    def is_singleton(self) -> bool:
        return self.mode is BindingMode.SINGLETON


@dataclass(frozen=True)
class Alias:
    name: str
    target: str


@dataclass(frozen=True, eq=False)
class Fake:
    """Temporary override factory, layered above bindings."""
    namespace: str
    factory: Factory
    cached: bool = False


@dataclass(frozen=True)
class AutoloadRoot:
    """Maps a namespace prefix onto a directory tree."""
    prefix: str
    directory: Path

    @property
    def segments(self) -> Tuple[str, ...]:
        return split_namespace(self.prefix)


def validate_namespace(namespace: Any) -> str:
    """Check that ``namespace`` is a usable namespace string and return it."""
    if not isinstance(namespace, str):
        raise TypeError(
            f"Namespace must be a string, got {type(namespace).__name__}")
    if not namespace:
        raise ValueError("Namespace must not be empty")
    return namespace


def split_namespace(namespace: str) -> Tuple[str, ...]:
    return tuple(namespace.split(NAMESPACE_SEPARATOR))
