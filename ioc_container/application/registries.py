"""
In-memory registries backing the container.

Registration is expected to happen during a single-threaded bootstrap phase,
so the binding, alias and fake registries take no locks. The singleton cache
is the only structure written during resolution and is safe to use from
concurrent callers.
"""

import logging
import threading
from typing import Any, Callable, Dict, List, Optional

from ..core.domain.bindings import Binding, BindingMode, Factory, Fake

logger = logging.getLogger(__name__)


class BindingRegistry:
    """Namespace to binding mapping. Re-binding overwrites."""

    def __init__(self) -> None:
        self._bindings: Dict[str, Binding] = {}

    def register(self, namespace: str, factory: Factory,
                 mode: BindingMode = BindingMode.TRANSIENT) -> Binding:
        binding = Binding(namespace=namespace, factory=factory, mode=mode)
        if namespace in self._bindings:
            logger.debug(f"Overwriting binding for {namespace}")
        self._bindings[namespace] = binding
        return binding

    def lookup(self, namespace: str) -> Optional[Binding]:
        return self._bindings.get(namespace)

    def unbind(self, namespace: str) -> bool:
        return self._bindings.pop(namespace, None) is not None

    def namespaces(self) -> List[str]:
        return list(self._bindings)

    def snapshot(self) -> Dict[str, Binding]:
        return self._bindings.copy()

    def __contains__(self, namespace: object) -> bool:
        return namespace in self._bindings

    def __len__(self) -> int:
        return len(self._bindings)


class AliasTable:
    """Alias name to target namespace mapping.

    Lookups are a single hop. Following chains and detecting cycles is left
    to the alias resolution step.
    """

    def __init__(self) -> None:
        self._aliases: Dict[str, str] = {}

    def register(self, name: str, target: str) -> None:
        self._aliases[name] = target

    def resolve_alias(self, name: str) -> Optional[str]:
        return self._aliases.get(name)

    def remove(self, name: str) -> bool:
        return self._aliases.pop(name, None) is not None

    def aliases_of(self, target: str) -> List[str]:
        return [name for name, aliased in self._aliases.items() if aliased == target]

    def snapshot(self) -> Dict[str, str]:
        return self._aliases.copy()

    def __contains__(self, name: object) -> bool:
        return name in self._aliases

    def __len__(self) -> int:
        return len(self._aliases)


class FakeRegistry:
    """
    Override factories that take priority over bindings.

    Fakes are recomputed on every resolution unless caching is enabled,
    either for the whole registry (``cache_fakes``) or for a single fake.
    Fakes stay registered until cleared.
    """

    def __init__(self, cache_fakes: bool = False) -> None:
        self.cache_fakes = cache_fakes
        self._fakes: Dict[str, Fake] = {}

    def register(self, namespace: str, factory: Factory,
                 cache: Optional[bool] = None) -> Fake:
        cached = self.cache_fakes if cache is None else cache
        fake = Fake(namespace=namespace, factory=factory, cached=cached)
        self._fakes[namespace] = fake
        return fake

    def restore(self, fake: Fake) -> None:
        """Put back a previously registered fake record as-is."""
        self._fakes[fake.namespace] = fake

    def lookup(self, namespace: str) -> Optional[Fake]:
        return self._fakes.get(namespace)

    def clear(self, namespace: str) -> Optional[Fake]:
        return self._fakes.pop(namespace, None)

    def clear_all(self) -> List[Fake]:
        cleared = list(self._fakes.values())
        self._fakes.clear()
        return cleared

    def namespaces(self) -> List[str]:
        return list(self._fakes)

    def __contains__(self, namespace: object) -> bool:
        return namespace in self._fakes

    def __len__(self) -> int:
        return len(self._fakes)


class _CacheEntry:
    __slots__ = ("owner", "lock", "has_value", "value")

    def __init__(self, owner: object) -> None:
        self.owner = owner
        self.lock = threading.Lock()
        self.has_value = False
        self.value: Any = None


class SingletonCache:
    """
    Compute-once cache keyed by namespace.

    Each entry is tied to the object that owns it (a binding or a fake).
    When the owner changes the entry is stale and the value is recomputed.
    Concurrent first accesses serialize on a per-namespace lock so the
    factory runs at most once; losers wait and read the winner's value.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, _CacheEntry] = {}
        self._guard = threading.Lock()

    def get_or_create(self, namespace: str, owner: object,
                      create: Callable[[], Any]) -> Any:
        with self._guard:
            entry = self._entries.get(namespace)
            if entry is None or entry.owner is not owner:
                entry = _CacheEntry(owner)
                self._entries[namespace] = entry

        with entry.lock:
            if entry.has_value:
                return entry.value

            # A raising factory leaves the entry empty, so the next call retries
            value = create()
            entry.value = value
            entry.has_value = True
            logger.debug(f"Cached singleton value for {namespace}")
            return value

    def has(self, namespace: str, owner: Optional[object] = None) -> bool:
        with self._guard:
            entry = self._entries.get(namespace)
        if entry is None or not entry.has_value:
            return False
        return owner is None or entry.owner is owner

    def invalidate(self, namespace: str) -> bool:
        with self._guard:
            return self._entries.pop(namespace, None) is not None

    def detach(self, namespace: str) -> Optional[_CacheEntry]:
        """Remove and return the entry for a namespace, keeping its value."""
        with self._guard:
            return self._entries.pop(namespace, None)

    def attach(self, namespace: str, entry: _CacheEntry) -> None:
        """Reinstate an entry previously returned by ``detach``."""
        with self._guard:
            self._entries[namespace] = entry

    def purge(self) -> int:
        with self._guard:
            count = len(self._entries)
            self._entries.clear()
            return count

    def __len__(self) -> int:
        with self._guard:
            return sum(1 for entry in self._entries.values() if entry.has_value)
