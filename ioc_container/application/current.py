"""
Process-wide access to the application container.

Applications install one container at bootstrap with ``set_container`` and
resolve through ``use``/``make``. Tests swap in an isolated container for a
block of code with ``container_scope``.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from ..core.exceptions import ContainerNotSetError
from .container import Container

logger = logging.getLogger(__name__)

_current: Optional[Container] = None
_lock = threading.Lock()


def set_container(container: Container) -> Optional[Container]:
    """Install the process-wide container and return the previous one."""
    global _current
    with _lock:
        previous = _current
        _current = container
    logger.debug("Process-wide container installed")
    return previous


def get_container() -> Container:
    """
    Get the process-wide container.

    Raises:
        ContainerNotSetError: If no container has been installed
    """
    container = _current
    if container is None:
        raise ContainerNotSetError(
            "No container installed, call set_container() during bootstrap")
    return container


def reset_container() -> None:
    """Remove the process-wide container."""
    global _current
    with _lock:
        _current = None


def has_container() -> bool:
    return _current is not None


@contextmanager
def container_scope(container: Optional[Container] = None) -> Iterator[Container]:
    """Temporarily install a container, restoring the previous one on exit."""
    global _current
    scoped = container if container is not None else Container()
    previous = set_container(scoped)
    try:
        yield scoped
    finally:
        with _lock:
            _current = previous


def use(namespace: str) -> Any:
    """Resolve a namespace from the process-wide container."""
    return get_container().resolve(namespace)


def make(target: Any) -> Any:
    """Construct a target with the process-wide container."""
    return get_container().make(target)
