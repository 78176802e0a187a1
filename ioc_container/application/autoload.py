"""
Autoload resolver mapping namespace prefixes onto directories.

A root mounted as ``App -> /srv/app`` makes ``App/Services/Foo`` resolve to
``/srv/app/Services/Foo``. Prefixes match whole path segments only, and the
longest matching prefix wins.
"""

import logging
import os
from pathlib import Path
from typing import Dict, List, Optional, Union

from ..core.domain.bindings import AutoloadRoot, split_namespace, validate_namespace
from ..core.exceptions import AmbiguousAutoloadMountError

logger = logging.getLogger(__name__)

_RELATIVE_SEGMENTS = {".", ".."}


class AutoloadResolver:
    """Resolves namespaces to filesystem paths through mounted roots."""

    def __init__(self) -> None:
        self._roots: Dict[str, AutoloadRoot] = {}

    def mount(self, prefix: str, directory: Union[str, "os.PathLike[str]"]) -> AutoloadRoot:
        """
        Mount a namespace prefix onto a directory.

        Args:
            prefix: Namespace prefix, e.g. ``App`` or ``App/Services``
            directory: Directory the prefix maps to

        Returns:
            The mounted root

        Raises:
            AmbiguousAutoloadMountError: If the prefix is already mounted
                at a different directory
        """
        validate_namespace(prefix)
        if any(not segment for segment in split_namespace(prefix)):
            raise ValueError(f"Autoload prefix has an empty segment: '{prefix}'")

        path = Path(directory).expanduser().absolute()
        existing = self._roots.get(prefix)
        if existing is not None:
            if existing.directory == path:
                return existing
            raise AmbiguousAutoloadMountError(prefix, str(existing.directory), str(path))

        root = AutoloadRoot(prefix=prefix, directory=path)
        self._roots[prefix] = root
        logger.debug(f"Mounted autoload root {prefix} -> {path}")
        return root

    def unmount(self, prefix: str) -> bool:
        return self._roots.pop(prefix, None) is not None

    def match(self, namespace: str) -> Optional[AutoloadRoot]:
        """Return the most specific root whose prefix covers the namespace."""
        segments = split_namespace(namespace)
        best: Optional[AutoloadRoot] = None
        for root in self._roots.values():
            prefix = root.segments
            if len(prefix) > len(segments) or segments[:len(prefix)] != prefix:
                continue
            if best is None or len(prefix) > len(best.segments):
                best = root
        return best

    def resolve(self, namespace: str) -> Optional[Path]:
        """
        Map a namespace to an absolute path.

        Args:
            namespace: Namespace to map

        Returns:
            Absolute path under the matching root, or None if no root matches

        Raises:
            ValueError: If the namespace has a relative path segment
        """
        root = self.match(namespace)
        if root is None:
            return None

        remainder = split_namespace(namespace)[len(root.segments):]
        if any(segment in _RELATIVE_SEGMENTS for segment in remainder):
            raise ValueError(f"Namespace '{namespace}' escapes autoload root '{root.prefix}'")
        return root.directory.joinpath(*remainder)

    def roots(self) -> List[AutoloadRoot]:
        return list(self._roots.values())

    def __len__(self) -> int:
        return len(self._roots)
