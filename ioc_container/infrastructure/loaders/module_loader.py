"""
Module loading for the autoload and fallback resolution steps.

Path based loads are cached per file, so loading the same path twice
returns the same module object, like the standard import system does for
dotted names.
"""

import hashlib
import importlib
import importlib.util
import logging
import os
import sys
import threading
from pathlib import Path
from types import ModuleType
from typing import Dict, Optional

from ...core.interfaces.resolution import IModuleLoader

logger = logging.getLogger(__name__)

_MODULE_PREFIX = "_ioc_autoload"


class ModuleLoader(IModuleLoader):
    """
    Loads modules from file paths and dotted specifiers.

    ``ModuleNotFoundError`` is raised only when the requested module itself
    does not exist. A module that exists but fails while importing one of its
    own dependencies raises ``ImportError`` instead, so callers can tell the
    two apart.
    """

    def __init__(self) -> None:
        self._modules: Dict[Path, ModuleType] = {}
        self._lock = threading.RLock()

    def find_module_file(self, path: Path) -> Optional[Path]:
        """Find the source file backing a module path, if any."""
        if path.suffix == ".py" and path.is_file():
            return path

        source = Path(f"{path}.py")
        if source.is_file():
            return source

        package_init = path / "__init__.py"
        if package_init.is_file():
            return package_init

        return None

    def load(self, path: Path) -> ModuleType:
        """Load the module stored at ``path`` (``.py`` file or package directory)."""
        module_file = self.find_module_file(Path(path))
        if module_file is None:
            raise ModuleNotFoundError(f"No module found at {path}", name=str(path))

        module_file = module_file.resolve()
        with self._lock:
            module = self._modules.get(module_file)
            if module is None:
                try:
                    module = self._exec_module(module_file)
                except ModuleNotFoundError as e:
                    raise ImportError(
                        f"Module {module_file} failed to import its dependency '{e.name}'",
                        path=str(module_file)) from e
                self._modules[module_file] = module
            return module

    def import_specifier(self, specifier: str) -> ModuleType:
        """Import a module given as a dotted or ``/`` separated specifier.

        Absolute filesystem paths are loaded like autoloaded paths.
        """
        if os.path.isabs(specifier):
            return self.load(Path(specifier))

        dotted = specifier.replace("/", ".")
        if not dotted or any(not part for part in dotted.split(".")):
            raise ModuleNotFoundError(f"Invalid module specifier '{specifier}'", name=dotted)

        try:
            return importlib.import_module(dotted)
        except ModuleNotFoundError as e:
            if e.name is not None and (dotted == e.name or dotted.startswith(e.name + ".")):
                raise
            raise ImportError(
                f"Module '{dotted}' failed to import its dependency '{e.name}'",
                name=dotted) from e

    def is_loaded(self, path: Path) -> bool:
        module_file = self.find_module_file(Path(path))
        if module_file is None:
            return False
        with self._lock:
            return module_file.resolve() in self._modules

    def _exec_module(self, module_file: Path) -> ModuleType:
        is_package = module_file.name == "__init__.py"
        stem = module_file.parent.name if is_package else module_file.stem
        digest = hashlib.sha1(str(module_file).encode("utf-8")).hexdigest()[:12]
        module_name = f"{_MODULE_PREFIX}.{stem}_{digest}"

        spec = importlib.util.spec_from_file_location(
            module_name,
            module_file,
            submodule_search_locations=[str(module_file.parent)] if is_package else None,
        )
        if not spec or not spec.loader:
            raise ImportError(f"Cannot load module from {module_file}", path=str(module_file))

        module = importlib.util.module_from_spec(spec)
        # Registered before execution so the module can import itself or its submodules
        sys.modules[module_name] = module
        try:
            spec.loader.exec_module(module)
        except BaseException:
            sys.modules.pop(module_name, None)
            raise

        logger.debug(f"Loaded module {module_file} as {module_name}")
        return module
