from .module_loader import ModuleLoader

__all__ = ["ModuleLoader"]
