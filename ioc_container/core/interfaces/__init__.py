"""Interfaces shared between the application and infrastructure layers."""

from .resolution import (
    MISSING,
    IContainer,
    IModuleLoader,
    IResolver,
    ResolutionContext,
)

__all__ = [
    "MISSING",
    "IContainer",
    "IModuleLoader",
    "IResolver",
    "ResolutionContext",
]
