"""Domain records for container registrations."""

from .bindings import (
    NAMESPACE_SEPARATOR,
    Alias,
    AutoloadRoot,
    Binding,
    BindingMode,
    Fake,
    Factory,
    split_namespace,
    validate_namespace,
)

__all__ = [
    "NAMESPACE_SEPARATOR",
    "Alias",
    "AutoloadRoot",
    "Binding",
    "BindingMode",
    "Fake",
    "Factory",
    "split_namespace",
    "validate_namespace",
]
