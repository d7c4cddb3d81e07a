"""
Definition package: ancestor chains and resolved method tables.

Provides the ancestor entry variants, the method table model and the
builder that composes them from an Environment.
"""

from .ancestors import (
    Ancestor,
    InstanceExtension,
    InstanceSelf,
    QueryKind,
    SingletonExtension,
    SingletonSelf,
    root_entry,
)
from .builder import DefinitionBuilder, build_definition
from .methods import Definition, MethodRecord, select_methods

__all__ = [
    "Ancestor",
    "InstanceExtension",
    "InstanceSelf",
    "QueryKind",
    "SingletonExtension",
    "SingletonSelf",
    "root_entry",
    "DefinitionBuilder",
    "build_definition",
    "Definition",
    "MethodRecord",
    "select_methods",
]
