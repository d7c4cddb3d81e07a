"""
Ancestor chain entries.

Each entry is one link of a linearized ancestor chain: the instance or
singleton side of a type, either the type itself or one of its named
extensions. Instance entries carry one type argument per declared type
parameter, or none for non-generic types.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple, Union

from sigview.names import TypeName
from sigview.types import Type, variables


class QueryKind(str, Enum):
    """Resolution context: the instance side or the singleton (class-level) side."""
    INSTANCE = "instance"
    SINGLETON = "singleton"


@dataclass(frozen=True)
class SingletonSelf:
    name: TypeName


@dataclass(frozen=True)
class SingletonExtension:
    name: TypeName
    extension_name: str


@dataclass(frozen=True)
class InstanceSelf:
    name: TypeName
    args: Tuple[Type, ...] = ()


@dataclass(frozen=True)
class InstanceExtension:
    name: TypeName
    args: Tuple[Type, ...]
    extension_name: str


Ancestor = Union[SingletonSelf, SingletonExtension, InstanceSelf, InstanceExtension]


def root_entry(decl, kind: QueryKind) -> Ancestor:
    """
    The first entry of the chain for an unapplied type.

    On the instance side every declared type parameter becomes a free type
    variable bound to that parameter.
    """
    name = decl.name.to_absolute()
    if kind == QueryKind.INSTANCE:
        return InstanceSelf(name=name, args=tuple(variables(decl.type_params)))
    if kind == QueryKind.SINGLETON:
        return SingletonSelf(name=name)
    raise ValueError(f"Unknown query kind: {kind}")
