"""
Query operations.

Each query reads a loaded Environment and yields rendered output lines.
Resolution errors surface as ReportableError subclasses when the
generator is consumed; callers decide how to report them.
"""

import json
from typing import Iterable, Iterator, Optional, Sequence

from sigview.logging_config import logger
from .declarations import DeclarationKind
from .definition import (
    DefinitionBuilder,
    QueryKind,
    build_definition,
    root_entry,
    select_methods,
)
from .environment import Environment
from .exceptions import ArityError, UnknownMethodError, UnknownTypeError
from .names import TypeName, parse_type_name
from .render import (
    render_ancestor,
    render_declaration,
    render_method_detail,
    render_method_entry,
)

ALL_KINDS = (DeclarationKind.CLASS, DeclarationKind.MODULE, DeclarationKind.INTERFACE)


def dump_declarations(env: Environment) -> str:
    """Serialize every loaded declaration as one JSON document."""
    return json.dumps([decl.model_dump(mode="json") for decl in env.declarations()])


def list_declarations(env: Environment, kinds: Optional[Iterable[DeclarationKind]] = None) -> Iterator[str]:
    """
    Yield ``name (kind)`` for each declared type whose kind is selected.

    Names are sorted by their string form. No kinds selects all of them.
    """
    selected = set(kinds or ()) or set(ALL_KINDS)
    for name in sorted(env.each_declared_name(), key=str):
        kind = env.kind_of(name)
        if kind in selected:
            yield render_declaration(name, kind)


def resolve_class(env: Environment, type_name: str) -> TypeName:
    """
    Parse type_name and check it names a class or module.

    Raises:
        MalformedNameError: If type_name cannot be parsed
        UnknownTypeError: If no class or module has that name
    """
    name = parse_type_name(type_name)
    if not env.is_class_or_module(name):
        raise UnknownTypeError(name)
    return name


def ancestors(env: Environment, type_name: str, kind: QueryKind = QueryKind.INSTANCE) -> Iterator[str]:
    """Yield the ancestor chain of a type, root first."""
    name = resolve_class(env, type_name)
    builder = DefinitionBuilder(env)
    root = root_entry(env.find_class(name), kind)
    logger.debug(f"Ancestors of {name} ({kind.value})")
    for ancestor in builder.build_ancestors(root):
        yield render_ancestor(ancestor)


def methods(env: Environment, type_name: str, kind: QueryKind = QueryKind.INSTANCE,
            inherit: bool = True) -> Iterator[str]:
    """
    Yield ``name (accessibility)`` for each method, sorted by name.

    With inherit disabled only methods the type implements itself are listed.
    """
    name = resolve_class(env, type_name)
    definition = build_definition(DefinitionBuilder(env), name, kind)
    for method in select_methods(definition, inherit=inherit):
        yield render_method_entry(method)


def check_method_args(args: Sequence[str]) -> None:
    """
    Raises:
        ArityError: Unless exactly a type name and a method name are given
    """
    if len(args) != 2:
        raise ArityError(expected=2, given=len(args))


def method_detail(env: Environment, args: Sequence[str], kind: QueryKind = QueryKind.INSTANCE) -> Iterator[str]:
    """Yield the detail block of one method: ``args`` is ``(TYPE, METHOD)``."""
    check_method_args(args)
    type_name, method_name = args
    name = resolve_class(env, type_name)

    definition = build_definition(DefinitionBuilder(env), name, kind)
    method = definition.methods.get(method_name)
    if method is None:
        raise UnknownMethodError(method_name)

    for line in render_method_detail(name, method, kind):
        yield line
