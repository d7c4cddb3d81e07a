"""
Text rendering for query results.

Pure formatting: every function maps model values to output lines and
never resolves anything.
"""

from typing import Iterator

from .declarations import DeclarationKind
from .definition import (
    Ancestor,
    InstanceExtension,
    InstanceSelf,
    MethodRecord,
    QueryKind,
    SingletonExtension,
    SingletonSelf,
)
from .names import TypeName

ABSENT = "(none)"
FIRST_OVERLOAD = " "
OVERLOAD_SEPARATOR = "|"


def _applied(ancestor) -> str:
    if ancestor.args:
        return f"{ancestor.name}[{', '.join(str(arg) for arg in ancestor.args)}]"
    return str(ancestor.name)


def render_ancestor(ancestor: Ancestor) -> str:
    if isinstance(ancestor, SingletonSelf):
        return f"singleton({ancestor.name})"
    if isinstance(ancestor, SingletonExtension):
        return f"singleton({ancestor.name} ({ancestor.extension_name}))"
    if isinstance(ancestor, InstanceSelf):
        return _applied(ancestor)
    if isinstance(ancestor, InstanceExtension):
        return f"{_applied(ancestor)} ({ancestor.extension_name})"
    raise TypeError(f"Not an ancestor entry: {ancestor!r}")


def render_declaration(name: TypeName, kind: DeclarationKind) -> str:
    return f"{name} ({kind.value})"


def render_method_entry(method: MethodRecord) -> str:
    return f"{method.name} ({method.accessibility.value})"


def render_method_signature(type_name: TypeName, method_name: str, kind: QueryKind) -> str:
    separator = "#" if kind == QueryKind.INSTANCE else "."
    return f"{type_name}{separator}{method_name}"


def render_method_detail(type_name: TypeName, method: MethodRecord, kind: QueryKind) -> Iterator[str]:
    """
    Yield the detail block for one method.

    Overloads are listed one per line; the first is indented with a blank
    marker and the following ones are joined with ``|``.
    """
    defined_in = str(method.defined_in.to_absolute()) if method.defined_in else ABSENT

    yield render_method_signature(type_name, method.name, kind)
    yield f"  defined_in: {defined_in}"
    yield f"  implementation: {method.implemented_in.to_absolute()}"
    yield f"  accessibility: {method.accessibility.value}"
    yield "  types:"
    separator = FIRST_OVERLOAD
    for method_type in method.method_types:
        yield f"    {separator} {method_type}"
        separator = OVERLOAD_SEPARATOR
