"""
Resolved method tables.

A Definition is the composed view of one type on its instance or singleton
side: every method reachable through the ancestor chain, keyed by name,
with the most specific ancestor winning.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from sigview.declarations import Accessibility
from sigview.names import TypeName
from sigview.types import MethodType
from .ancestors import QueryKind


@dataclass(frozen=True)
class MethodRecord:
    """One resolved method of a Definition."""
    name: str
    accessibility: Accessibility
    defined_in: Optional[TypeName]
    implemented_in: TypeName
    method_types: Tuple[MethodType, ...]

    def __post_init__(self):
        if not self.method_types:
            raise ValueError(f"Method '{self.name}' has no overloads")


@dataclass
class Definition:
    declaration: TypeName
    kind: QueryKind
    methods: Dict[str, MethodRecord] = field(default_factory=dict)

    def method_names(self) -> List[str]:
        """Method names in codepoint order."""
        return sorted(self.methods)

    def is_own(self, method: MethodRecord) -> bool:
        return method.implemented_in == self.declaration


def select_methods(definition: Definition, inherit: bool = True) -> Iterator[MethodRecord]:
    """
    Yield the methods to list, sorted by name.

    With inherit disabled only methods implemented by the queried type
    itself are kept; both sides of a type follow the same rule.
    """
    for name in definition.method_names():
        method = definition.methods[name]
        if inherit or definition.is_own(method):
            yield method
