"""
Type name parsing.

Turns user-supplied text like ``Foo::Bar`` or ``::Foo::Bar`` into a
namespace-qualified TypeName. Names used for lookup are always absolute.
"""

import re
from dataclasses import dataclass
from typing import Tuple

from .exceptions import MalformedNameError

SEPARATOR = "::"

SEGMENT_PATTERN = re.compile(r"^[A-Z_a-z][A-Za-z0-9_]*$")


@dataclass(frozen=True)
class Namespace:
    """An ordered path of namespace segments, optionally anchored at the root."""
    path: Tuple[str, ...] = ()
    absolute: bool = False

    @classmethod
    def parse(cls, text: str) -> "Namespace":
        """
        Parse ``::A::B::`` style text into a namespace.

        A leading separator makes the namespace absolute. Every segment must
        be a valid identifier.
        """
        absolute = text.startswith(SEPARATOR)
        body = text[len(SEPARATOR):] if absolute else text
        if body.endswith(SEPARATOR):
            body = body[:-len(SEPARATOR)]
        if not body:
            return cls(path=(), absolute=absolute)

        segments = body.split(SEPARATOR)
        for segment in segments:
            if not segment:
                raise MalformedNameError(text, "empty segment")
            if not SEGMENT_PATTERN.match(segment):
                raise MalformedNameError(text, f"invalid segment '{segment}'")
        return cls(path=tuple(segments), absolute=absolute)

    @property
    def is_empty(self) -> bool:
        return not self.path

    def parent(self) -> "Namespace":
        return Namespace(path=self.path[:-1], absolute=self.absolute)

    def to_absolute(self) -> "Namespace":
        if self.absolute:
            return self
        return Namespace(path=self.path, absolute=True)

    def __str__(self) -> str:
        prefix = SEPARATOR if self.absolute else ""
        return prefix + "".join(segment + SEPARATOR for segment in self.path)


@dataclass(frozen=True)
class TypeName:
    """A class, module or interface name qualified by its namespace."""
    namespace: Namespace
    name: str

    @classmethod
    def parse(cls, text: str) -> "TypeName":
        """
        Parse text into a TypeName, keeping it relative if written relatively.
        """
        if text is None or not text.strip():
            raise MalformedNameError(text or "", "empty name")
        text = text.strip()
        if text.endswith(SEPARATOR):
            raise MalformedNameError(text, "missing simple name")

        namespace = Namespace.parse(text)
        if namespace.is_empty:
            raise MalformedNameError(text, "missing simple name")
        return cls(namespace=namespace.parent(), name=namespace.path[-1])

    @property
    def absolute(self) -> bool:
        return self.namespace.absolute

    @property
    def is_interface(self) -> bool:
        return self.name.startswith("_")

    def to_absolute(self) -> "TypeName":
        if self.absolute:
            return self
        return TypeName(namespace=self.namespace.to_absolute(), name=self.name)

    def __str__(self) -> str:
        return f"{self.namespace}{self.name}"


def parse_type_name(text: str) -> TypeName:
    """
    Parse a user-supplied type name and anchor it at the root.

    ``Foo::Bar`` and ``::Foo::Bar`` both resolve to ``::Foo::Bar``.

    Raises:
        MalformedNameError: If text is empty or has an invalid segment
    """
    return TypeName.parse(text).to_absolute()
