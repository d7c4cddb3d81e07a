"""
Structured type values.

Types appear in method signatures, type arguments of ancestors and
superclass/include clauses. The query layer treats them as opaque values
that render through str(); the definition builder only needs variable
substitution.
"""

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, BeforeValidator, Field, PlainSerializer, PlainValidator

from .exceptions import MalformedNameError
from .names import TypeName, parse_type_name


def _parse_name(text: str, absolute: bool) -> TypeName:
    # pydantic only turns ValueError into validation errors
    try:
        return parse_type_name(text) if absolute else TypeName.parse(text)
    except MalformedNameError as e:
        raise ValueError(str(e)) from e


def _coerce_written_name(value: Any) -> TypeName:
    if isinstance(value, TypeName):
        return value
    if isinstance(value, str):
        return _parse_name(value, absolute=False)
    raise ValueError(f"expected a type name string, got {type(value).__name__}")


def _coerce_absolute_name(value: Any) -> TypeName:
    if isinstance(value, TypeName):
        return value.to_absolute()
    if isinstance(value, str):
        return _parse_name(value, absolute=True)
    raise ValueError(f"expected a type name string, got {type(value).__name__}")


# Names as written in signature files (types keep relative names)
WrittenName = Annotated[
    TypeName,
    PlainValidator(_coerce_written_name),
    PlainSerializer(str, return_type=str),
]

# Names of declarations, superclasses and mixins (always absolute)
AbsoluteName = Annotated[
    TypeName,
    PlainValidator(_coerce_absolute_name),
    PlainSerializer(str, return_type=str),
]

BASE_TYPE_NAMES = ("untyped", "void", "bool", "nil", "self", "instance", "class", "top", "bot")


class Variable(BaseModel):
    """A type variable bound to a declared type parameter."""
    kind: Literal["variable"] = "variable"
    name: str

    def sub(self, mapping: Dict[str, "Type"]) -> "Type":
        return mapping.get(self.name, self)

    def __str__(self) -> str:
        return self.name


class ClassInstance(BaseModel):
    kind: Literal["class_instance"] = "class_instance"
    name: WrittenName
    args: List["TypeField"] = Field(default_factory=list)

    def sub(self, mapping: Dict[str, "Type"]) -> "Type":
        if not self.args:
            return self
        return ClassInstance(name=self.name, args=[arg.sub(mapping) for arg in self.args])

    def __str__(self) -> str:
        if self.args:
            return f"{self.name}[{', '.join(str(arg) for arg in self.args)}]"
        return str(self.name)


class Interface(BaseModel):
    kind: Literal["interface"] = "interface"
    name: WrittenName
    args: List["TypeField"] = Field(default_factory=list)

    def sub(self, mapping: Dict[str, "Type"]) -> "Type":
        if not self.args:
            return self
        return Interface(name=self.name, args=[arg.sub(mapping) for arg in self.args])

    def __str__(self) -> str:
        if self.args:
            return f"{self.name}[{', '.join(str(arg) for arg in self.args)}]"
        return str(self.name)


class OptionalType(BaseModel):
    kind: Literal["optional"] = "optional"
    type: "TypeField"

    def sub(self, mapping: Dict[str, "Type"]) -> "Type":
        return OptionalType(type=self.type.sub(mapping))

    def __str__(self) -> str:
        inner = str(self.type)
        if isinstance(self.type, UnionType):
            inner = f"({inner})"
        return f"{inner}?"


class UnionType(BaseModel):
    kind: Literal["union"] = "union"
    types: List["TypeField"] = Field(min_length=2)

    def sub(self, mapping: Dict[str, "Type"]) -> "Type":
        return UnionType(types=[t.sub(mapping) for t in self.types])

    def __str__(self) -> str:
        return " | ".join(str(t) for t in self.types)


class BaseType(BaseModel):
    """Built-in type keywords: untyped, void, bool, nil, self, instance ..."""
    kind: Literal["base"] = "base"
    name: Literal["untyped", "void", "bool", "nil", "self", "instance", "class", "top", "bot"]

    def sub(self, mapping: Dict[str, "Type"]) -> "Type":
        return self

    def __str__(self) -> str:
        return self.name


def _coerce_type(value: Any) -> Any:
    """
    Accept the string shorthand used in signature files.

    ``"untyped"``/``"void"``/... become base types, any other string is read
    as a class (or, for ``_Name``, interface) instance without arguments.
    Type variables must be written out as ``{"kind": "variable", ...}``.
    """
    if not isinstance(value, str):
        return value
    if value in BASE_TYPE_NAMES:
        return {"kind": "base", "name": value}
    name = _parse_name(value, absolute=False)
    if name.is_interface:
        return {"kind": "interface", "name": value}
    return {"kind": "class_instance", "name": value}


Type = Annotated[
    Union[Variable, ClassInstance, Interface, OptionalType, UnionType, BaseType],
    Field(discriminator="kind"),
]

TypeField = Annotated[Type, BeforeValidator(_coerce_type)]


class Param(BaseModel):
    type: TypeField
    name: Optional[str] = None

    def sub(self, mapping: Dict[str, Type]) -> "Param":
        return Param(type=self.type.sub(mapping), name=self.name)

    def __str__(self) -> str:
        if self.name:
            return f"{self.type} {self.name}"
        return str(self.type)


def _params_to_str(required: List[Param], optional: List[Param], rest: Optional[Param]) -> str:
    parts = [str(p) for p in required]
    parts.extend(f"?{p}" for p in optional)
    if rest is not None:
        parts.append(f"*{rest}")
    return f"({', '.join(parts)})"


class Block(BaseModel):
    required: List[Param] = Field(default_factory=list)
    return_type: TypeField
    optional_block: bool = False

    def sub(self, mapping: Dict[str, Type]) -> "Block":
        return Block(
            required=[p.sub(mapping) for p in self.required],
            return_type=self.return_type.sub(mapping),
            optional_block=self.optional_block,
        )

    def __str__(self) -> str:
        prefix = "?" if self.optional_block else ""
        return f"{prefix}{{ {_params_to_str(self.required, [], None)} -> {self.return_type} }}"


class MethodType(BaseModel):
    """One overload of a method: ``[T] (A a, ?B) { (X) -> Y } -> R``."""
    type_params: List[str] = Field(default_factory=list)
    required: List[Param] = Field(default_factory=list)
    optional: List[Param] = Field(default_factory=list)
    rest: Optional[Param] = None
    block: Optional[Block] = None
    return_type: TypeField

    def sub(self, mapping: Dict[str, Type]) -> "MethodType":
        # Method-level type parameters shadow the enclosing ones
        mapping = {k: v for k, v in mapping.items() if k not in self.type_params}
        if not mapping:
            return self
        return MethodType(
            type_params=list(self.type_params),
            required=[p.sub(mapping) for p in self.required],
            optional=[p.sub(mapping) for p in self.optional],
            rest=self.rest.sub(mapping) if self.rest else None,
            block=self.block.sub(mapping) if self.block else None,
            return_type=self.return_type.sub(mapping),
        )

    def with_return_type(self, return_type: Type) -> "MethodType":
        return self.model_copy(update={"return_type": return_type})

    def __str__(self) -> str:
        text = _params_to_str(self.required, self.optional, self.rest)
        if self.type_params:
            text = f"[{', '.join(self.type_params)}] {text}"
        if self.block is not None:
            text = f"{text} {self.block}"
        return f"{text} -> {self.return_type}"


def variables(names: List[str]) -> List[Variable]:
    """Build one free type variable per declared type parameter."""
    return [Variable(name=name) for name in names]


for _model in (ClassInstance, Interface, OptionalType, UnionType, Param, Block, MethodType):
    _model.model_rebuild()
