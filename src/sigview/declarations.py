"""
Declaration models for signature files.

A signature file is a JSON document holding class, module, interface and
extension declarations. Names are parsed and anchored at the root while
validating, so every declaration in an Environment has an absolute name.
"""

from enum import Enum
from typing import Annotated, Iterator, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from .names import TypeName
from .types import AbsoluteName, MethodType, TypeField


class DeclarationKind(str, Enum):
    CLASS = "class"
    MODULE = "module"
    INTERFACE = "interface"


class Accessibility(str, Enum):
    PUBLIC = "public"
    PRIVATE = "private"
    PROTECTED = "protected"


class MethodKind(str, Enum):
    INSTANCE = "instance"
    SINGLETON = "singleton"
    # module_function style: both an instance and a singleton method
    SINGLETON_INSTANCE = "singleton_instance"


class MethodDefinition(BaseModel):
    member: Literal["method"] = "method"
    name: str = Field(min_length=1)
    kind: MethodKind = MethodKind.INSTANCE
    types: List[MethodType] = Field(min_length=1)
    accessibility: Optional[Accessibility] = None


class Include(BaseModel):
    member: Literal["include"] = "include"
    name: AbsoluteName
    args: List[TypeField] = Field(default_factory=list)


class Extend(BaseModel):
    member: Literal["extend"] = "extend"
    name: AbsoluteName
    args: List[TypeField] = Field(default_factory=list)


class Visibility(BaseModel):
    """A ``public`` or ``private`` section marker."""
    member: Literal["public", "private"]


Member = Annotated[
    Union[MethodDefinition, Include, Extend, Visibility],
    Field(discriminator="member"),
]


class SuperClass(BaseModel):
    name: AbsoluteName
    args: List[TypeField] = Field(default_factory=list)


class _Container(BaseModel):
    name: AbsoluteName
    type_params: List[str] = Field(default_factory=list)
    members: List[Member] = Field(default_factory=list)
    location: Optional[str] = None

    def method_members(self) -> Iterator[Tuple[MethodDefinition, Accessibility]]:
        """
        Yield method definitions with their effective accessibility.

        Visibility sections apply to the definitions that follow them until
        the next section; an explicit accessibility on a definition wins.
        """
        section = Accessibility.PUBLIC
        for member in self.members:
            if isinstance(member, Visibility):
                section = Accessibility(member.member)
            elif isinstance(member, MethodDefinition):
                yield member, member.accessibility or section

    def includes(self) -> List[Include]:
        return [m for m in self.members if isinstance(m, Include)]

    def extends(self) -> List[Extend]:
        return [m for m in self.members if isinstance(m, Extend)]


class ClassDecl(_Container):
    kind: Literal["class"] = "class"
    super_class: Optional[SuperClass] = None

    @field_validator("name")
    @classmethod
    def _not_interface_name(cls, value: TypeName) -> TypeName:
        if value.is_interface:
            raise ValueError(f"class name cannot start with '_': {value}")
        return value

    @property
    def declaration_kind(self) -> DeclarationKind:
        return DeclarationKind.CLASS


class ModuleDecl(_Container):
    kind: Literal["module"] = "module"
    self_type: Optional[TypeField] = None

    @field_validator("name")
    @classmethod
    def _not_interface_name(cls, value: TypeName) -> TypeName:
        if value.is_interface:
            raise ValueError(f"module name cannot start with '_': {value}")
        return value

    @property
    def declaration_kind(self) -> DeclarationKind:
        return DeclarationKind.MODULE


class InterfaceDecl(_Container):
    kind: Literal["interface"] = "interface"

    @field_validator("name")
    @classmethod
    def _interface_name(cls, value: TypeName) -> TypeName:
        if not value.is_interface:
            raise ValueError(f"interface name must start with '_': {value}")
        return value

    @field_validator("members")
    @classmethod
    def _instance_methods_only(cls, members: list) -> list:
        for member in members:
            if isinstance(member, Extend):
                raise ValueError("interfaces cannot extend modules")
            if isinstance(member, MethodDefinition) and member.kind != MethodKind.INSTANCE:
                raise ValueError(f"interface method '{member.name}' must be an instance method")
        return members

    @property
    def declaration_kind(self) -> DeclarationKind:
        return DeclarationKind.INTERFACE


class ExtensionDecl(_Container):
    """Methods and mixins attached to an existing class or module under a name."""
    kind: Literal["extension"] = "extension"
    extension_name: str = Field(min_length=1)


Declaration = Annotated[
    Union[ClassDecl, ModuleDecl, InterfaceDecl, ExtensionDecl],
    Field(discriminator="kind"),
]

TypeDeclaration = Union[ClassDecl, ModuleDecl, InterfaceDecl]


class SignatureFile(BaseModel):
    model_config = ConfigDict(extra="forbid")

    declarations: List[Declaration]


DECLARATION_LIST = TypeAdapter(List[Declaration])


def parse_declarations(data) -> List[Declaration]:
    """
    Validate the decoded JSON content of a signature file.

    Accepts either a bare list of declarations or ``{"declarations": [...]}``.

    Raises:
        pydantic.ValidationError: If the content does not describe declarations
    """
    if isinstance(data, dict):
        return SignatureFile.model_validate(data).declarations
    return DECLARATION_LIST.validate_python(data)
