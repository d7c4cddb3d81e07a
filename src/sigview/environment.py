"""
In-memory store of loaded declarations.

One Environment is built per command; nothing is shared between commands.
"""

from typing import Dict, Iterator, List, Optional

from sigview.logging_config import logger
from .declarations import (
    ClassDecl,
    Declaration,
    DeclarationKind,
    ExtensionDecl,
    ModuleDecl,
    TypeDeclaration,
)
from .exceptions import DuplicatedDeclarationError
from .names import TypeName


class Environment:
    """
    Holds class, module and interface declarations keyed by absolute name,
    plus the extensions attached to each class or module.
    """

    def __init__(self):
        self._declarations: List[Declaration] = []
        self._types: Dict[TypeName, TypeDeclaration] = {}
        self._extensions: Dict[TypeName, List[ExtensionDecl]] = {}

    def insert(self, decl: Declaration) -> None:
        """
        Add a declaration.

        Raises:
            DuplicatedDeclarationError: If the name is already declared
        """
        name = decl.name.to_absolute()

        if isinstance(decl, ExtensionDecl):
            self._extensions.setdefault(name, []).append(decl)
        else:
            existing = self._types.get(name)
            if existing is not None:
                raise DuplicatedDeclarationError(name, existing.location, decl.location)
            self._types[name] = decl

        self._declarations.append(decl)
        logger.debug(f"Inserted {decl.kind} {name}")

    def declarations(self) -> List[Declaration]:
        """All loaded declarations in load order, extensions included."""
        return list(self._declarations)

    def each_declared_name(self) -> Iterator[TypeName]:
        for name in self._types:
            yield name

    def find_declaration(self, name: TypeName) -> Optional[TypeDeclaration]:
        return self._types.get(name.to_absolute())

    def find_class(self, name: TypeName):
        """Return the class or module declaration for name, or None."""
        decl = self.find_declaration(name)
        if isinstance(decl, (ClassDecl, ModuleDecl)):
            return decl
        return None

    def is_class_or_module(self, name: TypeName) -> bool:
        return self.find_class(name) is not None

    def kind_of(self, name: TypeName) -> Optional[DeclarationKind]:
        decl = self.find_declaration(name)
        if decl is None:
            return None
        return decl.declaration_kind

    def extensions_of(self, name: TypeName) -> List[ExtensionDecl]:
        return list(self._extensions.get(name.to_absolute(), []))

    def __len__(self) -> int:
        return len(self._types)

    def __contains__(self, name: TypeName) -> bool:
        return name.to_absolute() in self._types
