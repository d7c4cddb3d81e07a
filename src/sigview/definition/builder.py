"""
Definition builder.

Linearizes ancestor chains and composes method tables from the
declarations held by an Environment.
"""

from typing import Dict, List, Optional, Tuple

from sigview.declarations import (
    Accessibility,
    ClassDecl,
    ExtensionDecl,
    InterfaceDecl,
    MethodKind,
    ModuleDecl,
)
from sigview.environment import Environment
from sigview.exceptions import (
    CyclicAncestorsError,
    InvalidTypeApplicationError,
    UnknownTypeError,
)
from sigview.logging_config import logger
from sigview.names import TypeName, parse_type_name
from sigview.types import BaseType, Type, variables
from .ancestors import (
    Ancestor,
    InstanceExtension,
    InstanceSelf,
    QueryKind,
    SingletonExtension,
    SingletonSelf,
)
from .methods import Definition, MethodRecord

BASIC_OBJECT = parse_type_name("BasicObject")
OBJECT = parse_type_name("Object")
MODULE = parse_type_name("Module")
CLASS = parse_type_name("Class")

ALWAYS_PRIVATE = ("initialize", "initialize_copy")

INSTANCE_SIDE = (MethodKind.INSTANCE, MethodKind.SINGLETON_INSTANCE)
SINGLETON_SIDE = (MethodKind.SINGLETON, MethodKind.SINGLETON_INSTANCE)

_Stack = Tuple[Tuple[QueryKind, TypeName], ...]


class DefinitionBuilder:
    """
    Builds ancestor chains and Definitions for classes and modules.

    Instance chains are memoized per builder; a builder lives for a single
    query.
    """

    def __init__(self, env: Environment):
        """
        Args:
            env: Loaded environment to resolve names against
        """
        self.env = env
        self._instance_cache: Dict[Tuple[TypeName, Tuple[str, ...]], List[Ancestor]] = {}

    # ------------------------------------------------------------------
    # Ancestors
    # ------------------------------------------------------------------

    def build_ancestors(self, root: Ancestor) -> List[Ancestor]:
        """
        Compute the linearized chain starting at root, most specific first.

        Raises:
            UnknownTypeError: If root or any ancestor is not a class or module
            CyclicAncestorsError: If the hierarchy loops back on itself
        """
        logger.debug(f"Building ancestors of {root}")
        if isinstance(root, InstanceSelf):
            return list(self._instance_ancestors(root.name, root.args, stack=()))
        if isinstance(root, SingletonSelf):
            return list(self._singleton_ancestors(root.name, stack=()))
        raise ValueError(f"Ancestor chains start at a self entry, got {root!r}")

    def _class_or_module(self, name: TypeName):
        decl = self.env.find_class(name)
        if decl is None:
            raise UnknownTypeError(name)
        return decl

    def _module(self, name: TypeName) -> ModuleDecl:
        decl = self.env.find_declaration(name)
        if not isinstance(decl, ModuleDecl):
            raise UnknownTypeError(name)
        return decl

    def _interface(self, name: TypeName) -> InterfaceDecl:
        decl = self.env.find_declaration(name)
        if not isinstance(decl, InterfaceDecl):
            raise UnknownTypeError(name)
        return decl

    def _super_class(self, decl: ClassDecl) -> Tuple[Optional[TypeName], Tuple[Type, ...]]:
        """Explicit superclass, or Object when one is loaded."""
        if decl.super_class is not None:
            return decl.super_class.name, tuple(decl.super_class.args)
        name = decl.name.to_absolute()
        if name in (BASIC_OBJECT, OBJECT) or OBJECT not in self.env:
            return None, ()
        return OBJECT, ()

    @staticmethod
    def _enter(stack: _Stack, kind: QueryKind, name: TypeName) -> _Stack:
        if (kind, name) in stack:
            chain = [entry_name for entry_kind, entry_name in stack if entry_kind == kind]
            raise CyclicAncestorsError(chain + [name])
        return stack + ((kind, name),)

    def _extensions_of(self, decl) -> List[ExtensionDecl]:
        """Extensions of decl; each must declare as many type parameters as decl."""
        extensions = self.env.extensions_of(decl.name)
        for ext in extensions:
            if len(ext.type_params) != len(decl.type_params):
                raise InvalidTypeApplicationError(ext.name, len(decl.type_params), len(ext.type_params))
        return extensions

    def _apply_args(self, decl, args: Tuple[Type, ...]) -> Tuple[Type, ...]:
        expected = len(decl.type_params)
        if not args and expected:
            # Bare reference to a generic type: arguments are untyped
            return tuple(BaseType(name="untyped") for _ in range(expected))
        if len(args) != expected:
            raise InvalidTypeApplicationError(decl.name, expected, len(args))
        return tuple(args)

    def _instance_ancestors(self, name: TypeName, args: Tuple[Type, ...], stack: _Stack) -> List[Ancestor]:
        decl = self._class_or_module(name)
        name = decl.name
        args = self._apply_args(decl, tuple(args))

        cache_key = (name, tuple(arg.model_dump_json() for arg in args))
        if cache_key in self._instance_cache:
            return self._instance_cache[cache_key]

        stack = self._enter(stack, QueryKind.INSTANCE, name)
        mapping = dict(zip(decl.type_params, args))
        extensions = self._extensions_of(decl)

        chain: List[Ancestor] = [InstanceSelf(name=name, args=args)]
        for ext in extensions:
            chain.append(InstanceExtension(name=name, args=args, extension_name=ext.extension_name))

        super_chain: List[Ancestor] = []
        if isinstance(decl, ClassDecl):
            super_name, super_args = self._super_class(decl)
            if super_name is not None:
                if not isinstance(self.env.find_declaration(super_name), ClassDecl):
                    raise UnknownTypeError(super_name)
                super_args = tuple(arg.sub(mapping) for arg in super_args)
                super_chain = self._instance_ancestors(super_name, super_args, stack)

        includes = [(inc, mapping) for inc in decl.includes()]
        for ext in extensions:
            ext_mapping = dict(zip(ext.type_params, args))
            includes.extend((inc, ext_mapping) for inc in ext.includes())
        for include, include_mapping in reversed(includes):
            if include.name.is_interface:
                continue
            self._module(include.name)
            include_args = tuple(arg.sub(include_mapping) for arg in include.args)
            for ancestor in self._instance_ancestors(include.name, include_args, stack):
                if ancestor not in chain and ancestor not in super_chain:
                    chain.append(ancestor)

        chain.extend(super_chain)
        self._instance_cache[cache_key] = chain
        return chain

    def _singleton_ancestors(self, name: TypeName, stack: _Stack) -> List[Ancestor]:
        decl = self._class_or_module(name)
        name = decl.name
        stack = self._enter(stack, QueryKind.SINGLETON, name)
        extensions = self._extensions_of(decl)

        chain: List[Ancestor] = [SingletonSelf(name=name)]
        for ext in extensions:
            chain.append(SingletonExtension(name=name, extension_name=ext.extension_name))

        super_chain: List[Ancestor] = []
        if isinstance(decl, ClassDecl):
            super_name, _ = self._super_class(decl)
            if super_name is not None:
                if not isinstance(self.env.find_declaration(super_name), ClassDecl):
                    raise UnknownTypeError(super_name)
                super_chain = self._singleton_ancestors(super_name, stack)
            elif CLASS in self.env:
                super_chain = self._instance_ancestors(CLASS, (), stack)
        elif MODULE in self.env:
            super_chain = self._instance_ancestors(MODULE, (), stack)

        extends = decl.extends() + [ex for ext in extensions for ex in ext.extends()]
        for extend in reversed(extends):
            if extend.name.is_interface:
                continue
            self._module(extend.name)
            for ancestor in self._instance_ancestors(extend.name, tuple(extend.args), stack):
                if ancestor not in chain and ancestor not in super_chain:
                    chain.append(ancestor)

        chain.extend(super_chain)
        return chain

    # ------------------------------------------------------------------
    # Method tables
    # ------------------------------------------------------------------

    def build_instance(self, name: TypeName) -> Definition:
        """
        Compose the instance-side method table of a class or module.

        Raises:
            UnknownTypeError: If name is not a class or module
        """
        decl = self._class_or_module(name)
        root = InstanceSelf(name=decl.name, args=tuple(variables(decl.type_params)))
        ancestors = self.build_ancestors(root)

        definition = Definition(declaration=decl.name, kind=QueryKind.INSTANCE)
        for ancestor in reversed(ancestors):
            self._add_instance_methods(definition.methods, ancestor)
        return definition

    def build_singleton(self, name: TypeName) -> Definition:
        """
        Compose the singleton-side method table of a class or module.

        Classes get a synthesized ``new`` built from their ``initialize``
        overloads unless they declare ``new`` themselves.

        Raises:
            UnknownTypeError: If name is not a class or module
        """
        decl = self._class_or_module(name)
        ancestors = self.build_ancestors(SingletonSelf(name=decl.name))

        definition = Definition(declaration=decl.name, kind=QueryKind.SINGLETON)
        methods = definition.methods
        for ancestor in reversed(ancestors):
            if isinstance(ancestor, SingletonSelf):
                self._add_members(methods, ancestor.name, [self._class_or_module(ancestor.name)],
                                  (), SINGLETON_SIDE, mixins="extends")
            elif isinstance(ancestor, SingletonExtension):
                self._add_members(methods, ancestor.name, self._extensions(ancestor),
                                  (), SINGLETON_SIDE, mixins="extends")
            else:
                self._add_instance_methods(methods, ancestor)

        if isinstance(decl, ClassDecl):
            own_new = methods.get("new")
            if own_new is None or own_new.implemented_in != decl.name:
                initialize = self.build_instance(decl.name).methods.get("initialize")
                if initialize is not None:
                    methods["new"] = MethodRecord(
                        name="new",
                        accessibility=Accessibility.PUBLIC,
                        defined_in=None,
                        implemented_in=decl.name,
                        method_types=tuple(
                            t.with_return_type(BaseType(name="instance")) for t in initialize.method_types
                        ),
                    )
        return definition

    def _extensions(self, ancestor) -> list:
        return [
            ext for ext in self.env.extensions_of(ancestor.name)
            if ext.extension_name == ancestor.extension_name
        ]

    def _add_instance_methods(self, methods: Dict[str, MethodRecord], ancestor: Ancestor) -> None:
        if isinstance(ancestor, InstanceSelf):
            containers = [self._class_or_module(ancestor.name)]
        else:
            containers = self._extensions(ancestor)
        self._add_members(methods, ancestor.name, containers, ancestor.args, INSTANCE_SIDE, mixins="includes")

    def _add_members(self, methods, owner: TypeName, containers, args, kinds, mixins: str) -> None:
        """
        Add the methods a declaration (or its extensions) contributes on one side.

        Interface mixins come first so the container's own methods override
        them.
        """
        for container in containers:
            mapping = dict(zip(container.type_params, args))
            for mixin in getattr(container, mixins)():
                if mixin.name.is_interface:
                    mixin_args = tuple(arg.sub(mapping) for arg in mixin.args)
                    self._add_interface_methods(methods, owner, mixin.name, mixin_args, stack=())

            for member, accessibility in container.method_members():
                if member.kind not in kinds:
                    continue
                if member.name in ALWAYS_PRIVATE and kinds is INSTANCE_SIDE:
                    accessibility = Accessibility.PRIVATE
                elif member.kind == MethodKind.SINGLETON_INSTANCE and kinds is INSTANCE_SIDE:
                    # module_function copies are private on the instance side
                    accessibility = Accessibility.PRIVATE
                methods[member.name] = MethodRecord(
                    name=member.name,
                    accessibility=accessibility,
                    defined_in=owner,
                    implemented_in=owner,
                    method_types=tuple(t.sub(mapping) for t in member.types),
                )

    def _add_interface_methods(self, methods, owner: TypeName, name: TypeName,
                               args: Tuple[Type, ...], stack: Tuple[TypeName, ...]) -> None:
        interface = self._interface(name)
        name = interface.name
        if name in stack:
            raise CyclicAncestorsError(list(stack) + [name])
        stack = stack + (name,)
        args = self._apply_args(interface, args)
        mapping = dict(zip(interface.type_params, args))

        for include in interface.includes():
            include_args = tuple(arg.sub(mapping) for arg in include.args)
            self._add_interface_methods(methods, owner, include.name, include_args, stack)

        for member, accessibility in interface.method_members():
            methods[member.name] = MethodRecord(
                name=member.name,
                accessibility=accessibility,
                defined_in=name,
                implemented_in=owner,
                method_types=tuple(t.sub(mapping) for t in member.types),
            )


def build_definition(builder: DefinitionBuilder, name: TypeName, kind: QueryKind) -> Definition:
    """Dispatch to the instance or singleton side."""
    if kind == QueryKind.INSTANCE:
        return builder.build_instance(name)
    if kind == QueryKind.SINGLETON:
        return builder.build_singleton(name)
    raise ValueError(f"Unknown query kind: {kind}")
