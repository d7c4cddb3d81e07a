"""
Unit tests for method table composition and listing rules.
"""

import pytest

from sigview.declarations import Accessibility
from sigview.definition import (
    Definition,
    DefinitionBuilder,
    MethodRecord,
    QueryKind,
    build_definition,
    select_methods,
)
from sigview.exceptions import UnknownTypeError
from sigview.loader import LoaderOptions, load_environment
from sigview.names import parse_type_name

CHILD = parse_type_name("Child")
PARENT = parse_type_name("Parent")


@pytest.fixture
def family_env(make_env, family):
    return make_env(family)


class TestInstanceDefinition:

    def test_methods_and_owners(self, family_env):
        definition = DefinitionBuilder(family_env).build_instance(CHILD)
        assert definition.declaration == CHILD
        assert definition.kind == QueryKind.INSTANCE
        assert definition.method_names() == ["greet", "helper", "initialize", "name", "own", "to_s"]

        greet = definition.methods["greet"]
        assert greet.implemented_in == PARENT
        assert greet.defined_in == PARENT

        assert definition.methods["to_s"].implemented_in == CHILD

    def test_interface_methods_are_implemented_by_includer(self, family_env):
        name = DefinitionBuilder(family_env).build_instance(CHILD).methods["name"]
        assert name.defined_in == parse_type_name("_Named")
        assert name.implemented_in == CHILD
        assert name.accessibility == Accessibility.PUBLIC

    def test_accessibility(self, family_env):
        methods = DefinitionBuilder(family_env).build_instance(CHILD).methods
        assert methods["helper"].accessibility == Accessibility.PRIVATE
        assert methods["initialize"].accessibility == Accessibility.PRIVATE
        assert methods["own"].accessibility == Accessibility.PUBLIC

    def test_overloads_keep_declaration_order(self, make_env, foo_overloads):
        env = make_env(foo_overloads)
        bar = DefinitionBuilder(env).build_instance(parse_type_name("Foo")).methods["bar"]
        assert [str(t) for t in bar.method_types] == ["(Integer) -> String", "(String) -> Integer"]

    def test_generic_method_types_use_type_parameters(self, core_env):
        first = DefinitionBuilder(core_env).build_instance(parse_type_name("Array")).methods["first"]
        assert first.implemented_in == parse_type_name("Enumerable")
        assert [str(t) for t in first.method_types] == ["() -> Elem?", "(Integer n) -> Array[Elem]"]

    def test_mixin_arguments_flow_into_method_types(self, core_env):
        to_a = DefinitionBuilder(core_env).build_instance(parse_type_name("Hash")).methods["to_a"]
        assert str(to_a.method_types[0]) == "() -> Array[Array[K | V]]"

    def test_module_function_is_private_on_instance_side(self, core_env):
        puts = DefinitionBuilder(core_env).build_instance(parse_type_name("Object")).methods["puts"]
        assert puts.accessibility == Accessibility.PRIVATE
        assert puts.implemented_in == parse_type_name("Kernel")

    def test_extension_methods_belong_to_extended_type(self):
        env = load_environment(LoaderOptions(libraries=("pathname",)))
        method = DefinitionBuilder(env).build_instance(parse_type_name("Kernel")).methods["Pathname"]
        assert method.implemented_in == parse_type_name("Kernel")

    def test_more_specific_ancestor_wins(self, core_env):
        to_s = DefinitionBuilder(core_env).build_instance(parse_type_name("Integer")).methods["to_s"]
        assert to_s.implemented_in == parse_type_name("Integer")
        assert len(to_s.method_types) == 2

    def test_unknown_type(self, family_env):
        with pytest.raises(UnknownTypeError):
            DefinitionBuilder(family_env).build_instance(parse_type_name("Nope"))

    def test_interface_is_not_buildable(self, family_env):
        with pytest.raises(UnknownTypeError):
            DefinitionBuilder(family_env).build_instance(parse_type_name("_Named"))


class TestSingletonDefinition:

    def test_singleton_methods_are_inherited(self, family_env):
        definition = DefinitionBuilder(family_env).build_singleton(CHILD)
        assert definition.kind == QueryKind.SINGLETON
        assert definition.methods["create"].implemented_in == PARENT

    def test_new_is_synthesized_from_initialize(self, family_env):
        new = DefinitionBuilder(family_env).build_singleton(CHILD).methods["new"]
        assert new.defined_in is None
        assert new.implemented_in == CHILD
        assert new.accessibility == Accessibility.PUBLIC
        assert [str(t) for t in new.method_types] == ["(String name) -> instance"]

    def test_no_initialize_no_new(self, family_env):
        assert "new" not in DefinitionBuilder(family_env).build_singleton(PARENT).methods

    def test_every_core_class_gets_new(self, core_env):
        new = DefinitionBuilder(core_env).build_singleton(parse_type_name("Regexp")).methods["new"]
        assert new.implemented_in == parse_type_name("Regexp")
        assert [str(t) for t in new.method_types] == ["() -> instance"]

    def test_explicit_new_is_kept(self, make_env, decls):
        env = make_env([{"kind": "class", "name": "Foo", "members": [
            decls.method("initialize", (("Integer",), "void")),
            decls.method("new", (("String",), "instance"), kind="singleton"),
        ]}])
        new = DefinitionBuilder(env).build_singleton(parse_type_name("Foo")).methods["new"]
        assert new.defined_in == parse_type_name("Foo")
        assert [str(t) for t in new.method_types] == ["(String) -> instance"]

    def test_module_function_is_public_on_singleton_side(self, core_env):
        puts = DefinitionBuilder(core_env).build_singleton(parse_type_name("Kernel")).methods["puts"]
        assert puts.accessibility == Accessibility.PUBLIC
        assert puts.implemented_in == parse_type_name("Kernel")

    def test_modules_do_not_get_new_from_initialize(self, core_env):
        definition = DefinitionBuilder(core_env).build_singleton(parse_type_name("Comparable"))
        assert "new" not in definition.methods or definition.methods["new"].implemented_in != parse_type_name("Comparable")

    def test_singleton_side_sees_class_instance_methods(self, core_env):
        methods = DefinitionBuilder(core_env).build_singleton(parse_type_name("Integer")).methods
        assert methods["sqrt"].implemented_in == parse_type_name("Integer")
        assert methods["superclass"].implemented_in == parse_type_name("Class")


class TestSelectMethods:

    def test_inherit_lists_everything_sorted(self, family_env):
        definition = DefinitionBuilder(family_env).build_instance(CHILD)
        names = [m.name for m in select_methods(definition, inherit=True)]
        assert names == sorted(definition.methods)

    def test_no_inherit_keeps_own_methods(self, family_env):
        definition = DefinitionBuilder(family_env).build_instance(CHILD)
        names = [m.name for m in select_methods(definition, inherit=False)]
        assert names == ["helper", "initialize", "name", "own", "to_s"]

    @pytest.mark.parametrize("kind", [QueryKind.INSTANCE, QueryKind.SINGLETON])
    @pytest.mark.parametrize("type_name", ["Integer", "Array", "Kernel", "String", "BasicObject"])
    def test_no_inherit_is_a_subset_of_inherit(self, core_env, type_name, kind):
        name = parse_type_name(type_name)
        definition = build_definition(DefinitionBuilder(core_env), name, kind)
        own = list(select_methods(definition, inherit=False))
        everything = list(select_methods(definition, inherit=True))
        assert {m.name for m in own} <= {m.name for m in everything}
        assert all(m.implemented_in == name for m in own)
        assert [m.name for m in everything] == sorted(m.name for m in everything)

    def test_codepoint_order(self):
        def record(n):
            return MethodRecord(name=n, accessibility=Accessibility.PUBLIC, defined_in=None,
                                implemented_in=PARENT, method_types=({},))

        definition = Definition(declaration=PARENT, kind=QueryKind.INSTANCE,
                                methods={n: record(n) for n in ["b", "B", "a", "[]", "+"]})
        assert [m.name for m in select_methods(definition)] == ["+", "B", "[]", "a", "b"]


def test_method_record_needs_overloads():
    with pytest.raises(ValueError):
        MethodRecord(name="x", accessibility=Accessibility.PUBLIC, defined_in=None,
                     implemented_in=PARENT, method_types=())
