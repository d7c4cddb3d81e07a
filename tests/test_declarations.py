"""
Unit tests for declaration models.
"""

import pytest
from pydantic import ValidationError

from sigview.declarations import (
    Accessibility,
    ClassDecl,
    DeclarationKind,
    ExtensionDecl,
    InterfaceDecl,
    ModuleDecl,
    parse_declarations,
)
from sigview.names import parse_type_name


def test_parse_list_and_wrapped_forms(shapes):
    bare = parse_declarations(shapes)
    wrapped = parse_declarations({"declarations": shapes})
    assert [d.name for d in bare] == [d.name for d in wrapped]
    assert [type(d) for d in bare] == [InterfaceDecl, ModuleDecl, ClassDecl]


@pytest.mark.parametrize("data", [{}, {"kind": "class", "name": "Lonely"}, {"declarations": [], "extra": 1}])
def test_object_form_requires_declarations_key(data):
    with pytest.raises(ValidationError):
        parse_declarations(data)


def test_names_are_absolute(decls):
    [decl] = parse_declarations([{"kind": "class", "name": "Foo::Bar", "super_class": {"name": "Base"}}])
    assert decl.name == parse_type_name("::Foo::Bar")
    assert str(decl.super_class.name) == "::Base"


def test_declaration_kinds(shapes):
    kinds = [d.declaration_kind for d in parse_declarations(shapes)]
    assert kinds == [DeclarationKind.INTERFACE, DeclarationKind.MODULE, DeclarationKind.CLASS]


def test_visibility_sections(decls):
    [decl] = parse_declarations([{
        "kind": "class",
        "name": "Foo",
        "members": [
            decls.method("a"),
            {"member": "private"},
            decls.method("b"),
            decls.method("c", accessibility="public"),
            {"member": "public"},
            decls.method("d"),
            decls.method("e", accessibility="protected"),
        ],
    }])
    result = {m.name: access for m, access in decl.method_members()}
    assert result == {
        "a": Accessibility.PUBLIC,
        "b": Accessibility.PRIVATE,
        "c": Accessibility.PUBLIC,
        "d": Accessibility.PUBLIC,
        "e": Accessibility.PROTECTED,
    }


def test_extension(decls):
    [decl] = parse_declarations([{
        "kind": "extension", "name": "String", "extension_name": "Pathname",
        "members": [decls.method("to_path")],
    }])
    assert isinstance(decl, ExtensionDecl)
    assert decl.extension_name == "Pathname"


class TestValidation:

    def test_interface_name_needs_underscore(self):
        with pytest.raises(ValidationError):
            parse_declarations([{"kind": "interface", "name": "Each"}])

    def test_class_name_cannot_be_interface_name(self):
        with pytest.raises(ValidationError):
            parse_declarations([{"kind": "class", "name": "_Each"}])

    def test_interface_methods_are_instance_methods(self, decls):
        with pytest.raises(ValidationError):
            parse_declarations([{"kind": "interface", "name": "_X",
                                 "members": [decls.method("x", kind="singleton")]}])

    def test_method_needs_an_overload(self):
        with pytest.raises(ValidationError):
            parse_declarations([{"kind": "class", "name": "Foo",
                                 "members": [{"member": "method", "name": "x", "types": []}]}])

    def test_unknown_kind(self):
        with pytest.raises(ValidationError):
            parse_declarations([{"kind": "struct", "name": "Foo"}])

    def test_malformed_name(self):
        with pytest.raises(ValidationError):
            parse_declarations([{"kind": "class", "name": "Foo::"}])


def test_dump_uses_strings_for_names(decls):
    [decl] = parse_declarations([{"kind": "class", "name": "Foo",
                                  "members": [decls.method("bar", (("Integer",), "String"))]}])
    data = decl.model_dump(mode="json")
    assert data["name"] == "::Foo"
    assert data["kind"] == "class"
    assert data["members"][0]["types"][0]["return_type"] == {"kind": "class_instance", "name": "String", "args": []}
