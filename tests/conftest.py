"""
Pytest configuration for the sigview test suite.

This conftest.py provides:
- Quiet logging (no console sink)
- An isolated HOME and working directory per test
- Factories for signature declarations, signature directories and environments
"""

import json
from types import SimpleNamespace

import pytest

from sigview.cli.config import CLIConfig
from sigview.declarations import parse_declarations
from sigview.environment import Environment
from sigview.loader import LoaderOptions, load_environment
from sigview.logging_config import setup_logging
from sigview.user_config import reset_user_config


# ============================================================================
# GLOBAL CONFIGURATION
# ============================================================================

@pytest.fixture(autouse=True)
def setup_test_logging():
    """Suppress console logs for clean test output."""
    setup_logging(level="DEBUG", suppress_console=True, enable_file_logging=False, force=True)


@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path, monkeypatch):
    """
    Give every test its own HOME and project directory so user config
    files never leak in.
    """
    home = tmp_path / "home"
    project = tmp_path / "project"
    home.mkdir()
    project.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("SIGVIEW_NO_USER_CONFIG", raising=False)
    monkeypatch.delenv("SIGVIEW_LOG_LEVEL", raising=False)
    monkeypatch.delenv("SIGVIEW_VERBOSE", raising=False)
    monkeypatch.chdir(project)
    reset_user_config()
    CLIConfig.reset()
    yield project
    reset_user_config()
    CLIConfig.reset()


# ============================================================================
# DECLARATION HELPERS
# ============================================================================

def method(name, *types, kind="instance", accessibility=None):
    """Build a method member; each type is a (params, return) pair or a full dict."""
    overloads = []
    for t in types or [((), "void")]:
        if isinstance(t, dict):
            overloads.append(t)
        else:
            params, return_type = t
            overloads.append({"required": [{"type": p} for p in params], "return_type": return_type})
    member = {"member": "method", "name": name, "kind": kind, "types": overloads}
    if accessibility:
        member["accessibility"] = accessibility
    return member


def var(name):
    return {"kind": "variable", "name": name}


@pytest.fixture
def decls():
    """Expose the declaration helpers to tests."""
    return SimpleNamespace(method=method, var=var)


@pytest.fixture
def make_env():
    """Factory: build an Environment (no core signatures) from declaration dicts."""
    def _make(declarations):
        env = Environment()
        for decl in parse_declarations(declarations):
            env.insert(decl)
        return env
    return _make


@pytest.fixture
def core_env():
    """Environment with the bundled core signatures."""
    return load_environment(LoaderOptions())


@pytest.fixture
def write_signatures(tmp_path):
    """Factory: write declaration dicts to ``<tmp>/sig/<name>`` and return the directory."""
    sig_dir = tmp_path / "sig"

    def _write(declarations, name="types.json"):
        path = sig_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(declarations))
        return sig_dir
    return _write


# ============================================================================
# SHARED FIXTURE DATA
# ============================================================================

@pytest.fixture
def shapes():
    """One class, one module and one interface."""
    return [
        {"kind": "interface", "name": "_C", "members": [method("call")]},
        {"kind": "module", "name": "B", "members": [method("b")]},
        {"kind": "class", "name": "A", "members": [method("a")]},
    ]


@pytest.fixture
def family():
    """
    Parent/Child hierarchy with an interface mixin, private section and
    singleton methods.
    """
    return [
        {
            "kind": "interface",
            "name": "_Named",
            "members": [method("name", ((), "String"))],
        },
        {
            "kind": "class",
            "name": "Parent",
            "members": [
                method("greet", ((), "String")),
                method("to_s", ((), "String")),
                method("create", ((), "instance"), kind="singleton"),
            ],
        },
        {
            "kind": "class",
            "name": "Child",
            "super_class": {"name": "Parent"},
            "members": [
                {"member": "include", "name": "_Named"},
                method("initialize", {"required": [{"type": "String", "name": "name"}], "return_type": "void"}),
                method("to_s", ((), "String")),
                method("own", (("Integer",), "bool")),
                {"member": "private"},
                method("helper", ((), "void")),
            ],
        },
    ]


@pytest.fixture
def foo_overloads():
    """Foo#bar with two overloads."""
    return [
        {
            "kind": "class",
            "name": "Foo",
            "members": [
                method("bar", (("Integer",), "String"), (("String",), "Integer")),
            ],
        }
    ]
