"""
sigview - Type Signature Query Tool

Answers structural questions about a loaded type-signature environment:
ancestor chains, method tables and method overloads.
"""

__version__ = "0.3.0"

# Core exports
from sigview.names import Namespace, TypeName, parse_type_name
from sigview.environment import Environment
from sigview.loader import EnvironmentLoader, LoaderOptions, load_environment
from sigview.definition import Definition, DefinitionBuilder, MethodRecord, QueryKind

__all__ = [
    "__version__",
    "Namespace",
    "TypeName",
    "parse_type_name",
    "Environment",
    "EnvironmentLoader",
    "LoaderOptions",
    "load_environment",
    "Definition",
    "DefinitionBuilder",
    "MethodRecord",
    "QueryKind",
]
