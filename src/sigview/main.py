"""
sigview command-line interface.

Usage:
    sigview [-r LIBRARY]... [-I DIR]... [--no-stdlib] COMMAND [ARGS]

Commands:
    ast                                   Dump every loaded declaration as JSON
    list [--class] [--module] [--interface]
    ancestors [--instance|--singleton] TYPE
    methods [--instance|--singleton] [--inherit|--no-inherit] TYPE
    method [--instance|--singleton] [--] TYPE METHOD
    version

Any other command prints the list of available commands.
"""

from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional

import typer
from typer.core import TyperGroup

from sigview import __version__
from sigview.cli.config import CLIConfig
from sigview.cli.output import echo, print_error
from sigview.declarations import DeclarationKind
from sigview.definition import QueryKind
from sigview.environment import Environment
from sigview.exceptions import LoadError, ReportableError
from sigview.loader import LoaderOptions, load_environment
from sigview.logging_config import logger, setup_logging
from sigview.user_config import get_user_config
from sigview import queries


class Command(str, Enum):
    AST = "ast"
    LIST = "list"
    ANCESTORS = "ancestors"
    METHODS = "methods"
    METHOD = "method"
    VERSION = "version"


COMMAND_NAMES = tuple(command.value for command in Command)
HELP_COMMAND = "help"
HELP_TEXT = f"Available commands: {', '.join(COMMAND_NAMES)}"


class CommandGroup(TyperGroup):
    """Routes every token outside the Command enum to the help command."""

    def resolve_command(self, ctx, args):
        if args and args[0] not in COMMAND_NAMES:
            logger.debug(f"Unknown command {args[0]!r}, showing help")
            args = [HELP_COMMAND]
        return super().resolve_command(ctx, args)


app = typer.Typer(cls=CommandGroup, add_completion=False)


@app.callback(invoke_without_command=True)
def global_options(
    ctx: typer.Context,
    libraries: Optional[List[str]] = typer.Option(
        None,
        "-r",
        metavar="LIBRARY",
        help="Load a named signature library (repeatable)."
    ),
    dirs: Optional[List[Path]] = typer.Option(
        None,
        "-I",
        metavar="DIR",
        help="Load signatures from a directory or file (repeatable)."
    ),
    no_stdlib: bool = typer.Option(
        False,
        "--no-stdlib",
        help="Do not load the bundled core signatures."
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log resolution details on stderr."
    ),
):
    """
    Query a type-signature environment: ancestors, methods and declarations.

    Global flags apply to every command that loads signatures.
    """
    if verbose:
        CLIConfig.set_verbose(True)
    if CLIConfig.is_verbose():
        setup_logging(level="DEBUG", force=True)

    options = get_user_config().loader_options()
    for library in libraries or []:
        options = options.add_library(library)
    for directory in dirs or []:
        options = options.add_path(directory)
    if no_stdlib:
        options = options.disable_standard_library()
    ctx.obj = options

    if ctx.invoked_subcommand is None:
        echo(HELP_TEXT)


def _load(ctx: typer.Context) -> Environment:
    """
    Load a fresh environment for the current command.

    A load failure aborts the command before any output.
    """
    options: LoaderOptions = ctx.obj or LoaderOptions()
    try:
        return load_environment(options)
    except LoadError as e:
        print_error(str(e))
        raise typer.Exit(code=1)


def _emit(lines: Iterable[str]) -> None:
    """Stream lines to stdout, reporting a resolution error as one line."""
    try:
        for line in lines:
            echo(line)
    except ReportableError as e:
        logger.debug(f"Reported: {e}")
        echo(str(e))


def _kind(instance: bool) -> QueryKind:
    return QueryKind.INSTANCE if instance else QueryKind.SINGLETON


@app.command(HELP_COMMAND, hidden=True)
def help_command():
    """List the available commands."""
    echo(HELP_TEXT)


@app.command(Command.AST.value)
def ast(ctx: typer.Context):
    """
    Print every loaded declaration as one JSON document.
    """
    env = _load(ctx)
    echo(queries.dump_declarations(env))


@app.command(Command.LIST.value)
def list_command(
    ctx: typer.Context,
    classes: bool = typer.Option(False, "--class", help="Include classes."),
    modules: bool = typer.Option(False, "--module", help="Include modules."),
    interfaces: bool = typer.Option(False, "--interface", help="Include interfaces."),
):
    """
    List declared type names, sorted. Without filters every kind is listed.
    """
    kinds = []
    if classes:
        kinds.append(DeclarationKind.CLASS)
    if modules:
        kinds.append(DeclarationKind.MODULE)
    if interfaces:
        kinds.append(DeclarationKind.INTERFACE)

    env = _load(ctx)
    _emit(queries.list_declarations(env, kinds))


@app.command(Command.ANCESTORS.value)
def ancestors(
    ctx: typer.Context,
    type_name: str = typer.Argument(..., metavar="TYPE"),
    instance: bool = typer.Option(True, "--instance/--singleton", help="Instance (default) or singleton ancestors."),
):
    """
    Print the linearized ancestor chain of a class or module, root first.
    """
    env = _load(ctx)
    _emit(queries.ancestors(env, type_name, _kind(instance)))


@app.command(Command.METHODS.value)
def methods(
    ctx: typer.Context,
    type_name: str = typer.Argument(..., metavar="TYPE"),
    instance: bool = typer.Option(True, "--instance/--singleton", help="Instance (default) or singleton methods."),
    inherit: bool = typer.Option(True, "--inherit/--no-inherit", help="Include inherited methods (default)."),
):
    """
    List the methods of a class or module with their accessibility.
    """
    env = _load(ctx)
    _emit(queries.methods(env, type_name, _kind(instance), inherit=inherit))


# Options must precede TYPE so operator names like -@ stay positional
@app.command(Command.METHOD.value, context_settings={"allow_interspersed_args": False})
def method(
    ctx: typer.Context,
    args: Optional[List[str]] = typer.Argument(None, metavar="TYPE METHOD"),
    instance: bool = typer.Option(True, "--instance/--singleton", help="Instance (default) or singleton method."),
):
    """
    Show where a method is defined, its accessibility and its overloads.

    Options go before TYPE; everything after it, dashes included, is read
    as a name. -- also ends the options.
    """
    args = args or []
    try:
        queries.check_method_args(args)
    except ReportableError as e:
        echo(str(e))
        return

    env = _load(ctx)
    _emit(queries.method_detail(env, args, _kind(instance)))


@app.command(Command.VERSION.value)
def version():
    """
    Prints the current version of sigview.
    """
    echo(f"{CLIConfig.PROGRAM_NAME} {__version__}")


def run(argv: Optional[List[str]] = None) -> None:
    """Console entry point."""
    app(args=argv, prog_name=CLIConfig.PROGRAM_NAME)


if __name__ == "__main__":
    run()
