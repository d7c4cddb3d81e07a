"""
Environment loading from signature sources.

Sources are the bundled core signatures, named libraries under the
standard library root, and user-supplied files or directories.
"""

import json
from pathlib import Path
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, ValidationError

from sigview.logging_config import logger
from .declarations import Declaration, parse_declarations
from .environment import Environment
from .exceptions import LibraryNotFoundError, LoadError, SignatureFileError

STDLIB_ROOT = Path(__file__).parent / "signatures"
CORE_LIBRARY = "core"
SIGNATURE_SUFFIX = ".json"


class LoaderOptions(BaseModel):
    """
    Immutable description of which sources to load.

    Built once per invocation from configuration and command-line flags.
    """
    model_config = ConfigDict(frozen=True)

    libraries: Tuple[str, ...] = ()
    paths: Tuple[Path, ...] = ()
    no_stdlib: bool = False

    def add_library(self, name: str) -> "LoaderOptions":
        return self.model_copy(update={"libraries": self.libraries + (name,)})

    def add_path(self, path: Path) -> "LoaderOptions":
        return self.model_copy(update={"paths": self.paths + (Path(path),)})

    def disable_standard_library(self) -> "LoaderOptions":
        return self.model_copy(update={"no_stdlib": True})


class EnvironmentLoader:
    """
    Loads declarations described by LoaderOptions into an Environment.

    Loading is all-or-nothing: the first failure raises LoadError and the
    environment must be discarded.
    """

    def __init__(self, options: Optional[LoaderOptions] = None, stdlib_root: Optional[Path] = STDLIB_ROOT):
        """
        Args:
            options: Sources to load (defaults to core signatures only)
            stdlib_root: Directory holding ``core/`` and named libraries
        """
        self.options = options or LoaderOptions()
        self.stdlib_root = None if self.options.no_stdlib else stdlib_root

    def sources(self) -> List[Path]:
        """
        Resolve the options into the ordered list of signature files.

        Raises:
            LoadError: If a library or path does not exist
        """
        files: List[Path] = []

        if self.stdlib_root is not None:
            core = self.stdlib_root / CORE_LIBRARY
            if core.is_dir():
                files.extend(self._files_in(core))

        for library in self.options.libraries:
            if self.stdlib_root is None:
                raise LibraryNotFoundError(library)
            library_dir = self.stdlib_root / library
            if not library_dir.is_dir():
                raise LibraryNotFoundError(library, self.stdlib_root)
            files.extend(self._files_in(library_dir))

        for path in self.options.paths:
            if path.is_dir():
                files.extend(self._files_in(path))
            elif path.is_file():
                files.append(path)
            else:
                raise SignatureFileError(path, "no such file or directory")

        return files

    def load(self, env: Environment) -> Environment:
        """
        Populate env with every declaration from the configured sources.

        Raises:
            LoadError: If any source is missing, invalid or conflicts with
                an already loaded declaration
        """
        files = self.sources()
        for file_path in files:
            for decl in self.read_file(file_path):
                env.insert(decl)

        logger.info(f"Loaded {len(env)} type declarations from {len(files)} files")
        return env

    def read_file(self, file_path: Path) -> List[Declaration]:
        logger.debug(f"Reading signatures from {file_path}")
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except OSError as e:
            raise SignatureFileError(file_path, e.strerror or str(e)) from e
        except json.JSONDecodeError as e:
            raise SignatureFileError(file_path, f"invalid JSON: {e}") from e

        try:
            declarations = parse_declarations(data)
        except ValidationError as e:
            first = e.errors()[0]
            where = ".".join(str(part) for part in first["loc"])
            raise SignatureFileError(file_path, f"{where}: {first['msg']}") from e

        return [decl.model_copy(update={"location": str(file_path)}) for decl in declarations]

    @staticmethod
    def _files_in(directory: Path) -> List[Path]:
        return sorted(p for p in directory.rglob(f"*{SIGNATURE_SUFFIX}") if p.is_file())


def load_environment(options: Optional[LoaderOptions] = None) -> Environment:
    """Build a fresh Environment from options."""
    return EnvironmentLoader(options).load(Environment())


__all__ = [
    "LoaderOptions",
    "EnvironmentLoader",
    "load_environment",
    "LoadError",
    "STDLIB_ROOT",
]
