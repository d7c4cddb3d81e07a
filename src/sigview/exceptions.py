# Custom exceptions for sigview


class SigviewError(Exception):
    """Base exception for all application-specific errors."""
    pass


class ReportableError(SigviewError):
    """
    Resolution-layer error reported to the user as a single line.

    Commands catch these at their boundary, print the message and exit
    normally.
    """
    pass


class MalformedNameError(ReportableError):
    """Raised when a type name cannot be parsed."""
    def __init__(self, text: str, reason: str = ""):
        self.text = text
        self.reason = reason
        message = f"Malformed type name: {text}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class UnknownTypeError(ReportableError):
    """Raised when a name does not resolve to a class or module."""
    def __init__(self, name):
        self.name = name
        super().__init__(f"Cannot find class: {name}")


class UnknownMethodError(ReportableError):
    """Raised when a method is missing from a resolved method table."""
    def __init__(self, method_name: str):
        self.method_name = method_name
        super().__init__(f"Cannot find method: {method_name}")


class ArityError(ReportableError):
    """Raised when a command receives the wrong number of positional arguments."""
    def __init__(self, expected: int, given: int):
        self.expected = expected
        self.given = given
        words = {1: "one", 2: "two", 3: "three"}
        super().__init__(
            f"Expected {words.get(expected, expected)} arguments, but given {given}."
        )


class CyclicAncestorsError(ReportableError):
    """Raised when a class inherits from or includes itself transitively."""
    def __init__(self, chain: list):
        self.chain = chain
        path = " -> ".join(str(name) for name in chain)
        super().__init__(f"Cyclic ancestors: {path}")


class LoadError(SigviewError):
    """Raised when the environment cannot be loaded from its sources. Fatal."""
    pass


class LibraryNotFoundError(LoadError):
    """Raised when a requested signature library does not exist."""
    def __init__(self, library: str, root=None):
        self.library = library
        self.root = root
        if root is None:
            message = f"Cannot find library '{library}': standard library is disabled"
        else:
            message = f"Cannot find library '{library}' in {root}"
        super().__init__(message)


class SignatureFileError(LoadError):
    """Raised when a signature file is missing, unreadable or invalid."""
    def __init__(self, file_path, message: str):
        self.file_path = file_path
        self.message = message
        super().__init__(f"Failed to load {file_path}: {message}")


class DuplicatedDeclarationError(LoadError):
    """Raised when the same type is declared twice."""
    def __init__(self, name, first_source=None, second_source=None):
        self.name = name
        self.first_source = first_source
        self.second_source = second_source
        message = f"Duplicated declaration: {name}"
        if first_source or second_source:
            message += f" ({first_source or '?'} and {second_source or '?'})"
        super().__init__(message)


class InvalidTypeApplicationError(ReportableError):
    """Raised when a generic type is given the wrong number of type arguments."""
    def __init__(self, name, expected: int, given: int):
        self.name = name
        self.expected = expected
        self.given = given
        super().__init__(
            f"Invalid type application: {name} expects {expected} type arguments, but given {given}"
        )
