## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘


class SnxError(Exception):
    kind = "Error"
    fatal = False

    def __init__(self, message: str = "", *, line: int | None = None, source: str | None = None):
        """Base class for all snx-raised errors."""
        super().__init__(message)
        self.message: str = message
        self.line: int | None = line
        self.source: str | None = source

    def __str__(self):
        return f"{self.kind} Error: {self.message}"

class SnxSyntaxError(SnxError):
    kind = "Syntax"

class SnxTypeError(SnxError, TypeError):
    kind = "Type"

class SnxNameError(SnxError, NameError):
    kind = "Name"

class SnxCompilationError(SnxError):
    """Illegal (re)declarations, found when a declaration line is executed."""
    kind = "Compilation"

class SnxRuntimeError(SnxError, RuntimeError):
    kind = "Runtime"

class SnxInternalError(SnxError, AssertionError):
    kind = "Internal"


class SnxJumpError(SnxRuntimeError):
    """A jump target outside the listing; further execution is meaningless."""
    fatal = True

class SnxReturnError(SnxRuntimeError):
    """A `return` or closing block with no active call to return from."""
    fatal = True
