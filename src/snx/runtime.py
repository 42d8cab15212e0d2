## snx — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from typing import Any, Callable, TextIO
from pathlib import Path

from .types import Token, Value, Int, Float, Bool, Str, Error
from .grammar import Style, grammar_for
from .lexer import tokenize as _tokenize
from .evaluator import evaluate as _evaluate, to_postfix
from .listing import Listing
from .interpreter import Interpreter


def to_value(x: Any) -> Value:
    """Convert a plain Python value into its runtime variant."""
    match x:
        case Int() | Float() | Bool() | Str() | Error(): return x
        case bool(): return Bool(x)
        case int(): return Int(x)
        case float(): return Float(x)
        case str(): return Str(x)
    raise TypeError(f"No runtime value for Python type {type(x).__name__}.")


def from_value(value: Value) -> Any:
    match value:
        case Error(message): raise ValueError(message)
        case Int(v) | Float(v) | Bool(v) | Str(v): return v


class Runtime:
    """Minimal runtime facade focused on embedding: evaluate expressions and run scripts."""

    def __init__(self, style: Style = 'end', out: TextIO | None = None, err: TextIO | None = None,
                 input_provider: Callable[[], str] | None = None, shell: Callable[[str], int] | None = None):
        grammar_for(style)
        self.style = style
        self.out, self.err = out, err
        self.input_provider = input_provider
        self.shell = shell

    # Expressions ─────────────────────────────────────────────────────────────────────────────
    def tokenize(self, text: str, variables: dict[str, Any] | None = None) -> list[Token]:
        return _tokenize(text, resolve=self._resolver(variables))

    def postfix(self, text: str, variables: dict[str, Any] | None = None) -> list[Token]:
        return to_postfix(self.tokenize(text, variables))

    def evaluate(self, text: str, variables: dict[str, Any] | None = None) -> Value:
        return _evaluate(text, resolve=self._resolver(variables))

    def _resolver(self, variables: dict[str, Any] | None):
        if variables is None: return None
        values = {k: to_value(v) for k, v in variables.items()}
        return values.get

    # Scripts ─────────────────────────────────────────────────────────────────────────────────
    def interpreter(self, source: str | Listing, filename: str | None = None, verbosity: int = 0) -> Interpreter:
        listing = source if isinstance(source, Listing) else Listing.from_source(source, filename=filename)
        return Interpreter(listing, style=self.style, out=self.out, err=self.err,
                           input_provider=self.input_provider, shell=self.shell, verbosity=verbosity)

    def run(self, source: str | Listing, filename: str | None = None, verbosity: int = 0,
            stats: dict | None = None) -> Interpreter:
        """Run a whole script and return the finished interpreter for inspection.

        Fatal errors propagate after the steps taken so far are added to `stats`.
        """
        interp = self.interpreter(source, filename=filename, verbosity=verbosity)
        try:
            interp.run()
        finally:
            if stats is not None:
                stats['steps'] = stats.get('steps', 0) + interp.steps
                stats['errors'] = stats.get('errors', 0) + interp.errors
        return interp

    def run_file(self, path: str | Path, verbosity: int = 0, stats: dict | None = None) -> Interpreter:
        return self.run(Listing.from_file(path), verbosity=verbosity, stats=stats)

    def is_error(self, value: Value) -> bool:
        return isinstance(value, Error)

    # Conversions ─────────────────────────────────────────────────────────────────────────────
    def to_value(self, x: Any) -> Value:
        return to_value(x)

    def from_value(self, value: Value) -> Any:
        return from_value(value)
