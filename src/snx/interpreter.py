## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import re
import sys
import subprocess
from typing import Callable, TextIO
from dataclasses import dataclass

from .types import Value, Int, Bool, Str, Error, type_name
from .errors import SnxError, SnxSyntaxError, SnxNameError, SnxCompilationError, SnxRuntimeError, \
                    SnxTypeError, SnxJumpError, SnxReturnError
from .grammar import Grammar, Style, KEYWORDS, NAME, grammar_for, split_arguments
from .listing import Listing
from .symbols import SymbolTable, FunctionTable
from .evaluator import evaluate
from .interpolate import interpolate
from .formatting import format_banner, format_source_context, format_trace


_PARAM = re.compile(NAME)


def read_line() -> str:
    """Read one line of external input; end of input reads as an empty line."""
    line = sys.stdin.readline()
    return line.rstrip('\r\n')

def run_shell(command: str) -> int:
    return subprocess.run(command, shell=True).returncode


@dataclass(frozen=True)
class Frame:
    address: int                  # line index to resume at after the call
    body_depth: int               # scope depth the function body runs at
    caller_depth: int             # scope depth at the call site, restored on return


class Interpreter:
    """Program-counter driven statement engine over a `Listing`.

    All mutable state of a running script lives here: program counter, scope depth,
    the return-address stack (as frames), variables, functions and the block style.
    """

    def __init__(self, listing: Listing, *, style: Style = 'end', out: TextIO | None = None,
                 err: TextIO | None = None, input_provider: Callable[[], str] | None = None,
                 shell: Callable[[str], int] | None = None, verbosity: int = 0):
        self.listing = listing
        self.grammar: Grammar = grammar_for(style)
        self.out = sys.stdout if out is None else out
        self.err = sys.stderr if err is None else err
        self.input_provider = input_provider or read_line
        self.shell = shell or run_shell
        self.verbosity = verbosity

        self.pc = 1
        self.scope_depth = 0
        self.frames: list[Frame] = []
        self.variables = SymbolTable()
        self.functions = FunctionTable()

        self.halted = False
        self.steps = 0
        self.errors = 0

    @property
    def style(self) -> str:
        return self.grammar.style

    @property
    def call_depth(self) -> int:
        return len(self.frames)

    @property
    def return_addresses(self) -> list[int]:
        return [f.address for f in self.frames]

    # Execution ───────────────────────────────────────────────────────────────────────────────
    def run(self) -> None:
        """Execute until `END`, the end of the listing, or a fatal error (which propagates)."""
        while not self.halted and self.pc < self.listing.end:
            self.step()

    def step(self) -> None:
        line_no, line = self.pc, self.listing[self.pc]
        statement = self.grammar.classify(line)
        self.steps += 1
        if self.verbosity > 0:
            extra = (self.scope_depth, self.call_depth) if self.verbosity > 1 else (None, None)
            print(format_trace(self.steps, line_no, line, *extra), file=self.out)

        if statement is None:
            self.pc += 1
            return
        try:
            getattr(self, f"_do_{statement.kind}")(*statement.groups)
        except SnxError as exc:
            if exc.line is None: exc.line, exc.source = line_no, line
            if exc.fatal: raise
            self.report(exc)
            self.pc = line_no + 1

    def jump(self, target: int) -> None:
        if not self.listing.is_address(target):
            raise SnxJumpError(f"Jump to invalid line {target}.")
        self.pc = target

    def evaluate(self, expression: str) -> Value:
        """Interpolate `${name}` forms, then evaluate with identifiers resolved against live variables."""
        try:
            text = interpolate(expression, self.variables.lookup)
        except SnxError as exc:
            return Error(str(exc), exc)
        return evaluate(text, resolve=self._resolve)

    def _resolve(self, name: str) -> Value | None:
        if name == 'input':
            return Str(self.input_provider())
        return self.variables.lookup(name)

    def _value_or_raise(self, expression: str) -> Value:
        if isinstance(value := self.evaluate(expression), Error):
            # Re-raise the evaluator's own error so reports keep its kind.
            if isinstance(value.cause, SnxError): raise value.cause
            raise SnxRuntimeError(value.message)
        return value

    # Reporting ───────────────────────────────────────────────────────────────────────────────
    def report(self, exc: SnxError) -> None:
        self.errors += 1
        line = exc.line if exc.line is not None else self.pc
        print(f"{format_banner(exc.kind.upper() + ' ERROR.')} Line {line}: {exc.message}", file=self.err)
        if 1 <= line <= len(self.listing):
            print(format_source_context(self.listing.lines, line, self.listing.filename, radius=1), file=self.err)

    def warn(self, message: str) -> None:
        print(f"{format_banner('WARNING.')} Line {self.pc}: {message}", file=self.err)

    # Scopes ──────────────────────────────────────────────────────────────────────────────────
    def open_scope(self) -> None:
        self.scope_depth += 1

    def close_scope(self) -> None:
        self.variables.teardown(self.scope_depth)
        self.scope_depth -= 1

    def _return(self) -> None:
        frame = self.frames.pop()
        # Nested calls share the caller's scope; only the outermost return drops the call scope.
        while self.scope_depth > frame.caller_depth:
            self.close_scope()
        self.jump(frame.address)

    # Statements ──────────────────────────────────────────────────────────────────────────────
    def _do_style(self, name: str) -> None:
        self.pc += 1
        self.grammar = grammar_for(name)

    def _do_comment(self) -> None:
        self.pc += 1

    _do_blank = _do_comment

    def _do_terminate(self) -> None:
        self.halted = True

    def _do_close(self) -> None:
        if self.frames and self.scope_depth == self.frames[-1].body_depth:
            self._return()
        elif self.scope_depth > 0:
            self.close_scope()
            self.pc += 1
        else:
            raise SnxSyntaxError("Unexpected closing brace '}' or 'end'.")

    def _do_return(self) -> None:
        if not self.frames:
            raise SnxReturnError("'return' called outside of a function.")
        self._return()

    def _do_return_expr(self, expression: str) -> None:
        self.warn(f"Returning a value is not supported; `return {expression}` is ignored.")
        self.pc += 1

    def _do_func(self, name: str, params: str) -> None:
        names = split_arguments(params)
        try:
            if bad := [p for p in names if not _PARAM.fullmatch(p) or p in KEYWORDS]:
                raise SnxSyntaxError(f"Invalid parameter name(s) for function '{name}': {', '.join(bad)}")
            self.functions.register(name, names, self.pc, self.scope_depth)
        except (SnxSyntaxError, SnxCompilationError) as exc:
            exc.line, exc.source = self.pc, self.listing[self.pc]
            self.report(exc)
        # The body only ever runs through a call, so straight-line execution skips it.
        end = self.listing.find_block_end(self.pc + 1, self.grammar)
        self.jump(end + 1)

    def _do_call(self, name: str, args: str) -> None:
        func = self.functions.get(name)
        arguments = split_arguments(args)
        values = [self.evaluate(a) if a else None for a in arguments[:len(func.params)]]
        if len(arguments) > len(func.params):
            self.warn(f"Function '{name}' takes {len(func.params)} argument(s), {len(arguments)} given; extras ignored.")

        caller_depth = self.scope_depth
        if not self.frames:
            self.open_scope()
        self.frames.append(Frame(self.pc + 1, self.scope_depth, caller_depth))

        for i, param in enumerate(func.params):
            value = values[i] if i < len(values) else None
            if value is None:
                self.warn(f"Missing argument for parameter '{param}'. Defaulting to 0.")
                value = Int(0)
            elif isinstance(value, Error):
                self.warn(f"Failed to evaluate argument for parameter '{param}' ({value.message}). Defaulting to 0.")
                value = Int(0)
            try:
                self.variables.declare(param, value, self.scope_depth)
            except SnxCompilationError:
                self.report(SnxRuntimeError(f"Function parameter '{param}' conflicts with existing variable in the current scope.",
                                            line=self.pc, source=self.listing[self.pc]))
        self.jump(func.entry + 1)

    def _do_goto(self, target: str) -> None:
        self.jump(int(target))

    def _do_if(self, condition: str) -> None:
        match self._value_or_raise(condition):
            case Bool(True):
                self.open_scope()
                self.pc += 1
                return
            case Bool(False):
                pass
            case other:
                self.report(SnxTypeError(f"Condition must be a boolean, got {type_name(other)}; treating as false.",
                                         line=self.pc, source=self.listing[self.pc]))
        end = self.listing.find_block_end(self.pc + 1, self.grammar)
        self.jump(end + 1)

    def _do_declare(self, name: str, expression: str) -> None:
        if name in KEYWORDS:
            raise SnxSyntaxError(f"Cannot use reserved keyword '{name}' as a variable name.")
        if name in self.variables:
            raise SnxCompilationError(f"Cannot redeclare variable '{name}'. A variable with that name already exists.")
        self.variables.declare(name, self._value_or_raise(expression), self.scope_depth)
        self.pc += 1

    def _do_assign(self, name: str, expression: str) -> None:
        if name not in self.variables:
            raise SnxNameError(f"Variable '{name}' used before declaration.")
        self.variables.assign(name, self._value_or_raise(expression))
        self.pc += 1

    def _do_print(self, command: str, expression: str) -> None:
        value = self._value_or_raise(expression)
        self.out.write(value.text + ('\n' if command == 'println' else ''))
        self.pc += 1

    def _do_exec(self, expression: str) -> None:
        command = self._value_or_raise(expression).text
        if hasattr(self.out, 'flush'): self.out.flush()
        self.shell(command)
        self.pc += 1
