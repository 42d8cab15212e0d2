## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from dataclasses import dataclass, field

from .types import Value
from .errors import SnxNameError, SnxCompilationError


@dataclass
class Variable:
    name: str
    value: Value
    depth: int                    # scope depth at which the binding was declared


@dataclass
class SymbolTable:
    """Flat variable store; each binding remembers the scope depth that owns it."""
    bindings: dict[str, Variable] = field(default_factory=dict)

    def __contains__(self, name: str) -> bool:
        return name in self.bindings

    def __len__(self) -> int:
        return len(self.bindings)

    def declare(self, name: str, value: Value, depth: int) -> Variable:
        if name in self.bindings:
            raise SnxCompilationError(f"Cannot redeclare variable '{name}'. A variable with that name already exists.")
        self.bindings[name] = var = Variable(name, value, depth)
        return var

    def assign(self, name: str, value: Value) -> Variable:
        if (var := self.bindings.get(name)) is None:
            raise SnxNameError(f"Variable '{name}' used before declaration.")
        var.value = value
        return var

    def lookup(self, name: str) -> Value | None:
        var = self.bindings.get(name)
        return None if var is None else var.value

    def teardown(self, depth: int) -> list[str]:
        """Erase every binding declared at `depth` or deeper, returning the erased names."""
        erased = [name for name, var in self.bindings.items() if var.depth >= depth]
        for name in erased:
            del self.bindings[name]
        return erased


@dataclass(frozen=True)
class Function:
    name: str
    params: tuple[str, ...]
    entry: int                    # line index of the declaration itself


@dataclass
class FunctionTable:
    functions: dict[str, Function] = field(default_factory=dict)

    def __contains__(self, name: str) -> bool:
        return name in self.functions

    def register(self, name: str, params: list[str] | tuple[str, ...], entry: int, depth: int) -> Function:
        if depth != 0:
            raise SnxCompilationError(f"Function '{name}' declared at scope depth {depth}; functions are only allowed in the global scope.")
        if (existing := self.functions.get(name)) is not None:
            # Jumping back over a declaration re-executes it; only a second definition is an error.
            if existing.entry == entry: return existing
            raise SnxCompilationError(f"Function '{name}' is already defined on line {self.functions[name].entry}.")
        self.functions[name] = func = Function(name, tuple(params), entry)
        return func

    def get(self, name: str) -> Function:
        if (func := self.functions.get(name)) is None:
            raise SnxNameError(f"Function '{name}' is not defined.")
        return func
