## snx — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from typing import Literal
from dataclasses import dataclass, field


INT64_MIN, INT64_MAX = -2**63, 2**63 - 1


# Runtime values are a closed set of frozen variants; operators match on them exhaustively.
@dataclass(frozen=True)
class Int:
    value: int

    @property
    def text(self) -> str:
        return str(self.value)

    literal = text


@dataclass(frozen=True)
class Float:
    value: float

    @property
    def text(self) -> str:
        return repr(self.value)

    literal = text


@dataclass(frozen=True)
class Bool:
    value: bool

    @property
    def text(self) -> str:
        return 'true' if self.value else 'false'

    literal = text


@dataclass(frozen=True)
class Str:
    value: str

    @property
    def text(self) -> str:
        return self.value

    @property
    def literal(self) -> str:
        return '"' + self.value.replace('\\', '\\\\').replace('"', '\\"') + '"'


@dataclass(frozen=True)
class Error:
    """Failure captured as a value, so callers decide whether to continue."""
    message: str
    cause: Exception | None = field(default=None, compare=False, repr=False)

    @property
    def text(self) -> str:
        return self.message

    literal = text


Value = Int | Float | Bool | Str | Error


def type_name(value: Value) -> str:
    return {Int: 'int', Float: 'float', Bool: 'bool', Str: 'string', Error: 'error'}[type(value)]


TokenType = Literal['INT', 'FLOAT', 'BOOL', 'STRING', 'OPERATOR', 'LPAR', 'RPAR']
LITERAL_TOKENS = ('INT', 'FLOAT', 'BOOL', 'STRING')


@dataclass(frozen=True)
class Token:
    type: TokenType
    value: Value | str            # Value for literals, symbol text for operators/parentheses
    column: int = 0

    @property
    def is_literal(self) -> bool:
        return self.type in LITERAL_TOKENS

    def __repr__(self):
        return self.value.literal if self.is_literal else str(self.value)
