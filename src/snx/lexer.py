## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import re
import functools
from typing import Callable

import lark

from .types import Token, Value, Int, Float, Bool, Str, Error, type_name, INT64_MIN, INT64_MAX
from .errors import SnxSyntaxError, SnxNameError, SnxTypeError, SnxRuntimeError, SnxInternalError
from .operators import coerce


GRAMMAR = r"""start: (NUMBER | STRING | WORD | OPERATOR | LPAR | RPAR)*

// TOKENS
STRING: /"(?:[^"\\]|\\.)*"/
NUMBER: /[0-9.]+/
WORD: /[A-Za-z_][A-Za-z0-9_]*/
OPERATOR: /==|!=|<=|>=|&&|\|\||[-+*\/%<>!]/
LPAR: "("
RPAR: ")"

// WHITESPACE
%import common.WS
%ignore WS
"""

Resolver = Callable[[str], Value | None]

_ESCAPE = re.compile(r'\\(.)', re.S)


@functools.cache
def _lark() -> lark.Lark:
    return lark.Lark(GRAMMAR, start='start', parser='lalr', lexer='basic')


def _raw_tokens(text: str) -> list[lark.Token]:
    try:
        tree = _lark().parse(text)
    except lark.exceptions.UnexpectedCharacters as exc:
        if exc.char == '"':
            raise SnxSyntaxError(f"Unterminated string starting at column {exc.column}") from None
        raise SnxSyntaxError(f"Invalid character '{exc.char}' at column {exc.column}") from None
    return list(tree.children)


def _number_token(text: str, column: int) -> Token:
    try:
        if '.' in text:
            return Token('FLOAT', Float(float(text)), column)
        value = int(text)
    except ValueError:
        raise SnxSyntaxError(f"Malformed number '{text}' at column {column}") from None
    if not INT64_MIN <= value <= INT64_MAX:
        raise SnxSyntaxError(f"Integer literal '{text}' out of range")
    return Token('INT', Int(value), column)


def value_token(value: Value, column: int = 0) -> Token:
    match value:
        case Bool(): return Token('BOOL', value, column)
        case Int(): return Token('INT', value, column)
        case Float(): return Token('FLOAT', value, column)
        case Str(): return Token('STRING', value, column)
        case Error():
            raise SnxInternalError(f"Cannot use error value as a literal: {value.message}")


def _word_token(name: str, column: int, resolve: Resolver | None) -> Token:
    if name in ('true', 'false'):
        return Token('BOOL', Bool(name == 'true'), column)
    if resolve is None:
        raise SnxSyntaxError(f"Unknown identifier '{name}'")
    if (value := resolve(name)) is None:
        raise SnxNameError(f"Undefined variable '{name}'")
    return value_token(value, column)


def _is_unary_position(tokens: list[Token]) -> bool:
    return not tokens or tokens[-1].type in ('OPERATOR', 'LPAR')

def _is_sign(tok: lark.Token, following: lark.Token | None, tokens: list[Token]) -> bool:
    """A `+`/`-` in prefix position that touches the number or identifier after it."""
    return tok.type == 'OPERATOR' and tok.value in ('+', '-') and _is_unary_position(tokens) \
        and following is not None and following.type in ('NUMBER', 'WORD') and following.start_pos == tok.end_pos


def _signed_token(sign: str, tok: Token, column: int) -> Token:
    match coerce(tok.value):
        case Int(v):
            v = -v if sign == '-' else v
            if not INT64_MIN <= v <= INT64_MAX:
                raise SnxRuntimeError("Integer overflow")
            return Token('INT', Int(v), column)
        case Float(v):
            return Token('FLOAT', Float(-v if sign == '-' else v), column)
        case other:
            raise SnxTypeError(f"Unary '{sign}' requires a numerical operand, found {type_name(other)}")


def tokenize(text: str, resolve: Resolver | None = None) -> list[Token]:
    """Split one expression into tokens, folding unambiguous unary signs into numbers.

    Bare identifiers other than `true`/`false` are looked up through `resolve` and
    become literal tokens of their current value; without a resolver they are errors.
    A sign touching an identifier applies to its value, so `-x` reads like `-5`.
    """
    raw = _raw_tokens(text)
    tokens: list[Token] = []
    i = 0
    while i < len(raw):
        tok = raw[i]
        following = raw[i+1] if i + 1 < len(raw) else None
        match tok.type:
            case 'OPERATOR' if _is_sign(tok, following, tokens) and following.type == 'NUMBER':
                tokens.append(_number_token(tok.value + following.value, tok.column))
                i += 1
            case 'OPERATOR' if _is_sign(tok, following, tokens):
                value = _word_token(following.value, following.column, resolve)
                tokens.append(_signed_token(tok.value, value, tok.column))
                i += 1
            case 'OPERATOR':
                tokens.append(Token('OPERATOR', tok.value, tok.column))
            case 'NUMBER':
                tokens.append(_number_token(tok.value, tok.column))
            case 'STRING':
                tokens.append(Token('STRING', Str(_ESCAPE.sub(r'\1', tok.value[1:-1])), tok.column))
            case 'WORD':
                tokens.append(_word_token(tok.value, tok.column, resolve))
            case 'LPAR' | 'RPAR':
                tokens.append(Token(tok.type, tok.value, tok.column))
            case _:
                raise SnxInternalError(f"Unexpected token type {tok.type}")
        i += 1
    return tokens
