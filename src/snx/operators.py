## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import re
from typing import Callable

from .types import Value, Int, Float, Bool, Str, Error, type_name, INT64_MIN, INT64_MAX
from .errors import SnxTypeError, SnxRuntimeError, SnxInternalError


_NUMERIC_TEXT = re.compile(r'[+-]?(?:\d+\.?\d*|\.\d+)')


def coerce(value: Value) -> Value:
    """Reinterpret a string whose entire content is a numeric literal as that number.

    This is the only implicit string-to-number conversion; everything else is returned as-is.
    """
    if isinstance(value, Str) and _NUMERIC_TEXT.fullmatch(value.value):
        text = value.value
        return Float(float(text)) if '.' in text else Int(int(text))
    return value


def _checked_int(n: int) -> Int:
    if not INT64_MIN <= n <= INT64_MAX:
        raise SnxRuntimeError("Integer overflow")
    return Int(n)


def _numeric_result(lhs: Value, rhs: Value, result: float) -> Value:
    # Float when an original operand was Float, or when the result is not integral.
    if isinstance(lhs, Float) or isinstance(rhs, Float) or not result.is_integer():
        return Float(result)
    return _checked_int(int(result))


def _arithmetic(op: str, lhs: Value, rhs: Value, int_fn: Callable, float_fn: Callable) -> Value:
    match coerce(lhs), coerce(rhs):
        case Int(l), Int(r):
            return int_fn(l, r)
        case (Int(l) | Float(l)), (Int(r) | Float(r)):
            return _numeric_result(lhs, rhs, float_fn(float(l), float(r)))
        case l, r:
            raise SnxTypeError(f"Operator '{op}' requires numerical operands, found {type_name(l)} and {type_name(r)}")


## ARITHMETIC
def op_add(lhs: Value, rhs: Value) -> Value:
    if isinstance(lhs, Str) and isinstance(rhs, Str):
        return Str(lhs.value + rhs.value)
    match coerce(lhs), coerce(rhs):
        case Int(l), Int(r):
            return _checked_int(l + r)
        case (Int(l) | Float(l)), (Int(r) | Float(r)):
            return _numeric_result(lhs, rhs, float(l) + float(r))
        # Non-numeric string content falls back to concatenating the textual forms.
        case [Str() as l, (Int() | Float() | Bool()) as r] | [(Int() | Float() | Bool()) as l, Str() as r]:
            return Str(l.text + r.text)
        case l, r:
            raise SnxTypeError(f"Operator '+' not supported for {type_name(l)} and {type_name(r)}")

def op_sub(lhs: Value, rhs: Value) -> Value:
    return _arithmetic('-', lhs, rhs, lambda l, r: _checked_int(l - r), lambda l, r: l - r)

def op_mul(lhs: Value, rhs: Value) -> Value:
    return _arithmetic('*', lhs, rhs, lambda l, r: _checked_int(l * r), lambda l, r: l * r)

def _int_div(l: int, r: int) -> Value:
    if r == 0: raise SnxRuntimeError("Division by zero")
    return _checked_int(l // r) if l % r == 0 else Float(l / r)

def _float_div(l: float, r: float) -> float:
    if r == 0: raise SnxRuntimeError("Division by zero")
    return l / r

def op_div(lhs: Value, rhs: Value) -> Value:
    return _arithmetic('/', lhs, rhs, _int_div, _float_div)

def op_rem(lhs: Value, rhs: Value) -> Value:
    match lhs, rhs:
        case Int(l), Int(r):
            if r == 0: raise SnxRuntimeError("Modulo by zero")
            # Truncated remainder: the sign follows the dividend.
            rem = abs(l) % abs(r)
            return Int(rem if l >= 0 else -rem)
        case _:
            raise SnxTypeError("Operator '%' requires integer operands")

## COMPARISON
def _equal(op: str, lhs: Value, rhs: Value) -> bool:
    match lhs, rhs:
        case Str(l), Str(r): return l == r
        case Bool(l), Bool(r): return l == r
        case (Int(l) | Float(l)), (Int(r) | Float(r)): return float(l) == float(r)
        case _:
            raise SnxTypeError(f"Cannot compare {type_name(lhs)} with {type_name(rhs)} using '{op}'")

def op_equal(lhs: Value, rhs: Value) -> Value: return Bool(_equal('==', lhs, rhs))
def op_differ(lhs: Value, rhs: Value) -> Value: return Bool(not _equal('!=', lhs, rhs))

def _ordered(op: str, lhs: Value, rhs: Value, cmp: Callable[[float, float], bool]) -> Value:
    match lhs, rhs:
        case (Int(l) | Float(l)), (Int(r) | Float(r)):
            return Bool(cmp(float(l), float(r)))
        case _:
            raise SnxTypeError(f"Operator '{op}' requires numerical operands")

def op_lt(lhs: Value, rhs: Value) -> Value: return _ordered('<', lhs, rhs, lambda l, r: l < r)
def op_gt(lhs: Value, rhs: Value) -> Value: return _ordered('>', lhs, rhs, lambda l, r: l > r)
def op_lte(lhs: Value, rhs: Value) -> Value: return _ordered('<=', lhs, rhs, lambda l, r: l <= r)
def op_gte(lhs: Value, rhs: Value) -> Value: return _ordered('>=', lhs, rhs, lambda l, r: l >= r)

## BOOLEAN LOGIC
def _logical(op: str, lhs: Value, rhs: Value) -> tuple[bool, bool]:
    match lhs, rhs:
        case Bool(l), Bool(r): return l, r
        case _:
            raise SnxTypeError(f"Operator '{op}' requires boolean operands")

def op_and(lhs: Value, rhs: Value) -> Value:
    l, r = _logical('&&', lhs, rhs)
    return Bool(l and r)

def op_or(lhs: Value, rhs: Value) -> Value:
    l, r = _logical('||', lhs, rhs)
    return Bool(l or r)

def op_not(operand: Value) -> Value:
    match operand:
        case Bool(v): return Bool(not v)
        case _:
            raise SnxTypeError("Operator '!' requires a boolean operand")


BINARY_OPERATORS: dict[str, Callable[[Value, Value], Value]] = {
    '+': op_add, '-': op_sub, '*': op_mul, '/': op_div, '%': op_rem,
    '==': op_equal, '!=': op_differ,
    '<': op_lt, '>': op_gt, '<=': op_lte, '>=': op_gte,
    '&&': op_and, '||': op_or,
}
UNARY_OPERATORS: dict[str, Callable[[Value], Value]] = {'!': op_not}


def apply_operator(symbol: str, *operands: Value) -> Value:
    if any(isinstance(v, Error) for v in operands):
        raise SnxInternalError(f"Error value reached operator '{symbol}'")
    if len(operands) == 1 and symbol in UNARY_OPERATORS:
        return UNARY_OPERATORS[symbol](*operands)
    if len(operands) == 2 and symbol in BINARY_OPERATORS:
        return BINARY_OPERATORS[symbol](*operands)
    raise SnxInternalError(f"Unknown operator '{symbol}'")
