## snx — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from snx.types import Int, Float, Bool, Str, Error
from snx.lexer import tokenize
from snx.evaluator import evaluate, to_postfix
from snx.errors import SnxNameError

import pytest


@pytest.mark.parametrize("text, expected", [
    ("2 + 3 * 4", Int(14)),
    ("(2 + 3) * 4", Int(20)),
    ("10 / 4", Float(2.5)),
    ("10 / 5", Int(2)),
    ('"foo" + 1', Str("foo1")),
    ('"3" + 4', Int(7)),
    ("true && false", Bool(False)),
    ("1 < 2 && 2 < 3", Bool(True)),
    ("10 - 2 - 3", Int(5)),
    ("2 * 3 % 4", Int(2)),
    ("-2 * -3", Int(6)),
    ("1 + 2 == 3", Bool(True)),
    ("false || 1 > 0 && 2 > 3", Bool(False)),
    ("!true", Bool(False)),
    ("!!true", Bool(True)),
    ("!(1 > 2) && true", Bool(True)),
    ("0.1 + 0.2", Float(0.1 + 0.2)),
])
def test_evaluate(text, expected):
    assert evaluate(text) == expected


def test_postfix_order():
    assert [repr(t) for t in to_postfix(tokenize('1 + 2 * 3'))] == ['1', '2', '3', '*', '+']
    assert [repr(t) for t in to_postfix(tokenize('(1 + 2) * 3'))] == ['1', '2', '+', '3', '*']
    assert [repr(t) for t in to_postfix(tokenize('!a == b', resolve={'a': Bool(True), 'b': Bool(False)}.get))] \
        == ['true', '!', 'false', '==']


@pytest.mark.parametrize("text, fragment", [
    ("7 % 0", "Modulo by zero"),
    ("1 / 0", "Division by zero"),
    ("(1 + 2", "Mismatched parentheses"),
    ("1 + 2)", "Mismatched parentheses"),
    ("1 +", "Insufficient operands for '+'"),
    ("1 2", "Invalid expression"),
    ("", "Invalid expression"),
    ("!1", "Operator '!' requires a boolean operand"),
    ('"a" < 1', "requires numerical operands"),
    ("unknown", "Unknown identifier 'unknown'"),
])
def test_evaluate_errors_are_values(text, fragment):
    result = evaluate(text)
    assert isinstance(result, Error)
    assert fragment in result.message

def test_error_message_names_the_kind():
    assert evaluate("1 / 0") == Error("Runtime Error: Division by zero")
    assert evaluate("1 +").message.startswith("Syntax Error:")


def test_evaluate_resolves_identifiers():
    resolve = {'x': Int(4), 'name': Str("ann")}.get
    assert evaluate("x * 2 + 1", resolve=resolve) == Int(9)
    assert evaluate('"hi " + name', resolve=resolve) == Str("hi ann")

def test_evaluate_is_deterministic():
    assert evaluate("3 * (4 + 5) / 2") == evaluate("3 * (4 + 5) / 2") == Float(13.5)

def test_error_value_keeps_the_raised_error():
    result = evaluate("missing", resolve={}.get)
    assert isinstance(result.cause, SnxNameError)
    assert result == Error("Name Error: Undefined variable 'missing'")

def test_negated_identifier():
    assert evaluate("-x * 2 + -y", resolve={'x': Int(5), 'y': Float(0.5)}.get) == Float(-10.5)
