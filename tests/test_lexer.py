## snx — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from snx.types import Int, Float, Bool, Str
from snx.lexer import tokenize
from snx.errors import SnxSyntaxError, SnxNameError, SnxTypeError, SnxRuntimeError

import pytest


def values(text, **kw):
    return [t.value for t in tokenize(text, **kw)]


def test_tokenize_literals_and_operators():
    tokens = tokenize('1 + 2.5 * "x" == true')
    assert [t.type for t in tokens] == ['INT', 'OPERATOR', 'FLOAT', 'OPERATOR', 'STRING', 'OPERATOR', 'BOOL']
    assert values('1 + 2.5 * "x" == true') == [Int(1), '+', Float(2.5), '*', Str("x"), '==', Bool(True)]

def test_tokenize_two_character_operators_win_over_prefixes():
    ops = [t.value for t in tokenize('1 <= 2 && 3 != 4 || !false') if t.type == 'OPERATOR']
    assert ops == ['<=', '&&', '!=', '||', '!']

def test_tokenize_columns_are_recorded():
    assert [t.column for t in tokenize('10 +  x', resolve={'x': Int(1)}.get)] == [1, 4, 7]


def test_unary_minus_folds_at_expression_start():
    assert values('-3 * 2') == [Int(-3), '*', Int(2)]

def test_unary_sign_folds_after_operator_and_parenthesis():
    assert values('4 * -2') == [Int(4), '*', Int(-2)]
    assert values('(-1.5)') == ['(', Float(-1.5), ')']
    assert values('+7') == [Int(7)]

def test_minus_after_operand_is_binary():
    assert values('2 - 3') == [Int(2), '-', Int(3)]
    assert values('2 -3') == [Int(2), '-', Int(3)]

def test_sign_separated_by_space_stays_an_operator():
    assert values('5 * - 2') == [Int(5), '*', '-', Int(2)]


def test_string_escapes_are_decoded():
    assert values(r'"a\"b\\c"') == [Str('a"b\\c')]

def test_string_keeps_operator_characters():
    assert values('"1 + (2)"') == [Str("1 + (2)")]

def test_unterminated_string_is_a_syntax_error():
    with pytest.raises(SnxSyntaxError, match="Unterminated string"):
        tokenize('"open')

def test_invalid_character_is_a_syntax_error():
    with pytest.raises(SnxSyntaxError, match="Invalid character '@'"):
        tokenize('1 @ 2')

def test_single_equals_is_not_an_operator():
    with pytest.raises(SnxSyntaxError):
        tokenize('1 = 2')


def test_malformed_number():
    with pytest.raises(SnxSyntaxError, match="Malformed number"):
        tokenize('1.2.3')

def test_integer_literal_out_of_range():
    with pytest.raises(SnxSyntaxError, match="out of range"):
        tokenize('9223372036854775808')
    assert values('-9223372036854775808') == [Int(-2**63)]


def test_identifier_without_resolver_is_unknown():
    with pytest.raises(SnxSyntaxError, match="Unknown identifier 'foo'"):
        tokenize('foo + 1')

def test_identifier_is_replaced_by_its_value():
    assert values('x + y', resolve={'x': Int(2), 'y': Str("a")}.get) == [Int(2), '+', Str("a")]

def test_undefined_identifier_with_resolver():
    with pytest.raises(SnxNameError, match="Undefined variable 'nope'"):
        tokenize('nope', resolve={}.get)

def test_booleans_never_go_through_the_resolver():
    def resolve(name):
        raise AssertionError(name)
    assert values('true || false', resolve=resolve) == [Bool(True), '||', Bool(False)]


def test_unary_sign_applies_to_identifier_value():
    resolve = {'x': Int(5), 'f': Float(2.5)}.get
    assert values('-x', resolve=resolve) == [Int(-5)]
    assert values('3 * -x', resolve=resolve) == [Int(3), '*', Int(-5)]
    assert values('(-f)', resolve=resolve) == ['(', Float(-2.5), ')']
    assert values('+x', resolve=resolve) == [Int(5)]

def test_minus_between_identifiers_is_binary():
    assert values('x -x', resolve={'x': Int(5)}.get) == [Int(5), '-', Int(5)]
    assert values('- x', resolve={'x': Int(5)}.get) == ['-', Int(5)]

def test_unary_sign_coerces_numeric_strings():
    assert values('-s', resolve={'s': Str("4")}.get) == [Int(-4)]

def test_unary_sign_on_non_numeric_value_is_a_type_error():
    with pytest.raises(SnxTypeError, match="Unary '-' requires a numerical operand, found string"):
        tokenize('-s', resolve={'s': Str("abc")}.get)
    with pytest.raises(SnxTypeError, match="found bool"):
        tokenize('-true')

def test_unary_sign_on_identifier_checks_int_range():
    with pytest.raises(SnxRuntimeError, match="Integer overflow"):
        tokenize('-m', resolve={'m': Int(-2**63)}.get)
