## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from .types import Token, Value, Error
from .errors import SnxError, SnxSyntaxError
from .lexer import tokenize, Resolver
from .operators import apply_operator, UNARY_OPERATORS


PRECEDENCE = {
    '||': 1,
    '&&': 2,
    '==': 3, '!=': 3,
    '<': 4, '>': 4, '<=': 4, '>=': 4,
    '+': 5, '-': 5,
    '*': 6, '/': 6, '%': 6,
    '!': 7,
}


def to_postfix(tokens: list[Token]) -> list[Token]:
    """Shunting-Yard: reorder infix tokens into postfix, dropping parentheses."""
    output: list[Token] = []
    operators: list[Token] = []

    for tok in tokens:
        match tok.type:
            case 'INT' | 'FLOAT' | 'BOOL' | 'STRING':
                output.append(tok)
            case 'LPAR':
                operators.append(tok)
            case 'RPAR':
                while operators and operators[-1].type != 'LPAR':
                    output.append(operators.pop())
                if not operators:
                    raise SnxSyntaxError("Mismatched parentheses")
                operators.pop()
            case 'OPERATOR':
                if tok.value not in PRECEDENCE:
                    raise SnxSyntaxError(f"Unknown operator '{tok.value}'")
                # Prefix operators have no left operand to reduce yet, so they never pop.
                if tok.value not in UNARY_OPERATORS:
                    while operators and operators[-1].type != 'LPAR' \
                            and PRECEDENCE[operators[-1].value] >= PRECEDENCE[tok.value]:
                        output.append(operators.pop())
                operators.append(tok)

    while operators:
        if (tok := operators.pop()).type == 'LPAR':
            raise SnxSyntaxError("Mismatched parentheses")
        output.append(tok)
    return output


def evaluate_postfix(postfix: list[Token]) -> Value:
    stack: list[Value] = []
    for tok in postfix:
        if tok.is_literal:
            stack.append(tok.value)
            continue
        arity = 1 if tok.value in UNARY_OPERATORS else 2
        if len(stack) < arity:
            raise SnxSyntaxError(f"Insufficient operands for '{tok.value}'")
        operands = stack[-arity:]
        del stack[-arity:]
        stack.append(apply_operator(tok.value, *operands))

    if len(stack) != 1:
        raise SnxSyntaxError("Invalid expression")
    return stack[0]


def evaluate(text: str, resolve: Resolver | None = None) -> Value:
    """Evaluate one infix expression; failures come back as an `Error` value, never raised."""
    try:
        return evaluate_postfix(to_postfix(tokenize(text, resolve=resolve)))
    except SnxError as exc:
        return Error(str(exc), exc)
