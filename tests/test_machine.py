'''
RPN machine tests
'''

import math

import regex

from mathexpr.definitions import DEFAULT, Definitions, FunctionDef
from mathexpr.machine import Machine
from mathexpr.tokens import Token, TokenKind
from mathexpr.util import EvaluationError

from pytest import raises


def number(text, start=0):
    return Token(TokenKind.NUMBER, text, start, start + len(text))


def op(symbol, start=0):
    return Token(TokenKind.OPERATOR, symbol, start, start + 1)


def function(name, start=0):
    return Token(TokenKind.FUNCTION, name, start, start + len(name))


def variable(name, start=0):
    return Token(TokenKind.VARIABLE, name, start, start + len(name))


def test_operand_order():
    m = Machine(DEFAULT)
    # 9 2 ^ is 9^2, not 2^9
    assert m.evaluate([number('9'), number('2'), op('^')]) == 81.0
    assert m.evaluate([number('10'), number('4'), op('-')]) == 6.0
    assert m.evaluate([number('5'), op('~')]) == -5.0


def test_function_argument_order():
    subtract = FunctionDef('sub', 2, lambda left, right: left - right)
    m = Machine(Definitions({}, [subtract], [], {}))
    assert m.evaluate([number('10'), number('3'), function('sub')]) == 7.0


def test_operator_synonyms():
    m = Machine(DEFAULT)
    assert m.evaluate([number('3'), number('4'),
                       op('\N{MULTIPLICATION SIGN}')]) == 12.0
    assert m.evaluate([number('3'), number('4'),
                       op('\N{DIVISION SIGN}')]) == 0.75


def test_constants_case_insensitive():
    m = Machine(DEFAULT)
    assert m.evaluate([Token(TokenKind.CONSTANT, 'PI', 0, 2)]) == math.pi
    assert m.evaluate([Token(TokenKind.CONSTANT, 'E', 0, 1)]) == math.e
    with raises(EvaluationError,
                match=regex.escape("Unknown constant 'tau' at 0:3")):
        m.evaluate([Token(TokenKind.CONSTANT, 'tau', 0, 3)])


def test_variables():
    m = Machine(DEFAULT)
    assert m.evaluate([variable('x')], {'x': 2}) == 2.0
    with raises(EvaluationError,
                match=regex.escape("Value of variable 'y' is not set")):
        m.evaluate([variable('y')], {'x': 2})
    # Exact case
    with raises(EvaluationError,
                match=regex.escape("Value of variable 'x' is not set")):
        m.evaluate([variable('x')], {'X': 2})
    with raises(EvaluationError):
        m.evaluate([variable('x')])


def test_unknown_names():
    m = Machine(DEFAULT)
    with raises(EvaluationError,
                match=regex.escape("Unknown operator '%' at 2:3")):
        m.evaluate([number('1'), number('2'), op('%', 2)])
    with raises(EvaluationError,
                match=regex.escape("Unknown function 'foo' at 0:3")):
        m.evaluate([number('1'), function('foo')])


def test_not_enough_operands():
    m = Machine(DEFAULT)
    with raises(EvaluationError,
                match=regex.escape("Not enough operands for operator '+' "
                                   "at 2:3")):
        m.evaluate([number('1'), op('+', 2)])
    with raises(EvaluationError,
                match=regex.escape("Not enough operands for function 'max' "
                                   "at 0:3")):
        m.evaluate([number('1'), function('max')])


def test_malformed():
    m = Machine(DEFAULT)
    with raises(EvaluationError, match='Malformed expression'):
        m.evaluate([number('1'), number('2')])
    with raises(EvaluationError, match='Malformed expression'):
        m.evaluate([])


def test_invalid_tokens():
    m = Machine(DEFAULT)
    with raises(EvaluationError,
                match=regex.escape("Invalid number '1e5' at 0:3")):
        m.evaluate([number('1e5')])
    with raises(EvaluationError,
                match=regex.escape("Invalid number 'inf' at 0:3")):
        m.evaluate([number('inf')])
    with raises(EvaluationError,
                match=regex.escape("Invalid token '(' at 0:1")):
        m.evaluate([Token(TokenKind.LEFT_PAREN, '(', 0, 1)])


def test_domain_error_carries_token():
    m = Machine(DEFAULT)
    divide = op('/', 2)
    with raises(EvaluationError, match='Division by zero') as info:
        m.evaluate([number('5'), number('0', 4), divide])
    assert info.value.token == divide


def test_stack_reset_between_runs():
    m = Machine(DEFAULT)
    with raises(EvaluationError):
        m.evaluate([number('1'), number('2')])
    assert m.evaluate([number('3')]) == 3.0


def test_variable_not_a_number():
    m = Machine(DEFAULT)
    with raises(EvaluationError,
                match=regex.escape("Value of variable 'x' is not a number: "
                                   "'2,5'")) as info:
        m.evaluate([variable('x')], {'x': '2,5'})
    assert info.value.token == variable('x')
