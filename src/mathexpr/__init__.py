'''
Math expression calculator.

Takes infix text like 2 + 3 * sin(pi / 2), parses it with a Pratt parser into
RPN, and evaluates that on a stack machine. Plain old arithmetic, a handful of
functions, constants, and caller-bound variables. Doubles throughout.

Everything an expression may name lives in one Definitions registry, shared by
the tokenizer, parser and machine.
'''

from .cli import CLI
from .definitions import DEFAULT, Definitions, FunctionDef, OperatorDef
from .expression import Expression, evaluate, parse_and_prepare
from .lexer import Tokenizer
from .machine import Machine
from .parser import PrattParser
from .tokens import Token, TokenKind
from .util import EvaluationError, ExpressionSyntaxError, MathExprError


__all__ = (
    'CLI',
    'DEFAULT',
    'Definitions',
    'EvaluationError',
    'Expression',
    'ExpressionSyntaxError',
    'FunctionDef',
    'MathExprError',
    'Machine',
    'OperatorDef',
    'PrattParser',
    'Token',
    'TokenKind',
    'Tokenizer',
    'evaluate',
    'parse_and_prepare',
)
