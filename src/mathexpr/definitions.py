'''
Registry of everything an expression may refer to by name or symbol.

Single source of truth for the tokenizer (which names exist), the parser
(precedence, associativity, arity) and the machine (what each name computes).
'''

from collections import namedtuple
from types import MappingProxyType

import logging
import math
import operator

from .util import EvaluationError, wrap_user_errors


logger = logging.getLogger(__name__)

# Magnitudes at or below this are zero, absorbing floating point noise.
EPSILON = 1e-10
# Largest n for which n! is a finite double.
MAX_FACTORIAL = 170
# Internal symbol for unary minus, so it never collides with binary minus.
UNARY_MINUS = '~'

ADDITIVE = 10
MULTIPLICATIVE = 20
POWER = 30
UNARY = 40


FunctionDef = namedtuple('FunctionDef', ['name', 'arity', 'rule'])
OperatorDef = namedtuple('OperatorDef', ['symbol', 'arity', 'rule'])


def _function(name, arity, f):
    '''
    Function definition whose rule reports Python arithmetic errors as
    EvaluationErrors.
    '''
    fmt = 'Cannot compute {}({})'.format(
        name,
        ', '.join('{%d}' % i for i in range(arity)),
    )
    return FunctionDef(name, arity, wrap_user_errors(fmt)(f))


def _operator(symbol, arity, f):
    if arity == 1:
        fmt = 'Cannot compute -{0}'
    else:
        fmt = 'Cannot compute {0} ' + symbol + ' {1}'
    return OperatorDef(symbol, arity, wrap_user_errors(fmt)(f))


def _divide(left, right):
    if abs(right) <= EPSILON:
        raise EvaluationError('Division by zero')
    return left / right


def _cot(x):
    tan = math.tan(x)
    if abs(tan) <= EPSILON:
        raise EvaluationError('Division by zero computing cotangent')
    return 1.0 / tan


def _ln(x):
    if x <= 0:
        raise EvaluationError('Logarithm is only defined for positive numbers')
    return math.log(x)


def _log(x):
    if x <= 0:
        raise EvaluationError('Logarithm is only defined for positive numbers')
    return math.log10(x)


def _sqrt(x):
    if x < 0:
        raise EvaluationError('Square root of a negative number is undefined')
    return math.sqrt(x)


def _factorial(x):
    if not 0 <= x <= MAX_FACTORIAL or x != math.floor(x):
        raise EvaluationError('Factorial is only defined for integers from '
                              '0 to {}'.format(MAX_FACTORIAL))
    return float(math.factorial(int(x)))


def _in_degrees(f):
    def wrapped(x):
        return f(math.radians(x))
    wrapped.__name__ = f.__name__
    return wrapped


class Definitions:
    '''
    Immutable registry of constants, functions, operators and precedences.

    Build once, then share by reference between any number of tokenizers,
    parsers and machines, from any number of threads.
    '''

    # Alternative spellings of operators, and the symbol they stand for.
    SYNONYMS = {
        '\N{MULTIPLICATION SIGN}': '*',
        '\N{DIVISION SIGN}': '/',
    }

    def __init__(self, constants, functions, operators, precedences,
                 right_associative=('^',)):
        '''
        :param constants: name to value. Names are case-insensitive.
        :param functions: FunctionDefs. Names are case-insensitive.
        :param operators: OperatorDefs, by symbol.
        :param precedences: symbol to binding power; higher binds tighter.
        :param right_associative: binary operator symbols that group right.
        '''
        self._constants = MappingProxyType({
            name.lower(): float(value)
            for name, value
            in constants.items()
        })
        self._functions = MappingProxyType({
            definition.name.lower(): definition
            for definition
            in functions
        })
        self._operators = MappingProxyType({
            definition.symbol: definition
            for definition
            in operators
        })
        self._precedences = MappingProxyType(dict(precedences))
        self._right_associative = frozenset(right_associative)
        for definition in self._functions.values():
            if definition.arity < 1:
                raise ValueError('Function {!r} must take at least one '
                                 'argument'.format(definition.name))

    @classmethod
    def default(cls, degrees=False):
        '''
        Build the stock registry.

        :param degrees: Trigonometric functions take degrees instead of
                        radians.
        '''
        trig = _in_degrees if degrees else (lambda f: f)
        functions = [
            # Trigonometric
            _function('sin', 1, trig(math.sin)),
            _function('cos', 1, trig(math.cos)),
            _function('tan', 1, trig(math.tan)),
            _function('cot', 1, trig(_cot)),
            # Logarithms
            _function('ln', 1, _ln),
            _function('log', 1, _log),
            # Algebraic
            _function('sqrt', 1, _sqrt),
            _function('\N{SQUARE ROOT}', 1, _sqrt),
            _function('abs', 1, abs),
            _function('exp', 1, math.exp),
            _function('factorial', 1, _factorial),
            # Multi-argument
            _function('max', 2, max),
            _function('min', 2, min),
        ]
        operators = [
            _operator('+', 2, operator.__add__),
            _operator('-', 2, operator.__sub__),
            _operator('*', 2, operator.__mul__),
            _operator('/', 2, _divide),
            # math.pow, unlike **, refuses to go complex.
            _operator('^', 2, math.pow),
            _operator(UNARY_MINUS, 1, operator.__neg__),
        ]
        precedences = {
            '+': ADDITIVE,
            '-': ADDITIVE,
            '*': MULTIPLICATIVE,
            '/': MULTIPLICATIVE,
            '^': POWER,
            UNARY_MINUS: UNARY,
        }
        for synonym, symbol in cls.SYNONYMS.items():
            precedences[synonym] = precedences[symbol]
        constants = {
            'pi': math.pi,
            '\N{GREEK SMALL LETTER PI}': math.pi,
            'e': math.e,
        }
        logger.debug('Building default definitions (degrees=%s)', degrees)
        return cls(constants, functions, operators, precedences)

    @property
    def constant_names(self):
        return tuple(self._constants)

    @property
    def function_names(self):
        return tuple(self._functions)

    def normalize(self, symbol):
        '''
        Canonical spelling of an operator symbol.
        '''
        return type(self).SYNONYMS.get(symbol, symbol)

    def constant(self, name):
        return self._constants.get(name.lower())

    def function(self, name):
        return self._functions.get(name.lower())

    def operator(self, symbol):
        return self._operators.get(self.normalize(symbol))

    def precedence(self, symbol):
        '''
        Binding power of operator symbol, 0 if it isn't one.
        '''
        return self._precedences.get(
            symbol,
            self._precedences.get(self.normalize(symbol), 0),
        )

    def is_right_associative(self, symbol):
        return self.normalize(symbol) in self._right_associative


DEFAULT = Definitions.default()
