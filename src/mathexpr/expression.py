'''
Tokenize, parse and evaluate in one place.
'''

from types import MappingProxyType

from .definitions import DEFAULT
from .lexer import Tokenizer
from .machine import Machine
from .parser import PrattParser
from .util import EvaluationError, ExpressionSyntaxError


class Expression:
    '''
    Expression parsed once, to evaluate any number of times.

    Bindings set with set_variable persist across evaluations. Each
    evaluation runs on a machine of its own.
    '''

    def __init__(self, source, rpn, definitions=DEFAULT):
        self.source = source
        self.rpn = tuple(rpn)
        self.definitions = definitions
        self._variables = dict()

    @property
    def variables(self):
        return MappingProxyType(self._variables)

    def set_variable(self, name, value):
        '''
        Bind variable name to a number, for this and later evaluations.
        '''
        try:
            self._variables[name] = float(value)
        except (TypeError, ValueError) as e:
            raise EvaluationError(
                "Value of variable '{}' is not a number: {!r}".format(name,
                                                                     value),
            ) from e

    def evaluate(self, variables=None):
        '''
        Evaluate with the bound variables.

        :param variables: Name to value, overriding bound variables for this
                          call only.
        '''
        overrides = variables
        variables = self._variables
        if overrides:
            variables = dict(variables)
            variables.update(overrides)
        machine = Machine(self.definitions)
        return machine.evaluate(self.rpn, variables)

    def postfix(self):
        '''
        RPN as text, e.g., 2 3 4 * + for 2 + 3 * 4.
        '''
        return ' '.join(map(str, self.rpn))

    def __repr__(self):
        return '{}({!r})'.format(type(self).__name__, self.source)


def parse_and_prepare(source, definitions=DEFAULT):
    '''
    Parse expression text, or pre-typed tokens, into a reusable Expression.
    '''
    if isinstance(source, str):
        tokens = Tokenizer.from_definitions(definitions).tokenize(source)
    else:
        tokens = list(source)
        source = ' '.join(map(str, tokens))
    parser = PrattParser(definitions)
    try:
        rpn = parser.parse(tokens)
    except RecursionError as e:
        raise ExpressionSyntaxError('Expression is nested too deeply') from e
    return Expression(source, rpn, definitions)


def evaluate(text, variables=None, definitions=DEFAULT):
    '''
    Parse and evaluate expression text in one go.

    :param variables: Variable name to value.
    '''
    expression = parse_and_prepare(text, definitions)
    return expression.evaluate(variables)
