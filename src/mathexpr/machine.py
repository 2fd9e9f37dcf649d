from collections import deque
import logging

import regex

from .lexer import Tokenizer
from .tokens import TokenKind
from .util import EvaluationError


logger = logging.getLogger(__name__)


class Machine:
    '''
    Arithmetic stack machine (RPN evaluator).

    Takes tokens in RPN order and runs them against a registry of definitions
    and the caller's variable bindings. The stack is reset on every
    evaluation, but is still the machine's own: one machine per thread.
    '''

    def __init__(self, definitions):
        '''
        Create empty stack machine.

        :param definitions: Constants, functions and operators to run with.
        '''
        self.definitions = definitions
        self.stack = deque()

    def evaluate(self, rpn, variables=None):
        '''
        Run RPN tokens, returning the one value they leave on the stack.

        :param rpn: Tokens, operands before their operators and functions.
        :param variables: Variable name (case-sensitive) to value. Only read.
        '''
        if variables is None:
            variables = {}
        self.stack = deque()
        for token in rpn:
            handler = type(self).HANDLERS.get(token.kind)
            if handler is None:
                raise EvaluationError(
                    "Invalid token '{}' at {}".format(token.text, token.span),
                    token=token,
                )
            handler(self, token, variables)
        if len(self.stack) != 1:
            raise EvaluationError('Malformed expression')
        result = self.stack.pop()
        logger.debug('Evaluated %s to %r',
                     ' '.join(map(str, rpn)), result)
        return result

    def _pshstack(self, *new):
        '''
        Push all elements onto stack, leftmost at the bottom.
        '''
        self.stack.extend(new)

    def _popstack(self, token, n=1):
        '''
        Pop specified number of operands for token from stack, topmost first.
        '''
        if len(self.stack) < n:
            raise EvaluationError(
                "Not enough operands for {} '{}' at {}".format(
                    token.kind.value,
                    token.text,
                    token.span,
                ),
                token=token,
            )
        return [self.stack.pop() for _ in range(n)]

    def _apply(self, token, definition):
        '''
        Apply definition to as many operands as it takes, pushing the result.
        '''
        # If you don't reverse, you'll do 2^9 when you say 9 2 ^ instead of
        # 9^2.
        args = reversed(self._popstack(token, definition.arity))
        try:
            result = definition.rule(*args)
        except EvaluationError as e:
            if e.token is None:
                e.token = token
            raise
        self._pshstack(float(result))

    def _number(self, token, variables):
        if regex.fullmatch(Tokenizer.NUMBER, token.text,
                           flags=Tokenizer.FLAGS) is None:
            raise EvaluationError(
                "Invalid number '{}' at {}".format(token.text, token.span),
                token=token,
            )
        self._pshstack(float(token.text))

    def _constant(self, token, variables):
        value = self.definitions.constant(token.text)
        if value is None:
            raise EvaluationError(
                "Unknown constant '{}' at {}".format(token.text, token.span),
                token=token,
            )
        self._pshstack(value)

    def _variable(self, token, variables):
        # No implicit zero
        if token.text not in variables:
            raise EvaluationError(
                "Value of variable '{}' is not set".format(token.text),
                token=token,
            )
        value = variables[token.text]
        try:
            self._pshstack(float(value))
        except (TypeError, ValueError) as e:
            raise EvaluationError(
                "Value of variable '{}' is not a number: {!r}".format(
                    token.text,
                    value,
                ),
                token=token,
            ) from e

    def _operator(self, token, variables):
        definition = self.definitions.operator(token.text)
        if definition is None:
            raise EvaluationError(
                "Unknown operator '{}' at {}".format(token.text, token.span),
                token=token,
            )
        self._apply(token, definition)

    def _function(self, token, variables):
        definition = self.definitions.function(token.text)
        if definition is None:
            raise EvaluationError(
                "Unknown function '{}' at {}".format(token.text, token.span),
                token=token,
            )
        self._apply(token, definition)

    # Token kind to what running it does.
    HANDLERS = {
        TokenKind.NUMBER: _number,
        TokenKind.CONSTANT: _constant,
        TokenKind.VARIABLE: _variable,
        TokenKind.OPERATOR: _operator,
        TokenKind.FUNCTION: _function,
    }
