'''
Pratt (precedence climbing) parser, from infix tokens to RPN.
'''

import logging

from .definitions import UNARY_MINUS
from .tokens import Token, TokenKind
from .util import ExpressionSyntaxError


logger = logging.getLogger(__name__)


class PrattParser:
    '''
    Parser of token sequences into RPN, i.e., postfix order.

    Not reentrant: holds the token list and cursor of the parse in progress.
    Cheap to create, so create one per thread.
    '''

    def __init__(self, definitions):
        self.definitions = definitions
        self.tokens = []
        self.position = 0

    def parse(self, tokens):
        '''
        Parse tokens and return them reordered into RPN.

        Unary minus comes out as an operator token of its own symbol, spanning
        the original minus sign. Unary plus and parentheses do not come out at
        all.
        '''
        self.tokens = [token
                       for token
                       in tokens
                       if not self._isblank(token)]
        self.position = 0
        rpn = []
        self._parse_expression(0, rpn)
        if self.position < len(self.tokens):
            self._unexpected(self.tokens[self.position])
        logger.debug('Parsed into RPN: %s', ' '.join(map(str, rpn)))
        return rpn

    @staticmethod
    def _isblank(token):
        return token.kind is TokenKind.UNKNOWN and token.text.isspace()

    def _peek(self):
        '''
        Return the next token without consuming it, None past the end.
        '''
        if self.position < len(self.tokens):
            return self.tokens[self.position]
        return None

    def _advance(self):
        token = self._peek()
        if token is None:
            raise ExpressionSyntaxError('Unexpected end of expression')
        self.position += 1
        return token

    def _unexpected(self, token):
        raise ExpressionSyntaxError(
            "Unexpected token '{}' at {}".format(token.text, token.span),
            token=token,
        )

    def _parse_expression(self, min_precedence, rpn):
        self._parse_prefix(rpn)
        while True:
            token = self._peek()
            if token is None or token.kind is not TokenKind.OPERATOR:
                break
            definition = self.definitions.operator(token.text)
            if definition is None or definition.arity != 2:
                self._unexpected(token)
            precedence = self.definitions.precedence(token.text)
            if precedence < min_precedence:
                break
            self.position += 1
            if self.definitions.is_right_associative(token.text):
                self._parse_expression(precedence, rpn)
            else:
                self._parse_expression(precedence + 1, rpn)
            # After both its operands
            rpn.append(token)

    def _parse_prefix(self, rpn):
        token = self._advance()
        if token.kind in {TokenKind.NUMBER,
                          TokenKind.CONSTANT,
                          TokenKind.VARIABLE}:
            rpn.append(token)
        elif token.kind is TokenKind.FUNCTION:
            self._parse_call(token, rpn)
        elif token.kind is TokenKind.LEFT_PAREN:
            self._parse_expression(0, rpn)
            self._expect_closing(token)
        elif token.kind is TokenKind.OPERATOR and token.text == '-':
            self._parse_expression(self.definitions.precedence(UNARY_MINUS),
                                   rpn)
            rpn.append(Token(TokenKind.OPERATOR,
                             UNARY_MINUS,
                             token.start,
                             token.end))
        elif token.kind is TokenKind.OPERATOR and token.text == '+':
            # Unary plus is a no-op
            self._parse_expression(self.definitions.precedence(UNARY_MINUS),
                                   rpn)
        else:
            self._unexpected(token)

    def _expect_closing(self, opening):
        token = self._peek()
        if token is None or token.kind is not TokenKind.RIGHT_PAREN:
            raise ExpressionSyntaxError(
                "Expected ')' to close '{}' at {}".format(opening.text,
                                                          opening.span),
                token=opening,
            )
        self.position += 1

    def _parse_call(self, function, rpn):
        '''
        Parse parenthesized, comma separated arguments, checking their count.
        '''
        definition = self.definitions.function(function.text)
        if definition is None:
            raise ExpressionSyntaxError(
                "Unknown function '{}' at {}".format(function.text,
                                                     function.span),
                token=function,
            )
        token = self._peek()
        if token is None or token.kind is not TokenKind.LEFT_PAREN:
            raise ExpressionSyntaxError(
                "Expected '(' after function '{}' at {}".format(function.text,
                                                                function.span),
                token=function,
            )
        self.position += 1
        count = 0
        while True:
            token = self._peek()
            if token is None:
                raise ExpressionSyntaxError(
                    "Expected ')' after arguments of function '{}' at "
                    "{}".format(function.text, function.span),
                    token=function,
                )
            if token.kind is TokenKind.RIGHT_PAREN:
                self.position += 1
                break
            if count:
                if token.kind is not TokenKind.DELIMITER:
                    raise ExpressionSyntaxError(
                        "Expected ',' between arguments of function '{}', "
                        "got '{}' at {}".format(function.text,
                                                token.text,
                                                token.span),
                        token=token,
                    )
                self.position += 1
            self._parse_expression(0, rpn)
            count += 1
        if count != definition.arity:
            raise ExpressionSyntaxError(
                "Function '{}' takes {} argument(s), got {}".format(
                    function.text,
                    definition.arity,
                    count,
                ),
                token=function,
            )
        rpn.append(function)
