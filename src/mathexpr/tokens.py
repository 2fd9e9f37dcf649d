from collections import namedtuple
from enum import Enum


class TokenKind(Enum):
    NUMBER = 'number'
    CONSTANT = 'constant'
    VARIABLE = 'variable'
    OPERATOR = 'operator'
    FUNCTION = 'function'
    LEFT_PAREN = 'lparen'
    RIGHT_PAREN = 'rparen'
    # Argument separator, i.e., the comma
    DELIMITER = 'delimiter'
    UNKNOWN = 'unknown'


class Token(namedtuple('Token', ['kind', 'text', 'start', 'end'])):
    '''
    Lexical unit of an expression.

    start and end are character offsets into the source, end exclusive. They
    are only ever used for diagnostics.
    '''
    __slots__ = ()

    @property
    def span(self):
        return '{}:{}'.format(self.start, self.end)

    def __str__(self):
        return self.text
