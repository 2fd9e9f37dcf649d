from functools import lru_cache, reduce
import logging
import operator

import regex

from .tokens import Token, TokenKind
from .util import ExpressionSyntaxError


logger = logging.getLogger(__name__)


class Tokenizer:
    '''
    Tokenizer for the infix expression *regular* grammar.

    Needs the names of the functions and constants in use, to tell them apart
    from variables. Holds no state across calls.
    '''
    LEFT_PAREN = r'\('
    RIGHT_PAREN = r'\)'
    DELIMITER = r','
    OPERATORS = '+-*/^\N{MULTIPLICATION SIGN}\N{DIVISION SIGN}'
    # Single character operators only.
    OPERATOR = r'[' + ''.join(map(regex.escape, OPERATORS)) + r']'
    # Number. Keeps to what float() and a person would both agree on.
    NUMBER = r'''
              # 1, 12, 1.3
              # but not .3, 1., 1e3, 1_200
              [0-9]+
              (?:
                  \.
                  [0-9]+
              )?
              '''
    IDENTIFIER = r'[a-zA-Z_]\w*'
    SPACE = r'\s+'
    # Anything else, one character at a time, to report it.
    UNKNOWN = r'\S'

    # Matched group, in order of precedence, to token kind
    KINDS = {
        'lparen': TokenKind.LEFT_PAREN,
        'rparen': TokenKind.RIGHT_PAREN,
        'delimiter': TokenKind.DELIMITER,
        'operator': TokenKind.OPERATOR,
        'function': TokenKind.FUNCTION,
        'constant': TokenKind.CONSTANT,
        'number': TokenKind.NUMBER,
        'variable': TokenKind.VARIABLE,
        'space': None,
        'unknown': TokenKind.UNKNOWN,
    }
    # Default regex flags for matching lexemes
    FLAGS = reduce(operator.__or__,
                   {regex.VERSION1,
                    regex.VERBOSE},
                   0)

    def __init__(self, function_names, constant_names):
        cls = type(self)
        self.grammar = r'|'.join([
            r'(?<lparen>' + cls.LEFT_PAREN + r')',
            r'(?<rparen>' + cls.RIGHT_PAREN + r')',
            r'(?<delimiter>' + cls.DELIMITER + r')',
            r'(?<operator>' + cls.OPERATOR + r')',
            r'(?<function>' + cls._keywords(function_names) + r')',
            r'(?<constant>' + cls._keywords(constant_names) + r')',
            r'(?<number>' + cls.NUMBER + r')',
            r'(?<variable>' + cls.IDENTIFIER + r')',
            r'(?<space>' + cls.SPACE + r')',
            r'(?<unknown>' + cls.UNKNOWN + r')',
        ])
        self._pattern = regex.compile(self.grammar, flags=cls.FLAGS)

    @classmethod
    @lru_cache(maxsize=None)
    def from_definitions(cls, definitions):
        '''
        Tokenizer for the names in definitions, built once per registry.
        '''
        return cls(definitions.function_names, definitions.constant_names)

    @staticmethod
    def _keywords(names):
        '''
        Case-insensitive alternation of whole-word names, longest first.

        Names starting or ending in a symbol, like √, need no word boundary
        on that side.
        '''
        alternatives = []
        for name in sorted(set(names), key=len, reverse=True):
            pattern = regex.escape(name)
            if regex.match(r'\w', name[0]):
                pattern = r'\b' + pattern
            if regex.match(r'\w', name[-1]):
                pattern = pattern + r'\b'
            alternatives.append(pattern)
        if not alternatives:
            # Never matches
            return r'(?!)'
        return r'(?i:' + r'|'.join(alternatives) + r')'

    def tokenize(self, text):
        '''
        Take an expression and return all its tokens, whitespace excluded.

        Fails listing every character that isn't part of the grammar, rather
        than return a partial result.
        '''
        tokens = []
        unknown = []
        position = 0
        while position < len(text):
            # Never None; the last two alternatives cover every character.
            match = self._pattern.match(text, position)
            kind = type(self).KINDS[match.lastgroup]
            position = match.end()
            if kind is None:
                continue
            token = Token(kind, match.group(), match.start(), match.end())
            if kind is TokenKind.UNKNOWN:
                unknown.append(token)
            tokens.append(token)
        if unknown:
            raise ExpressionSyntaxError(
                'Invalid characters: ' + ', '.join(
                    repr(token.text)
                    for token
                    in unknown
                ),
                token=unknown[0],
            )
        logger.debug('Tokenized %r into %d tokens', text, len(tokens))
        return tokens
