from pytest import Item, fixture

from mathexpr.definitions import DEFAULT
from mathexpr.lexer import Tokenizer
from mathexpr.parser import PrattParser


def pytest_assertion_pass(item: Item,
                          lineno: int,
                          orig: str,
                          expl: str) -> None:
    '''
    Log every assertion, in case we later need to audit a run.

    Excessive in most cases. Needs enable_assertion_pass_hook.

    Use with pytest -rP.
    '''
    print('given', item.name + ':' + str(lineno), str(orig))  # no repr()!)
    print('actual', item.name + ':' + str(lineno),
          '\n'.join(str(expl).splitlines()[:-2]))


@fixture
def tokenize():
    return Tokenizer.from_definitions(DEFAULT).tokenize


@fixture
def rpn(tokenize):
    '''
    Parse text, and return the RPN as space separated text.
    '''
    def parse(text):
        parser = PrattParser(DEFAULT)
        return ' '.join(token.text for token in parser.parse(tokenize(text)))
    return parse
