from os import isatty
from sys import stdin, stdout, exit
import sys
from argparse import ArgumentParser, ArgumentTypeError, REMAINDER, OPTIONAL
import logging

from prompt_toolkit import PromptSession

from .definitions import Definitions
from .expression import parse_and_prepare
from .lexer import Tokenizer
from .util import MathExprError


logger = logging.getLogger(__name__)


class InteractiveInput:
    def __init__(self, prompt):
        self.prompt = prompt

    def __iter__(self):
        try:
            session = PromptSession(message=self.prompt,
                                    enable_suspend=True,
                                    enable_open_in_editor=True,
                                    prompt_continuation=' ' * len(self.prompt),
                                    # Certainly not! But be explicit.
                                    erase_when_done=False)
            while True:
                yield session.prompt()
        except EOFError:
            return


def _binding(argument):
    '''
    Parse NAME=VALUE into a variable binding.
    '''
    name, sep, value = argument.partition('=')
    name = name.strip()
    if not sep or not name:
        raise ArgumentTypeError('expected NAME=VALUE, got {!r}'.format(argument))
    try:
        return name, float(value)
    except ValueError:
        raise ArgumentTypeError('not a number: {!r}'.format(value))


class CLI:
    '''
    Command line interface to the expression engine.

    One expression per line in, one number per line out.
    '''

    DEFAULT_PROMPT = '> '

    def _lines(self):
        expressions = self.args.expressions
        if expressions is stdin:
            expressions = self._prompting_input()
        for line in expressions:
            line = line.strip()
            if line:
                yield line

    def dumper(self):
        '''
        Dump all tokens, and the RPN they parse into.
        '''
        tokenizer = Tokenizer.from_definitions(self.definitions)
        print('<kind>\t<repr(text)>\t<span>')
        for line in self._lines():
            try:
                for token in tokenizer.tokenize(line):
                    print(token.kind.value, repr(token.text), token.span,
                          sep='\t')
                expression = parse_and_prepare(line, self.definitions)
                print('rpn', expression.postfix(), sep='\t')
            # Abort entire rest of line, makes sense anyway
            except MathExprError as e:
                self._report(line, e)

    def executor(self):
        '''
        Evaluate each expression and print its value.
        '''
        for line in self._lines():
            try:
                expression = parse_and_prepare(line, self.definitions)
                for name, value in self.args.variables:
                    expression.set_variable(name, value)
                print(self._format(expression.evaluate()))
            except MathExprError as e:
                self._report(line, e)

    def raw_grammar(self):
        '''
        Print current internally defined grammar.
        '''
        tokenizer = Tokenizer.from_definitions(self.definitions)
        print(tokenizer.grammar)

    def _report(self, line, error):
        self.failures += 1
        logger.debug('Failed on %r', line, exc_info=error)
        print(error, file=sys.stderr)

    def _format(self, value):
        '''
        Round value to precision, if set, and drop the .0 of whole numbers.
        '''
        if self.args.precision is not None:
            value = round(value, self.args.precision)
        if value.is_integer() and abs(value) < 1e16:
            return str(int(value))
        return repr(value)

    def _prompting_input(self):
        '''
        Return prompting stdin.__iter__ decorator...

        If either:
        - prompt explicitly specified.
        - both stdin/out are a tty
        '''
        if self.args.prompt or \
           isatty(stdin.fileno()) and isatty(stdout.fileno()):
            return InteractiveInput(prompt=self.args.prompt or
                                    self.DEFAULT_PROMPT)
        else:
            return stdin

    def __init__(self):
        '''
        Create ready to run CLI.

        Does not run or parse command line arguments.
        '''
        self.failures = 0
        self.argument_parser = ArgumentParser(
            description='Infix math expression calculator',
        )
        self.argument_parser.add_argument('-v', '--verbose',
                                          action='store_true',
                                          help='debug logging, with '
                                               'tracebacks of failures')
        self.argument_parser.add_argument('-s', '--set',
                                          type=_binding,
                                          action='append',
                                          dest='variables',
                                          metavar='NAME=VALUE',
                                          help='bind a variable')
        self.argument_parser.add_argument('-k', '--precision',
                                          type=int,
                                          help='round output to this many '
                                               'decimal places')
        self.argument_parser.add_argument('--degrees',
                                          action='store_true',
                                          help='trigonometric functions take '
                                               'degrees, not radians')
        int_nonint_groups = self.argument_parser.add_mutually_exclusive_group()
        int_nonint_groups.add_argument('-e', '--expression',
                                       nargs=REMAINDER,
                                       dest='expressions')
        int_nonint_groups.add_argument('-p', '--prompt',
                                       nargs=OPTIONAL,
                                       const=self.DEFAULT_PROMPT)
        main_groups = self.argument_parser.add_mutually_exclusive_group()
        for short_, long_, action in [('-G', '--raw-grammar',
                                       self.raw_grammar),
                                      ('-D', '--dump', self.dumper)]:
            main_groups.add_argument(short_, long_,
                                     action='store_const',
                                     const=action,
                                     dest='action')
        self.argument_parser.set_defaults(action=self.executor,
                                          expressions=stdin,
                                          variables=[])

    def run(self, *, args=None):
        '''
        Run CLI, given these args, or previously passed CLI args.

        Return exit status: 1 if any expression failed.
        '''
        self.args = self.argument_parser.parse_args(args)
        logging.basicConfig(
            level=logging.DEBUG if self.args.verbose else logging.WARNING,
            format='%(name)s: %(message)s',
        )
        self.definitions = Definitions.default(degrees=self.args.degrees)
        self.failures = 0
        try:
            self.args.action()
        except KeyboardInterrupt:
            exit(1)
        return 1 if self.failures else 0
