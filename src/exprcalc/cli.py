from os import isatty
import sys
from argparse import ArgumentParser, REMAINDER, OPTIONAL
import logging

import regex
from prompt_toolkit import PromptSession
from prompt_toolkit.history import InMemoryHistory

from .util import CalcError, ExpressionSyntaxError
from .numeric import BACKENDS, FUNCTIONS, FloatBackend, backend_for
from .lexer import Lexer
from .converter import Converter
from .expression import evaluate, evaluate_as


logger = logging.getLogger(__name__)


class InteractiveInput:
    def __init__(self, prompt):
        self.prompt = prompt

    def __iter__(self):
        try:
            session = PromptSession(message=self.prompt,
                                    enable_suspend=True,
                                    # Not persisted; that's the variable
                                    # store's business, not ours.
                                    history=InMemoryHistory(),
                                    prompt_continuation=' ' * len(self.prompt),
                                    # Interferes with X11 selection.
                                    mouse_support=False,
                                    erase_when_done=False)
            while True:
                yield session.prompt()
        except EOFError:
            return


class CLI:
    '''
    Command line interface to the expression evaluator.
    '''

    DEFAULT_PROMPT = '> '
    DEFAULT_MODE = FloatBackend.NAME
    # name = expression
    ASSIGNMENT = r'\s*(?<name>' + Lexer.IDENTIFIER + r')' \
                 r'\s*=(?<expression>.*)'

    def dumper(self):
        '''
        Dump tokens and postfix order of each expression.
        '''
        lexer = Lexer(backend_for(self.args.mode))
        converter = Converter()
        print('[kind:value ...]')
        for line in self._lines():
            try:
                tokens = lexer.tokenize(line)
                rpn = converter.convert(tokens)
            except CalcError as e:
                self._report(e)
                continue
            for label, sequence in ('tokens', tokens), ('rpn', rpn):
                print(label,
                      *('{}:{}'.format(token.kind, token.value)
                        for token
                        in sequence),
                      sep='\t')

    def executor(self):
        '''
        Evaluate (or assign) each expression, printing results.
        '''
        for line in self._lines():
            try:
                result = self.execute(line)
            # One bad line does not stop the rest
            except CalcError as e:
                self._report(e)
                continue
            if result is not None:
                print(result, flush=True)

    def raw_grammar(self):
        '''
        Print current internally defined grammar.
        '''
        print('value:', Lexer.VALUE)
        print('infix:', Lexer.INFIX)

    def execute(self, line):
        '''
        Run one input line. Return printable result, or None for assignments.
        '''
        match = regex.fullmatch(type(self).ASSIGNMENT, line,
                                flags=regex.DOTALL)
        if match is not None:
            self.assign(match.group('name'), match.group('expression'))
            return None
        if self.args.mode == FloatBackend.NAME:
            result = evaluate(line, self.variables)
            if self.args.precision is not None:
                result = round(result, self.args.precision)
            return FloatBackend().format(result)
        return evaluate_as(self.args.mode, line, self.variables)

    def assign(self, name, expression):
        '''
        Store float value of expression into variable name.
        '''
        name = name.lower()
        if name in FUNCTIONS:
            raise ExpressionSyntaxError(
                "Cannot assign to function name '{}'.".format(name))
        self.variables[name] = evaluate(expression, self.variables)
        logger.debug('%s = %r', name, self.variables[name])

    def _report(self, e):
        self.failed = True
        if self.args.verbose:
            logger.exception('%s', e.args[0])
        else:
            print(e.args[0], file=sys.stderr, flush=True)

    def _lines(self):
        for line in self.args.expressions:
            if line.strip():
                yield line

    def _prompting_input(self):
        '''
        Return prompting stdin.__iter__ decorator...

        If either:
        - prompt explicitly specified.
        - both stdin/out are a tty
        '''
        if self.args.prompt or \
           isatty(sys.stdin.fileno()) and isatty(sys.stdout.fileno()):
            return InteractiveInput(prompt=self.args.prompt or
                                    self.DEFAULT_PROMPT)
        else:
            return sys.stdin

    def __init__(self):
        '''
        Create ready to run CLI.

        Does not run or parse command line arguments.
        '''
        self.variables = {}
        self.failed = False
        self.argument_parser = ArgumentParser(
            description='Infix calculator, evaluated through RPN')
        self.argument_parser.add_argument('-v', '--verbose',
                                          action='store_true')
        self.argument_parser.add_argument('-m', '--mode',
                                          choices=sorted(BACKENDS),
                                          default=self.DEFAULT_MODE)
        self.argument_parser.add_argument('-k', '--precision',
                                          type=int,
                                          help='round float results')
        self.argument_parser.add_argument('-s', '--set',
                                          action='append',
                                          default=[],
                                          metavar='NAME=EXPRESSION',
                                          dest='assignments')
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
                                          expressions=sys.stdin)

    def run(self, *, args=None):
        '''
        Run CLI, given these args, or previously passed CLI args.

        Return exit status: 1 if any expression failed.
        '''
        self.args = self.argument_parser.parse_args(args)
        if self.args.verbose:
            logging.basicConfig(level=logging.DEBUG,
                                stream=sys.stderr,
                                format='%(name)s: %(message)s')
        for assignment in self.args.assignments:
            match = regex.fullmatch(type(self).ASSIGNMENT, assignment)
            if match is None:
                self.argument_parser.error(
                    'expected NAME=EXPRESSION, got {!r}'.format(assignment))
            try:
                self.assign(match.group('name'), match.group('expression'))
            except CalcError as e:
                self.argument_parser.error('{}: {}'.format(assignment,
                                                           e.args[0]))
        if self.args.expressions is sys.stdin:
            self.args.expressions = self._prompting_input()
        try:
            self.args.action()
        except KeyboardInterrupt:
            return 1
        return 1 if self.failed else 0
