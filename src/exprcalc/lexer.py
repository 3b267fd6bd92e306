from collections import namedtuple
from functools import reduce
import operator

import regex

from .util import ExpressionSyntaxError
from .numeric import FUNCTIONS, FloatBackend


Token = namedtuple('Token', 'kind value')

NUMBER = 'number'
OPERATOR = 'operator'
FUNCTION = 'function'
VARIABLE = 'variable'
LPAREN = 'lparen'
RPAREN = 'rparen'

# Prefix unary minus, like _ in dc.
NEGATE = '_'


class Lexer:
    '''
    Lexer for the infix grammar.

    Scans left to right, alternating between expecting a value and expecting
    an operator. Holds no state between calls; the backend only decides
    which parts of the grammar are allowed.
    '''
    # Any run of digits and dots. Validated afterwards, for better errors
    # than "couldn't lex".
    DIGITS = r'[\d.]+'
    IDENTIFIER = r'[A-Za-z][A-Za-z0-9_]*'
    SPACE = r'\s*'

    # What may follow a unary sign.
    SIGNED = r'(?<lparen>\()|' \
             r'(?<number>' + DIGITS + r')|' \
             r'(?<identifier>' + IDENTIFIER + r')'
    # Lexemes where a value is expected.
    VALUE = r'(?<sign>[-+])|' + SIGNED
    # Lexemes where an operator is expected.
    INFIX = r'(?<rparen>\))|' \
            r'(?<factorial>!)|' \
            r'(?<operator>[-+*/xX:^])'

    # x and : are spelled out multiplication and division.
    OPERATORS = {
        'x': '*',
        ':': '/',
    }

    FLAGS = reduce(operator.__or__,
                   {regex.ASCII,
                    regex.VERSION1},
                   0)

    def __init__(self, backend=None):
        self.backend = backend or FloatBackend()

    def _match(self, pattern, line, position):
        return regex.match(pattern, line,
                           pos=position,
                           flags=type(self).FLAGS)

    def _skip(self, line, position):
        '''
        Return position of next non-space character.
        '''
        return self._match(type(self).SPACE, line, position).end()

    def _unsupported(self, what):
        return ExpressionSyntaxError(
            '{} mode does not support {}.'.format(
                self.backend.NAME.capitalize(), what))

    def lex(self, line):
        '''
        Take an expression and yield all tokens, left to right.

        Raises ExpressionSyntaxError on the first lexeme out of place.
        '''
        position = self._skip(line, 0)
        expecting_value = True
        while position < len(line):
            if expecting_value:
                position, expecting_value = yield from self._value(line,
                                                                   position)
            else:
                position, expecting_value = yield from self._infix(line,
                                                                   position)
            position = self._skip(line, position)
        if expecting_value:
            raise ExpressionSyntaxError(
                'Expression ended unexpectedly. Operand missing.')

    def tokenize(self, line):
        '''
        Return all tokens of line, as a list.
        '''
        return list(self.lex(line))

    def _value(self, line, position):
        match = self._match(type(self).VALUE, line, position)
        if match is None:
            raise ExpressionSyntaxError(
                "Expected a number or '(' in the expression.")
        sign = match.group('sign')
        if sign:
            position = self._skip(line, match.end())
            if position >= len(line):
                raise ExpressionSyntaxError(
                    'Expression cannot end with a unary operator.')
            match = self._match(type(self).SIGNED, line, position)
            if match is None:
                raise ExpressionSyntaxError(
                    "Expected a number or '(' in the expression.")
            if sign == '-' and not match.group('number'):
                yield Token(OPERATOR, NEGATE)
        if match.group('lparen'):
            yield Token(LPAREN, '(')
            return match.end(), True
        elif match.group('number'):
            yield self._number(match.group('number'), sign == '-')
            return match.end(), False
        else:
            identifier = match.group('identifier')
            name = identifier.lower()
            if name not in FUNCTIONS:
                yield Token(VARIABLE, name)
                return match.end(), False
            if not self.backend.supports('functions'):
                raise ExpressionSyntaxError(
                    'Functions are not supported in {} mode: {}'.format(
                        self.backend.NAME, name))
            yield Token(FUNCTION, name)
            # The parenthesis itself is the next value lexeme.
            lookahead = self._skip(line, match.end())
            if not line.startswith('(', lookahead):
                raise ExpressionSyntaxError(
                    "Function '{}' must be followed by parentheses.".format(
                        identifier))
            return lookahead, True

    def _number(self, text, negative):
        if text.count('.') > 1:
            raise ExpressionSyntaxError(
                'Multiple decimal separators found in number.')
        if text.strip('.') == '':
            raise ExpressionSyntaxError('Expected a digit in the number.')
        if '.' in text and not self.backend.supports('decimals'):
            raise self._unsupported('decimal numbers')
        if negative:
            text = '-' + text
        return Token(NUMBER, self.backend.literal(text))

    def _infix(self, line, position):
        match = self._match(type(self).INFIX, line, position)
        if match is None:
            raise ExpressionSyntaxError(
                "Expected an operator or ')' in the expression.")
        if match.group('rparen'):
            yield Token(RPAREN, ')')
            return match.end(), False
        elif match.group('factorial'):
            yield Token(OPERATOR, '!')
            return match.end(), False
        symbol = match.group('operator').lower()
        symbol = type(self).OPERATORS.get(symbol, symbol)
        if symbol == '^' and not self.backend.supports('power'):
            raise self._unsupported('exponentiation')
        yield Token(OPERATOR, symbol)
        return match.end(), True
