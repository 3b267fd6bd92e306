import logging

from .util import ExpressionSyntaxError
from .lexer import (NUMBER, OPERATOR, FUNCTION, VARIABLE, LPAREN, RPAREN,
                    NEGATE)


logger = logging.getLogger(__name__)


class Converter:
    '''
    Infix to postfix (RPN) conversion, by shunting yard.
    '''

    # Negation binds like * and /, so -x^2 is -(x^2) but 2*-x still works.
    PRECEDENCE = {
        '+': 1,
        '-': 1,
        '*': 2,
        '/': 2,
        NEGATE: 2,
        '^': 3,
        '!': 4,
    }
    RIGHT_ASSOCIATIVE = frozenset('^')
    # Operators with no left operand; pushing them never pops anything.
    PREFIX = frozenset(NEGATE)

    def precedence(self, symbol):
        try:
            return type(self).PRECEDENCE[symbol]
        except KeyError:
            raise ExpressionSyntaxError(
                'Unknown operator encountered: {!r}'.format(symbol)) from None

    def _shouldpop(self, top, incoming):
        '''
        Return True if stacked operator top goes out before incoming.
        '''
        if top.kind != OPERATOR:
            return False
        stacked = self.precedence(top.value)
        current = self.precedence(incoming.value)
        if incoming.value in type(self).RIGHT_ASSOCIATIVE:
            return stacked > current
        return stacked >= current

    def convert(self, tokens):
        '''
        Take infix tokens and return them in postfix order.

        Parentheses are dropped; a function follows its closing parenthesis.
        '''
        output = []
        stack = []
        for token in tokens:
            if token.kind in (NUMBER, VARIABLE):
                output.append(token)
            elif token.kind in (FUNCTION, LPAREN):
                stack.append(token)
            elif token.kind == OPERATOR:
                self.precedence(token.value)
                if token.value not in type(self).PREFIX:
                    while stack and self._shouldpop(stack[-1], token):
                        output.append(stack.pop())
                stack.append(token)
            elif token.kind == RPAREN:
                while stack and stack[-1].kind != LPAREN:
                    output.append(stack.pop())
                if not stack:
                    raise ExpressionSyntaxError(
                        'Mismatched parentheses in expression.')
                stack.pop()
                if stack and stack[-1].kind == FUNCTION:
                    output.append(stack.pop())
            else:
                raise ExpressionSyntaxError(
                    'Unknown token {!r}'.format(token))
        while stack:
            token = stack.pop()
            if token.kind in (LPAREN, RPAREN):
                raise ExpressionSyntaxError(
                    'Mismatched parentheses in expression.')
            output.append(token)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug('rpn: %s', ' '.join(str(token.value)
                                              for token
                                              in output))
        return output
