from collections import deque
import logging

from .util import (UnknownIdentifierError,
                   StructuralError,
                   ExpressionSyntaxError)
from .numeric import FloatBackend
from .lexer import NUMBER, OPERATOR, FUNCTION, VARIABLE, NEGATE


logger = logging.getLogger(__name__)


class Machine:
    '''
    Arithmetic stack machine, running postfix tokens.

    One machine per evaluation: the stack starts empty, and the variables
    are only ever read.
    '''

    # Binary operators, by the backend method implementing them.
    BINARY = {
        '+': 'add',
        '-': 'subtract',
        '*': 'multiply',
        '/': 'divide',
        '^': 'power',
    }

    # Unary operators, with the error when the stack is empty.
    UNARY = {
        '!': ('factorial', 'Factorial operator missing operand.'),
        NEGATE: ('negate', 'Negation missing operand.'),
    }

    def __init__(self, backend=None, variables=None):
        '''
        Create empty stack machine.

        :param backend: Numeric backend; float if None.
        :param variables: Mapping of lowercase names to float values.
        '''
        self.backend = backend or FloatBackend()
        self.variables = variables if variables is not None else {}
        self.stack = deque()

    def run(self, rpn):
        '''
        Feed all postfix tokens, and return the single resulting value.
        '''
        for token in rpn:
            self.feed(token)
        result = self.result()
        logger.debug('result: %r', result)
        return result

    def feed(self, token):
        '''
        Push a value or apply an operator or function to the stack.
        '''
        if token.kind == NUMBER:
            self._pshstack(self.backend.parse(token.value))
        elif token.kind == VARIABLE:
            self._pshstack(self.load(token.value))
        elif token.kind == OPERATOR:
            self._operate(token.value)
        elif token.kind == FUNCTION:
            value = self._popstack(1, 'Function missing operand.')[0]
            self._pshstack(self.backend.function(token.value, value))
        else:
            raise StructuralError('Unexpected token in postfix: {!r}'.format(
                token))

    def result(self):
        '''
        Pop and return the final value, if it's the only one left.
        '''
        if len(self.stack) != 1:
            raise StructuralError('Invalid expression: leftover operands.'
                                  if self.stack else
                                  'Invalid expression: insufficient operands.')
        return self.stack.pop()

    def load(self, name):
        '''
        Return variable value, converted for the backend.
        '''
        try:
            value = self.variables[name]
        except KeyError:
            raise UnknownIdentifierError('Unknown variable: ' + name) from None
        return self.backend.variable(name, value)

    def _operate(self, symbol):
        if symbol in type(self).UNARY:
            method, missing = type(self).UNARY[symbol]
            operand = self._popstack(1, missing)[0]
            self._pshstack(getattr(self.backend, method)(operand))
        elif symbol in type(self).BINARY:
            # If you don't reverse, you'll do 2/8 when you say 8 2 /.
            rhs, lhs = self._popstack(
                2, 'Invalid expression: insufficient operands.')
            method = getattr(self.backend, type(self).BINARY[symbol])
            self._pshstack(method(lhs, rhs))
        else:
            raise ExpressionSyntaxError('Unknown operator in expression.')

    def _pshstack(self, *new):
        '''
        Push all elements onto stack, leftmost at the bottom.
        '''
        self.stack.extend(new)

    def _popstack(self, n, missing):
        '''
        Pop specified number of values from stack, topmost first.
        '''
        if len(self.stack) < n:
            raise StructuralError(missing)
        return [self.stack.pop() for _ in range(n)]
