'''
Infix calculator.

Expressions are tokenized, converted to postfix by shunting yard, and run on
a stack machine. Supports plain old arithmetic, ^, factorial, a handful of
math functions and variables, in one of three numeric modes:

- float: native double precision.
- bigint: arbitrary-precision integers; no fractions, functions or ^.
- bigdecimal: 50 significant decimal digits; 0.1 + 0.2 is 0.3.

Not intended to be a computer algebra system! No symbols, no complex input.
'''

from .util import (CalcError,
                   ExpressionSyntaxError,
                   InvalidLiteralError,
                   UnknownIdentifierError,
                   DomainError,
                   CalcArithmeticError,
                   CalcOverflowError,
                   StructuralError)
from .numeric import (Backend, FloatBackend, BigIntBackend,
                      BigDecimalBackend, BACKENDS, backend_for)
from .lexer import Lexer, Token
from .converter import Converter
from .machine import Machine
from .expression import (postfix, evaluate, evaluate_bigint,
                         evaluate_bigdecimal, evaluate_as)
from .cli import CLI


__all__ = ('evaluate', 'evaluate_bigint', 'evaluate_bigdecimal',
           'evaluate_as', 'postfix',
           'Lexer', 'Token', 'Converter', 'Machine', 'CLI',
           'Backend', 'FloatBackend', 'BigIntBackend', 'BigDecimalBackend',
           'BACKENDS', 'backend_for',
           'CalcError', 'ExpressionSyntaxError', 'InvalidLiteralError',
           'UnknownIdentifierError', 'DomainError', 'CalcArithmeticError',
           'CalcOverflowError', 'StructuralError')
