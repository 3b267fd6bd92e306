'''
Numeric backends.

A backend is everything the lexer and the machine need to know about one
numeric domain: which parts of the grammar it accepts, how literals and
variables become values, and the arithmetic itself. Create one per
evaluation; no backend touches global numeric state.
'''

import decimal
import math

import mpmath

from .util import (wrap_user_errors,
                   DomainError,
                   CalcArithmeticError,
                   CalcOverflowError,
                   ExpressionSyntaxError,
                   InvalidLiteralError)


# Recognized function names, reserved in every mode.
FUNCTIONS = ('sin', 'cos', 'tan', 'log', 'sqrt', 'exp',
             'cot', 'asin', 'acos', 'atan', 'sinh')


class Backend:
    '''
    Capability interface shared by all numeric domains.
    '''

    NAME = None
    # Any of 'decimals', 'functions', 'power'.
    CAPABILITIES = frozenset()
    EPSILON = 0
    # None means unbounded.
    FACTORIAL_LIMIT = None
    FACTORIAL_OVERFLOW = 'Factorial result is too large.'

    # Argument checks, before applying a function.
    DOMAINS = {
        'log': (lambda value: value > 0,
                'Logarithm undefined for non-positive values.'),
        'sqrt': (lambda value: value >= 0,
                 'Square root undefined for negative values.'),
        'asin': (lambda value: -1 <= value <= 1,
                 'Arcsine undefined for this value.'),
        'acos': (lambda value: -1 <= value <= 1,
                 'Arccosine undefined for this value.'),
    }

    def supports(self, capability):
        return capability in self.CAPABILITIES

    def literal(self, text):
        '''
        Token value for a scanned literal. Parsed lazily by default.
        '''
        return text

    def parse(self, literal):
        raise NotImplementedError

    def variable(self, name, value):
        raise NotImplementedError

    def format(self, value):
        return str(value)

    def is_zero(self, value):
        '''
        Return True if value is within EPSILON of zero.
        '''
        return abs(value) <= self.EPSILON

    def add(self, lhs, rhs):
        return lhs + rhs

    def subtract(self, lhs, rhs):
        return lhs - rhs

    def multiply(self, lhs, rhs):
        return lhs * rhs

    def negate(self, value):
        return -value

    def divide(self, lhs, rhs):
        if rhs == 0:
            raise CalcArithmeticError('Division by zero in expression.')
        return self._divide(lhs, rhs)

    def _divide(self, lhs, rhs):
        return lhs / rhs

    def power(self, lhs, rhs):
        if not self.supports('power'):
            raise ExpressionSyntaxError(
                'Exponentiation is not supported in {} mode.'.format(
                    self.NAME))
        if rhs == 0:
            return self._integer(1)
        if lhs == 0 and rhs < 0:
            raise DomainError('Zero cannot be raised to a negative power.')
        return self._power(lhs, rhs)

    def _power(self, lhs, rhs):
        raise NotImplementedError

    def factorial(self, value):
        '''
        Return value!, for value (approximately) a non-negative integer.
        '''
        n = self._integral(value)
        if n is None:
            raise DomainError('Factorial is only defined for integers.')
        if n < 0:
            raise DomainError(
                'Factorial is not defined for negative numbers.')
        if self.FACTORIAL_LIMIT is not None and n > self.FACTORIAL_LIMIT:
            raise CalcOverflowError(self.FACTORIAL_OVERFLOW)
        return self._factorial(n)

    def _factorial(self, n):
        return math.factorial(n)

    def _integer(self, n):
        return n

    def _integral(self, value):
        '''
        Return value as an int if it is within EPSILON of one, else None.
        '''
        rounded = round(value)
        if abs(value - rounded) > self.EPSILON:
            return None
        return int(rounded)

    def function(self, name, value):
        '''
        Apply named function to value, checking its domain first.
        '''
        if not self.supports('functions'):
            raise ExpressionSyntaxError(
                'Functions are not supported in {} mode: {}'.format(
                    self.NAME, name))
        if name not in FUNCTIONS:
            raise ExpressionSyntaxError('Unknown function: ' + name)
        check, message = self.DOMAINS.get(name, (None, None))
        if check is not None and not check(value):
            raise DomainError(message)
        if name == 'cot':
            return self._cotangent(value)
        return self._apply(name, value)

    def _cotangent(self, value):
        tangent = self._apply('tan', value)
        if self.is_zero(tangent):
            raise DomainError('Cotangent undefined for this value.')
        return self._divide(self._integer(1), tangent)

    def _apply(self, name, value):
        raise NotImplementedError


class FloatBackend(Backend):
    '''
    Native double precision.
    '''

    NAME = 'float'
    CAPABILITIES = frozenset({'decimals', 'functions', 'power'})
    EPSILON = 1e-9
    FACTORIAL_LIMIT = 170
    FACTORIAL_OVERFLOW = 'Factorial result would overflow double precision.'
    SIGNIFICANT_DIGITS = 15

    def literal(self, text):
        return self.parse(text)

    @wrap_user_errors("Invalid number literal '{1}'.", InvalidLiteralError)
    def parse(self, literal):
        value = float(literal)
        if not math.isfinite(value):
            # Beyond double range.
            raise ValueError(literal)
        return value

    def variable(self, name, value):
        return float(value)

    def format(self, value):
        if value == 0:
            # No negative zero.
            value = 0.0
        return '{:.{}g}'.format(value, self.SIGNIFICANT_DIGITS)

    def _factorial(self, n):
        return float(math.factorial(n))

    def _integer(self, n):
        return float(n)

    def _integral(self, value):
        if not math.isfinite(value):
            return None
        return super()._integral(value)

    @wrap_user_errors('Cannot raise {1} to the power of {2}.')
    def _power(self, lhs, rhs):
        return math.pow(lhs, rhs)

    @wrap_user_errors('Cannot compute {1}({2}).')
    def _apply(self, name, value):
        return getattr(math, name)(value)


class BigIntBackend(Backend):
    '''
    Arbitrary-precision integers. No fractions, functions or powers.

    Literals and results go through decimal.Decimal: int() and str() refuse
    more digits than sys.get_int_max_str_digits().
    '''

    NAME = 'bigint'
    INT64 = (-2 ** 63, 2 ** 63 - 1)
    VARIABLE_EPSILON = 1e-9

    @wrap_user_errors("Invalid integer literal '{1}'.", InvalidLiteralError)
    def parse(self, literal):
        if not literal.lstrip('-').isdigit():
            raise ValueError(literal)
        return int(decimal.Decimal(literal))

    def variable(self, name, value):
        value = float(value)
        if not math.isfinite(value):
            raise CalcOverflowError(
                "Variable '{}' is out of range for bigint mode.".format(name))
        rounded = round(value)
        if abs(value - rounded) > self.VARIABLE_EPSILON:
            raise CalcOverflowError(
                "Variable '{}' must be an integer in bigint mode.".format(
                    name))
        low, high = self.INT64
        if not low <= rounded <= high:
            raise CalcOverflowError(
                "Variable '{}' is out of range for bigint mode.".format(name))
        return int(rounded)

    def format(self, value):
        return str(decimal.Decimal(value))

    def _integral(self, value):
        return value

    def _divide(self, lhs, rhs):
        quotient, remainder = divmod(lhs, rhs)
        if remainder:
            raise CalcArithmeticError(
                'Division results in a non-integer value in bigint mode.')
        return quotient


class BigDecimalBackend(Backend):
    '''
    Arbitrary-precision decimals, PRECISION significant digits.

    Arithmetic is done in a private decimal.Context; named functions are
    computed by mpmath, with GUARD_DIGITS extra digits, and rounded back.
    '''

    NAME = 'bigdecimal'
    CAPABILITIES = frozenset({'decimals', 'functions', 'power'})
    PRECISION = 50
    GUARD_DIGITS = 10
    EPSILON = decimal.Decimal('1e-40')
    FACTORIAL_LIMIT = 10000
    FACTORIAL_OVERFLOW = 'Factorial operand is too large for bigdecimal mode.'
    TRAPS = [decimal.InvalidOperation,
             decimal.DivisionByZero,
             decimal.Overflow]

    def __init__(self, precision=None):
        self.precision = precision or type(self).PRECISION
        self.context = decimal.Context(prec=self.precision,
                                       rounding=decimal.ROUND_HALF_EVEN,
                                       traps=type(self).TRAPS)
        self._mp = None

    @property
    def mp(self):
        '''
        Private mpmath context, created on first use.
        '''
        if self._mp is None:
            self._mp = mpmath.MPContext()
            self._mp.dps = self.precision + self.GUARD_DIGITS
        return self._mp

    @wrap_user_errors("Invalid decimal literal '{1}'.", InvalidLiteralError)
    def parse(self, literal):
        value = self.context.create_decimal(literal)
        if not value.is_finite():
            raise ValueError(literal)
        return value

    def variable(self, name, value):
        value = float(value)
        if not math.isfinite(value):
            raise CalcOverflowError(
                "Variable '{}' is out of range for bigdecimal mode.".format(
                    name))
        # Shortest repr, so 0.1 is 0.1 and not its binary expansion.
        return self.context.create_decimal(repr(value))

    def format(self, value):
        if value.is_zero():
            return '0'
        value = value.normalize(self.context)
        if -self.precision < value.adjusted() < self.precision:
            return '{:f}'.format(value)
        return str(value)

    def _factorial(self, n):
        # Exact, then rounded once.
        return self.context.plus(decimal.Decimal(math.factorial(n)))

    def _integer(self, n):
        return decimal.Decimal(n)

    def is_zero(self, value):
        return self.context.abs(value) <= self.EPSILON

    def _integral(self, value):
        rounded = value.to_integral_value(rounding=decimal.ROUND_HALF_UP,
                                          context=self.context)
        if not self.is_zero(self.context.subtract(value, rounded)):
            return None
        return int(rounded)

    @wrap_user_errors('Cannot add {1} and {2}.')
    def add(self, lhs, rhs):
        return self.context.add(lhs, rhs)

    @wrap_user_errors('Cannot subtract {2} from {1}.')
    def subtract(self, lhs, rhs):
        return self.context.subtract(lhs, rhs)

    @wrap_user_errors('Cannot multiply {1} by {2}.')
    def multiply(self, lhs, rhs):
        return self.context.multiply(lhs, rhs)

    def negate(self, value):
        return self.context.minus(value)

    @wrap_user_errors('Cannot divide {1} by {2}.')
    def _divide(self, lhs, rhs):
        return self.context.divide(lhs, rhs)

    @wrap_user_errors('Cannot raise {1} to the power of {2}.')
    def _power(self, lhs, rhs):
        return self.context.power(lhs, rhs)

    @wrap_user_errors('Cannot compute {1}({2}).')
    def _apply(self, name, value):
        mp = self.mp
        result = getattr(mp, name)(mp.mpf(format(value, 'e')))
        return self.context.create_decimal(mp.nstr(result, mp.dps))


BACKENDS = {
    backend.NAME: backend
    for backend
    in (FloatBackend, BigIntBackend, BigDecimalBackend)
}


def backend_for(mode):
    '''
    Return a fresh backend for mode name.
    '''
    try:
        return BACKENDS[mode]()
    except KeyError:
        raise ValueError('Unknown mode {!r}, expected one of {}'.format(
            mode, ', '.join(sorted(BACKENDS)))) from None


__all__ = ('Backend', 'FloatBackend', 'BigIntBackend', 'BigDecimalBackend',
           'BACKENDS', 'FUNCTIONS', 'backend_for')
