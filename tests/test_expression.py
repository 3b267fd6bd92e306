'''
End to end evaluation tests
'''

import math

from exprcalc import (evaluate, evaluate_bigint, evaluate_bigdecimal,
                      evaluate_as)
from exprcalc.util import (CalcError, ExpressionSyntaxError,
                           InvalidLiteralError, UnknownIdentifierError,
                           DomainError,
                           CalcArithmeticError, CalcOverflowError)

from pytest import raises, approx, mark


@mark.parametrize('expression, expected', [
    ('2+3*4', 14),
    ('(2+3)*4', 20),
    ('42', 42),
    ('10-4-3', 3),
    ('2*(3+4)*5', 70),
    ('7/2', 3.5),
    ('-(3+2)', -5),
    ('-2^2', 4),
    ('2^-1', 0.5),
    ('2^3^2', 512),
    ('(2^3)^2', 64),
    ('5!', 120),
    ('3!!', 720),
    ('0!', 1),
    ('2 x 3', 6),
    ('8 : 2', 4),
    ('10 X 2', 20),
    ('  1 + .5 ', 1.5),
    ('SIN(0)', 0),
    ('sqrt(16) + exp(0)', 5),
    ('-sqrt(4)', -2),
])
def test_evaluate(expression, expected):
    assert evaluate(expression) == expected


@mark.parametrize('expression, expected', [
    ('x+1', 3.5),
    ('X * 2', 5.0),
    ('-x^2', -6.25),
    ('2^-n', 1 / 16),
    ('2*-x', -5.0),
    ('n!', 24.0),
])
def test_variables(variables, expression, expected):
    assert evaluate(expression, variables) == expected


def test_unknown_variable(variables):
    with raises(UnknownIdentifierError, match='Unknown variable: y'):
        evaluate('y+1', variables)


@mark.parametrize('expression, error', [
    ('-1!', DomainError),
    ('2.5!', DomainError),
    ('171!', CalcOverflowError),
    ('5/0', CalcArithmeticError),
    ('sqrt(-1)', DomainError),
    ('log(0)', DomainError),
    ('asin(2)', DomainError),
    ('acos(-2)', DomainError),
    ('cot(0)', DomainError),
    ('(-8)^(1/3)', DomainError),
    ('0^-1', DomainError),
    ('sinh(1000)', CalcOverflowError),
    ('(2+3', ExpressionSyntaxError),
    ('2+3)', ExpressionSyntaxError),
    ('sin 2', ExpressionSyntaxError),
    ('2 +', ExpressionSyntaxError),
])
def test_evaluate_errors(expression, error):
    with raises(error):
        evaluate(expression)


def test_errors_are_builtin_kinds():
    with raises(ArithmeticError):
        evaluate('1/0')
    with raises(OverflowError):
        evaluate('200!')
    with raises(LookupError):
        evaluate('nope')
    with raises(ValueError):
        evaluate('sqrt(-2)')


def test_functions():
    assert evaluate('sin(1)^2 + cos(1)^2') == approx(1.0)
    assert evaluate('atan(1) * 4') == approx(math.pi)
    assert evaluate('log(exp(2))') == approx(2.0)
    assert evaluate('tan(1)') == approx(math.tan(1))


def test_idempotent(variables):
    results = {evaluate('x^2 + sin(x) - n!', variables) for _ in range(5)}
    assert len(results) == 1


@mark.parametrize('expression, expected', [
    ('6/2', '3'),
    ('-7/7', '-1'),
    ('20!', '2432902008176640000'),
    ('123456789012345678901234567890 * 10',
     '1234567890123456789012345678900'),
    ('-(2-5)', '3'),
    ('0 - 30!', '-265252859812191058636308480000000'),
])
def test_bigint(expression, expected):
    assert evaluate_bigint(expression) == expected


@mark.parametrize('expression, error', [
    ('5/2', CalcArithmeticError),
    ('1/0', CalcArithmeticError),
    ('1.5 + 1', ExpressionSyntaxError),
    ('2^3', ExpressionSyntaxError),
    ('sqrt(4)', ExpressionSyntaxError),
    ('-3!', DomainError),
])
def test_bigint_errors(expression, error):
    with raises(error):
        evaluate_bigint(expression)


def test_bigint_variables(variables):
    assert evaluate_bigint('n! * 2', variables) == '48'
    with raises(CalcOverflowError):
        evaluate_bigint('x + 1', variables)
    with raises(CalcOverflowError):
        evaluate_bigint('big + 1', variables)


@mark.parametrize('expression, expected', [
    ('0.1 + 0.2', '0.3'),
    ('1/3', '0.' + '3' * 50),
    ('2^10', '1024'),
    ('2^3^2', '512'),
    ('5!', '120'),
    ('1 - 0.9', '0.1'),
    ('-(0.5)', '-0.5'),
    ('sqrt(16)', '4'),
    ('sin(0)', '0'),
])
def test_bigdecimal(expression, expected):
    assert evaluate_bigdecimal(expression) == expected


def test_bigdecimal_variables(variables):
    assert evaluate_bigdecimal('x * 3', variables) == '7.5'
    assert evaluate_bigdecimal('y * 3', {'y': 0.1}) == '0.3'


def test_bigdecimal_large_factorial():
    result = evaluate_bigdecimal('10000!')
    assert result.startswith('2.84625968091705451890641')
    assert result.endswith('E+35659')
    with raises(CalcOverflowError):
        evaluate_bigdecimal('10001!')


@mark.parametrize('expression, error', [
    ('1/0', CalcArithmeticError),
    ('log(-1)', DomainError),
    ('0.5!', DomainError),
    ('(-8)^0.5', DomainError),
    ('(1', ExpressionSyntaxError),
])
def test_bigdecimal_errors(expression, error):
    with raises(error):
        evaluate_bigdecimal(expression)


def test_evaluate_as():
    assert evaluate_as('float', '1/4') == '0.25'
    assert evaluate_as('bigint', '2*21') == '42'
    assert evaluate_as('bigdecimal', '0.1*3') == '0.3'
    with raises(ValueError):
        evaluate_as('complex', '1')


def test_every_error_is_a_calc_error():
    for expression in ('1/0', 'y', '(', 'sqrt(-1)', '171!'):
        with raises(CalcError):
            evaluate(expression)


@mark.parametrize('expression', ['1' * 400,
                                 '-' + '1' * 400,
                                 '1' * 400 + ' - ' + '1' * 400])
def test_literal_out_of_double_range(expression):
    with raises(InvalidLiteralError, match='Invalid number literal'):
        evaluate(expression)
