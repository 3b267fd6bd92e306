'''
Entry points: expression string in, value out.

Each call tokenizes, converts to postfix and runs a fresh machine; nothing
is kept between calls.
'''

import logging

from .numeric import FloatBackend, BigIntBackend, BigDecimalBackend, \
    backend_for
from .lexer import Lexer
from .converter import Converter
from .machine import Machine


logger = logging.getLogger(__name__)


def postfix(expression, backend=None):
    '''
    Return the postfix tokens of expression, for backend's grammar.
    '''
    tokens = Lexer(backend).tokenize(expression)
    logger.debug('tokens: %s', tokens)
    return Converter().convert(tokens)


def _run(backend, expression, variables):
    logger.debug('evaluating %r in %s mode', expression, backend.NAME)
    return Machine(backend, variables).run(postfix(expression, backend))


def evaluate(expression, variables=None):
    '''
    Evaluate expression in double precision, returning a float.

    :param variables: Mapping of lowercase names to floats, only read.
    '''
    return _run(FloatBackend(), expression, variables)


def evaluate_bigint(expression, variables=None):
    '''
    Evaluate expression with arbitrary-precision integers.

    No decimal points, functions or ^. Returns the result as a decimal string.
    '''
    backend = BigIntBackend()
    return backend.format(_run(backend, expression, variables))


def evaluate_bigdecimal(expression, variables=None):
    '''
    Evaluate expression with 50 significant decimal digits.

    Returns the result as a string, trailing zeros stripped.
    '''
    backend = BigDecimalBackend()
    return backend.format(_run(backend, expression, variables))


def evaluate_as(mode, expression, variables=None):
    '''
    Evaluate expression in the named mode, returning the formatted result.
    '''
    backend = backend_for(mode)
    return backend.format(_run(backend, expression, variables))
