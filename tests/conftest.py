import logging
from types import MappingProxyType

from pytest import fixture, Item

from exprcalc.numeric import (BACKENDS, FloatBackend, BigIntBackend,
                              BigDecimalBackend)


audit = logging.getLogger('exprcalc.tests.audit')


def pytest_assertion_pass(item: Item,
                          lineno: int,
                          orig: str,
                          expl: str) -> None:
    '''
    Log every passing assertion, in case we later need to audit a run.

    Only called with enable_assertion_pass_hook set; use with
    pytest -o enable_assertion_pass_hook=true --log-level=DEBUG -rP.
    Logged rather than printed, so capsys assertions stay untouched.
    '''
    where = '{}:{}'.format(item.name, lineno)
    audit.debug('given %s %s', where, orig)
    # Last two lines are the full-diff hint.
    audit.debug('actual %s %s', where,
                '\n'.join(str(expl).splitlines()[:-2]))


@fixture
def variables():
    '''
    Read-only variables, so any attempt to write to them fails loudly.
    '''
    return MappingProxyType({'x': 2.5, 'n': 4.0, 'big': 1e19})


@fixture(params=sorted(BACKENDS))
def backend(request):
    return BACKENDS[request.param]()


@fixture
def floats():
    return FloatBackend()


@fixture
def bigints():
    return BigIntBackend()


@fixture
def bigdecimals():
    return BigDecimalBackend()
