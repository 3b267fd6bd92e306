from functools import wraps
import decimal


class CalcError(Exception):
    '''
    Base of every error a bad expression can cause.

    The message is always args[0].
    '''


class ExpressionSyntaxError(CalcError, ValueError):
    pass


class InvalidLiteralError(ExpressionSyntaxError):
    pass


class UnknownIdentifierError(CalcError, LookupError):
    pass


class DomainError(CalcError, ValueError):
    pass


class CalcArithmeticError(CalcError, ArithmeticError):
    pass


class CalcOverflowError(CalcError, OverflowError):
    pass


class StructuralError(CalcError):
    pass


# Checked in order. decimal.DivisionByZero is a ZeroDivisionError, and
# decimal.Overflow is neither an OverflowError nor a ValueError.
_TRANSLATIONS = (
    (ZeroDivisionError, CalcArithmeticError),
    ((OverflowError, decimal.Overflow), CalcOverflowError),
    ((ValueError, decimal.InvalidOperation), DomainError),
)


def wrap_user_errors(fmt, error=None):
    '''
    Decorator that converts library exceptions into CalcErrors.

    Passes through CalcErrors. The message is fmt formatted with the call's
    arguments. If error is given, every other exception becomes one;
    otherwise the class is picked from the kind of exception raised.
    '''
    def decorator(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except CalcError:
                raise
            except Exception as e:
                message = fmt.format(*args, **kwargs)
                if error is not None:
                    raise error(message) from e
                for caught, translated in _TRANSLATIONS:
                    if isinstance(e, caught):
                        raise translated(message) from e
                raise
        return wrapper
    return decorator
