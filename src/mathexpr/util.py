from functools import wraps


class MathExprError(Exception):
    '''
    Base of every error raised by the expression engine.

    Carries the offending token, when there is one, for diagnostics.
    '''
    def __init__(self, message, token=None):
        super().__init__(message)
        self.message = message
        self.token = token

    def __str__(self):
        return self.message


class ExpressionSyntaxError(MathExprError):
    '''
    Text could not be tokenized, or tokens could not be parsed.
    '''


class EvaluationError(MathExprError):
    '''
    RPN could not be evaluated, or a function/operator rejected its operands.
    '''


def wrap_user_errors(fmt):
    '''
    Decorator converting arithmetic failures into EvaluationErrors.

    Passes through MathExprErrors. Positional arguments are available to fmt.
    '''
    def decorator(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except MathExprError:
                raise
            except (ArithmeticError, ValueError) as e:
                raise EvaluationError(fmt.format(*args, **kwargs)) from e
        return wrapper
    return decorator
