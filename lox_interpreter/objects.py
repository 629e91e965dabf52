"""
Runtime values and the operators defined on them.

Lox values are plain Python objects: ``float`` for numbers, ``str``,
``bool``, ``None`` for nil, and ``LoxCallable`` instances. Operators that
are not defined for their operands return one of the two error sentinels
below; the interpreter turns those into runtime errors before they can be
stored or printed.
"""
import math
from decimal import Decimal
from typing import Any

from .callables import LoxCallable
from .errors import InternalError


class ErrorSentinel:
    """Marks an operation that is not defined for its operand kinds."""
    def __init__(self, name: str):
        self.name = name

    def __repr__(self) -> str:
        return f"<{self.name}>"


ARITHMETIC_ERROR = ErrorSentinel("ArithmeticError")
COMPARISON_ERROR = ErrorSentinel("ComparisonError")


def is_error(value: Any) -> bool:
    return isinstance(value, ErrorSentinel)


def _is_number(value: Any) -> bool:
    # bool is a subclass of int, never of float
    return isinstance(value, float)


def _both_numbers(left: Any, right: Any) -> bool:
    return _is_number(left) and _is_number(right)


def type_name(value: Any) -> str:
    """The kind of a value as a Lox user would name it."""
    if value is None: return "nil"
    if isinstance(value, bool): return "boolean"
    if _is_number(value): return "number"
    if isinstance(value, str): return "string"
    if isinstance(value, LoxCallable): return "function"
    return type(value).__name__


# --- Arithmetic ---

def add(left: Any, right: Any) -> Any:
    if _both_numbers(left, right):
        return left + right
    if isinstance(left, str) and isinstance(right, str):
        return left + right
    if isinstance(left, str) and _is_number(right):
        return left + stringify(right)
    if _is_number(left) and isinstance(right, str):
        return stringify(left) + right
    return ARITHMETIC_ERROR


def sub(left: Any, right: Any) -> Any:
    if _both_numbers(left, right):
        return left - right
    return ARITHMETIC_ERROR


def mul(left: Any, right: Any) -> Any:
    if _both_numbers(left, right):
        return left * right
    return ARITHMETIC_ERROR


def div(left: Any, right: Any) -> Any:
    if not _both_numbers(left, right):
        return ARITHMETIC_ERROR
    if right == 0.0:
        # IEEE 754: x/0 is a signed infinity, 0/0 is nan
        if left == 0.0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right


# --- Ordering ---

def less(left: Any, right: Any) -> Any:
    if _both_numbers(left, right):
        return left < right
    return COMPARISON_ERROR


def less_eq(left: Any, right: Any) -> Any:
    if _both_numbers(left, right):
        return left <= right
    return COMPARISON_ERROR


def greater(left: Any, right: Any) -> Any:
    if _both_numbers(left, right):
        return left > right
    return COMPARISON_ERROR


def greater_eq(left: Any, right: Any) -> Any:
    if _both_numbers(left, right):
        return left >= right
    return COMPARISON_ERROR


# --- Equality ---

def eq(left: Any, right: Any) -> Any:
    """
    Equality is only defined between values of the same kind. nil may be
    compared with anything and is equal only to nil.
    """
    if left is None or right is None:
        return left is None and right is None
    if _both_numbers(left, right):
        return left == right
    if isinstance(left, str) and isinstance(right, str):
        return left == right
    if isinstance(left, bool) and isinstance(right, bool):
        return left == right
    if isinstance(left, LoxCallable) and isinstance(right, LoxCallable):
        return left is right
    return COMPARISON_ERROR


def neq(left: Any, right: Any) -> Any:
    result = eq(left, right)
    if is_error(result):
        return result
    return not result


def is_truthy(value: Any) -> bool:
    """nil and false are falsey, everything else is truthy."""
    if value is None: return False
    if isinstance(value, bool): return value
    return True


def _format_number(value: float) -> str:
    """Plain decimal digits, never an exponent. Integral values drop the '.0'."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    # repr gives the shortest round-tripping digits; Decimal spells them out.
    text = format(Decimal(repr(value)), 'f')
    if text.endswith(".0"):
        text = text[:-2]
    return text


def stringify(value: Any) -> str:
    if is_error(value):
        raise InternalError(f"Attempted to display the error sentinel {value!r}.")
    if value is None: return "nil"
    if isinstance(value, bool): return "true" if value else "false"
    if _is_number(value): return _format_number(value)
    return str(value)
