"""
Monetary Value Module

Parsing, arithmetic and display helpers for monetary amounts and rates.
NEVER uses float for monetary values: every amount entering the ledger is
turned into a finite Decimal here.

Ledger arithmetic and display rounding do not use the global 28 digit
context. Each operation gets a context wide enough for its operands, so sums
and differences are exact and display rounding never overflows.
"""

from decimal import (
    Context, Decimal, DivisionByZero, Inexact, InvalidOperation, Overflow,
    ROUND_HALF_UP, getcontext
)
from typing import Union
import re

# Set global decimal context for financial precision
getcontext().prec = 28

DISPLAY_PRECISION = 2

# Largest digit span (integer digits plus fractional digits) of a single amount
MAX_AMOUNT_DIGITS = 60

AmountLike = Union[str, int, float, Decimal]

_STRIP_PATTERN = re.compile(r'[\s$,]')


def digit_span(*values: Decimal) -> int:
    """Digits needed to hold every value exactly at a common exponent"""
    high = max(max(value.adjusted() for value in values), 0)
    low = min(min(value.as_tuple().exponent for value in values), 0)
    return high - low + 1


def exact_context(*values: Decimal, extra_digits: int = 2) -> Context:
    """
    Decimal context wide enough to combine the given values without rounding

    Inexact is trapped, so any operation that would have to round raises
    instead of silently losing digits.
    """
    return Context(
        prec=digit_span(*values) + extra_digits,
        rounding=ROUND_HALF_UP,
        traps=[InvalidOperation, DivisionByZero, Overflow, Inexact]
    )


def parse_decimal(value: AmountLike) -> Decimal:
    """
    Convert caller input to a finite Decimal

    Accepts Decimal, int, float and strings such as "100", "-30.5" or
    "$1,250.00". Currency symbols, whitespace and thousands separators are
    ignored.

    Args:
        value: Raw amount supplied by the caller

    Returns:
        Decimal value

    Raises:
        ValueError: If the value is empty, malformed, not finite, or spans
                    more than MAX_AMOUNT_DIGITS digits
    """
    if isinstance(value, bool) or value is None:
        raise ValueError(f"Cannot convert {value!r} to Decimal")

    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float)):
        result = Decimal(str(value))
    elif isinstance(value, str):
        clean_value = _STRIP_PATTERN.sub('', value)
        if not clean_value:
            raise ValueError("Value must be a non-empty string")
        try:
            result = Decimal(clean_value)
        except InvalidOperation:
            raise ValueError(f"Cannot convert '{value}' to Decimal")
    else:
        raise ValueError(f"Cannot convert {type(value).__name__} to Decimal")

    if not result.is_finite():
        raise ValueError(f"Amount must be finite, got '{value}'")

    if digit_span(result) > MAX_AMOUNT_DIGITS:
        raise ValueError(f"Amount must not span more than {MAX_AMOUNT_DIGITS} digits")

    return result


def add_exact(left: Decimal, right: Decimal) -> Decimal:
    """Sum of two Decimals with no rounding"""
    return exact_context(left, right).add(left, right)


def subtract_exact(left: Decimal, right: Decimal) -> Decimal:
    """Difference of two Decimals with no rounding"""
    return exact_context(left, right).subtract(left, right)


def round_for_display(value: Decimal, precision: int = DISPLAY_PRECISION) -> Decimal:
    """Round a Decimal half-up to the display precision"""
    context = Context(prec=digit_span(value) + precision + 2, rounding=ROUND_HALF_UP)
    return value.quantize(Decimal(1).scaleb(-precision), context=context)


def format_money(value: Decimal, precision: int = DISPLAY_PRECISION) -> str:
    """Format for display, e.g. Decimal('-30') -> '-30.00'"""
    return f"{round_for_display(value, precision):.{precision}f}"


def rate_to_percentage(rate: Decimal, precision: int = DISPLAY_PRECISION) -> Decimal:
    """Express a fractional rate as a rounded percentage (0.035 -> 3.50)"""
    return round_for_display(rate.scaleb(2, context=exact_context(rate, extra_digits=3)), precision)


def format_percentage(rate: Decimal, precision: int = DISPLAY_PRECISION) -> str:
    """Format a fractional rate for display, e.g. Decimal('0.035') -> '3.50%'"""
    return f"{rate_to_percentage(rate, precision):.{precision}f}%"
