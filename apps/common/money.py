"""
Monetary arithmetic helpers.

Every money value that enters the ledger (API payloads, ORM rows, bulk
payment items) passes through these two functions before it is stored or
compared, so balance checks and stored amounts always agree to the cent.

Example:
    >>> round2('10.005')
    Decimal('10.01')
    >>> round2(None)
    Decimal('0.00')
"""

import math
from decimal import DefaultContext, Decimal, InvalidOperation, ROUND_HALF_UP, localcontext

ZERO = Decimal('0.00')
CENT = Decimal('0.01')

# Largest value a DecimalField(max_digits=12, decimal_places=2) column holds
MAX_AMOUNT = Decimal('9999999999.99')

_MAX_EXPONENT = DefaultContext.Emax


def to_decimal(value) -> Decimal:
    """
    Coerce an arbitrary value to a finite Decimal.

    None, booleans, unparseable strings, NaN and infinities all become zero.
    Floats go through their shortest repr so 10.005 stays 10.005 instead of
    picking up binary noise. Never raises.
    """
    if value is None or isinstance(value, bool):
        return Decimal('0')

    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        if not math.isfinite(value):
            return Decimal('0')
        result = Decimal(repr(value))
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return Decimal('0')

    # Anything past the default exponent limit would overflow to Infinity
    if not result.is_finite() or result.adjusted() > _MAX_EXPONENT:
        return Decimal('0')
    return result


def round2(value) -> Decimal:
    """Round to cents, half-up (10.005 -> 10.01, 10.004 -> 10.00)."""
    number = to_decimal(value)
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, number.adjusted() + 3)
        return number.quantize(CENT, rounding=ROUND_HALF_UP)


def exceeds_max_amount(value) -> bool:
    """True when the rounded value does not fit a money column."""
    return round2(value).copy_abs() > MAX_AMOUNT


def format_money(value, currency='') -> str:
    """Render an amount for user-facing messages, e.g. 'S/ 50.00'."""
    amount = f'{round2(value):.2f}'
    return f'{currency} {amount}' if currency else amount
