"""
Display formatting for money values.
"""

import math
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any

CURRENCY_SYMBOL = "$"


def format_currency(amount: Any, decimals: int = 2) -> str:
    """Format a money amount as a fixed-point string with a currency symbol.

    None, NaN, infinities and non-numeric input render as "$0.00".
    """
    if isinstance(amount, bool) or not isinstance(amount, (int, float, Decimal)):
        return f"{CURRENCY_SYMBOL}0.00"
    if isinstance(amount, Decimal):
        if not amount.is_finite():
            return f"{CURRENCY_SYMBOL}0.00"
        value = amount
    elif isinstance(amount, float):
        if not math.isfinite(amount):
            return f"{CURRENCY_SYMBOL}0.00"
        value = Decimal(str(amount))
    else:
        value = Decimal(amount)

    quantum = Decimal(1).scaleb(-decimals) if decimals > 0 else Decimal(1)
    with localcontext() as ctx:
        # Enough precision for every integer digit plus the requested decimals
        ctx.prec = max(value.adjusted(), 0) + max(decimals, 0) + 2
        rounded = value.quantize(quantum, rounding=ROUND_HALF_UP)
    if rounded == 0:
        # Avoid rendering "-0.00"
        rounded = abs(rounded)
    return f"{CURRENCY_SYMBOL}{rounded:f}"
