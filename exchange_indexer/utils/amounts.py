# exchange_indexer/utils/amounts.py
"""
Utility functions for handling token amounts in blockchain operations
"""

import functools
from decimal import Context, Decimal, ROUND_HALF_EVEN, localcontext
from typing import Union

from ..types.constants import ZERO_BD, ONE_BD


# Every decimal operation on a cumulative field runs under this context so
# results do not depend on the interpreter's default precision.
DECIMAL_CONTEXT = Context(prec=80, rounding=ROUND_HALF_EVEN)


def decimal_context():
    return localcontext(DECIMAL_CONTEXT)


def with_decimal_context(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        with decimal_context():
            return func(*args, **kwargs)
    return wrapper


def amount_to_int(amount: Union[str, int, None]) -> int:
    """Convert amount to int with robust type handling"""
    if amount is None:
        return 0
    if isinstance(amount, str):
        if amount.strip() == "":
            return 0
        return int(amount)
    return int(amount)


def exponent_to_decimal(decimals: int) -> Decimal:
    result = ONE_BD
    for _ in range(decimals):
        result = result * 10
    return result


@with_decimal_context
def convert_token_to_decimal(amount: Union[str, int], decimals: int) -> Decimal:
    """Scale a raw integer amount down by the token's decimal precision.

    Zero-precision tokens are returned unconverted.
    """
    raw = Decimal(amount_to_int(amount))
    if decimals == 0:
        return raw
    return raw / exponent_to_decimal(decimals)


@with_decimal_context
def safe_div(amount0: Decimal, amount1: Decimal) -> Decimal:
    if amount1 == ZERO_BD:
        return ZERO_BD
    return amount0 / amount1
