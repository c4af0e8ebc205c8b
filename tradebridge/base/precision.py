"""
Tick-size precision helpers.

Markets express precision as an increment (tick size for prices, lot size
for amounts). Amounts are truncated to the lot so an order never exceeds the
requested size; prices are rounded to the nearest tick.
"""

from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal
from typing import Optional, Union

from tradebridge.base.fields import to_decimal
from tradebridge.errors import InvalidOrder

Number = Union[Decimal, int, str]


def _to_step(value: Decimal, step: Decimal, rounding: str) -> Decimal:
    return ((value / step).to_integral_value(rounding=rounding) * step).quantize(step)


def _invalid(message: str, exchange_id: Optional[str]) -> InvalidOrder:
    if exchange_id:
        message = f"{exchange_id} {message}"
    return InvalidOrder(message, exchange_id=exchange_id)


def amount_to_precision(
    amount: Number,
    step: Optional[Decimal],
    exchange_id: Optional[str] = None,
) -> str:
    """
    Truncate an amount to a multiple of the lot size.

    Args:
        amount: Requested amount.
        step: Lot size, or None to send the amount unchanged.
        exchange_id: Exchange reported on the raised error.

    Returns:
        str: Amount formatted for the wire.

    Raises:
        InvalidOrder: If a positive amount truncates to zero.

    Example:
        >>> amount_to_precision("250", Decimal("100"))
        '200'
    """
    value = to_decimal(amount)
    if value is None:
        raise _invalid("amount is required", exchange_id)
    if step is None:
        return format(value, "f")
    result = _to_step(value, step, ROUND_DOWN)
    if value > 0 and result == 0:
        raise _invalid(
            f"amount {value} must be greater than minimum amount precision of {step}",
            exchange_id,
        )
    return format(result, "f")


def price_to_precision(
    price: Number,
    step: Optional[Decimal],
    exchange_id: Optional[str] = None,
) -> str:
    """
    Round a price to the nearest multiple of the tick size.

    Example:
        >>> price_to_precision("0.0464567", Decimal("0.000001"))
        '0.046457'
    """
    value = to_decimal(price)
    if value is None:
        raise _invalid("price is required", exchange_id)
    if step is None:
        return format(value, "f")
    return format(_to_step(value, step, ROUND_HALF_UP), "f")
