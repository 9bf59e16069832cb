"""Pricing engine — line totals, order totals and cancellation fees.

Pure functions over anything shaped like a line item (cart items, order line
items, item candidates): ``quantity``, ``is_custom``, ``unit_price`` and
``custom_price``. Amounts are integer minor units (cents); nothing here touches
floating point, so totals recomputed any number of times never drift.
"""

from dataclasses import dataclass

from ordering.errors import InvalidPrice, InvalidTransition
from ordering.order.status import OrderStatus

# Flat penalty for cancelling an order the chef has already accepted ($50.00).
CANCELLATION_FEE = 5000

DEFAULT_CURRENCY = "USD"

_CURRENCY_SYMBOLS = {"USD": "$", "EUR": "€", "GBP": "£"}


@dataclass(frozen=True)
class CancellationCharge:
    """Outcome of cancelling an order: what is charged and what it replaces."""

    fee: int
    new_total: int
    original_amount: int


def unit_price_of(item) -> int | None:
    """Return the effective unit price: the chef's price for custom items, else the catalog price."""
    return item.custom_price if item.is_custom else item.unit_price


def line_total(item, require_final: bool = False) -> int:
    """Quantity times effective unit price.

    Unset custom prices count as zero unless ``require_final`` is set, in which
    case they raise ``InvalidPrice`` like negative prices do.
    """
    price = unit_price_of(item)
    if price is None:
        if require_final:
            raise InvalidPrice({"price": [f"Item '{_label(item)}' has no price yet"]})
        price = 0
    if price < 0:
        raise InvalidPrice({"price": [f"Item '{_label(item)}' has a negative price"]})
    return item.quantity * price


def order_total(items, require_final: bool = False) -> int:
    return sum((line_total(item, require_final=require_final) for item in items), 0)


def cancellation_fee(order) -> CancellationCharge:
    """Compute the charge for cancelling ``order`` from its current (pre-cancellation) status.

    Accepted orders are charged the flat ``CANCELLATION_FEE``, which becomes the
    new total. Pending orders cost nothing. The previous total is always kept
    as ``original_amount``.
    """
    status = OrderStatus(order.status)
    original_amount = order.total_amount or 0

    if status == OrderStatus.ACCEPTED:
        return CancellationCharge(fee=CANCELLATION_FEE, new_total=CANCELLATION_FEE, original_amount=original_amount)
    if status == OrderStatus.PENDING:
        return CancellationCharge(fee=0, new_total=0, original_amount=original_amount)

    raise InvalidTransition({"status": [f"An order in {status.value} state cannot be cancelled"]})


def format_amount(amount: int | None, currency: str = DEFAULT_CURRENCY) -> str:
    """Render minor units for people, e.g. ``4000`` -> ``$40.00``."""
    amount = amount or 0
    symbol = _CURRENCY_SYMBOLS.get(currency, f"{currency} ")
    sign = "-" if amount < 0 else ""
    whole, cents = divmod(abs(amount), 100)
    return f"{sign}{symbol}{whole:,}.{cents:02d}"


def _label(item) -> str:
    return getattr(item, "custom_dish_name", None) or getattr(item, "dish_name", None) or "item"
