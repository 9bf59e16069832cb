"""Checkout — turns the customer's cart into a pending order.

Everything the order needs is checked before any state changes: the cart has
items, dish types are chosen, the address and payment method belong to the
customer and the service time falls inside the booking window. The order (with
all of its line items, carried by one OrderPlaced event) and the emptied cart
are then staged in the same unit of work, so either both are committed or
neither is.

The unit of work commits after the handler returns, so callers go through
``place_order``, which reports a failed commit as ``CheckoutFailed`` too.
"""

from datetime import UTC, datetime, timedelta

import structlog
from protean import handle
from protean.exceptions import InvalidOperationError, ObjectNotFoundError, ValidationError
from protean.fields import DateTime, Identifier
from protean.utils.globals import current_domain

from ordering.cart.cart import Cart
from ordering.cart.store import active_cart_for
from ordering.directory import get_directory
from ordering.domain import ordering
from ordering.errors import (
    CheckoutFailed,
    MissingSelection,
    RecordNotFound,
    SchedulingTooFar,
    SchedulingTooSoon,
)
from ordering.order.order import Order

logger = structlog.get_logger(__name__)

# Chefs need time to shop and travel
MIN_LEAD_TIME = timedelta(hours=2)

# Bookings open two weeks ahead
MAX_BOOKING_WINDOW = timedelta(days=14)

FAILED_MESSAGE = "Your order could not be placed. Your cart has not been changed, please try again."

# Raised by the handler itself while checking the cart; passed through as-is
_REJECTIONS = (ValidationError, ObjectNotFoundError, InvalidOperationError)


@ordering.command(part_of="Cart")
class Checkout:
    customer_id = Identifier(required=True)
    address_id = Identifier()
    payment_method_id = Identifier()
    scheduled_at = DateTime(required=True)


def validate_schedule(scheduled_at, now=None):
    """Return ``scheduled_at`` as an aware datetime inside the booking window.

    Naive datetimes are read as UTC.
    """
    now = now or datetime.now(UTC)
    if scheduled_at.tzinfo is None:
        scheduled_at = scheduled_at.replace(tzinfo=UTC)

    if scheduled_at < now + MIN_LEAD_TIME:
        raise SchedulingTooSoon(
            {"scheduled_at": ["Please schedule at least 2 hours in advance so the chef can prepare"]}
        )
    if scheduled_at > now + MAX_BOOKING_WINDOW:
        raise SchedulingTooFar({"scheduled_at": ["Bookings can be made at most 14 days in advance"]})
    return scheduled_at


@ordering.command_handler(part_of=Cart)
class CheckoutHandler:
    @handle(Checkout)
    def checkout(self, command):
        directory = get_directory()
        customer_id = str(command.customer_id)

        cart = active_cart_for(customer_id)
        if not cart.items:
            raise ValidationError({"cart": ["Your cart is empty"]})

        missing = [item.dish_name for item in cart.items if item.requires_dish_type and not item.dish_type]
        if missing:
            raise MissingSelection({"dish_type": [f"Please choose a dish type for: {', '.join(missing)}"]})

        if not command.address_id:
            raise MissingSelection({"address_id": ["Please select a delivery address"]})
        if not command.payment_method_id:
            raise MissingSelection({"payment_method_id": ["Please select a payment method"]})

        scheduled_at = validate_schedule(command.scheduled_at)

        customer = directory.get_customer(customer_id)
        if customer is None:
            raise RecordNotFound({"customer_id": [f"Customer {customer_id} does not exist"]})

        address = directory.get_address(str(command.address_id))
        if address is None or str(address.customer_id) != customer_id:
            raise RecordNotFound({"address_id": ["Delivery address not found"]})

        payment_method = directory.get_payment_method(str(command.payment_method_id))
        if payment_method is None or str(payment_method.customer_id) != customer_id:
            raise RecordNotFound({"payment_method_id": ["Payment method not found"]})

        # Custom requests carry the chef of the page they were made on, which
        # is the cart's chef.
        chef = directory.get_chef(cart.current_chef_id())
        if chef is None:
            raise RecordNotFound({"chef_id": [f"Chef {cart.current_chef_id()} does not exist"]})

        try:
            order = Order.place(
                customer=customer,
                chef=chef,
                address=address,
                payment_method=payment_method,
                requested_time=scheduled_at,
                cart_items=cart.items,
            )
            current_domain.repository_for(Order).add(order)

            cart.clear(reason="checked_out")
            current_domain.repository_for(Cart).add(cart)
        except Exception as exc:
            logger.exception("checkout_failed", customer_id=customer_id, cart_id=str(cart.id))
            raise CheckoutFailed({"checkout": [FAILED_MESSAGE]}) from exc

        logger.info(
            "order_placed",
            order_id=str(order.id),
            customer_id=customer_id,
            chef_id=str(chef.chef_id),
            total_amount=order.total_amount,
            line_items=len(order.items),
            requested_time=scheduled_at.isoformat(),
        )
        return str(order.id)


def place_order(command: Checkout) -> str:
    """Process ``command`` and return the new order's id.

    Protean rolls the unit of work back when its commit fails (a store outage,
    or a cart changed by another request), so nothing is persisted; the
    failure is reported as ``CheckoutFailed``.
    """
    try:
        return current_domain.process(command, asynchronous=False)
    except _REJECTIONS:
        raise
    except Exception as exc:
        logger.exception("checkout_commit_failed", customer_id=str(command.customer_id))
        raise CheckoutFailed({"checkout": [FAILED_MESSAGE]}) from exc
