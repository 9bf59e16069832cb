"""Domain events for the Order aggregate.

All events are versioned, immutable facts. They are persisted to the event
store, replayed through the Order's ``@apply`` methods to rebuild its state,
and consumed by the notification handler. ``recipients`` lists the roles
(customer, chef, admin) that should hear about the change.
"""

from protean.fields import Boolean, DateTime, Identifier, Integer, String, Text

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """A cart was checked out into a new pending order."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    customer_email = String(max_length=255)
    customer_contact_number = String(max_length=50)
    chef_id = Identifier(required=True)
    chef_name = String(max_length=200)
    items = Text(required=True)  # JSON: list of line item dicts, ids included
    delivery_address = Text(required=True)  # JSON: address snapshot
    payment_method_type = String(max_length=50)
    payment_details = String(max_length=50)
    requested_time = DateTime(required=True)
    total_amount = Integer(required=True)
    currency = String(default="USD")
    has_custom_items = Boolean(default=False)
    recipients = Text()  # JSON: list of roles
    placed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class CustomDishPriced:
    """The chef set the price of a custom dish on a pending order."""

    __version__ = 1

    order_id = Identifier(required=True)
    line_item_id = Identifier(required=True)
    price = Integer(required=True)
    new_total_amount = Integer(required=True)
    priced_by = String(max_length=20)
    priced_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderAccepted:
    """The chef accepted the order; payment is captured."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    chef_id = Identifier(required=True)
    total_amount = Integer(required=True)
    accepted_by = String(max_length=20)
    recipients = Text()
    accepted_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderRejected:
    """The chef declined the order."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    chef_id = Identifier(required=True)
    reason = String(max_length=500)
    rejected_by = String(max_length=20)
    recipients = Text()
    rejected_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderCompleted:
    """The chef delivered the service."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    chef_id = Identifier(required=True)
    completed_by = String(max_length=20)
    recipients = Text()
    completed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderCancelled:
    """The customer cancelled; accepted orders carry the cancellation fee."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    chef_id = Identifier(required=True)
    previous_status = String(required=True)
    fee = Integer(required=True)
    original_amount = Integer(required=True)
    total_amount = Integer(required=True)
    currency = String(default="USD")
    reason = String(max_length=500)
    cancelled_by = String(max_length=20)
    recipients = Text()
    cancelled_at = DateTime(required=True)
