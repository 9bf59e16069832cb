"""Order listing — order history for customers and chefs, and the operator board.

One row per order, kept current by a projector on Order events. Listings are
newest first; the operator board also counts orders per status.
"""

import json

from protean.core.projector import on
from protean.fields import DateTime, Identifier, Integer, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.events import (
    CustomDishPriced,
    OrderAccepted,
    OrderCancelled,
    OrderCompleted,
    OrderPlaced,
    OrderRejected,
)
from ordering.order.order import Order
from ordering.order.status import OrderStatus, PaymentStatus
from ordering.pricing import DEFAULT_CURRENCY, format_amount


@ordering.projection
class OrderListing:
    order_id = Identifier(identifier=True, required=True)
    customer_id = Identifier(required=True)
    chef_id = Identifier(required=True)
    chef_name = String(max_length=200)
    status = String(required=True)
    payment_status = String(required=True)
    item_count = Integer(default=0)
    total_amount = Integer(default=0)
    cancellation_fee = Integer(default=0)
    currency = String(default=DEFAULT_CURRENCY)
    requested_time = DateTime()
    placed_at = DateTime(required=True)
    updated_at = DateTime()


@ordering.projector(projector_for=OrderListing, aggregates=[Order])
class OrderListingProjector:
    @on(OrderPlaced)
    def on_order_placed(self, event):
        items = json.loads(event.items) if isinstance(event.items, str) else []
        current_domain.repository_for(OrderListing).add(
            OrderListing(
                order_id=event.order_id,
                customer_id=event.customer_id,
                chef_id=event.chef_id,
                chef_name=event.chef_name,
                status=OrderStatus.PENDING.value,
                payment_status=PaymentStatus.UNPAID.value,
                item_count=sum(item.get("quantity", 0) for item in items),
                total_amount=event.total_amount,
                currency=event.currency or DEFAULT_CURRENCY,
                requested_time=event.requested_time,
                placed_at=event.placed_at,
                updated_at=event.placed_at,
            )
        )

    def _update(self, order_id, updated_at, **changes):
        repo = current_domain.repository_for(OrderListing)
        record = repo.get(order_id)
        for field_name, value in changes.items():
            setattr(record, field_name, value)
        record.updated_at = updated_at
        repo.add(record)

    @on(CustomDishPriced)
    def on_custom_dish_priced(self, event):
        self._update(event.order_id, event.priced_at, total_amount=event.new_total_amount)

    @on(OrderAccepted)
    def on_order_accepted(self, event):
        self._update(
            event.order_id,
            event.accepted_at,
            status=OrderStatus.ACCEPTED.value,
            payment_status=PaymentStatus.PAID.value,
        )

    @on(OrderRejected)
    def on_order_rejected(self, event):
        self._update(event.order_id, event.rejected_at, status=OrderStatus.REJECTED.value)

    @on(OrderCompleted)
    def on_order_completed(self, event):
        self._update(event.order_id, event.completed_at, status=OrderStatus.COMPLETED.value)

    @on(OrderCancelled)
    def on_order_cancelled(self, event):
        self._update(
            event.order_id,
            event.cancelled_at,
            status=OrderStatus.CANCELLED.value,
            total_amount=event.total_amount,
            cancellation_fee=event.fee,
        )


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------
def _listing(**criteria) -> list[dict]:
    query = current_domain.repository_for(OrderListing)._dao.query
    if criteria:
        query = query.filter(**criteria)
    return [listing_view(record) for record in query.order_by("-placed_at").all().items]


def _with_status(criteria: dict, status) -> dict:
    if status is not None:
        criteria["status"] = OrderStatus(status).value
    return criteria


def list_orders_for_customer(customer_id, status=None) -> list[dict]:
    """The customer's order history, newest first."""
    return _listing(**_with_status({"customer_id": str(customer_id)}, status))


def list_orders_for_chef(chef_id, status=None) -> list[dict]:
    """Orders placed with a chef, newest first."""
    return _listing(**_with_status({"chef_id": str(chef_id)}, status))


def list_orders(status=None) -> list[dict]:
    """Every order, newest first, optionally narrowed to one status."""
    return _listing(**_with_status({}, status))


def count_orders_by_status() -> dict:
    """Number of orders in each status, every status present, plus the total."""
    counts = {status.value: 0 for status in OrderStatus}
    for record in current_domain.repository_for(OrderListing)._dao.query.all().items:
        counts[record.status] += 1
    counts["total"] = sum(counts.values())
    return counts


def listing_view(record: OrderListing) -> dict:
    return {
        "order_id": str(record.order_id),
        "customer_id": str(record.customer_id),
        "chef_id": str(record.chef_id),
        "chef_name": record.chef_name,
        "status": record.status,
        "payment_status": record.payment_status,
        "item_count": record.item_count,
        "total_amount": record.total_amount,
        "cancellation_fee": record.cancellation_fee,
        "currency": record.currency,
        "display_total": format_amount(record.total_amount, record.currency),
        "requested_time": record.requested_time.isoformat() if record.requested_time else None,
        "placed_at": record.placed_at.isoformat() if record.placed_at else None,
    }
