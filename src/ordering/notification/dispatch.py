"""Order notifications — reacts to Order events and tells the people involved.

Each order event lists its recipient roles. The handler renders one message
per role and hands it to the configured notifier. Delivery problems are
logged and never undo the order change that triggered them.
"""

import json

import structlog
from protean.utils.mixins import handle

from ordering.directory import get_directory
from ordering.domain import ordering
from ordering.notification import get_notifier
from ordering.notification import messages
from ordering.order.events import (
    OrderAccepted,
    OrderCancelled,
    OrderCompleted,
    OrderPlaced,
    OrderRejected,
)
from ordering.order.order import Order
from ordering.pricing import DEFAULT_CURRENCY

logger = structlog.get_logger(__name__)


@ordering.event_handler(part_of=Order)
class OrderNotificationsHandler:
    """Sends order notifications to customers, chefs and admins."""

    @handle(OrderPlaced)
    def on_order_placed(self, event: OrderPlaced) -> None:
        roles = _recipients(event)
        chef = get_directory().get_chef(str(event.chef_id))
        time = _format_time(event.requested_time)

        outgoing = []
        if "chef" in roles:
            outgoing.append(
                messages.chef_new_order(
                    event.order_id,
                    event.chef_name,
                    chef.email if chef else None,
                    time,
                )
            )
        if "admin" in roles:
            outgoing.append(messages.admin_custom_order(event.order_id, time))
        _send(outgoing)

    @handle(OrderAccepted)
    def on_order_accepted(self, event: OrderAccepted) -> None:
        roles = _recipients(event)
        time = _format_time(event.accepted_at)
        directory = get_directory()

        outgoing = []
        if "chef" in roles:
            chef = directory.get_chef(str(event.chef_id))
            outgoing.append(
                messages.chef_order_accepted(
                    event.order_id,
                    chef.display_name if chef else "",
                    chef.email if chef else None,
                    time,
                )
            )
        if "customer" in roles:
            customer = directory.get_customer(str(event.customer_id))
            outgoing.append(
                messages.customer_order_accepted(
                    event.order_id,
                    customer.display_name if customer else "",
                    customer.email if customer else None,
                    time,
                )
            )
        _send(outgoing)

    @handle(OrderRejected)
    def on_order_rejected(self, event: OrderRejected) -> None:
        if "customer" not in _recipients(event):
            return
        customer = get_directory().get_customer(str(event.customer_id))
        _send(
            [
                messages.customer_order_rejected(
                    event.order_id,
                    customer.display_name if customer else "",
                    customer.email if customer else None,
                    _format_time(event.rejected_at),
                )
            ]
        )

    @handle(OrderCompleted)
    def on_order_completed(self, event: OrderCompleted) -> None:
        if "customer" not in _recipients(event):
            return
        customer = get_directory().get_customer(str(event.customer_id))
        _send(
            [
                messages.customer_order_completed(
                    event.order_id,
                    customer.display_name if customer else "",
                    customer.email if customer else None,
                    _format_time(event.completed_at),
                )
            ]
        )

    @handle(OrderCancelled)
    def on_order_cancelled(self, event: OrderCancelled) -> None:
        roles = _recipients(event)
        time = _format_time(event.cancelled_at)
        currency = event.currency or DEFAULT_CURRENCY

        outgoing = []
        if "chef" in roles:
            chef = get_directory().get_chef(str(event.chef_id))
            outgoing.append(
                messages.order_cancelled(
                    event.order_id,
                    "chef",
                    chef.display_name if chef else "",
                    chef.email if chef else None,
                    time,
                    event.fee,
                    currency,
                )
            )
        if "admin" in roles:
            outgoing.append(
                messages.order_cancelled(
                    event.order_id,
                    "admin",
                    "",
                    messages.admin_email(),
                    time,
                    event.fee,
                    currency,
                )
            )
        _send(outgoing)


def _recipients(event) -> list[str]:
    return json.loads(event.recipients) if event.recipients else []


def _format_time(value) -> str:
    return value.strftime("%Y-%m-%d %H:%M %Z").strip() if value else ""


def _send(outgoing) -> None:
    notifier = get_notifier()
    for message in outgoing:
        try:
            delivered = notifier.notify(message)
        except Exception as e:
            logger.error(
                "Notification delivery failed",
                order_id=message.order_id,
                recipient_role=message.recipient_role,
                title=message.title,
                error=str(e),
            )
            continue

        if delivered:
            logger.info(
                "Notification sent",
                order_id=message.order_id,
                recipient_role=message.recipient_role,
                title=message.title,
            )
        else:
            logger.warning(
                "Notification not delivered",
                order_id=message.order_id,
                recipient_role=message.recipient_role,
                title=message.title,
            )
