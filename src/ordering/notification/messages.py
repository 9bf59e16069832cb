"""Message templates for order notifications.

Each render function takes plain values from an order event (plus the
recipient's name and e-mail) and returns a ``Message``. Orders are referred to
by their short id, the first segment of the UUID.
"""

import os

from ordering.notification.port import Message
from ordering.pricing import format_amount

BRAND = "MyGourmet"


def base_url() -> str:
    return os.getenv("MYGOURMET_BASE_URL", "http://localhost:5173").rstrip("/")


def admin_email() -> str:
    return os.getenv("MYGOURMET_ADMIN_EMAIL", "admin@mygourmet.local")


def short_order_id(order_id) -> str:
    return str(order_id).split("-")[0]


def chef_new_order(order_id, chef_name, chef_email, time) -> Message:
    link = f"{base_url()}/chef/order/{order_id}"
    return Message(
        order_id=str(order_id),
        recipient_role="chef",
        email=chef_email,
        title="New Order Notification",
        name=f"Order {BRAND}: {chef_name}",
        time=time,
        message=(
            f"You have received a new order (#{short_order_id(order_id)}). \n"
            f"Please check your dashboard to see the details: {link}"
        ),
    )


def admin_custom_order(order_id, time) -> Message:
    link = f"{base_url()}/admin/order/{order_id}"
    return Message(
        order_id=str(order_id),
        recipient_role="admin",
        email=admin_email(),
        title="Custom Order Notification",
        name=f"Order {BRAND}",
        time=time,
        message=(
            f"A new order with custom dish (#{short_order_id(order_id)}) has been placed. \n"
            f"Please review and set the price: {link}"
        ),
    )


def chef_order_accepted(order_id, chef_name, chef_email, time) -> Message:
    link = f"{base_url()}/chef/order/{order_id}"
    return Message(
        order_id=str(order_id),
        recipient_role="chef",
        email=chef_email,
        title="Order Accepted Notification",
        name=f"Order {BRAND}: {chef_name}",
        time=time,
        message=(
            f"New order (#{short_order_id(order_id)}) has been accepted.\n"
            f"Please check your dashboard for details: {link}"
        ),
    )


def customer_order_accepted(order_id, customer_name, customer_email, time) -> Message:
    link = f"{base_url()}/orders"
    return Message(
        order_id=str(order_id),
        recipient_role="customer",
        email=customer_email,
        title="Your Order Has Been Accepted",
        name=f"Order {BRAND}: {customer_name}",
        time=time,
        message=(
            f"Good news! Your order (#{short_order_id(order_id)}) has been accepted. \n"
            "Your chef is preparing for your scheduled date. "
            f"You can view your order details here: {link}"
        ),
    )


def customer_order_rejected(order_id, customer_name, customer_email, time) -> Message:
    link = f"{base_url()}/orders"
    return Message(
        order_id=str(order_id),
        recipient_role="customer",
        email=customer_email,
        title="Important Update About Your Order",
        name=f"Order {BRAND}: {customer_name}",
        time=time,
        message=(
            f"We're sorry to inform you that your order (#{short_order_id(order_id)}) "
            "cannot be fulfilled at this time. \n"
            "Please contact our support team for more information. "
            f"You can view your order details here: {link}"
        ),
    )


def customer_order_completed(order_id, customer_name, customer_email, time) -> Message:
    link = f"{base_url()}/orders"
    return Message(
        order_id=str(order_id),
        recipient_role="customer",
        email=customer_email,
        title="Thank You For Dining With Us",
        name=f"Order {BRAND}: {customer_name}",
        time=time,
        message=(
            f"Your order (#{short_order_id(order_id)}) has been completed. "
            f"We hope you enjoyed it! You can view your order details here: {link}"
        ),
    )


def order_cancelled(order_id, recipient_role, name, email, time, fee, currency) -> Message:
    if recipient_role == "admin":
        link = f"{base_url()}/admin/order/{order_id}"
    else:
        link = f"{base_url()}/chef/order/{order_id}"

    if fee:
        charge = f"A cancellation fee of {format_amount(fee, currency)} applies."
    else:
        charge = "No cancellation fee applies."

    return Message(
        order_id=str(order_id),
        recipient_role=recipient_role,
        email=email,
        title="Order Cancellation Notification",
        name=f"Order {BRAND}: {name}" if name else f"Order {BRAND}",
        time=time,
        message=(
            f"Order (#{short_order_id(order_id)}) has been cancelled by the customer. {charge}\n"
            f"You can view the order details here: {link}"
        ),
    )
