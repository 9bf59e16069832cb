"""Ordering bounded context — chef carts, checkout and the order lifecycle.

Handles the single-chef shopping cart (CQRS), the atomic checkout that turns
a cart into an order, and the event-sourced order lifecycle with its
custom-dish pricing gate and cancellation fee.
"""

from protean.domain import Domain

from ordering.utils.logging import configure_logging

configure_logging()

ordering = Domain(name="ordering")
