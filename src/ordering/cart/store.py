"""Cart lookup — the one active cart per customer, plus its read view."""

import structlog
from protean.utils.globals import current_domain

from ordering.cart.cart import Cart, CartStatus
from ordering.pricing import unit_price_of

logger = structlog.get_logger(__name__)


def active_cart_for(customer_id) -> Cart:
    """Return the customer's active cart, creating an empty one if there is none.

    If more than one active cart exists the most recently created one wins and
    the others are discarded, so a customer never sees two carts.
    """
    repo = current_domain.repository_for(Cart)
    carts = repo._dao.query.filter(customer_id=str(customer_id), status=CartStatus.ACTIVE.value).all().items

    if not carts:
        # Unsaved until the caller changes it and adds it to the repository
        return Cart.create(customer_id=str(customer_id))

    ordered = sorted(carts, key=lambda c: c.created_at, reverse=True)
    for duplicate in ordered[1:]:
        stale = repo.get(duplicate.id)
        stale.discard()
        repo.add(stale)
        logger.warning(
            "duplicate_cart_discarded",
            customer_id=str(customer_id),
            cart_id=str(stale.id),
            kept_cart_id=str(ordered[0].id),
        )

    return repo.get(ordered[0].id)


def cart_view(cart: Cart) -> dict:
    """Plain-dict rendering of a cart with its derived totals."""
    return {
        "cart_id": str(cart.id),
        "customer_id": str(cart.customer_id),
        "chef_id": cart.current_chef_id(),
        "status": cart.status,
        "items": [
            {
                "item_id": str(item.id),
                "dish_id": str(item.dish_id) if item.dish_id else None,
                "chef_id": str(item.chef_id),
                "dish_name": item.custom_dish_name if item.is_custom else item.dish_name,
                "quantity": item.quantity,
                "unit_price": unit_price_of(item),
                "line_total": item.total(),
                "dish_type": item.dish_type,
                "customization_options": item.options(),
                "dish_note": item.dish_note,
                "is_custom": item.is_custom,
                "custom_description": item.custom_description,
            }
            for item in cart.items
        ],
        "item_count": cart.item_count(),
        "subtotal": cart.subtotal(),
        "has_custom_items": cart.has_custom_items(),
    }


def get_cart_view(customer_id) -> dict:
    return cart_view(active_cart_for(customer_id))
