"""Domain events for the Cart aggregate."""

from protean.fields import Boolean, DateTime, Identifier, Integer, String

from ordering.domain import ordering


@ordering.event(part_of="Cart")
class CartItemAdded:
    """An item was added to the cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    item_id = Identifier(required=True)
    chef_id = Identifier(required=True)
    dish_id = Identifier()  # Empty for custom dish requests
    quantity = Integer(required=True)
    is_custom = Boolean(default=False)


@ordering.event(part_of="Cart")
class CartItemQuantityUpdated:
    """The quantity of a cart item was changed."""

    __version__ = 1

    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@ordering.event(part_of="Cart")
class CartItemRemoved:
    """An item was removed from the cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)


@ordering.event(part_of="Cart")
class CartCleared:
    """All items were removed, after checkout or when switching chefs."""

    __version__ = 1

    cart_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    items_removed = Integer(required=True)
    reason = String(max_length=50)


@ordering.event(part_of="Cart")
class CartDiscarded:
    """A duplicate active cart was retired in favour of the customer's newest one."""

    __version__ = 1

    cart_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    discarded_at = DateTime(required=True)
