"""Cart aggregate (CQRS) — one customer's pending selection from a single chef.

The cart is a standard CQRS aggregate (not event sourced). Every item in it
belongs to the same chef; an item from another chef is reported back as a
``ChefConflict`` instead of being added, and the caller decides whether to
keep the current cart or replace it. At checkout the cart's items are copied
into an Order and the cart is emptied.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, HasMany, Identifier, Integer, String, Text

from ordering.cart.candidate import ChefConflict, ItemCandidate
from ordering.cart.events import (
    CartCleared,
    CartDiscarded,
    CartItemAdded,
    CartItemQuantityUpdated,
    CartItemRemoved,
)
from ordering.domain import ordering
from ordering.errors import ItemNotFound
from ordering.pricing import line_total, order_total


class CartStatus(Enum):
    ACTIVE = "Active"
    DISCARDED = "Discarded"


@ordering.entity(part_of="Cart")
class CartItem:
    dish_id = Identifier()  # Empty for custom dish requests
    chef_id = Identifier(required=True)
    dish_name = String(max_length=200)
    unit_price = Integer(min_value=0)  # Catalog price in cents
    quantity = Integer(required=True, min_value=1)
    dish_type = String(max_length=50)
    requires_dish_type = Boolean(default=False)
    customization_options = Text()  # JSON array of chosen options
    dish_note = Text()

    is_custom = Boolean(default=False)
    custom_dish_name = String(max_length=200)
    custom_description = Text()
    custom_price = Integer(min_value=0)  # Set by the chef after checkout

    added_at = DateTime()

    def options(self) -> list[str]:
        return json.loads(self.customization_options) if self.customization_options else []

    def total(self) -> int:
        return line_total(self)


@ordering.aggregate
class Cart:
    customer_id = Identifier(required=True)
    items = HasMany(CartItem)
    status = String(choices=CartStatus, default=CartStatus.ACTIVE.value)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def items_must_come_from_a_single_chef(self):
        chefs = {str(item.chef_id) for item in self.items}
        if len(chefs) > 1:
            raise ValidationError({"items": ["A cart can only hold dishes from one chef"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, customer_id):
        now = datetime.now(UTC)
        return cls(
            customer_id=customer_id,
            status=CartStatus.ACTIVE.value,
            created_at=now,
            updated_at=now,
        )

    # -------------------------------------------------------------------
    # Derived values
    # -------------------------------------------------------------------
    def current_chef_id(self) -> str | None:
        """The chef every item belongs to, or None for an empty cart."""
        return str(self.items[0].chef_id) if self.items else None

    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    def subtotal(self) -> int:
        """Sum of line totals; unpriced custom items count as zero."""
        return order_total(self.items)

    def has_custom_items(self) -> bool:
        return any(item.is_custom for item in self.items)

    def is_active(self) -> bool:
        return CartStatus(self.status) == CartStatus.ACTIVE

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, candidate: ItemCandidate, proceed_to_checkout: bool = False):
        """Add ``candidate`` to the cart.

        Returns the new ``CartItem``, or a ``ChefConflict`` (leaving the cart
        untouched) when the cart already holds another chef's dishes.
        """
        self._ensure_active("Items can only be added to an active cart")
        candidate.validate()

        current_chef = self.current_chef_id()
        if current_chef is not None and current_chef != str(candidate.chef_id):
            return ChefConflict(
                current_chef_id=current_chef,
                candidate=candidate,
                proceed_to_checkout=proceed_to_checkout,
            )

        now = datetime.now(UTC)
        item = CartItem(
            dish_id=candidate.dish_id,
            chef_id=candidate.chef_id,
            dish_name=candidate.dish_name,
            unit_price=candidate.unit_price,
            quantity=candidate.quantity,
            dish_type=candidate.dish_type,
            requires_dish_type=candidate.requires_dish_type,
            customization_options=json.dumps(list(candidate.customization_options)),
            dish_note=candidate.dish_note,
            is_custom=candidate.is_custom,
            custom_dish_name=candidate.custom_dish_name,
            custom_description=candidate.custom_description,
            custom_price=candidate.custom_price,
            added_at=now,
        )
        self.add_items(item)
        self.updated_at = now

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                customer_id=str(self.customer_id),
                item_id=str(item.id),
                chef_id=str(candidate.chef_id),
                dish_id=candidate.dish_id,
                quantity=candidate.quantity,
                is_custom=candidate.is_custom,
            )
        )
        return item

    def update_item_quantity(self, item_id, new_quantity):
        """Change an item's quantity. Zero or less removes the item."""
        self._ensure_active("Item quantities can only be updated in an active cart")
        item = self._find_item(item_id)

        if new_quantity <= 0:
            self.remove_item(item_id)
            return

        previous_quantity = item.quantity
        item.quantity = new_quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemQuantityUpdated(
                cart_id=str(self.id),
                item_id=str(item_id),
                previous_quantity=previous_quantity,
                new_quantity=new_quantity,
            )
        )

    def remove_item(self, item_id):
        self._ensure_active("Items can only be removed from an active cart")
        item = self._find_item(item_id)

        self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemRemoved(
                cart_id=str(self.id),
                item_id=str(item_id),
            )
        )

    def clear(self, reason="cleared"):
        """Remove every item. Clearing an empty cart is a no-op."""
        if not self.items:
            return

        removed = len(self.items)
        with atomic_change(self):
            for item in list(self.items):
                self.remove_items(item)
            self.updated_at = datetime.now(UTC)

        self.raise_(
            CartCleared(
                cart_id=str(self.id),
                customer_id=str(self.customer_id),
                items_removed=removed,
                reason=reason,
            )
        )

    # -------------------------------------------------------------------
    # Cart lifecycle
    # -------------------------------------------------------------------
    def discard(self):
        """Retire a duplicate active cart."""
        self._ensure_active("Only active carts can be discarded")

        now = datetime.now(UTC)
        self.status = CartStatus.DISCARDED.value
        self.updated_at = now

        self.raise_(
            CartDiscarded(
                cart_id=str(self.id),
                customer_id=str(self.customer_id),
                discarded_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    def _ensure_active(self, message):
        if not self.is_active():
            raise ValidationError({"status": [message]})

    def _find_item(self, item_id):
        item = next((i for i in self.items if str(i.id) == str(item_id)), None)
        if item is None:
            raise ItemNotFound({"item_id": [f"Item {item_id} is not in the cart"]})
        return item
