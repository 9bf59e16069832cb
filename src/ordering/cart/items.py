"""Cart item management — commands and handler.

Carts are addressed by customer: every command resolves the customer's single
active cart through ``active_cart_for``.
"""

from dataclasses import dataclass

import structlog
from protean import handle
from protean.fields import Boolean, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from ordering.cart.candidate import ChefConflict, ItemCandidate, build_candidate
from ordering.cart.cart import Cart
from ordering.cart.conflict import ConflictPolicy, resolve_chef_conflict
from ordering.cart.store import active_cart_for
from ordering.directory import get_directory
from ordering.domain import ordering

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class AddOutcome:
    """Result of an add: either the new item's id or the conflict to resolve."""

    cart_id: str
    item_id: str | None = None
    conflict: ChefConflict | None = None
    proceed_to_checkout: bool = False

    @property
    def added(self) -> bool:
        return self.conflict is None


@ordering.command(part_of="Cart")
class AddToCart:
    customer_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    dish_id = Identifier()  # Omit for a custom dish request
    chef_id = Identifier()  # Required for a custom dish request
    dish_type = String(max_length=50)
    customization_options = Text()  # JSON array
    dish_note = Text()
    custom_dish_name = String(max_length=200)
    custom_description = Text()
    then_checkout = Boolean(default=False)


@ordering.command(part_of="Cart")
class ResolveChefConflict:
    customer_id = Identifier(required=True)
    candidate = Text(required=True)  # JSON: the candidate returned with the conflict
    policy = String(required=True, choices=ConflictPolicy)
    proceed_to_checkout = Boolean(default=False)


@ordering.command(part_of="Cart")
class UpdateCartItemQuantity:
    customer_id = Identifier(required=True)
    item_id = Identifier(required=True)
    new_quantity = Integer(required=True)  # Zero or less removes the item


@ordering.command(part_of="Cart")
class RemoveCartItem:
    customer_id = Identifier(required=True)
    item_id = Identifier(required=True)


@ordering.command(part_of="Cart")
class ClearCart:
    customer_id = Identifier(required=True)


@ordering.command_handler(part_of=Cart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        candidate = build_candidate(
            get_directory(),
            quantity=command.quantity,
            dish_id=command.dish_id,
            chef_id=command.chef_id,
            dish_type=command.dish_type,
            customization_options=command.customization_options,
            dish_note=command.dish_note,
            custom_dish_name=command.custom_dish_name,
            custom_description=command.custom_description,
        )

        repo = current_domain.repository_for(Cart)
        cart = active_cart_for(command.customer_id)
        result = cart.add_item(candidate, proceed_to_checkout=bool(command.then_checkout))

        if isinstance(result, ChefConflict):
            logger.info(
                "chef_conflict",
                customer_id=str(command.customer_id),
                current_chef_id=result.current_chef_id,
                candidate_chef_id=candidate.chef_id,
            )
            return AddOutcome(
                cart_id=str(cart.id),
                conflict=result,
                proceed_to_checkout=result.proceed_to_checkout,
            )

        repo.add(cart)
        return AddOutcome(
            cart_id=str(cart.id),
            item_id=str(result.id),
            proceed_to_checkout=bool(command.then_checkout),
        )

    @handle(ResolveChefConflict)
    def resolve_conflict(self, command):
        policy = ConflictPolicy(command.policy)
        candidate = ItemCandidate.from_json(command.candidate)
        if policy == ConflictPolicy.REPLACE:
            # Re-resolve against the directory; prices never come from the client
            candidate = build_candidate(
                get_directory(),
                quantity=candidate.quantity,
                dish_id=candidate.dish_id,
                chef_id=candidate.chef_id,
                dish_type=candidate.dish_type,
                customization_options=list(candidate.customization_options),
                dish_note=candidate.dish_note,
                custom_dish_name=candidate.custom_dish_name,
                custom_description=candidate.custom_description,
            )

        repo = current_domain.repository_for(Cart)
        cart = active_cart_for(command.customer_id)
        resolution = resolve_chef_conflict(
            cart,
            candidate,
            policy,
            proceed_to_checkout=bool(command.proceed_to_checkout),
        )
        if resolution.item_id is not None:
            repo.add(cart)
        return resolution

    @handle(UpdateCartItemQuantity)
    def update_cart_item_quantity(self, command):
        repo = current_domain.repository_for(Cart)
        cart = active_cart_for(command.customer_id)
        cart.update_item_quantity(
            item_id=command.item_id,
            new_quantity=command.new_quantity,
        )
        repo.add(cart)

    @handle(RemoveCartItem)
    def remove_cart_item(self, command):
        repo = current_domain.repository_for(Cart)
        cart = active_cart_for(command.customer_id)
        cart.remove_item(item_id=command.item_id)
        repo.add(cart)

    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = active_cart_for(command.customer_id)
        cart.clear()
        repo.add(cart)
