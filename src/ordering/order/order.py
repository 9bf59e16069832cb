"""Order aggregate (Event Sourced) — a checked-out cart on its way to the table.

Every state change is captured as a domain event and the current state is
rebuilt by replaying events through the ``@apply`` methods. The order is
created once, from a cart, and afterwards only its status, payment status,
amounts and the prices of custom dishes change.

State Machine:
    pending → accepted | rejected | cancelled
    accepted → completed | cancelled
    rejected, completed, cancelled are terminal

Custom dishes are priced by the chef while the order is pending; an order
with an unpriced custom dish can be neither accepted nor completed.
"""

import json
from datetime import UTC, datetime
from uuid import uuid4

from protean import apply
from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from ordering.domain import ordering
from ordering.errors import (
    ActionNotPermitted,
    InvalidPrice,
    InvalidTransition,
    ItemNotFound,
    PricesFrozen,
    UnpricedCustomItems,
)
from ordering.order.events import (
    CustomDishPriced,
    OrderAccepted,
    OrderCancelled,
    OrderCompleted,
    OrderPlaced,
    OrderRejected,
)
from ordering.order.status import ActorRole, OrderStatus, PaymentStatus
from ordering.pricing import DEFAULT_CURRENCY, cancellation_fee, order_total

# State machine transition map
_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.ACCEPTED, OrderStatus.REJECTED, OrderStatus.CANCELLED},
    OrderStatus.ACCEPTED: {OrderStatus.COMPLETED, OrderStatus.CANCELLED},
    OrderStatus.REJECTED: set(),  # Terminal
    OrderStatus.COMPLETED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

# Who may move an order into each status
_PERMITTED_ROLES = {
    OrderStatus.ACCEPTED: {ActorRole.CHEF, ActorRole.ADMIN},
    OrderStatus.REJECTED: {ActorRole.CHEF, ActorRole.ADMIN},
    OrderStatus.COMPLETED: {ActorRole.CHEF, ActorRole.ADMIN},
    OrderStatus.CANCELLED: {ActorRole.CUSTOMER},
}

# Statuses that require every custom dish to carry a positive price
_PRICED_STATUSES = {OrderStatus.ACCEPTED, OrderStatus.COMPLETED}


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="Order")
class DeliveryAddress:
    """Where the chef cooks, captured at checkout.

    Later edits to the customer's saved addresses never reach the order.
    """

    address_line = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    state = String(max_length=100)
    zip_code = String(required=True, max_length=20)
    access_note = Text()


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderLineItem:
    """A dish on the order, copied from the cart at checkout.

    Immutable except ``custom_price``, which the chef sets on custom dishes
    while the order is pending.
    """

    dish_id = Identifier()
    chef_id = Identifier(required=True)
    dish_name = String(max_length=200)
    unit_price = Integer(min_value=0)
    quantity = Integer(required=True, min_value=1)
    dish_type = String(max_length=50)
    requires_dish_type = Boolean(default=False)
    customization_options = Text()  # JSON array
    dish_note = Text()
    is_custom = Boolean(default=False)
    custom_dish_name = String(max_length=200)
    custom_description = Text()
    custom_price = Integer()

    def label(self) -> str:
        return (self.custom_dish_name if self.is_custom else self.dish_name) or "item"


# ---------------------------------------------------------------------------
# Aggregate Root (Event Sourced)
# ---------------------------------------------------------------------------
@ordering.aggregate(is_event_sourced=True)
class Order:
    customer_id = Identifier(required=True)
    customer_email = String(max_length=255)
    customer_contact_number = String(max_length=50)
    chef_id = Identifier(required=True)
    chef_name = String(max_length=200)
    delivery_address = ValueObject(DeliveryAddress)
    payment_method_type = String(max_length=50)
    payment_details = String(max_length=50)  # Masked, e.g. "**** 4242"
    requested_time = DateTime()
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.UNPAID.value)
    items = HasMany(OrderLineItem)
    total_amount = Integer(default=0)
    original_amount = Integer()  # Total before cancellation
    cancellation_fee = Integer(default=0)
    currency = String(max_length=3, default=DEFAULT_CURRENCY)
    cancellation_reason = String(max_length=500)
    created_at = DateTime()
    updated_at = DateTime()
    accepted_at = DateTime()
    completed_at = DateTime()
    cancelled_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        customer,
        chef,
        address,
        payment_method,
        requested_time,
        cart_items,
        currency=DEFAULT_CURRENCY,
    ):
        """Create a pending order from the items of a checked-out cart.

        Uses _create_new() to get a blank aggregate with auto-generated
        identity. All state, line items included, is established by the
        single OrderPlaced event, so an order never exists without its items.

        Args:
            customer: Directory record with customer_id, email, contact_number.
            chef: Directory record with chef_id and display_name.
            address: Directory record exposing ``snapshot()``.
            payment_method: Directory record with method_type and ``descriptor``.
            requested_time: Aware datetime the customer wants the chef.
            cart_items: The cart's items; they are copied, never referenced.
        """
        now = datetime.now(UTC)

        # Pre-generate line item IDs for deterministic replay
        items_data = [_line_item_data(item) for item in cart_items]
        has_custom = any(item["is_custom"] for item in items_data)

        recipients = [ActorRole.CHEF.value]
        if has_custom:
            recipients.append(ActorRole.ADMIN.value)

        order = cls._create_new()
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                customer_id=str(customer.customer_id),
                customer_email=customer.email,
                customer_contact_number=customer.contact_number,
                chef_id=str(chef.chef_id),
                chef_name=chef.display_name,
                items=json.dumps(items_data),
                delivery_address=json.dumps(address.snapshot()),
                payment_method_type=payment_method.method_type,
                payment_details=payment_method.descriptor,
                requested_time=requested_time,
                total_amount=order_total(cart_items),
                currency=currency,
                has_custom_items=has_custom,
                recipients=json.dumps(recipients),
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def unpriced_custom_items(self):
        return [item for item in self.items if item.is_custom and not (item.custom_price or 0) > 0]

    def has_custom_items(self) -> bool:
        return any(item.is_custom for item in self.items)

    def is_terminal(self) -> bool:
        return not _VALID_TRANSITIONS[OrderStatus(self.status)]

    # -------------------------------------------------------------------
    # Guards
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target):
        current = OrderStatus(self.status)
        if target not in _VALID_TRANSITIONS[current]:
            raise InvalidTransition({"status": [f"Cannot transition from {current.value} to {target.value}"]})

    def _assert_priced(self, target):
        unpriced = self.unpriced_custom_items()
        if target in _PRICED_STATUSES and unpriced:
            names = ", ".join(item.label() for item in unpriced)
            raise UnpricedCustomItems(
                {"items": [f"Custom dishes must be priced before the order is {target.value}: {names}"]}
            )

    def _assert_permitted(self, target, role, actor_id):
        if role not in _PERMITTED_ROLES[target]:
            raise ActionNotPermitted(
                {"actor_role": [f"A {role.value} cannot move an order to {target.value}"]}
            )
        self._assert_acts_for_order(role, actor_id)

    def _assert_acts_for_order(self, role, actor_id):
        """Chefs act only on their own orders and customers only on theirs."""
        if role == ActorRole.CHEF and str(actor_id) != str(self.chef_id):
            raise ActionNotPermitted({"actor_id": ["This order belongs to another chef"]})
        if role == ActorRole.CUSTOMER and str(actor_id) != str(self.customer_id):
            raise ActionNotPermitted({"actor_id": ["This order belongs to another customer"]})

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def transition(self, target_status, actor_role, actor_id=None, reason=None):
        """Move the order to ``target_status`` on behalf of ``actor_role``.

        Guards run in a fixed order: the pricing gate first, then the
        transition table (terminal states and same-status moves included),
        then the actor's role and ownership.
        """
        target = _as_status(target_status)
        role = _as_role(actor_role)

        self._assert_priced(target)
        self._assert_can_transition(target)
        self._assert_permitted(target, role, actor_id)

        now = datetime.now(UTC)
        if target == OrderStatus.ACCEPTED:
            self.raise_(
                OrderAccepted(
                    order_id=str(self.id),
                    customer_id=str(self.customer_id),
                    chef_id=str(self.chef_id),
                    total_amount=self.total_amount,
                    accepted_by=role.value,
                    recipients=json.dumps([ActorRole.CUSTOMER.value, ActorRole.CHEF.value]),
                    accepted_at=now,
                )
            )
        elif target == OrderStatus.REJECTED:
            self.raise_(
                OrderRejected(
                    order_id=str(self.id),
                    customer_id=str(self.customer_id),
                    chef_id=str(self.chef_id),
                    reason=reason,
                    rejected_by=role.value,
                    recipients=json.dumps([ActorRole.CUSTOMER.value]),
                    rejected_at=now,
                )
            )
        elif target == OrderStatus.COMPLETED:
            self.raise_(
                OrderCompleted(
                    order_id=str(self.id),
                    customer_id=str(self.customer_id),
                    chef_id=str(self.chef_id),
                    completed_by=role.value,
                    recipients=json.dumps([ActorRole.CUSTOMER.value]),
                    completed_at=now,
                )
            )
        else:
            charge = cancellation_fee(self)
            self.raise_(
                OrderCancelled(
                    order_id=str(self.id),
                    customer_id=str(self.customer_id),
                    chef_id=str(self.chef_id),
                    previous_status=self.status,
                    fee=charge.fee,
                    original_amount=charge.original_amount,
                    total_amount=charge.new_total,
                    currency=self.currency,
                    reason=reason,
                    cancelled_by=role.value,
                    recipients=json.dumps([ActorRole.CHEF.value, ActorRole.ADMIN.value]),
                    cancelled_at=now,
                )
            )

    def set_custom_price(self, line_item_id, price, actor_role, actor_id=None):
        """Price a custom dish. Only the chef (or an admin) may, and only while pending."""
        role = _as_role(actor_role)

        if OrderStatus(self.status) != OrderStatus.PENDING:
            raise PricesFrozen({"status": [f"Prices cannot change once the order is {self.status}"]})
        if role not in (ActorRole.CHEF, ActorRole.ADMIN):
            raise ActionNotPermitted({"actor_role": [f"A {role.value} cannot set dish prices"]})
        self._assert_acts_for_order(role, actor_id)

        item = next((i for i in self.items if str(i.id) == str(line_item_id)), None)
        if item is None:
            raise ItemNotFound({"line_item_id": [f"Line item {line_item_id} is not on this order"]})
        if not item.is_custom:
            raise ValidationError({"line_item_id": [f"'{item.label()}' is a catalog dish with a fixed price"]})
        if price is None or not isinstance(price, int) or price < 0:
            raise InvalidPrice({"price": ["Price must be a whole number of cents, zero or more"]})

        new_total = order_total(i for i in self.items if i is not item) + item.quantity * price

        self.raise_(
            CustomDishPriced(
                order_id=str(self.id),
                line_item_id=str(item.id),
                price=price,
                new_total_amount=new_total,
                priced_by=role.value,
                priced_at=datetime.now(UTC),
            )
        )

    # -------------------------------------------------------------------
    # @apply methods — rebuild state during event replay
    # -------------------------------------------------------------------
    @apply
    def _on_order_placed(self, event: OrderPlaced):
        self.id = event.order_id
        self.customer_id = event.customer_id
        self.customer_email = event.customer_email
        self.customer_contact_number = event.customer_contact_number
        self.chef_id = event.chef_id
        self.chef_name = event.chef_name
        self.payment_method_type = event.payment_method_type
        self.payment_details = event.payment_details
        self.requested_time = event.requested_time
        self.status = OrderStatus.PENDING.value
        self.payment_status = PaymentStatus.UNPAID.value
        self.total_amount = event.total_amount
        self.cancellation_fee = 0
        self.currency = event.currency or DEFAULT_CURRENCY
        self.created_at = event.placed_at
        self.updated_at = event.placed_at

        # Reconstruct line items from JSON (includes IDs for deterministic replay)
        items_data = json.loads(event.items) if isinstance(event.items, str) else []
        self.items = [OrderLineItem(**item_data) for item_data in items_data]

        address_data = json.loads(event.delivery_address) if isinstance(event.delivery_address, str) else {}
        if address_data:
            self.delivery_address = DeliveryAddress(**address_data)

    @apply
    def _on_custom_dish_priced(self, event: CustomDishPriced):
        item = next((i for i in self.items if str(i.id) == str(event.line_item_id)), None)
        if item:
            item.custom_price = event.price
        self.total_amount = event.new_total_amount
        self.updated_at = event.priced_at

    @apply
    def _on_order_accepted(self, event: OrderAccepted):
        self.status = OrderStatus.ACCEPTED.value
        self.payment_status = PaymentStatus.PAID.value
        self.accepted_at = event.accepted_at
        self.updated_at = event.accepted_at

    @apply
    def _on_order_rejected(self, event: OrderRejected):
        self.status = OrderStatus.REJECTED.value
        self.cancellation_reason = event.reason
        self.updated_at = event.rejected_at

    @apply
    def _on_order_completed(self, event: OrderCompleted):
        self.status = OrderStatus.COMPLETED.value
        self.completed_at = event.completed_at
        self.updated_at = event.completed_at

    @apply
    def _on_order_cancelled(self, event: OrderCancelled):
        self.status = OrderStatus.CANCELLED.value
        self.cancellation_fee = event.fee
        self.original_amount = event.original_amount
        self.total_amount = event.total_amount
        self.cancellation_reason = event.reason
        self.cancelled_at = event.cancelled_at
        self.updated_at = event.cancelled_at


def _line_item_data(item) -> dict:
    return {
        "id": str(uuid4()),
        "dish_id": str(item.dish_id) if item.dish_id else None,
        "chef_id": str(item.chef_id),
        "dish_name": item.dish_name,
        "unit_price": item.unit_price,
        "quantity": item.quantity,
        "dish_type": item.dish_type,
        "requires_dish_type": bool(item.requires_dish_type),
        "customization_options": item.customization_options,
        "dish_note": item.dish_note,
        "is_custom": bool(item.is_custom),
        "custom_dish_name": item.custom_dish_name,
        "custom_description": item.custom_description,
        "custom_price": item.custom_price,
    }


def _as_status(value) -> OrderStatus:
    try:
        return OrderStatus(value)
    except ValueError:
        raise InvalidTransition({"status": [f"Unknown order status: {value}"]}) from None


def _as_role(value) -> ActorRole:
    try:
        return ActorRole(value)
    except ValueError:
        raise ActionNotPermitted({"actor_role": [f"Unknown role: {value}"]}) from None
