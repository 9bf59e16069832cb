"""Order lifecycle — status transitions and custom dish pricing."""

import structlog
from protean import handle
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order
from ordering.order.status import ActorRole, OrderStatus

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class TransitionOrderStatus:
    order_id = Identifier(required=True)
    target_status = String(required=True, choices=OrderStatus)
    actor_role = String(required=True, choices=ActorRole)
    actor_id = Identifier()
    reason = String(max_length=500)


@ordering.command(part_of="Order")
class SetCustomDishPrice:
    order_id = Identifier(required=True)
    line_item_id = Identifier(required=True)
    price = Integer(required=True)  # Cents; negative prices are rejected by the order
    actor_role = String(required=True, choices=ActorRole)
    actor_id = Identifier()


@ordering.command_handler(part_of=Order)
class OrderLifecycleHandler:
    @handle(TransitionOrderStatus)
    def transition_order_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        previous_status = order.status

        order.transition(
            target_status=command.target_status,
            actor_role=command.actor_role,
            actor_id=command.actor_id,
            reason=command.reason,
        )
        repo.add(order)

        logger.info(
            "order_status_changed",
            order_id=str(order.id),
            from_status=previous_status,
            to_status=order.status,
            actor_role=command.actor_role,
            cancellation_fee=order.cancellation_fee,
            total_amount=order.total_amount,
        )
        return order.status

    @handle(SetCustomDishPrice)
    def set_custom_dish_price(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.set_custom_price(
            line_item_id=command.line_item_id,
            price=command.price,
            actor_role=command.actor_role,
            actor_id=command.actor_id,
        )
        repo.add(order)

        logger.info(
            "custom_dish_priced",
            order_id=str(order.id),
            line_item_id=str(command.line_item_id),
            price=command.price,
            total_amount=order.total_amount,
        )
        return order.total_amount
