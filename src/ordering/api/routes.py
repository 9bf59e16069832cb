"""FastAPI routes for the Ordering domain — carts, checkout and orders."""

import json

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from protean.utils.globals import current_domain

from ordering.api.schemas import (
    AddToCartRequest,
    AddToCartResponse,
    ChefConflictResponse,
    CheckoutRequest,
    OrderIdResponse,
    OrderListingResponse,
    OrderStatusName,
    OrderStatusResponse,
    OrderTotalResponse,
    ResolutionResponse,
    ResolveConflictRequest,
    SetCustomPriceRequest,
    StatusResponse,
    TransitionOrderRequest,
    UpdateCartItemQuantityRequest,
)
from ordering.cart.items import (
    AddToCart,
    ClearCart,
    RemoveCartItem,
    ResolveChefConflict,
    UpdateCartItemQuantity,
)
from ordering.cart.store import get_cart_view
from ordering.checkout.checkout import Checkout, place_order
from ordering.order.lifecycle import SetCustomDishPrice, TransitionOrderStatus
from ordering.order.summary import get_order_summary
from ordering.projections.order_listing import (
    count_orders_by_status,
    list_orders,
    list_orders_for_chef,
    list_orders_for_customer,
)

# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/carts", tags=["carts"])


@cart_router.get("/{customer_id}")
async def get_cart(customer_id: str) -> dict:
    return get_cart_view(customer_id)


@cart_router.post(
    "/{customer_id}/items",
    response_model=AddToCartResponse,
    responses={409: {"model": ChefConflictResponse}},
)
async def add_cart_item(customer_id: str, body: AddToCartRequest):
    command = AddToCart(
        customer_id=customer_id,
        quantity=body.quantity,
        dish_id=body.dish_id,
        chef_id=body.chef_id,
        dish_type=body.dish_type,
        customization_options=json.dumps(body.customization_options),
        dish_note=body.dish_note,
        custom_dish_name=body.custom_dish_name,
        custom_description=body.custom_description,
        then_checkout=body.then_checkout,
    )
    outcome = current_domain.process(command, asynchronous=False)

    if not outcome.added:
        conflict = ChefConflictResponse(cart_id=outcome.cart_id, **outcome.conflict.to_dict())
        return JSONResponse(status_code=409, content=conflict.model_dump())

    return AddToCartResponse(
        cart_id=outcome.cart_id,
        item_id=outcome.item_id,
        proceed_to_checkout=outcome.proceed_to_checkout,
    )


@cart_router.put("/{customer_id}/items/{item_id}", response_model=StatusResponse)
async def update_cart_item_quantity(
    customer_id: str, item_id: str, body: UpdateCartItemQuantityRequest
) -> StatusResponse:
    command = UpdateCartItemQuantity(
        customer_id=customer_id,
        item_id=item_id,
        new_quantity=body.new_quantity,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.delete("/{customer_id}/items/{item_id}", response_model=StatusResponse)
async def remove_cart_item(customer_id: str, item_id: str) -> StatusResponse:
    command = RemoveCartItem(
        customer_id=customer_id,
        item_id=item_id,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.delete("/{customer_id}/items", response_model=StatusResponse)
async def clear_cart(customer_id: str) -> StatusResponse:
    current_domain.process(ClearCart(customer_id=customer_id), asynchronous=False)
    return StatusResponse()


@cart_router.post("/{customer_id}/conflict", response_model=ResolutionResponse)
async def resolve_chef_conflict(customer_id: str, body: ResolveConflictRequest) -> ResolutionResponse:
    command = ResolveChefConflict(
        customer_id=customer_id,
        candidate=json.dumps(body.candidate),
        policy=body.policy,
        proceed_to_checkout=body.proceed_to_checkout,
    )
    resolution = current_domain.process(command, asynchronous=False)
    return ResolutionResponse(
        policy=resolution.policy.value,
        item_id=resolution.item_id,
        proceed_to_checkout=resolution.proceed_to_checkout,
        items_removed=resolution.items_removed,
    )


@cart_router.post("/{customer_id}/checkout", status_code=201, response_model=OrderIdResponse)
async def checkout(customer_id: str, body: CheckoutRequest) -> OrderIdResponse:
    command = Checkout(
        customer_id=customer_id,
        address_id=body.address_id,
        payment_method_id=body.payment_method_id,
        scheduled_at=body.scheduled_at,
    )
    order_id = place_order(command)
    return OrderIdResponse(order_id=order_id)


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.get("", response_model=list[OrderListingResponse])
async def get_orders(status: OrderStatusName | None = None) -> list[dict]:
    return list_orders(status)


@order_router.get("/status-counts")
async def get_order_status_counts() -> dict:
    return count_orders_by_status()


@order_router.get("/by-customer/{customer_id}", response_model=list[OrderListingResponse])
async def get_customer_orders(customer_id: str, status: OrderStatusName | None = None) -> list[dict]:
    return list_orders_for_customer(customer_id, status)


@order_router.get("/by-chef/{chef_id}", response_model=list[OrderListingResponse])
async def get_chef_orders(chef_id: str, status: OrderStatusName | None = None) -> list[dict]:
    return list_orders_for_chef(chef_id, status)


@order_router.get("/{order_id}")
async def get_order(order_id: str) -> dict:
    return get_order_summary(order_id)


@order_router.put("/{order_id}/status", response_model=OrderStatusResponse)
async def transition_order_status(order_id: str, body: TransitionOrderRequest) -> OrderStatusResponse:
    command = TransitionOrderStatus(
        order_id=order_id,
        target_status=body.target_status,
        actor_role=body.actor_role,
        actor_id=body.actor_id,
        reason=body.reason,
    )
    status = current_domain.process(command, asynchronous=False)
    return OrderStatusResponse(order_id=order_id, status=status)


@order_router.put("/{order_id}/items/{line_item_id}/price", response_model=OrderTotalResponse)
async def set_custom_dish_price(order_id: str, line_item_id: str, body: SetCustomPriceRequest) -> OrderTotalResponse:
    command = SetCustomDishPrice(
        order_id=order_id,
        line_item_id=line_item_id,
        price=body.price,
        actor_role=body.actor_role,
        actor_id=body.actor_id,
    )
    total_amount = current_domain.process(command, asynchronous=False)
    return OrderTotalResponse(order_id=order_id, total_amount=total_amount)
