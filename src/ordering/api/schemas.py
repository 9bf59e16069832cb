"""Pydantic request/response schemas for the Ordering API.

These are external contracts (anti-corruption layer) — separate from
internal Protean commands. Amounts are integer cents.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Cart Request Schemas
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    quantity: int = Field(ge=1, default=1)
    dish_id: str | None = None
    chef_id: str | None = None
    dish_type: str | None = None
    customization_options: list[str] = Field(default_factory=list)
    dish_note: str | None = None
    custom_dish_name: str | None = None
    custom_description: str | None = None
    then_checkout: bool = False

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "dish_id": "dish-risotto",
                    "quantity": 2,
                    "dish_type": "Main",
                    "customization_options": ["extra parmesan"],
                },
                {
                    "chef_id": "chef-001",
                    "quantity": 1,
                    "custom_dish_name": "Grandma's lasagna",
                    "custom_description": "Like she used to make it",
                },
            ]
        }
    }


class UpdateCartItemQuantityRequest(BaseModel):
    new_quantity: int  # Zero or less removes the item


class ResolveConflictRequest(BaseModel):
    policy: Literal["reject", "replace"]
    candidate: dict
    proceed_to_checkout: bool = False


class CheckoutRequest(BaseModel):
    address_id: str | None = None
    payment_method_id: str | None = None
    scheduled_at: datetime


# ---------------------------------------------------------------------------
# Order Request Schemas
# ---------------------------------------------------------------------------
OrderStatusName = Literal["pending", "accepted", "rejected", "completed", "cancelled"]


class TransitionOrderRequest(BaseModel):
    target_status: OrderStatusName
    actor_role: Literal["customer", "chef", "admin"]
    actor_id: str | None = None
    reason: str | None = None


class SetCustomPriceRequest(BaseModel):
    price: int
    actor_role: Literal["customer", "chef", "admin"]
    actor_id: str | None = None


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class StatusResponse(BaseModel):
    status: str = "ok"


class AddToCartResponse(BaseModel):
    cart_id: str
    item_id: str
    proceed_to_checkout: bool = False


class ChefConflictResponse(BaseModel):
    code: str = "chef_conflict"
    cart_id: str
    current_chef_id: str
    candidate_chef_id: str
    candidate: dict
    proceed_to_checkout: bool = False


class ResolutionResponse(BaseModel):
    policy: str
    item_id: str | None = None
    proceed_to_checkout: bool = False
    items_removed: int = 0


class OrderIdResponse(BaseModel):
    order_id: str


class OrderStatusResponse(BaseModel):
    order_id: str
    status: str


class OrderTotalResponse(BaseModel):
    order_id: str
    total_amount: int


class OrderListingResponse(BaseModel):
    order_id: str
    customer_id: str
    chef_id: str
    chef_name: str | None = None
    status: str
    payment_status: str
    item_count: int
    total_amount: int
    cancellation_fee: int = 0
    currency: str
    display_total: str
    requested_time: str | None = None
    placed_at: str | None = None
