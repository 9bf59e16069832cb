"""Application tests for the order listing read model and its queries."""

import pytest
from ordering.cart.items import AddToCart
from ordering.checkout.checkout import Checkout, place_order
from ordering.order.lifecycle import SetCustomDishPrice, TransitionOrderStatus
from ordering.order.summary import get_order_summary
from ordering.projections.order_listing import (
    OrderListing,
    count_orders_by_status,
    list_orders,
    list_orders_for_chef,
    list_orders_for_customer,
)
from protean import current_domain

ADDRESSES = {"cust-001": ("addr-001", "pm-001"), "cust-002": ("addr-002", "pm-002")}


def _place(in_three_hours, customer_id="cust-001", **item):
    item = item or {"dish_id": "dish-steak", "quantity": 1}
    current_domain.process(AddToCart(customer_id=customer_id, **item), asynchronous=False)
    address_id, payment_method_id = ADDRESSES[customer_id]
    return place_order(
        Checkout(
            customer_id=customer_id,
            address_id=address_id,
            payment_method_id=payment_method_id,
            scheduled_at=in_three_hours,
        )
    )


def _transition(order_id, target_status, actor_role, actor_id=None):
    current_domain.process(
        TransitionOrderStatus(
            order_id=order_id,
            target_status=target_status,
            actor_role=actor_role,
            actor_id=actor_id,
        ),
        asynchronous=False,
    )


@pytest.fixture(autouse=True)
def _directory(directory):
    return directory


class TestOrderListingProjection:
    def test_created_on_checkout(self, in_three_hours):
        order_id = _place(in_three_hours, dish_id="dish-risotto", dish_type="Main", quantity=2)

        listing = current_domain.repository_for(OrderListing).get(order_id)
        assert listing.status == "pending"
        assert listing.payment_status == "unpaid"
        assert str(listing.customer_id) == "cust-001"
        assert str(listing.chef_id) == "chef-001"
        assert listing.chef_name == "Chef Marco"
        assert listing.item_count == 2
        assert listing.total_amount == 4000

    def test_follows_acceptance(self, in_three_hours):
        order_id = _place(in_three_hours)
        _transition(order_id, "accepted", "chef", "chef-001")

        listing = current_domain.repository_for(OrderListing).get(order_id)
        assert listing.status == "accepted"
        assert listing.payment_status == "paid"

    def test_follows_custom_pricing(self, in_three_hours):
        order_id = _place(in_three_hours, chef_id="chef-001", custom_dish_name="Lasagna", quantity=2)
        line_item_id = get_order_summary(order_id)["unpriced_items"][0]

        current_domain.process(
            SetCustomDishPrice(
                order_id=order_id,
                line_item_id=line_item_id,
                price=1500,
                actor_role="chef",
                actor_id="chef-001",
            ),
            asynchronous=False,
        )

        assert current_domain.repository_for(OrderListing).get(order_id).total_amount == 3000

    def test_cancellation_keeps_only_the_fee(self, in_three_hours):
        order_id = _place(in_three_hours)
        _transition(order_id, "accepted", "chef", "chef-001")
        _transition(order_id, "cancelled", "customer", "cust-001")

        listing = current_domain.repository_for(OrderListing).get(order_id)
        assert listing.status == "cancelled"
        assert listing.cancellation_fee == 5000
        assert listing.total_amount == 5000

    def test_rejection_and_completion(self, in_three_hours):
        rejected = _place(in_three_hours)
        _transition(rejected, "rejected", "chef", "chef-001")
        completed = _place(in_three_hours)
        _transition(completed, "accepted", "admin")
        _transition(completed, "completed", "chef", "chef-001")

        repo = current_domain.repository_for(OrderListing)
        assert repo.get(rejected).status == "rejected"
        assert repo.get(completed).status == "completed"


class TestOrderQueries:
    def test_customer_history_is_newest_first(self, in_three_hours):
        first = _place(in_three_hours)
        second = _place(in_three_hours, dish_id="dish-ramen", quantity=1)
        _place(in_three_hours, customer_id="cust-002")

        history = list_orders_for_customer("cust-001")

        assert [o["order_id"] for o in history] == [second, first]
        assert history[0]["chef_name"] == "Chef Aiko"
        assert history[0]["display_total"] == "$18.00"

    def test_customer_history_by_status(self, in_three_hours):
        accepted = _place(in_three_hours)
        _transition(accepted, "accepted", "chef", "chef-001")
        _place(in_three_hours)

        assert [o["order_id"] for o in list_orders_for_customer("cust-001", "accepted")] == [accepted]

    def test_customer_without_orders(self):
        assert list_orders_for_customer("cust-002") == []

    def test_chef_sees_only_their_orders(self, in_three_hours):
        marco = _place(in_three_hours)
        aiko = _place(in_three_hours, dish_id="dish-ramen", quantity=1)
        other_customer = _place(in_three_hours, customer_id="cust-002")

        assert [o["order_id"] for o in list_orders_for_chef("chef-001")] == [other_customer, marco]
        assert [o["order_id"] for o in list_orders_for_chef("chef-002")] == [aiko]

    def test_operator_list_and_status_counts(self, in_three_hours):
        pending = _place(in_three_hours)
        accepted = _place(in_three_hours)
        _transition(accepted, "accepted", "chef", "chef-001")
        cancelled = _place(in_three_hours, customer_id="cust-002")
        _transition(cancelled, "cancelled", "customer", "cust-002")

        assert [o["order_id"] for o in list_orders()] == [cancelled, accepted, pending]
        assert [o["order_id"] for o in list_orders("pending")] == [pending]
        assert count_orders_by_status() == {
            "pending": 1,
            "accepted": 1,
            "rejected": 0,
            "completed": 0,
            "cancelled": 1,
            "total": 3,
        }

    def test_status_counts_with_no_orders(self):
        counts = count_orders_by_status()
        assert counts["total"] == 0
        assert set(counts) == {"pending", "accepted", "rejected", "completed", "cancelled", "total"}
