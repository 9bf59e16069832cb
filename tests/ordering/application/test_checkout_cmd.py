"""Application tests for checking a cart out into an order."""

from datetime import UTC, datetime, timedelta
from unittest.mock import patch

import pytest
from ordering.cart.cart import Cart
from ordering.cart.items import AddToCart
from ordering.cart.store import get_cart_view
from ordering.checkout.checkout import Checkout, place_order, validate_schedule
from ordering.errors import (
    CheckoutFailed,
    MissingSelection,
    RecordNotFound,
    SchedulingTooFar,
    SchedulingTooSoon,
)
from ordering.order.order import Order
from ordering.order.status import OrderStatus, PaymentStatus
from ordering.pricing import order_total
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError


def _add(customer_id="cust-001", **overrides):
    fields = {"customer_id": customer_id, "quantity": 2, "dish_id": "dish-risotto", "dish_type": "Main"}
    fields.update(overrides)
    return current_domain.process(AddToCart(**fields), asynchronous=False)


def _checkout(scheduled_at, **overrides):
    fields = {
        "customer_id": "cust-001",
        "address_id": "addr-001",
        "payment_method_id": "pm-001",
        "scheduled_at": scheduled_at,
    }
    fields.update(overrides)
    return place_order(Checkout(**fields))


def _cart_items(customer_id="cust-001"):
    return get_cart_view(customer_id)["items"]


@pytest.fixture(autouse=True)
def _directory(directory):
    return directory


class TestValidateSchedule:
    NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)

    def test_inside_window(self):
        when = self.NOW + timedelta(hours=3)
        assert validate_schedule(when, now=self.NOW) == when

    def test_exactly_two_hours_is_allowed(self):
        validate_schedule(self.NOW + timedelta(hours=2), now=self.NOW)

    def test_too_soon(self):
        with pytest.raises(SchedulingTooSoon):
            validate_schedule(self.NOW + timedelta(hours=1, minutes=59), now=self.NOW)

    def test_exactly_fourteen_days_is_allowed(self):
        validate_schedule(self.NOW + timedelta(days=14), now=self.NOW)

    def test_too_far(self):
        with pytest.raises(SchedulingTooFar):
            validate_schedule(self.NOW + timedelta(days=14, minutes=1), now=self.NOW)

    def test_naive_time_is_read_as_utc(self):
        naive = (self.NOW + timedelta(hours=5)).replace(tzinfo=None)
        assert validate_schedule(naive, now=self.NOW).tzinfo == UTC


class TestCheckoutSuccess:
    def test_creates_pending_order(self, in_three_hours):
        _add()
        order_id = _checkout(in_three_hours)

        order = current_domain.repository_for(Order).get(order_id)
        assert order.status == OrderStatus.PENDING.value
        assert order.payment_status == PaymentStatus.UNPAID.value
        assert str(order.customer_id) == "cust-001"
        assert str(order.chef_id) == "chef-001"
        assert order.total_amount == 4000

    def test_line_items_match_cart(self, in_three_hours):
        _add()
        _add(dish_id="dish-tiramisu", dish_type=None, quantity=1)
        _add(dish_id=None, dish_type=None, quantity=1, chef_id="chef-001", custom_dish_name="Lasagna")

        order_id = _checkout(in_three_hours)

        order = current_domain.repository_for(Order).get(order_id)
        assert len(order.items) == 3
        assert order.total_amount == order_total(order.items) == 4900
        assert len(order.unpriced_custom_items()) == 1

    def test_snapshots_contact_address_and_card(self, in_three_hours):
        _add()
        order = current_domain.repository_for(Order).get(_checkout(in_three_hours))

        assert order.customer_email == "jane@example.com"
        assert order.customer_contact_number == "555-0100"
        assert order.chef_name == "Chef Marco"
        assert order.delivery_address.address_line == "1 Main St"
        assert order.delivery_address.access_note == "Ring twice"
        assert order.payment_method_type == "credit_card"
        assert order.payment_details == "**** 4242"

    def test_cart_is_emptied(self, in_three_hours):
        _add()
        _checkout(in_three_hours)
        assert _cart_items() == []

    def test_cart_accepts_another_chef_after_checkout(self, in_three_hours):
        _add()
        _checkout(in_three_hours)
        outcome = _add(dish_id="dish-ramen", dish_type=None, quantity=1)
        assert outcome.added


class TestCheckoutValidation:
    def test_empty_cart(self, in_three_hours):
        with pytest.raises(ValidationError) as exc:
            _checkout(in_three_hours)
        assert "cart" in exc.value.messages

    def test_missing_address(self, in_three_hours):
        _add()
        with pytest.raises(MissingSelection) as exc:
            _checkout(in_three_hours, address_id=None)
        assert "address_id" in exc.value.messages
        assert len(_cart_items()) == 1

    def test_missing_payment_method(self, in_three_hours):
        _add()
        with pytest.raises(MissingSelection):
            _checkout(in_three_hours, payment_method_id=None)

    def test_too_soon(self):
        _add()
        with pytest.raises(SchedulingTooSoon):
            _checkout(datetime.now(UTC) + timedelta(hours=1))
        assert len(_cart_items()) == 1

    def test_too_far(self):
        _add()
        with pytest.raises(SchedulingTooFar):
            _checkout(datetime.now(UTC) + timedelta(days=15))

    def test_address_of_another_customer(self, in_three_hours):
        _add()
        with pytest.raises(RecordNotFound):
            _checkout(in_three_hours, address_id="addr-002")
        assert len(_cart_items()) == 1

    def test_payment_method_of_another_customer(self, in_three_hours):
        _add()
        with pytest.raises(RecordNotFound):
            _checkout(in_three_hours, payment_method_id="pm-002")

    def test_unknown_customer(self, in_three_hours):
        _add(customer_id="cust-404")
        with pytest.raises(RecordNotFound):
            _checkout(in_three_hours, customer_id="cust-404")


class TestCheckoutFailure:
    def test_failure_leaves_no_order_and_an_intact_cart(self, in_three_hours):
        _add()
        placed = []
        original_place = Order.place

        def spy_place(*args, **kwargs):
            order = original_place(*args, **kwargs)
            placed.append(order)
            return order

        with (
            patch.object(Order, "place", side_effect=spy_place),
            patch.object(Cart, "clear", side_effect=RuntimeError("database unavailable")),
            pytest.raises(CheckoutFailed) as exc,
        ):
            _checkout(in_three_hours)

        assert isinstance(exc.value.__cause__, RuntimeError)
        assert len(placed) == 1
        with pytest.raises(ObjectNotFoundError):
            current_domain.repository_for(Order).get(str(placed[0].id))
        assert len(_cart_items()) == 1

    def test_store_failure_on_commit_is_a_checkout_failure(self, in_three_hours):
        _add()
        store_cls = type(current_domain.event_store.store)

        with (
            patch.object(store_cls, "_write", side_effect=RuntimeError("event store down")),
            pytest.raises(CheckoutFailed) as exc,
        ):
            _checkout(in_three_hours)

        assert isinstance(exc.value.__cause__, RuntimeError)
        assert "checkout" in exc.value.messages
        assert len(_cart_items()) == 1
