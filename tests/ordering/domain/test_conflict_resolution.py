"""Tests for resolving chef conflicts by keeping or replacing the cart."""

import pytest
from ordering.cart.candidate import ItemCandidate
from ordering.cart.cart import Cart
from ordering.cart.conflict import ConflictPolicy, resolve_chef_conflict
from protean.exceptions import ValidationError


def _marco_cart():
    cart = Cart.create(customer_id="cust-001")
    cart.add_item(
        ItemCandidate(
            chef_id="chef-001",
            dish_id="dish-risotto",
            dish_name="Mushroom Risotto",
            unit_price=2000,
            dish_types=("Main", "Side"),
            dish_type="Main",
            quantity=2,
        )
    )
    cart.add_item(ItemCandidate(chef_id="chef-001", is_custom=True, custom_dish_name="Lasagna"))
    return cart


def _ramen(quantity=1):
    return ItemCandidate(
        chef_id="chef-002",
        dish_id="dish-ramen",
        dish_name="Tonkotsu Ramen",
        unit_price=1800,
        quantity=quantity,
    )


class TestReject:
    def test_reject_keeps_cart(self):
        cart = _marco_cart()
        resolution = resolve_chef_conflict(cart, _ramen(), ConflictPolicy.REJECT)

        assert resolution.policy == ConflictPolicy.REJECT
        assert resolution.item_id is None
        assert len(cart.items) == 2
        assert cart.current_chef_id() == "chef-001"

    def test_reject_carries_checkout_intent(self):
        resolution = resolve_chef_conflict(_marco_cart(), _ramen(), "reject", proceed_to_checkout=True)
        assert resolution.proceed_to_checkout is True


class TestReplace:
    def test_replace_leaves_only_the_new_item(self):
        cart = _marco_cart()
        resolution = resolve_chef_conflict(cart, _ramen(), ConflictPolicy.REPLACE)

        assert len(cart.items) == 1
        assert cart.current_chef_id() == "chef-002"
        assert str(cart.items[0].id) == resolution.item_id
        assert resolution.items_removed == 2

    def test_replace_keeps_checkout_intent(self):
        resolution = resolve_chef_conflict(_marco_cart(), _ramen(), ConflictPolicy.REPLACE, proceed_to_checkout=True)
        assert resolution.proceed_to_checkout is True

    def test_replace_never_mixes_chefs(self):
        cart = _marco_cart()
        resolve_chef_conflict(cart, _ramen(quantity=3), ConflictPolicy.REPLACE)
        assert {str(item.chef_id) for item in cart.items} == {"chef-002"}
        assert cart.subtotal() == 5400

    def test_invalid_candidate_does_not_empty_cart(self):
        cart = _marco_cart()
        with pytest.raises(ValidationError):
            resolve_chef_conflict(cart, _ramen(quantity=0), ConflictPolicy.REPLACE)
        assert len(cart.items) == 2

    def test_replace_without_conflict_just_adds(self):
        cart = _marco_cart()
        candidate = ItemCandidate(
            chef_id="chef-001",
            dish_id="dish-tiramisu",
            dish_name="Tiramisu",
            unit_price=900,
        )
        resolution = resolve_chef_conflict(cart, candidate, ConflictPolicy.REPLACE)
        assert len(cart.items) == 3
        assert resolution.items_removed == 0

    def test_replace_on_empty_cart(self):
        cart = Cart.create(customer_id="cust-001")
        resolve_chef_conflict(cart, _ramen(), ConflictPolicy.REPLACE)
        assert cart.current_chef_id() == "chef-002"

    def test_unknown_policy(self):
        with pytest.raises(ValueError):
            resolve_chef_conflict(_marco_cart(), _ramen(), "merge")
