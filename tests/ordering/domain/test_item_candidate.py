"""Tests for ItemCandidate validation and resolving candidates from the directory."""

import pytest
from ordering.cart.candidate import ChefConflict, ItemCandidate, build_candidate
from ordering.errors import InvalidPrice, MissingSelection, RecordNotFound
from protean.exceptions import ValidationError


def _risotto(**overrides):
    fields = {
        "chef_id": "chef-001",
        "dish_id": "dish-risotto",
        "dish_name": "Mushroom Risotto",
        "unit_price": 2000,
        "dish_types": ("Main", "Side"),
        "dish_type": "Main",
        "quantity": 2,
    }
    fields.update(overrides)
    return ItemCandidate(**fields)


class TestValidate:
    def test_valid_catalog_candidate(self):
        _risotto().validate()

    def test_quantity_must_be_positive(self):
        with pytest.raises(ValidationError) as exc:
            _risotto(quantity=0).validate()
        assert "quantity" in exc.value.messages

    def test_missing_dish_type_selection(self):
        with pytest.raises(MissingSelection) as exc:
            _risotto(dish_type=None).validate()
        assert "dish_type" in exc.value.messages

    def test_dish_type_must_be_offered(self):
        with pytest.raises(ValidationError):
            _risotto(dish_type="Dessert").validate()

    def test_dish_without_types_needs_no_selection(self):
        ItemCandidate(chef_id="chef-001", dish_id="dish-tiramisu", dish_name="Tiramisu", unit_price=900).validate()

    def test_negative_catalog_price(self):
        with pytest.raises(InvalidPrice):
            _risotto(unit_price=-100).validate()

    def test_custom_candidate_needs_a_name(self):
        with pytest.raises(ValidationError) as exc:
            ItemCandidate(chef_id="chef-001", is_custom=True, custom_dish_name="  ").validate()
        assert "custom_dish_name" in exc.value.messages

    def test_custom_candidate_has_no_price(self):
        candidate = ItemCandidate(chef_id="chef-001", is_custom=True, custom_dish_name="Lasagna")
        candidate.validate()
        assert candidate.custom_price is None


class TestSerialization:
    def test_json_round_trip_preserves_selection(self):
        candidate = _risotto(customization_options=("extra parmesan",), dish_note="No salt")
        restored = ItemCandidate.from_json(candidate.to_json())
        assert restored == candidate

    def test_unknown_keys_are_ignored(self):
        data = _risotto().to_dict()
        data["unexpected"] = "value"
        assert ItemCandidate.from_dict(data) == _risotto()

    def test_non_object_payload_rejected(self):
        with pytest.raises(ValidationError):
            ItemCandidate.from_json("[1, 2]")

    def test_conflict_to_dict(self):
        conflict = ChefConflict(current_chef_id="chef-002", candidate=_risotto(), proceed_to_checkout=True)
        data = conflict.to_dict()
        assert data["current_chef_id"] == "chef-002"
        assert data["candidate_chef_id"] == "chef-001"
        assert data["proceed_to_checkout"] is True


class TestBuildCandidate:
    def test_catalog_dish_takes_chef_and_price_from_directory(self, directory):
        candidate = build_candidate(directory, quantity=2, dish_id="dish-risotto", dish_type="Side")
        assert candidate.chef_id == "chef-001"
        assert candidate.unit_price == 2000
        assert candidate.dish_name == "Mushroom Risotto"
        assert candidate.dish_types == ("Main", "Side")
        assert candidate.requires_dish_type is True

    def test_options_accept_json_text(self, directory):
        candidate = build_candidate(
            directory,
            quantity=1,
            dish_id="dish-risotto",
            dish_type="Main",
            customization_options='["extra parmesan"]',
        )
        assert candidate.customization_options == ("extra parmesan",)

    def test_unknown_option_rejected(self, directory):
        with pytest.raises(ValidationError):
            build_candidate(
                directory,
                quantity=1,
                dish_id="dish-risotto",
                dish_type="Main",
                customization_options=["gold leaf"],
            )

    def test_unknown_dish(self, directory):
        with pytest.raises(RecordNotFound):
            build_candidate(directory, quantity=1, dish_id="dish-missing")

    def test_missing_dish_type_is_reported(self, directory):
        with pytest.raises(MissingSelection):
            build_candidate(directory, quantity=1, dish_id="dish-risotto")

    def test_custom_request_needs_chef(self, directory):
        with pytest.raises(MissingSelection):
            build_candidate(directory, quantity=1, custom_dish_name="Lasagna")

    def test_custom_request_for_unknown_chef(self, directory):
        with pytest.raises(RecordNotFound):
            build_candidate(directory, quantity=1, chef_id="chef-999", custom_dish_name="Lasagna")

    def test_custom_request(self, directory):
        candidate = build_candidate(
            directory,
            quantity=1,
            chef_id="chef-002",
            custom_dish_name="Grandma's lasagna",
            custom_description="Like she used to make it",
        )
        assert candidate.is_custom is True
        assert candidate.dish_id is None
        assert candidate.chef_id == "chef-002"
        assert candidate.custom_price is None
