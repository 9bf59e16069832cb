"""Item candidates and chef conflicts.

An ``ItemCandidate`` is the item a customer is trying to put into their cart,
resolved against the directory (chef, price, offered dish types) but not yet
part of any cart. It is passed explicitly to ``Cart.add_item`` and to chef
conflict resolution, and it round-trips through JSON so a client can hand the
exact same candidate back when it resolves a conflict.
"""

import json
from dataclasses import asdict, dataclass, field

from protean.exceptions import ValidationError

from ordering.directory.port import Directory
from ordering.errors import InvalidPrice, MissingSelection, RecordNotFound


@dataclass(frozen=True)
class ItemCandidate:
    chef_id: str
    quantity: int = 1
    dish_id: str | None = None
    dish_name: str | None = None
    unit_price: int | None = None
    dish_types: tuple[str, ...] = field(default_factory=tuple)  # offered by the dish
    dish_type: str | None = None  # chosen by the customer
    customization_options: tuple[str, ...] = field(default_factory=tuple)
    dish_note: str | None = None
    is_custom: bool = False
    custom_dish_name: str | None = None
    custom_description: str | None = None
    custom_price: int | None = None

    @property
    def requires_dish_type(self) -> bool:
        return bool(self.dish_types)

    def validate(self) -> None:
        """Reject candidates that can never be added, before any cart is touched."""
        if not isinstance(self.quantity, int) or self.quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})
        if not self.chef_id:
            raise ValidationError({"chef_id": ["Every item must belong to a chef"]})

        if self.is_custom:
            if not (self.custom_dish_name or "").strip():
                raise ValidationError({"custom_dish_name": ["A custom dish needs a name"]})
            return

        if not self.dish_id:
            raise ValidationError({"dish_id": ["A catalog item needs a dish"]})
        if self.unit_price is None or self.unit_price < 0:
            raise InvalidPrice({"unit_price": [f"Dish '{self.dish_name}' has no valid price"]})
        if self.requires_dish_type and not self.dish_type:
            raise MissingSelection({"dish_type": [f"Please choose a dish type for '{self.dish_name}'"]})
        if self.dish_type and self.dish_type not in self.dish_types:
            raise ValidationError({"dish_type": [f"'{self.dish_type}' is not offered for '{self.dish_name}'"]})

    def to_dict(self) -> dict:
        data = asdict(self)
        data["dish_types"] = list(self.dish_types)
        data["customization_options"] = list(self.customization_options)
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: dict) -> "ItemCandidate":
        known = {name: data[name] for name in cls.__dataclass_fields__ if name in data}
        known["dish_types"] = tuple(known.get("dish_types") or ())
        known["customization_options"] = tuple(known.get("customization_options") or ())
        return cls(**known)

    @classmethod
    def from_json(cls, payload) -> "ItemCandidate":
        data = json.loads(payload) if isinstance(payload, str) else payload
        if not isinstance(data, dict):
            raise ValidationError({"candidate": ["Candidate must be a JSON object"]})
        return cls.from_dict(data)


@dataclass(frozen=True)
class ChefConflict:
    """The candidate belongs to a different chef than the items already in the cart.

    Returned (never raised) by ``Cart.add_item``; the cart is left untouched.
    ``proceed_to_checkout`` remembers whether the add was part of an
    add-then-checkout action.
    """

    current_chef_id: str
    candidate: ItemCandidate
    proceed_to_checkout: bool = False

    def to_dict(self) -> dict:
        return {
            "current_chef_id": self.current_chef_id,
            "candidate_chef_id": self.candidate.chef_id,
            "candidate": self.candidate.to_dict(),
            "proceed_to_checkout": self.proceed_to_checkout,
        }


def build_candidate(
    directory: Directory,
    *,
    quantity: int,
    dish_id: str | None = None,
    chef_id: str | None = None,
    dish_type: str | None = None,
    customization_options=None,
    dish_note: str | None = None,
    custom_dish_name: str | None = None,
    custom_description: str | None = None,
) -> ItemCandidate:
    """Resolve what the customer asked for into a validated candidate.

    Catalog dishes take their chef, name and price from the directory.
    Custom requests are made on a chef's page, so ``chef_id`` is required and
    must name a known chef; their price stays unset until the chef sets it.
    """
    options = _parse_options(customization_options)

    if dish_id:
        dish = directory.get_dish(dish_id)
        if dish is None:
            raise RecordNotFound({"dish_id": [f"Dish {dish_id} does not exist"]})

        unknown = [option for option in options if option not in dish.customization_options]
        if unknown:
            raise ValidationError({"customization_options": [f"Unknown options for '{dish.name}': {', '.join(unknown)}"]})

        candidate = ItemCandidate(
            chef_id=str(dish.chef_id),
            quantity=quantity,
            dish_id=str(dish.dish_id),
            dish_name=dish.name,
            unit_price=dish.price,
            dish_types=tuple(dish.dish_types),
            dish_type=dish_type or None,
            customization_options=options,
            dish_note=dish_note,
        )
    else:
        if not chef_id:
            raise MissingSelection({"chef_id": ["A custom dish request must name a chef"]})
        if directory.get_chef(chef_id) is None:
            raise RecordNotFound({"chef_id": [f"Chef {chef_id} does not exist"]})

        candidate = ItemCandidate(
            chef_id=str(chef_id),
            quantity=quantity,
            dish_note=dish_note,
            is_custom=True,
            custom_dish_name=custom_dish_name,
            custom_description=custom_description,
        )

    candidate.validate()
    return candidate


def _parse_options(raw) -> tuple[str, ...]:
    if not raw:
        return ()
    values = json.loads(raw) if isinstance(raw, str) else raw
    if not isinstance(values, list):
        raise ValidationError({"customization_options": ["Options must be a list"]})
    return tuple(str(value) for value in values)
