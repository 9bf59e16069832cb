"""Directory port (abstract interface) — read-only lookups the engine depends on.

Dishes, chefs, customer profiles, delivery addresses and payment methods are
managed elsewhere (catalog and profile forms). The ordering engine only reads
them: to resolve a dish's chef and price when it is added to a cart, and to
snapshot contact, address and payment details at checkout.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass(frozen=True)
class DishRecord:
    dish_id: str
    chef_id: str
    name: str
    price: int  # minor units
    dish_types: tuple[str, ...] = field(default_factory=tuple)
    customization_options: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ChefRecord:
    chef_id: str
    display_name: str
    email: str | None = None


@dataclass(frozen=True)
class CustomerRecord:
    customer_id: str
    email: str
    display_name: str = ""
    contact_number: str = ""


@dataclass(frozen=True)
class AddressRecord:
    address_id: str
    customer_id: str
    address_line: str
    city: str
    state: str
    zip_code: str
    access_note: str | None = None

    def snapshot(self) -> dict:
        return {
            "address_line": self.address_line,
            "city": self.city,
            "state": self.state,
            "zip_code": self.zip_code,
            "access_note": self.access_note,
        }


@dataclass(frozen=True)
class PaymentMethodRecord:
    payment_method_id: str
    customer_id: str
    method_type: str
    card_number: str

    @property
    def descriptor(self) -> str:
        """Non-reversible summary safe to store on an order (``**** 4242``)."""
        return f"**** {self.card_number[-4:]}"


class Directory(ABC):
    """Abstract directory interface. Lookups return ``None`` for unknown ids."""

    @abstractmethod
    def get_dish(self, dish_id: str) -> DishRecord | None: ...

    @abstractmethod
    def get_chef(self, chef_id: str) -> ChefRecord | None: ...

    @abstractmethod
    def get_customer(self, customer_id: str) -> CustomerRecord | None: ...

    @abstractmethod
    def get_address(self, address_id: str) -> AddressRecord | None: ...

    @abstractmethod
    def get_payment_method(self, payment_method_id: str) -> PaymentMethodRecord | None: ...
