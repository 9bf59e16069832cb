"""In-memory directory for development and testing.

Records are seeded explicitly with the ``add_*`` helpers; nothing is persisted.
"""

from ordering.directory.port import (
    AddressRecord,
    ChefRecord,
    CustomerRecord,
    Directory,
    DishRecord,
    PaymentMethodRecord,
)


class InMemoryDirectory(Directory):
    """Directory adapter backed by plain dictionaries."""

    def __init__(self) -> None:
        self.dishes: dict[str, DishRecord] = {}
        self.chefs: dict[str, ChefRecord] = {}
        self.customers: dict[str, CustomerRecord] = {}
        self.addresses: dict[str, AddressRecord] = {}
        self.payment_methods: dict[str, PaymentMethodRecord] = {}

    def add_dish(self, dish: DishRecord) -> DishRecord:
        self.dishes[dish.dish_id] = dish
        return dish

    def add_chef(self, chef: ChefRecord) -> ChefRecord:
        self.chefs[chef.chef_id] = chef
        return chef

    def add_customer(self, customer: CustomerRecord) -> CustomerRecord:
        self.customers[customer.customer_id] = customer
        return customer

    def add_address(self, address: AddressRecord) -> AddressRecord:
        self.addresses[address.address_id] = address
        return address

    def add_payment_method(self, payment_method: PaymentMethodRecord) -> PaymentMethodRecord:
        self.payment_methods[payment_method.payment_method_id] = payment_method
        return payment_method

    def get_dish(self, dish_id: str) -> DishRecord | None:
        return self.dishes.get(str(dish_id))

    def get_chef(self, chef_id: str) -> ChefRecord | None:
        return self.chefs.get(str(chef_id))

    def get_customer(self, customer_id: str) -> CustomerRecord | None:
        return self.customers.get(str(customer_id))

    def get_address(self, address_id: str) -> AddressRecord | None:
        return self.addresses.get(str(address_id))

    def get_payment_method(self, payment_method_id: str) -> PaymentMethodRecord | None:
        return self.payment_methods.get(str(payment_method_id))

    def reset(self) -> None:
        """Forget every record (useful between tests)."""
        self.dishes.clear()
        self.chefs.clear()
        self.customers.clear()
        self.addresses.clear()
        self.payment_methods.clear()
