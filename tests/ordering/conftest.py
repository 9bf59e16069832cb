from datetime import UTC, datetime, timedelta

import pytest
from protean.integrations.pytest import DomainFixture

from ordering.directory import reset_directory, set_directory
from ordering.directory.fake_adapter import InMemoryDirectory
from ordering.directory.port import (
    AddressRecord,
    ChefRecord,
    CustomerRecord,
    DishRecord,
    PaymentMethodRecord,
)
from ordering.notification import reset_notifier, set_notifier
from ordering.notification.fake_adapter import FakeNotifier


@pytest.fixture(scope="session")
def ordering_bed():
    from ordering.domain import ordering

    bed = DomainFixture(ordering)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(ordering_bed):
    with ordering_bed.domain_context():
        yield

        from protean import current_domain

        # Clear all databases
        for _, provider in current_domain.providers.items():
            provider._data_reset()

        # Drain event stores
        current_domain.event_store.store._data_reset()

    reset_directory()
    reset_notifier()


@pytest.fixture()
def directory():
    """A directory seeded with two chefs, their dishes and one customer.

    chef-001 (Chef Marco): dish-risotto $20 (types Main/Side),
    dish-tiramisu $9, dish-steak $120.
    chef-002 (Chef Aiko): dish-ramen $18.
    cust-001 owns addr-001 and pm-001; cust-002 owns addr-002 and pm-002.
    """
    d = InMemoryDirectory()
    d.add_chef(ChefRecord(chef_id="chef-001", display_name="Chef Marco", email="marco@example.com"))
    d.add_chef(ChefRecord(chef_id="chef-002", display_name="Chef Aiko", email="aiko@example.com"))

    d.add_dish(
        DishRecord(
            dish_id="dish-risotto",
            chef_id="chef-001",
            name="Mushroom Risotto",
            price=2000,
            dish_types=("Main", "Side"),
            customization_options=("extra parmesan", "no truffle oil"),
        )
    )
    d.add_dish(DishRecord(dish_id="dish-tiramisu", chef_id="chef-001", name="Tiramisu", price=900))
    d.add_dish(DishRecord(dish_id="dish-steak", chef_id="chef-001", name="Dry-aged Steak", price=12000))
    d.add_dish(DishRecord(dish_id="dish-ramen", chef_id="chef-002", name="Tonkotsu Ramen", price=1800))

    d.add_customer(
        CustomerRecord(
            customer_id="cust-001",
            email="jane@example.com",
            display_name="Jane",
            contact_number="555-0100",
        )
    )
    d.add_customer(CustomerRecord(customer_id="cust-002", email="joe@example.com", display_name="Joe"))

    d.add_address(
        AddressRecord(
            address_id="addr-001",
            customer_id="cust-001",
            address_line="1 Main St",
            city="Springfield",
            state="IL",
            zip_code="62701",
            access_note="Ring twice",
        )
    )
    d.add_address(
        AddressRecord(
            address_id="addr-002",
            customer_id="cust-002",
            address_line="9 Elm St",
            city="Springfield",
            state="IL",
            zip_code="62702",
        )
    )
    d.add_payment_method(
        PaymentMethodRecord(
            payment_method_id="pm-001",
            customer_id="cust-001",
            method_type="credit_card",
            card_number="4111111111114242",
        )
    )
    d.add_payment_method(
        PaymentMethodRecord(
            payment_method_id="pm-002",
            customer_id="cust-002",
            method_type="credit_card",
            card_number="5500000000000004",
        )
    )

    set_directory(d)
    return d


@pytest.fixture()
def notifier():
    fake = FakeNotifier()
    set_notifier(fake)
    return fake


@pytest.fixture()
def in_three_hours():
    return datetime.now(UTC) + timedelta(hours=3)
