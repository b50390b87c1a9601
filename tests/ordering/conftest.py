import json

import pytest
from protean.integrations.pytest import DomainFixture


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


# ---------------------------------------------------------------------------
# Outbound adapters (fresh fakes per test, see tests/conftest.py)
# ---------------------------------------------------------------------------
@pytest.fixture()
def cart():
    """The active fake cart service with a small catalogue registered."""
    from ordering.cart import get_cart_service

    service = get_cart_service()
    service.register_product("prod-001", price=1000.0, bonus=10)
    service.register_product("prod-002", price=500.0, discounted_price=400.0, bonus=5)
    service.register_product("prod-003", price=250.0, step=5)
    return service


@pytest.fixture()
def notifier():
    from ordering.notifications import get_notifier

    return get_notifier()


@pytest.fixture()
def mailer():
    from ordering.notifications import get_mailer

    return get_mailer()


@pytest.fixture()
def geocoder():
    from ordering.delivery.geo import get_geocoder

    return get_geocoder()


@pytest.fixture()
def distance_matrix():
    from ordering.delivery.geo import get_distance_matrix

    return get_distance_matrix()


# ---------------------------------------------------------------------------
# Stored aggregates
# ---------------------------------------------------------------------------
@pytest.fixture()
def add_zone():
    from ordering.delivery.zone import DeliveryZone
    from ordering.delivery.zones import AddDeliveryZone
    from protean import current_domain

    def _add(name, lat, lng, price=500.0, is_free_from_price=10000.0):
        zone_id = current_domain.process(
            AddDeliveryZone(name=name, lat=lat, lng=lng, price=price, is_free_from_price=is_free_from_price),
            asynchronous=False,
        )
        return current_domain.repository_for(DeliveryZone).get(zone_id)

    return _add


@pytest.fixture()
def yerevan(geocoder, add_zone):
    """A Yerevan zone found by locality name: 500 fee, free from 10000."""
    geocoder.configure(locality="Yerevan")
    return add_zone("Yerevan", 40.1792, 44.4991, price=500.0, is_free_from_price=10000.0)


@pytest.fixture()
def register_customer():
    from ordering.customer.customer import Customer
    from ordering.customer.registration import RegisterCustomer
    from protean import current_domain

    def _register(email="buyer@example.com", points=1000, role="user"):
        customer_id = current_domain.process(
            RegisterCustomer(email=email, first_name="Anna", last_name="Petrosyan", role=role, points=points),
            asynchronous=False,
        )
        return current_domain.repository_for(Customer).get(customer_id)

    return _register


@pytest.fixture()
def customer(register_customer):
    return register_customer()


@pytest.fixture()
def admin(register_customer):
    """A back-office user allowed to cancel reviewed orders and finish orders."""
    return register_customer(email="admin@example.com", points=0, role="admin")


@pytest.fixture()
def register_guest():
    """Store a verified guest and return ``(guest, plain_code)``."""
    from ordering.customer.guest import GuestUser
    from protean import current_domain

    def _register(email="guest@example.com"):
        guest = GuestUser.for_email(email)
        code = guest.issue_verification_code()
        guest.verify(code)
        repo = current_domain.repository_for(GuestUser)
        repo.add(guest)
        return repo.get(guest.id), code

    return _register


@pytest.fixture()
def guest(register_guest):
    return register_guest()


@pytest.fixture()
def create_promo():
    from ordering.promo.promo_code import PromoCode
    from protean import current_domain

    def _create(code, type, **kwargs):
        promo = PromoCode.create(code=code, type=type, **kwargs)
        repo = current_domain.repository_for(PromoCode)
        repo.add(promo)
        return repo.get(promo.id)

    return _create


@pytest.fixture()
def reload():
    """Fetch the stored copy of an aggregate."""
    from protean import current_domain

    def _reload(aggregate_cls, identifier):
        return current_domain.repository_for(aggregate_cls).get(identifier)

    return _reload


# ---------------------------------------------------------------------------
# Order placement
# ---------------------------------------------------------------------------
YEREVAN_ADDRESS = {"address": "1 Abovyan St", "house": "1", "lat": 40.18, "lng": 44.51}


@pytest.fixture()
def place_order(cart):
    """Place an order through the command handler; returns the result envelope.

    Defaults to a pickup order of two ``prod-001`` units (2000).
    """
    from ordering.order.creation import PlaceOrder
    from protean import current_domain

    def _place(lines=None, address=None, **fields):
        fields.setdefault("delivery_type", "pickup")
        return current_domain.process(
            PlaceOrder(
                lines=json.dumps(lines or [{"product_id": "prod-001", "count": 2}]),
                delivery_address=json.dumps(address) if address else None,
                **fields,
            ),
            asynchronous=False,
        )

    return _place


@pytest.fixture()
def yerevan_address():
    return dict(YEREVAN_ADDRESS)
