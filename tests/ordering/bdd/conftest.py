"""Shared BDD fixtures and step definitions for checkout and orders."""

import pytest
from ordering.customer.customer import Customer
from ordering.order.lifecycle import CancelOrder
from ordering.order.order import Order
from ordering.promo.check import CheckPromoCode
from ordering.promo.lookup import find_by_code
from ordering.promo.promo_code import PromoCode
from ordering.shared.messages import Message, translate
from protean import current_domain
from pytest_bdd import given, parsers, then, when


@pytest.fixture()
def outcome():
    """Container for the last operation result."""
    return {"result": None}


@pytest.fixture()
def run(outcome):
    """Process a command synchronously and remember its result for the Then steps."""

    def _run(command):
        outcome["result"] = current_domain.process(command, asynchronous=False)
        return outcome["result"]

    return _run


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse("a customer with {points:d} bonus points"), target_fixture="buyer")
def customer_with_points(cart, register_customer, points):
    return register_customer(points=points)


@given(parsers.cfparse('a delivery zone "{name}" with fee {fee:d} free from {threshold:d}'))
def delivery_zone(cart, geocoder, add_zone, name, fee, threshold):
    geocoder.configure(locality=name)
    add_zone(name, 40.1792, 44.4991, price=float(fee), is_free_from_price=float(threshold))


@given(parsers.cfparse('an active "{type}" promo code "{code}" worth {amount:d} for {uses:d} uses'))
def active_promo_code(create_promo, type, code, amount, uses):
    create_promo(code, type, amount=amount, usage_count=uses)


@given(parsers.cfparse('a free shipping promo code "{code}"'))
def free_shipping_promo_code(create_promo, code):
    create_promo(code, "free_shipping")


@given(parsers.cfparse('the promo code "{code}" requires a minimum price of {min_price:d}'))
def promo_code_minimum(code, min_price):
    repo = current_domain.repository_for(PromoCode)
    promo = find_by_code(code)
    promo.update_terms(min_price=float(min_price))
    repo.add(promo)


# ---------------------------------------------------------------------------
# When steps shared by several features
# ---------------------------------------------------------------------------
@when("the customer cancels the order")
def customer_cancels(buyer, order_id, run):
    run(CancelOrder(order_id=order_id, actor_kind="customer", actor_id=str(buyer.id)))


@when("an admin cancels the order")
def admin_cancels(order_id, admin, run):
    run(CancelOrder(order_id=order_id, actor_kind="admin", actor_id=str(admin.id)))


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the operation is rejected with "{key}"'))
def operation_rejected(outcome, key):
    result = outcome["result"]
    assert result is not None
    assert not result.success
    # Parameterized messages are compared on their fixed prefix
    expected = translate(Message(key)).split("{")[0]
    assert result.message.startswith(expected), result.message


@then(parsers.cfparse('the order status is "{status}"'))
def order_status_is(order_id, status):
    assert current_domain.repository_for(Order).get(order_id).status == status


@then(parsers.cfparse("the customer has {points:d} bonus points"))
def customer_points(buyer, points):
    assert current_domain.repository_for(Customer).get(buyer.id).points == points


@then(parsers.cfparse('the promo code "{code}" is deprecated'))
def promo_code_deprecated(code):
    assert find_by_code(code).deprecated is True


@then(parsers.cfparse('the promo code "{code}" is no longer found at checkout'))
def promo_code_not_found(run, code):
    result = run(CheckPromoCode(code=code, price=1000.0, delivery_type="pickup"))
    assert result.message == translate(Message.PROMO_CODE_NOT_FOUND)
