"""Shared checkout steps: resolve the payer, quote the cart, price it.

Used by both the checkout preview and order placement so that what the buyer
is shown is exactly what the order is placed with.
"""

import json
from dataclasses import dataclass

from ordering.cart import get_cart_service
from ordering.cart.quote import CartQuote, CartRequestLine
from ordering.customer.customer import Customer
from ordering.customer.guest import GuestUser
from ordering.delivery.geo.port import Coordinates
from ordering.order.order import ActorKind, DeliveryType
from ordering.pricing.aggregator import CheckoutPricer, PricingBreakdown
from ordering.promo.lookup import find_redeemable
from ordering.promo.promo_code import PromoCode
from ordering.shared.language import Language
from ordering.shared.messages import Message, translate
from ordering.shared.result import OperationResult, fail, ok


@dataclass(frozen=True)
class Payer:
    customer: Customer | None = None
    guest: GuestUser | None = None

    @property
    def actor_kind(self) -> ActorKind | None:
        if self.customer is not None:
            return ActorKind.CUSTOMER
        if self.guest is not None:
            return ActorKind.GUEST
        return None

    @property
    def actor_id(self) -> str | None:
        owner = self.customer or self.guest
        return str(owner.id) if owner is not None else None


@dataclass(frozen=True)
class PricedCheckout:
    quote: CartQuote
    breakdown: PricingBreakdown
    promo: PromoCode | None = None


def parse_lines(raw: str | None) -> list[CartRequestLine]:
    """Decode the JSON list of ``{product_id, count, product_version_id}`` objects."""
    return [
        CartRequestLine(
            product_id=str(item["product_id"]),
            count=int(item["count"]),
            product_version_id=item.get("product_version_id"),
        )
        for item in json.loads(raw or "[]")
    ]


def price_checkout(
    lines: list[CartRequestLine],
    delivery_type: DeliveryType,
    payer: Payer,
    bonus: int | None = None,
    destination: Coordinates | None = None,
    promo_code: str | None = None,
    language: Language = Language.EN,
) -> OperationResult:
    """Quote and price a checkout; ``data`` is a ``PricedCheckout`` on success."""
    if not lines:
        return fail(translate(Message.EMPTY_CART, language))

    promo = None
    if promo_code:
        promo = find_redeemable(promo_code)
        if promo is None:
            return fail(translate(Message.PROMO_CODE_NOT_FOUND, language))

    customer_id = str(payer.customer.id) if payer.customer is not None else None
    quote = get_cart_service().quote(lines, language, customer_id)
    if quote.deleted_list:
        return fail(translate(Message.WRONG_PRODUCTS, language), {"deleted_list": list(quote.deleted_list)})
    if quote.is_empty:
        return fail(translate(Message.EMPTY_CART, language))

    result = CheckoutPricer().price(
        quote,
        delivery_type,
        customer=payer.customer,
        bonus=bonus,
        destination=destination,
        promo=promo,
        actor_kind=payer.actor_kind,
        actor_id=payer.actor_id,
        language=language,
    )
    if not result.success:
        return result
    return ok(data=PricedCheckout(quote=quote, breakdown=result.data, promo=promo))
