"""Promo code evaluation — is a code usable for this order, and what is it worth?

Checks run in a fixed order and the first failing one decides the
(localized) rejection message:

1. per-buyer usage against ``usage_count``;
2. delivery fee (resolved once, or taken from the caller);
3. ``min_price`` / 4. ``max_price``;
5. free shipping on an order that already ships free.

Percent discounts are taken from the rounded discounted price, so the
discount is whatever brings the price to a multiple of 10.
"""

from dataclasses import dataclass
from typing import Callable

from ordering.delivery.fee import resolve_delivery_fee
from ordering.delivery.geo.port import Coordinates
from ordering.order.order import ActorKind, DeliveryType
from ordering.promo.promo_code import PromoCode, PromoCodeType
from ordering.promo.usage import count_usages
from ordering.shared.language import Language
from ordering.shared.messages import Message, translate
from ordering.shared.money import discounted_price, format_amount
from ordering.shared.result import OperationResult, fail, ok


@dataclass(frozen=True)
class PromoContext:
    price: float
    delivery_type: DeliveryType = DeliveryType.DELIVERY
    language: Language = Language.EN
    actor_kind: ActorKind | None = None
    actor_id: str | None = None
    destination: Coordinates | None = None
    resolved_delivery_fee: float | None = None


@dataclass(frozen=True)
class PromoEvaluation:
    discount_amount: float
    is_free_shipping: bool
    delivery_fee: float | None

    def to_dict(self) -> dict:
        return {
            "discount_amount": self.discount_amount,
            "is_free_shipping": self.is_free_shipping,
            "delivery_fee": self.delivery_fee,
        }


class PromoCodeEvaluator:
    def __init__(
        self,
        fee_resolver: Callable[[Coordinates, float], float] | None = None,
        usage_counter: Callable[..., int] | None = None,
    ) -> None:
        self._resolve_fee = fee_resolver or resolve_delivery_fee
        self._count_usages = usage_counter or count_usages

    def evaluate(self, promo: PromoCode, context: PromoContext) -> OperationResult:
        language = context.language

        if context.actor_id and promo.usage_count is not None:
            used = self._usages_by(promo, context)
            if used >= promo.usage_count:
                return fail(translate(Message.PROMO_CODE_ALREADY_USED, language))

        delivery_fee = self._delivery_fee(context)

        if promo.min_price is not None and context.price < promo.min_price:
            return fail(
                translate(Message.PROMO_CODE_BELOW_MINIMUM, language, min_price=format_amount(promo.min_price))
            )
        if promo.max_price is not None and context.price > promo.max_price:
            return fail(
                translate(Message.PROMO_CODE_ABOVE_MAXIMUM, language, max_price=format_amount(promo.max_price))
            )

        kind = PromoCodeType(promo.type)
        ships_free = context.delivery_type == DeliveryType.PICKUP or not delivery_fee
        if kind == PromoCodeType.FREE_SHIPPING and ships_free:
            return fail(translate(Message.PROMO_CODE_SHIPPING_ALREADY_FREE, language))

        if kind == PromoCodeType.FREE_SHIPPING:
            return ok(data=PromoEvaluation(discount_amount=0.0, is_free_shipping=True, delivery_fee=0.0))

        if kind == PromoCodeType.FIXED_AMOUNT:
            discount = float(promo.amount)
        else:
            discount = context.price - discounted_price(context.price, promo.amount)

        if promo.free_shipping:
            return ok(data=PromoEvaluation(discount_amount=discount, is_free_shipping=True, delivery_fee=0.0))
        return ok(data=PromoEvaluation(discount_amount=discount, is_free_shipping=False, delivery_fee=delivery_fee))

    def _usages_by(self, promo: PromoCode, context: PromoContext) -> int:
        if context.actor_kind == ActorKind.GUEST:
            return self._count_usages(str(promo.id), guest_id=context.actor_id)
        return self._count_usages(str(promo.id), customer_id=context.actor_id)

    def _delivery_fee(self, context: PromoContext) -> float | None:
        if context.delivery_type == DeliveryType.PICKUP:
            return None
        if context.resolved_delivery_fee is not None:
            return context.resolved_delivery_fee
        if context.destination is not None:
            return self._resolve_fee(context.destination, context.price)
        return None
