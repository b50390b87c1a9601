"""Checkout pricing — one authoritative total for a cart.

Evaluation order:
1. cart total (sub total minus cart discount);
2. minus redeemed bonus points (checked by the bonus ledger guard);
3. plus the delivery fee, priced on the total after bonus (delivery only);
4. minus the promo discount, evaluated against the fee-inclusive total;
   a free-shipping grant takes the fee added in step 3 back out.

The zone is resolved once per call and the fee handed to the promo
evaluator, so the promo check and the final total agree on the fee.
"""

from dataclasses import asdict, dataclass

import structlog

from ordering.bonus.ledger import check_redemption
from ordering.cart.quote import CartQuote
from ordering.customer.customer import Customer
from ordering.delivery.fee import calculate_delivery_fee
from ordering.delivery.geo.port import Coordinates
from ordering.delivery.resolver import ZoneResolver
from ordering.order.order import ActorKind, DeliveryType
from ordering.promo.evaluation import PromoCodeEvaluator, PromoContext
from ordering.promo.promo_code import PromoCode
from ordering.shared.language import Language
from ordering.shared.result import OperationResult, ok

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class PricingBreakdown:
    sub_total: float
    discount_amount: float
    used_bonuses: int
    delivery_fee: float
    promo_code_discount_amount: float
    is_free_shipping: bool
    receiving_bonuses: int
    total: float

    def to_dict(self) -> dict:
        return asdict(self)


class CheckoutPricer:
    def __init__(self, zone_resolver: ZoneResolver | None = None, evaluator: PromoCodeEvaluator | None = None):
        self._zone_resolver = zone_resolver
        self._evaluator = evaluator or PromoCodeEvaluator()

    def price(
        self,
        quote: CartQuote,
        delivery_type: DeliveryType,
        customer: Customer | None = None,
        bonus: int | None = None,
        destination: Coordinates | None = None,
        promo: PromoCode | None = None,
        actor_kind: ActorKind | None = None,
        actor_id: str | None = None,
        language: Language = Language.EN,
    ) -> OperationResult:
        """Price the checkout. A rejected bonus or promo code yields a failure envelope."""
        cart_total = quote.total

        rejection = check_redemption(customer, bonus, cart_total, language)
        if rejection is not None:
            return rejection
        used_bonuses = bonus or 0
        total = cart_total - used_bonuses

        resolved_fee = None
        if delivery_type == DeliveryType.DELIVERY and destination is not None:
            zone = (self._zone_resolver or ZoneResolver()).resolve(destination.lat, destination.lng)
            resolved_fee = calculate_delivery_fee(zone, total)
        delivery_fee = resolved_fee or 0.0
        total += delivery_fee

        promo_discount = 0.0
        is_free_shipping = False
        if promo is not None:
            evaluation = self._evaluator.evaluate(
                promo,
                PromoContext(
                    price=total,
                    delivery_type=delivery_type,
                    language=language,
                    actor_kind=actor_kind,
                    actor_id=actor_id,
                    destination=destination,
                    resolved_delivery_fee=resolved_fee,
                ),
            )
            if not evaluation.success:
                return evaluation

            promo_discount = evaluation.data.discount_amount
            total -= promo_discount
            if evaluation.data.is_free_shipping:
                is_free_shipping = True
                total -= delivery_fee
                delivery_fee = 0.0

        breakdown = PricingBreakdown(
            sub_total=quote.sub_total,
            discount_amount=quote.discount,
            used_bonuses=used_bonuses,
            delivery_fee=delivery_fee,
            promo_code_discount_amount=promo_discount,
            is_free_shipping=is_free_shipping,
            receiving_bonuses=quote.bonus,
            total=total,
        )
        logger.debug("checkout_priced", **breakdown.to_dict())
        return ok(data=breakdown)
