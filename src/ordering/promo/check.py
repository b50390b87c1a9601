"""Promo code check at checkout — command and handler.

Lets the buyer see what a code is worth before placing the order. Nothing
is recorded; the code is only taken when the order is placed.
"""

from protean import handle
from protean.fields import Float, Identifier, Integer, String

from ordering.customer.lookup import find_guest_by_email
from ordering.delivery.geo.port import Coordinates
from ordering.domain import ordering
from ordering.order.order import ActorKind, DeliveryType
from ordering.promo.evaluation import PromoCodeEvaluator, PromoContext
from ordering.promo.lookup import find_redeemable
from ordering.promo.promo_code import PromoCode
from ordering.shared.language import Language
from ordering.shared.messages import Message, translate
from ordering.shared.result import fail, ok


@ordering.command(part_of="PromoCode")
class CheckPromoCode:
    code = String(required=True, max_length=50)
    price = Float(required=True, min_value=0.0)
    delivery_type = String(choices=DeliveryType, default=DeliveryType.DELIVERY.value)
    lat = Float(min_value=-90.0, max_value=90.0)
    lng = Float(min_value=-180.0, max_value=180.0)
    customer_id = Identifier()
    guest_email = String(max_length=254)
    language = Integer(default=1)


def checkout_actor(customer_id=None, guest_email=None) -> tuple[ActorKind | None, str | None]:
    """Identify the buyer for per-buyer promo usage counting."""
    if customer_id:
        return ActorKind.CUSTOMER, str(customer_id)
    if guest_email:
        guest = find_guest_by_email(guest_email)
        if guest is not None:
            return ActorKind.GUEST, str(guest.id)
    return None, None


@ordering.command_handler(part_of=PromoCode)
class CheckPromoCodeHandler:
    @handle(CheckPromoCode)
    def check_promo_code(self, command):
        language = Language.from_code(command.language)

        promo = find_redeemable(command.code)
        if promo is None:
            return fail(translate(Message.PROMO_CODE_NOT_FOUND, language))

        actor_kind, actor_id = checkout_actor(command.customer_id, command.guest_email)
        destination = None
        if command.lat is not None and command.lng is not None:
            destination = Coordinates(command.lat, command.lng)

        result = PromoCodeEvaluator().evaluate(
            promo,
            PromoContext(
                price=command.price,
                delivery_type=DeliveryType(command.delivery_type),
                language=language,
                actor_kind=actor_kind,
                actor_id=actor_id,
                destination=destination,
            ),
        )
        if not result.success:
            return result
        return ok(data=result.data.to_dict())
