"""Checkout preview ("go to checkout") — command and handler.

Prices the cart exactly as order placement would, without recording
anything: no points are debited and no promo use is taken.
"""

from protean import handle
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from ordering.customer.customer import Customer
from ordering.customer.lookup import find_guest_by_email
from ordering.delivery.geo.port import Coordinates
from ordering.domain import ordering
from ordering.order.order import DeliveryType, Order
from ordering.pricing.checkout import Payer, parse_lines, price_checkout
from ordering.shared.language import Language
from ordering.shared.result import ok


@ordering.command(part_of="Order")
class PreviewCheckout:
    lines = Text(required=True)  # JSON: list of {product_id, count, product_version_id}
    delivery_type = String(choices=DeliveryType, default=DeliveryType.DELIVERY.value)
    lat = Float(min_value=-90.0, max_value=90.0)
    lng = Float(min_value=-180.0, max_value=180.0)
    customer_id = Identifier()
    guest_email = String(max_length=254)
    bonus = Integer(min_value=0)
    promo_code = String(max_length=50)
    language = Integer(default=1)


@ordering.command_handler(part_of=Order)
class PreviewCheckoutHandler:
    @handle(PreviewCheckout)
    def preview_checkout(self, command):
        language = Language.from_code(command.language)

        if command.customer_id:
            payer = Payer(customer=current_domain.repository_for(Customer).get(command.customer_id))
        elif command.guest_email:
            payer = Payer(guest=find_guest_by_email(command.guest_email))
        else:
            payer = Payer()

        destination = None
        if command.lat is not None and command.lng is not None:
            destination = Coordinates(command.lat, command.lng)

        result = price_checkout(
            parse_lines(command.lines),
            DeliveryType(command.delivery_type),
            payer,
            bonus=command.bonus,
            destination=destination,
            promo_code=command.promo_code,
            language=language,
        )
        if not result.success:
            return result

        priced = result.data
        customer = payer.customer
        return ok(
            data={
                **priced.breakdown.to_dict(),
                "lines": [line.as_order_line() for line in priced.quote.lines],
                "points": customer.points if customer is not None else None,
                "payer": {
                    "name": customer.full_name if customer is not None else None,
                    "email": customer.email if customer is not None else command.guest_email,
                    "phone_number": customer.phone_number if customer is not None else None,
                },
            }
        )
