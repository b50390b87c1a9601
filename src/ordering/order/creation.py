"""Order placement — command and handler.

Placement prices the checkout exactly like the preview, then records it in
one unit of work:
- debit redeemed bonus points and bump the customer's order count;
- take one use of the promo code and record who used it;
- persist the order;
- notify administrators, and mail the order code to guests.
"""

import json

import structlog
from protean import handle
from protean.fields import DateTime, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from ordering.bonus.ledger import claim_promo_use, debit_points
from ordering.customer.customer import Customer
from ordering.customer.lookup import find_guest_by_email
from ordering.delivery.geo.port import Coordinates
from ordering.domain import ordering
from ordering.notifications import get_mailer, get_notifier
from ordering.notifications.port import NotificationType
from ordering.notifications.templates import OrderCreatedTemplate
from ordering.order.order import DeliveryType, Order, OsType, PaymentType
from ordering.order.queries import is_order_code_taken
from ordering.pricing.checkout import Payer, parse_lines, price_checkout
from ordering.promo.promo_code import PromoCode
from ordering.promo.usage import PromoCodeUsage
from ordering.shared.codes import generate_unique_code
from ordering.shared.language import Language
from ordering.shared.messages import Message, translate
from ordering.shared.money import format_amount
from ordering.shared.result import fail, ok

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class PlaceOrder:
    lines = Text(required=True)  # JSON: list of {product_id, count, product_version_id}
    payment_type = String(choices=PaymentType, default=PaymentType.CASH.value)
    delivery_type = String(choices=DeliveryType, default=DeliveryType.DELIVERY.value)
    delivery_address = Text()  # JSON: OrderAddress fields, lat/lng required for delivery
    billing_address = Text()  # JSON: OrderAddress fields
    delivery_date = DateTime()
    customer_id = Identifier()
    guest_email = String(max_length=254)
    guest_code = String(max_length=10)
    guest_name = String(max_length=255)
    guest_phone_number = String(max_length=30)
    company_id = Identifier()
    company_name = String(max_length=255)
    bonus = Integer(min_value=0)
    promo_code = String(max_length=50)
    comment = Text()
    os_type = String(choices=OsType, default=OsType.WEB.value)
    language = Integer(default=1)


def _load_json(raw):
    return json.loads(raw) if raw else None


@ordering.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        language = Language.from_code(command.language)

        payer_result = self._resolve_payer(command, language)
        if not payer_result.success:
            return payer_result
        payer = payer_result.data

        delivery_type = DeliveryType(command.delivery_type)
        delivery_address = _load_json(command.delivery_address)
        destination = None
        if delivery_type == DeliveryType.DELIVERY:
            if not delivery_address or delivery_address.get("lat") is None or delivery_address.get("lng") is None:
                return fail(translate(Message.DELIVERY_ADDRESS_REQUIRED, language))
            destination = Coordinates(float(delivery_address["lat"]), float(delivery_address["lng"]))

        result = price_checkout(
            parse_lines(command.lines),
            delivery_type,
            payer,
            bonus=command.bonus,
            destination=destination,
            promo_code=command.promo_code,
            language=language,
        )
        if not result.success:
            return result
        priced = result.data
        breakdown = priced.breakdown
        customer, guest = payer.customer, payer.guest

        if customer is not None:
            debit_points(customer, breakdown.used_bonuses)
            customer.record_order_placed()

        order = Order.place(
            code=generate_unique_code(is_order_code_taken),
            lines=[line.as_order_line() for line in priced.quote.lines],
            breakdown=breakdown,
            payment_type=command.payment_type,
            delivery_type=delivery_type.value,
            customer_id=str(customer.id) if customer is not None else None,
            guest_id=str(guest.id) if guest is not None else None,
            guest_name=command.guest_name if guest is not None else None,
            guest_phone_number=command.guest_phone_number if guest is not None else None,
            delivery_address=delivery_address if delivery_type == DeliveryType.DELIVERY else None,
            billing_address=_load_json(command.billing_address),
            delivery_date=command.delivery_date,
            company_id=command.company_id,
            company_name=command.company_name,
            promo_code_id=str(priced.promo.id) if priced.promo is not None else None,
            comment=command.comment,
            os_type=command.os_type,
        )

        if priced.promo is not None:
            claim_promo_use(priced.promo)
            current_domain.repository_for(PromoCode).add(priced.promo)
            current_domain.repository_for(PromoCodeUsage).add(
                PromoCodeUsage.record(
                    promo_code_id=str(priced.promo.id),
                    order_id=str(order.id),
                    customer_id=order.customer_id,
                    guest_id=order.guest_id,
                )
            )
        if customer is not None:
            current_domain.repository_for(Customer).add(customer)
        current_domain.repository_for(Order).add(order)

        get_notifier().send_admin_notification(NotificationType.NEW_ORDER, str(order.id), sender_id=payer.actor_id)
        if guest is not None:
            self._mail_guest(order, guest.email, language)

        logger.info(
            "order_placed",
            order_id=str(order.id),
            code=order.code,
            status=order.status,
            total=order.total,
            promo_code_id=order.promo_code_id,
            used_bonuses=order.used_bonuses,
        )
        return ok(
            translate(Message.ORDER_CREATED, language),
            {"order_id": str(order.id), "code": order.code, "status": order.status, "total": order.total},
        )

    def _resolve_payer(self, command, language):
        if command.customer_id:
            return ok(data=Payer(customer=current_domain.repository_for(Customer).get(command.customer_id)))

        guest = find_guest_by_email(command.guest_email) if command.guest_email else None
        if guest is None or not guest.verified:
            return fail(translate(Message.WRONG_EMAIL, language))
        if not guest.check_code(command.guest_code):
            return fail(translate(Message.WRONG_CODE, language))
        return ok(data=Payer(guest=guest))

    def _mail_guest(self, order, email, language):
        rendered = OrderCreatedTemplate.render(
            {"code": order.code, "name": order.guest_name, "total": format_amount(order.total)},
            language,
        )
        result = get_mailer().send(email, rendered["subject"], rendered["body"])
        if result.get("status") != "sent":
            logger.warning("order_created_email_failed", order_id=str(order.id), error=result.get("error"))
