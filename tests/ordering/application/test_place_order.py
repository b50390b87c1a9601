"""Application tests for order placement."""

from ordering.customer.customer import Customer
from ordering.notifications.port import NotificationType
from ordering.order.order import Order, OrderStatus
from ordering.promo.promo_code import PromoCode
from ordering.promo.usage import PromoCodeUsage, count_usages
from ordering.shared.language import Language
from ordering.shared.messages import Message, translate
from protean import current_domain


class TestCustomerOrder:
    def test_order_persisted_with_breakdown(self, place_order, customer, reload):
        result = place_order(customer_id=str(customer.id), bonus=400)
        assert result.success
        assert result.message == translate(Message.ORDER_CREATED)

        order = reload(Order, result.data["order_id"])
        assert order.status == OrderStatus.PENDING.value
        assert order.code == result.data["code"]
        assert len(order.code) == 8
        assert order.sub_total == 2000.0
        assert order.used_bonuses == 400
        assert order.receiving_bonuses == 20
        assert order.total == 1600.0
        assert len(order.lines) == 1

    def test_points_debited_and_order_counted(self, place_order, customer, reload):
        place_order(customer_id=str(customer.id), bonus=400)
        stored = reload(Customer, customer.id)
        assert stored.points == 600
        assert stored.order_count == 1

    def test_bonus_over_cap_rejected_without_side_effects(self, place_order, customer, reload):
        result = place_order(customer_id=str(customer.id), bonus=401)
        assert not result.success
        assert result.message == translate(Message.BONUS_EXCEEDS_CAP)
        assert reload(Customer, customer.id).points == 1000
        assert current_domain.repository_for(Order)._dao.query.all().items == []

    def test_card_payment_starts_as_draft(self, place_order, customer, reload):
        result = place_order(customer_id=str(customer.id), payment_type="card")
        assert reload(Order, result.data["order_id"]).status == OrderStatus.DRAFT.value

    def test_admins_notified(self, place_order, customer, notifier):
        result = place_order(customer_id=str(customer.id))
        sent = notifier.of_type(NotificationType.NEW_ORDER)
        assert sent == [
            {
                "audience": "admin",
                "type": "new_order",
                "order_id": result.data["order_id"],
                "sender_id": str(customer.id),
            }
        ]

    def test_unknown_product_rejected(self, place_order, customer):
        result = place_order(customer_id=str(customer.id), lines=[{"product_id": "gone", "count": 1}])
        assert not result.success
        assert result.message == translate(Message.WRONG_PRODUCTS)
        assert result.data == {"deleted_list": ["gone"]}

    def test_localized_rejection(self, place_order, customer):
        result = place_order(customer_id=str(customer.id), bonus=5000, language=3)
        assert result.message == translate(Message.BONUS_EXCEEDS_BALANCE, Language.HY)


class TestDelivery:
    def test_fee_added_for_delivery(self, place_order, customer, yerevan, yerevan_address, reload):
        result = place_order(customer_id=str(customer.id), delivery_type="delivery", address=yerevan_address)
        order = reload(Order, result.data["order_id"])
        assert order.delivery_fee == 500.0
        assert order.total == 2500.0
        assert order.delivery_address.address == yerevan_address["address"]

    def test_delivery_needs_coordinates(self, place_order, customer, yerevan):
        result = place_order(
            customer_id=str(customer.id), delivery_type="delivery", address={"address": "Somewhere"}
        )
        assert not result.success
        assert result.message == translate(Message.DELIVERY_ADDRESS_REQUIRED)

    def test_company_billing_snapshot(self, place_order, customer, reload):
        result = place_order(
            customer_id=str(customer.id),
            company_id="comp-001",
            company_name="Acme LLC",
            billing_address='{"address": "5 Tumanyan St"}',
        )
        order = reload(Order, result.data["order_id"])
        assert order.company_name == "Acme LLC"
        assert order.billing_address.address == "5 Tumanyan St"


class TestPromoCodeUse:
    def test_promo_applied_and_use_recorded(self, place_order, customer, create_promo, reload):
        promo = create_promo("SUMMER10", "percent", amount=10, usage_count=5)
        result = place_order(customer_id=str(customer.id), promo_code="summer-10")
        assert result.success

        order = reload(Order, result.data["order_id"])
        assert order.promo_code_id == str(promo.id)
        assert order.promo_code_discount_amount == 200
        assert order.total == 1800.0
        assert reload(PromoCode, promo.id).used_count == 1
        assert count_usages(str(promo.id), customer_id=str(customer.id)) == 1

    def test_last_use_deprecates_code(self, place_order, customer, create_promo, reload):
        promo = create_promo("ONCEONLY", "fixed_amount", amount=300, usage_count=1)
        place_order(customer_id=str(customer.id), promo_code="ONCEONLY")
        stored = reload(PromoCode, promo.id)
        assert stored.deprecated is True

        again = place_order(customer_id=str(customer.id), promo_code="ONCEONLY")
        assert again.message == translate(Message.PROMO_CODE_NOT_FOUND)

    def test_unknown_promo_code(self, place_order, customer):
        result = place_order(customer_id=str(customer.id), promo_code="NOPE1234")
        assert result.message == translate(Message.PROMO_CODE_NOT_FOUND)

    def test_shared_counter_across_buyers(self, place_order, register_customer, create_promo, reload):
        # usage_count caps every buyer together, not each buyer separately.
        promo = create_promo("TWOUSES", "fixed_amount", amount=100, usage_count=2)
        first = register_customer(email="first@example.com")
        second = register_customer(email="second@example.com")
        third = register_customer(email="third@example.com")

        assert place_order(customer_id=str(first.id), promo_code="TWOUSES").success
        assert place_order(customer_id=str(second.id), promo_code="TWOUSES").success
        result = place_order(customer_id=str(third.id), promo_code="TWOUSES")
        assert result.message == translate(Message.PROMO_CODE_NOT_FOUND)
        assert reload(PromoCode, promo.id).used_count == 2


class TestGuestOrder:
    def test_guest_order_mails_code(self, place_order, guest, mailer, reload):
        guest_user, code = guest
        result = place_order(
            guest_email="Guest@Example.com", guest_code=code, guest_name="Aram", guest_phone_number="+37499000000"
        )
        assert result.success

        order = reload(Order, result.data["order_id"])
        assert order.guest_id == str(guest_user.id)
        assert order.customer_id is None
        assert order.guest_name == "Aram"
        assert len(mailer.sent_emails) == 1
        assert mailer.sent_emails[0]["to"] == "guest@example.com"
        assert order.code in mailer.sent_emails[0]["subject"]

    def test_guest_with_wrong_code(self, place_order, guest):
        _, code = guest
        wrong = "0000" if code != "0000" else "1111"
        result = place_order(guest_email="guest@example.com", guest_code=wrong)
        assert result.message == translate(Message.WRONG_CODE)

    def test_unverified_guest(self, place_order):
        result = place_order(guest_email="stranger@example.com", guest_code="1234")
        assert result.message == translate(Message.WRONG_EMAIL)

    def test_guest_cannot_redeem_bonus(self, place_order, guest):
        _, code = guest
        result = place_order(guest_email="guest@example.com", guest_code=code, bonus=100)
        assert result.message == translate(Message.BONUS_NOT_ALLOWED)

    def test_guest_promo_usage_recorded_by_guest(self, place_order, guest, create_promo):
        guest_user, code = guest
        promo = create_promo("GUEST500", "fixed_amount", amount=500, usage_count=3)
        place_order(guest_email="guest@example.com", guest_code=code, promo_code="GUEST500")
        usages = current_domain.repository_for(PromoCodeUsage)._dao.query.all().items
        assert [(u.guest_id, u.customer_id) for u in usages] == [(str(guest_user.id), None)]
        assert count_usages(str(promo.id), guest_id=str(guest_user.id)) == 1

    def test_mail_failure_does_not_fail_order(self, place_order, guest, mailer):
        _, code = guest
        mailer.configure(should_succeed=False, failure_reason="SMTP down")
        assert place_order(guest_email="guest@example.com", guest_code=code).success
