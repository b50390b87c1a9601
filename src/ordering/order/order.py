"""Order aggregate (CQRS) — the placed order and its lifecycle.

Prices are frozen at placement: the totals copied from the pricing breakdown
never change afterwards, and delivery/billing addresses are snapshots, not
references to the buyer's address book.

State Machine:
    DRAFT (card payments awaiting capture)
    PENDING → REVIEW → FINISHED / CANCELED
    PENDING → FINISHED / CANCELED

Every transition is looked up in ``TRANSITIONS``, keyed by
``(current_status, transition)``. A rule names the target status, the actor
kinds allowed to request it and the side effects the lifecycle handler must
run afterwards.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import (
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from ordering.domain import ordering
from ordering.order.events import OrderCanceled, OrderFinished, OrderPlaced, OrderSetToReview


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    DRAFT = "draft"
    PENDING = "pending"
    REVIEW = "review"
    FINISHED = "finished"
    CANCELED = "canceled"


class PaymentType(Enum):
    CASH = "cash"
    CARD = "card"
    TRANSFER = "transfer"

    @property
    def requires_capture(self) -> bool:
        return self == PaymentType.CARD


class DeliveryType(Enum):
    DELIVERY = "delivery"
    PICKUP = "pickup"


class OsType(Enum):
    WEB = "web"
    IOS = "ios"
    ANDROID = "android"


class ActorKind(Enum):
    CUSTOMER = "customer"
    GUEST = "guest"
    ADMIN = "admin"


class OrderTransition(Enum):
    REVIEW = "review"
    CANCEL = "cancel"
    FINISH = "finish"


class SideEffect(Enum):
    NOTIFY_ADMIN_OF_REVIEW = "notify_admin_of_review"
    RESTORE_REDEEMED_POINTS = "restore_redeemed_points"
    BUMP_GUEST_CANCELED_COUNT = "bump_guest_canceled_count"
    RELEASE_PROMO_USAGE = "release_promo_usage"
    NOTIFY_CANCELLATION = "notify_cancellation"
    CREDIT_RECEIVING_BONUSES = "credit_receiving_bonuses"
    BUMP_FINISHED_COUNT = "bump_finished_count"
    NOTIFY_OWNER_OF_FINISH = "notify_owner_of_finish"
    BUMP_BOUGHT_COUNTS = "bump_bought_counts"


@dataclass(frozen=True)
class Actor:
    """Who requests a transition. The lifecycle handler builds admin actors only for admin customers."""

    kind: ActorKind
    id: str | None = None


@dataclass(frozen=True)
class TransitionRule:
    target: OrderStatus
    actors: frozenset
    side_effects: tuple


_CANCEL_EFFECTS = (
    SideEffect.RESTORE_REDEEMED_POINTS,
    SideEffect.BUMP_GUEST_CANCELED_COUNT,
    SideEffect.RELEASE_PROMO_USAGE,
    SideEffect.NOTIFY_CANCELLATION,
)

_FINISH_EFFECTS = (
    SideEffect.CREDIT_RECEIVING_BONUSES,
    SideEffect.BUMP_FINISHED_COUNT,
    SideEffect.NOTIFY_OWNER_OF_FINISH,
    SideEffect.BUMP_BOUGHT_COUNTS,
)

_OWNERS = frozenset({ActorKind.CUSTOMER, ActorKind.GUEST})

TRANSITIONS = {
    (OrderStatus.PENDING, OrderTransition.REVIEW): TransitionRule(
        OrderStatus.REVIEW, _OWNERS, (SideEffect.NOTIFY_ADMIN_OF_REVIEW,)
    ),
    (OrderStatus.PENDING, OrderTransition.CANCEL): TransitionRule(
        OrderStatus.CANCELED, _OWNERS | {ActorKind.ADMIN}, _CANCEL_EFFECTS
    ),
    (OrderStatus.REVIEW, OrderTransition.CANCEL): TransitionRule(
        OrderStatus.CANCELED, frozenset({ActorKind.ADMIN}), _CANCEL_EFFECTS
    ),
    (OrderStatus.PENDING, OrderTransition.FINISH): TransitionRule(
        OrderStatus.FINISHED, frozenset({ActorKind.ADMIN}), _FINISH_EFFECTS
    ),
    (OrderStatus.REVIEW, OrderTransition.FINISH): TransitionRule(
        OrderStatus.FINISHED, frozenset({ActorKind.ADMIN}), _FINISH_EFFECTS
    ),
}

# Active orders are still in progress; the rest is history.
ACTIVE_STATUSES = (OrderStatus.PENDING, OrderStatus.REVIEW)
HISTORY_STATUSES = (OrderStatus.FINISHED, OrderStatus.CANCELED)


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="Order")
class OrderAddress:
    """An address captured at checkout time.

    Later edits to the buyer's address book or company profile do not touch
    orders that were already placed.
    """

    address = String(required=True, max_length=500)
    house = String(max_length=50)
    apartment = String(max_length=50)
    lat = Float(min_value=-90.0, max_value=90.0)
    lng = Float(min_value=-180.0, max_value=180.0)
    contact_name = String(max_length=255)
    contact_phone_number = String(max_length=30)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderLine:
    """One priced product line, copied from the cart quote at checkout."""

    product_id = Identifier(required=True)
    product_version_id = Identifier()
    price = Float(required=True, min_value=0.0)
    discounted_price = Float(min_value=0.0)
    step = Integer(default=1, min_value=1)
    step_count = Integer(default=1, min_value=0)
    count = Integer(required=True, min_value=1)
    image = String(max_length=500)
    partner = String(max_length=255)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    code = String(required=True, max_length=8)
    customer_id = Identifier()
    guest_id = Identifier()
    guest_name = String(max_length=255)
    guest_phone_number = String(max_length=30)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_type = String(choices=PaymentType, default=PaymentType.CASH.value)
    delivery_type = String(choices=DeliveryType, default=DeliveryType.DELIVERY.value)
    delivery_date = DateTime()
    delivery_address = ValueObject(OrderAddress)
    billing_address = ValueObject(OrderAddress)
    company_id = Identifier()
    company_name = String(max_length=255)
    promo_code_id = Identifier()
    lines = HasMany(OrderLine)
    sub_total = Float(default=0.0)
    discount_amount = Float(default=0.0)
    delivery_fee = Float(default=0.0)
    promo_code_discount_amount = Float(default=0.0)
    used_bonuses = Integer(default=0, min_value=0)
    receiving_bonuses = Integer(default=0, min_value=0)
    total = Float(default=0.0)
    comment = Text()
    os_type = String(choices=OsType, default=OsType.WEB.value)
    cancel_reason = String(max_length=500)
    canceled_by = String(max_length=255)
    finished_by = String(max_length=255)
    created_at = DateTime()
    canceled_at = DateTime()
    finished_at = DateTime()

    @invariant.post
    def order_must_have_exactly_one_owner(self):
        if bool(self.customer_id) == bool(self.guest_id):
            raise ValidationError({"owner": ["Order must belong to either a customer or a guest"]})

    @invariant.post
    def total_must_match_breakdown(self):
        expected = (
            self.sub_total
            - self.discount_amount
            - self.used_bonuses
            + self.delivery_fee
            - self.promo_code_discount_amount
        )
        if abs(self.total - expected) > 0.005:
            raise ValidationError({"total": ["Order total does not match its price breakdown"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        code,
        lines,
        breakdown,
        payment_type,
        delivery_type,
        customer_id=None,
        guest_id=None,
        guest_name=None,
        guest_phone_number=None,
        delivery_address=None,
        billing_address=None,
        delivery_date=None,
        company_id=None,
        company_name=None,
        promo_code_id=None,
        comment=None,
        os_type=None,
    ):
        """Create a placed order from a priced checkout.

        Args:
            lines: list of dicts with the ``OrderLine`` fields (cart quote lines).
            breakdown: ``PricingBreakdown`` whose amounts are frozen onto the order.
            delivery_address / billing_address: dicts with the ``OrderAddress`` fields.
        """
        payment = PaymentType(payment_type)
        status = OrderStatus.DRAFT if payment.requires_capture else OrderStatus.PENDING
        now = datetime.now(UTC)

        order = cls(
            code=code,
            customer_id=customer_id,
            guest_id=guest_id,
            guest_name=guest_name,
            guest_phone_number=guest_phone_number,
            status=status.value,
            payment_type=payment.value,
            delivery_type=DeliveryType(delivery_type).value,
            delivery_date=delivery_date,
            delivery_address=OrderAddress(**delivery_address) if delivery_address else None,
            billing_address=OrderAddress(**billing_address) if billing_address else None,
            company_id=company_id,
            company_name=company_name,
            promo_code_id=promo_code_id,
            lines=[OrderLine(**line) for line in lines],
            sub_total=breakdown.sub_total,
            discount_amount=breakdown.discount_amount,
            delivery_fee=breakdown.delivery_fee,
            promo_code_discount_amount=breakdown.promo_code_discount_amount,
            used_bonuses=breakdown.used_bonuses,
            receiving_bonuses=breakdown.receiving_bonuses,
            total=breakdown.total,
            comment=comment,
            os_type=OsType(os_type).value if os_type else OsType.WEB.value,
            created_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                code=code,
                customer_id=customer_id,
                guest_id=guest_id,
                status=order.status,
                payment_type=order.payment_type,
                delivery_type=order.delivery_type,
                sub_total=order.sub_total,
                discount_amount=order.discount_amount,
                delivery_fee=order.delivery_fee,
                promo_code_id=promo_code_id,
                promo_code_discount_amount=order.promo_code_discount_amount,
                used_bonuses=order.used_bonuses,
                receiving_bonuses=order.receiving_bonuses,
                total=order.total,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Ownership
    # -------------------------------------------------------------------
    @property
    def is_guest_order(self) -> bool:
        return bool(self.guest_id)

    def is_owned_by(self, actor: Actor) -> bool:
        if actor.kind == ActorKind.CUSTOMER:
            return bool(self.customer_id) and str(self.customer_id) == str(actor.id)
        if actor.kind == ActorKind.GUEST:
            return bool(self.guest_id) and str(self.guest_id) == str(actor.id)
        return False

    @property
    def product_ids(self) -> list[str]:
        """Distinct product ids in line order."""
        seen = []
        for line in self.lines:
            product_id = str(line.product_id)
            if product_id not in seen:
                seen.append(product_id)
        return seen

    # -------------------------------------------------------------------
    # Transition guards
    # -------------------------------------------------------------------
    def rule_for(self, transition: OrderTransition, actor: Actor) -> TransitionRule:
        """Return the rule for ``transition`` or raise ValidationError.

        The status is always checked first, then the actor kind, then
        ownership for non-admin actors.
        """
        current = OrderStatus(self.status)
        rule = TRANSITIONS.get((current, transition))
        if rule is None:
            raise ValidationError({"status": [f"Cannot {transition.value} an order in {current.value} status"]})
        if actor.kind not in rule.actors:
            raise ValidationError(
                {"actor": [f"{actor.kind.value} cannot {transition.value} an order in {current.value} status"]}
            )
        if actor.kind != ActorKind.ADMIN and not self.is_owned_by(actor):
            raise ValidationError({"actor": ["Only the owner of the order can do this"]})
        return rule

    def can(self, transition: OrderTransition, actor: Actor) -> bool:
        try:
            self.rule_for(transition, actor)
        except ValidationError:
            return False
        return True

    # -------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------
    def set_to_review(self, actor: Actor) -> tuple:
        rule = self.rule_for(OrderTransition.REVIEW, actor)
        self.status = rule.target.value

        self.raise_(
            OrderSetToReview(
                order_id=str(self.id),
                requested_by=actor.id,
                requested_by_kind=actor.kind.value,
            )
        )
        return rule.side_effects

    def cancel(self, actor: Actor, reason: str | None = None) -> tuple:
        rule = self.rule_for(OrderTransition.CANCEL, actor)
        previous = self.status
        now = datetime.now(UTC)

        self.status = rule.target.value
        self.cancel_reason = reason
        self.canceled_by = actor.id or actor.kind.value
        self.canceled_at = now

        self.raise_(
            OrderCanceled(
                order_id=str(self.id),
                previous_status=previous,
                reason=reason,
                canceled_by=self.canceled_by,
                canceled_by_kind=actor.kind.value,
                used_bonuses=self.used_bonuses,
                canceled_at=now,
            )
        )
        return rule.side_effects

    def finish(self, actor: Actor) -> tuple:
        rule = self.rule_for(OrderTransition.FINISH, actor)
        now = datetime.now(UTC)

        self.status = rule.target.value
        self.finished_by = actor.id or actor.kind.value
        self.finished_at = now

        self.raise_(
            OrderFinished(
                order_id=str(self.id),
                finished_by=self.finished_by,
                receiving_bonuses=self.receiving_bonuses,
                finished_at=now,
            )
        )
        return rule.side_effects
