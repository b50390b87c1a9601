"""Order lifecycle — review, cancel and finish commands and their handler.

The handler checks the current status against ``TRANSITIONS`` before
resolving who is asking. Admin requests must come from a customer holding an
admin role. A disallowed request is answered with a localized failure
envelope. Once the order has moved, the side effects named by the rule run
in table order.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from ordering.bonus.ledger import accrue_points, refund_points
from ordering.customer.customer import Customer
from ordering.customer.guest import GuestUser
from ordering.customer.lookup import find_guest_by_email
from ordering.domain import ordering
from ordering.notifications import get_mailer, get_notifier
from ordering.notifications.port import NotificationType
from ordering.notifications.templates import OrderCanceledTemplate
from ordering.order.order import TRANSITIONS, Actor, ActorKind, Order, OrderStatus, OrderTransition, SideEffect
from ordering.order.product_sales import record_purchases
from ordering.promo.usage import PromoCodeUsage, usages_for_order
from ordering.shared.language import Language
from ordering.shared.messages import Message, translate
from ordering.shared.result import fail, ok

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class SetOrderToReview:
    order_id = Identifier(required=True)
    actor_kind = String(required=True, choices=ActorKind)
    actor_id = Identifier()
    guest_email = String(max_length=254)
    order_code = String(max_length=8)
    language = Integer(default=1)


@ordering.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    actor_kind = String(required=True, choices=ActorKind)
    actor_id = Identifier()
    guest_email = String(max_length=254)
    order_code = String(max_length=8)
    reason = String(max_length=500)
    language = Integer(default=1)


@ordering.command(part_of="Order")
class FinishOrder:
    order_id = Identifier(required=True)
    actor_kind = String(required=True, choices=ActorKind)
    actor_id = Identifier()
    language = Integer(default=1)


class SideEffectRunner:
    """Runs the side effects of one transition and persists what they touch."""

    def __init__(self, order: Order, actor: Actor, language: Language, reason: str | None = None) -> None:
        self.order = order
        self.actor = actor
        self.language = language
        self.reason = reason
        self._customer: Customer | None = None
        self._guest: GuestUser | None = None
        self._handlers = {
            SideEffect.NOTIFY_ADMIN_OF_REVIEW: self.notify_admin_of_review,
            SideEffect.RESTORE_REDEEMED_POINTS: self.restore_redeemed_points,
            SideEffect.BUMP_GUEST_CANCELED_COUNT: self.bump_guest_canceled_count,
            SideEffect.RELEASE_PROMO_USAGE: self.release_promo_usage,
            SideEffect.NOTIFY_CANCELLATION: self.notify_cancellation,
            SideEffect.CREDIT_RECEIVING_BONUSES: self.credit_receiving_bonuses,
            SideEffect.BUMP_FINISHED_COUNT: self.bump_finished_count,
            SideEffect.NOTIFY_OWNER_OF_FINISH: self.notify_owner_of_finish,
            SideEffect.BUMP_BOUGHT_COUNTS: self.bump_bought_counts,
        }

    def run(self, side_effects) -> None:
        for effect in side_effects:
            self._handlers[effect]()

        if self._customer is not None:
            current_domain.repository_for(Customer).add(self._customer)
        if self._guest is not None:
            current_domain.repository_for(GuestUser).add(self._guest)

    @property
    def customer(self) -> Customer | None:
        if self._customer is None and self.order.customer_id:
            self._customer = current_domain.repository_for(Customer).get(self.order.customer_id)
        return self._customer

    @property
    def guest(self) -> GuestUser | None:
        if self._guest is None and self.order.guest_id:
            self._guest = current_domain.repository_for(GuestUser).get(self.order.guest_id)
        return self._guest

    # -------------------------------------------------------------------
    # Review
    # -------------------------------------------------------------------
    def notify_admin_of_review(self) -> None:
        get_notifier().send_admin_notification(
            NotificationType.ORDER_SET_TO_REVIEW, str(self.order.id), sender_id=self.actor.id
        )

    # -------------------------------------------------------------------
    # Cancel
    # -------------------------------------------------------------------
    def restore_redeemed_points(self) -> None:
        # The owner's canceled counter only moves when points were redeemed.
        if self.order.customer_id and self.order.used_bonuses:
            refund_points(self.customer, self.order.used_bonuses)
            self.customer.record_order_canceled()

    def bump_guest_canceled_count(self) -> None:
        if self.order.guest_id:
            self.guest.record_order_canceled()

    def release_promo_usage(self) -> None:
        if not self.order.promo_code_id:
            return
        repo = current_domain.repository_for(PromoCodeUsage)
        for usage in usages_for_order(
            str(self.order.id),
            str(self.order.promo_code_id),
            customer_id=self.order.customer_id,
            guest_id=self.order.guest_id,
        ):
            repo._dao.delete(usage)

    def notify_cancellation(self) -> None:
        order_id = str(self.order.id)
        if self.actor.kind != ActorKind.ADMIN:
            get_notifier().send_admin_notification(NotificationType.ORDER_CANCELED, order_id, sender_id=self.actor.id)
        elif self.order.customer_id:
            get_notifier().send_user_notification(
                NotificationType.ORDER_CANCELED, order_id, user_id=str(self.order.customer_id)
            )
        else:
            rendered = OrderCanceledTemplate.render({"code": self.order.code, "reason": self.reason}, self.language)
            result = get_mailer().send(self.guest.email, rendered["subject"], rendered["body"])
            if result.get("status") != "sent":
                logger.warning("order_canceled_email_failed", order_id=order_id, error=result.get("error"))

    # -------------------------------------------------------------------
    # Finish
    # -------------------------------------------------------------------
    def credit_receiving_bonuses(self) -> None:
        if self.order.customer_id:
            accrue_points(self.customer, self.order.receiving_bonuses)

    def bump_finished_count(self) -> None:
        owner = self.customer if self.order.customer_id else self.guest
        owner.record_order_finished()

    def notify_owner_of_finish(self) -> None:
        if self.order.customer_id:
            get_notifier().send_user_notification(
                NotificationType.ORDER_FINISHED, str(self.order.id), user_id=str(self.order.customer_id)
            )

    def bump_bought_counts(self) -> None:
        record_purchases(self.order.product_ids)


def _admin_actor(command) -> Actor | None:
    """An admin is a registered customer holding an admin role."""
    if not command.actor_id:
        return None
    try:
        admin = current_domain.repository_for(Customer).get(command.actor_id)
    except ObjectNotFoundError:
        return None
    if not admin.is_admin:
        return None
    return Actor(kind=ActorKind.ADMIN, id=str(admin.id))


def _guest_actor(command, order: Order) -> Actor | None:
    """Guests identify themselves with e-mail and order code."""
    email = getattr(command, "guest_email", None)
    order_code = getattr(command, "order_code", None) or ""
    guest = find_guest_by_email(email) if email else None
    if guest is None or order_code.strip().upper() != order.code:
        return None
    return Actor(kind=ActorKind.GUEST, id=str(guest.id))


@ordering.command_handler(part_of=Order)
class OrderLifecycleHandler:
    @handle(SetOrderToReview)
    def set_order_to_review(self, command):
        return self._transition(
            command,
            OrderTransition.REVIEW,
            Message.ORDER_SET_TO_REVIEW,
            lambda order, actor: order.set_to_review(actor),
        )

    @handle(CancelOrder)
    def cancel_order(self, command):
        return self._transition(
            command,
            OrderTransition.CANCEL,
            Message.ORDER_CANCELED,
            lambda order, actor: order.cancel(actor, command.reason),
            reason=command.reason,
        )

    @handle(FinishOrder)
    def finish_order(self, command):
        return self._transition(
            command,
            OrderTransition.FINISH,
            Message.ORDER_FINISHED,
            lambda order, actor: order.finish(actor),
        )

    def _transition(self, command, transition, success_message, apply, reason=None):
        language = Language.from_code(command.language)
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)

        if (OrderStatus(order.status), transition) not in TRANSITIONS:
            return fail(translate(Message.TRANSITION_NOT_ALLOWED, language))

        kind = ActorKind(command.actor_kind)
        if kind == ActorKind.GUEST:
            actor = _guest_actor(command, order)
            if actor is None:
                return fail(translate(Message.ORDER_NOT_FOUND, language))
        elif kind == ActorKind.ADMIN:
            actor = _admin_actor(command)
        else:
            actor = Actor(kind=kind, id=str(command.actor_id) if command.actor_id else None)

        if actor is None or not order.can(transition, actor):
            return fail(translate(Message.TRANSITION_NOT_ALLOWED, language))

        previous = order.status
        side_effects = apply(order, actor)
        repo.add(order)
        SideEffectRunner(order, actor, language, reason=reason).run(side_effects)

        logger.info(
            "order_transitioned",
            order_id=str(order.id),
            transition=transition.value,
            from_status=previous,
            to_status=order.status,
            actor_kind=actor.kind.value,
            actor_id=actor.id,
        )
        return ok(translate(success_message, language), {"order_id": str(order.id), "status": order.status})
