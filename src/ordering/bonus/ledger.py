"""Bonus ledger guard — the only code that moves bonus points and promo counters.

Redemption limits:
- only registered customers may redeem;
- never more than the current balance;
- never more than ``BONUS_CAP_RATIO`` of the cart total (before bonus).
A request over a limit is rejected, never clamped.

Every mutation goes through an aggregate method that checks its precondition
(balance stays non-negative, ``used_count`` stays within ``usage_count``).
Persisting the aggregate through its repository bumps ``_version``, so a
concurrent write based on a stale copy is rejected instead of overwriting.
"""

import structlog

from ordering.customer.customer import Customer, PointsCreditReason
from ordering.promo.promo_code import PromoCode
from ordering.shared.language import Language
from ordering.shared.messages import Message, translate
from ordering.shared.result import OperationResult, fail

logger = structlog.get_logger(__name__)

BONUS_CAP_RATIO = 0.2


def max_redeemable(cart_total: float) -> float:
    return cart_total * BONUS_CAP_RATIO


def check_redemption(
    customer: Customer | None,
    bonus: int | None,
    cart_total: float,
    language: Language = Language.EN,
) -> OperationResult | None:
    """Return a failure envelope when ``bonus`` may not be redeemed, None when it may."""
    if not bonus:
        return None
    if customer is None:
        return fail(translate(Message.BONUS_NOT_ALLOWED, language))
    if bonus > customer.points:
        return fail(translate(Message.BONUS_EXCEEDS_BALANCE, language))
    if bonus > max_redeemable(cart_total):
        return fail(translate(Message.BONUS_EXCEEDS_CAP, language))
    return None


def debit_points(customer: Customer, amount: int) -> None:
    """Take redeemed points off the balance when an order is placed."""
    if amount:
        customer.redeem_points(amount)
        logger.info("bonus_points_debited", customer_id=str(customer.id), amount=amount, balance=customer.points)


def accrue_points(customer: Customer, amount: int) -> None:
    """Credit the points an order earns once it is finished."""
    if amount:
        customer.credit_points(amount, PointsCreditReason.ORDER_FINISHED)
        logger.info("bonus_points_accrued", customer_id=str(customer.id), amount=amount, balance=customer.points)


def refund_points(customer: Customer, amount: int) -> None:
    """Give back points redeemed on an order that was canceled."""
    if amount:
        customer.credit_points(amount, PointsCreditReason.ORDER_CANCELED)
        logger.info("bonus_points_refunded", customer_id=str(customer.id), amount=amount, balance=customer.points)


def claim_promo_use(promo: PromoCode) -> None:
    """Take one use of a promo code. Deprecates the code on its last use."""
    promo.register_use()
    logger.info(
        "promo_code_use_claimed",
        promo_code_id=str(promo.id),
        used_count=promo.used_count,
        usage_count=promo.usage_count,
        deprecated=promo.deprecated,
    )
