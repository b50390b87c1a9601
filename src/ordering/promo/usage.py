"""PromoCodeUsage aggregate — who used which promo code on which order.

The record is removed again when its order is canceled, so the buyer can
reuse the code; the promo code's own ``used_count`` is not decremented.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier
from protean.utils.globals import current_domain

from ordering.domain import ordering


@ordering.aggregate
class PromoCodeUsage:
    promo_code_id = Identifier(required=True)
    order_id = Identifier(required=True)
    customer_id = Identifier()
    guest_id = Identifier()
    used_at = DateTime()

    @invariant.post
    def usage_must_have_exactly_one_actor(self):
        if bool(self.customer_id) == bool(self.guest_id):
            raise ValidationError({"actor": ["Usage must belong to either a customer or a guest"]})

    @classmethod
    def record(cls, promo_code_id, order_id, customer_id=None, guest_id=None):
        return cls(
            promo_code_id=promo_code_id,
            order_id=order_id,
            customer_id=customer_id,
            guest_id=guest_id,
            used_at=datetime.now(UTC),
        )


def _actor_filter(customer_id=None, guest_id=None) -> dict:
    if customer_id:
        return {"customer_id": customer_id}
    if guest_id:
        return {"guest_id": guest_id}
    return {}


def count_usages(promo_code_id, customer_id=None, guest_id=None) -> int:
    """Number of times the given buyer has used the promo code."""
    actor = _actor_filter(customer_id, guest_id)
    if not actor:
        return 0
    repo = current_domain.repository_for(PromoCodeUsage)
    return repo._dao.query.filter(promo_code_id=promo_code_id, **actor).count()


def usages_for_order(order_id, promo_code_id, customer_id=None, guest_id=None) -> list[PromoCodeUsage]:
    actor = _actor_filter(customer_id, guest_id)
    repo = current_domain.repository_for(PromoCodeUsage)
    return repo._dao.query.filter(order_id=order_id, promo_code_id=promo_code_id, **actor).limit(None).all().items
