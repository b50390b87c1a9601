"""Domain events for the Order aggregate.

Events are immutable facts about an order. They are stored with the
aggregate on commit and drive downstream consumers (analytics, mailers).
"""

from protean.fields import DateTime, Float, Identifier, Integer, String

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """A buyer completed checkout and an order was created."""

    __version__ = 1

    order_id = Identifier(required=True)
    code = String(required=True)
    customer_id = Identifier()
    guest_id = Identifier()
    status = String(required=True)
    payment_type = String(required=True)
    delivery_type = String(required=True)
    sub_total = Float(required=True)
    discount_amount = Float()
    delivery_fee = Float()
    promo_code_id = Identifier()
    promo_code_discount_amount = Float()
    used_bonuses = Integer()
    receiving_bonuses = Integer()
    total = Float(required=True)
    placed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderSetToReview:
    """The owner asked for the pending order to be reviewed before it is fulfilled."""

    __version__ = 1

    order_id = Identifier(required=True)
    requested_by = String()
    requested_by_kind = String(required=True)


@ordering.event(part_of="Order")
class OrderCanceled:
    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    reason = String()
    canceled_by = String()
    canceled_by_kind = String(required=True)
    used_bonuses = Integer()
    canceled_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderFinished:
    __version__ = 1

    order_id = Identifier(required=True)
    finished_by = String()
    receiving_bonuses = Integer()
    finished_at = DateTime(required=True)
