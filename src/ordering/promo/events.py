"""Domain events for the PromoCode aggregate."""

from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String

from ordering.domain import ordering


@ordering.event(part_of="PromoCode")
class PromoCodeCreated:
    __version__ = 1

    promo_code_id = Identifier(required=True)
    code = String(required=True)
    type = String(required=True)
    amount = Float()
    usage_count = Integer()
    created_at = DateTime(required=True)


@ordering.event(part_of="PromoCode")
class PromoCodeUpdated:
    __version__ = 1

    promo_code_id = Identifier(required=True)
    code = String(required=True)
    deprecated = Boolean(default=False)


@ordering.event(part_of="PromoCode")
class PromoCodeRedeemed:
    """A promo code was applied to a placed order; ``used_count`` is the new global count."""

    __version__ = 1

    promo_code_id = Identifier(required=True)
    code = String(required=True)
    used_count = Integer(required=True)
    usage_count = Integer()


@ordering.event(part_of="PromoCode")
class PromoCodeExhausted:
    """The last allowed use was taken; the code is deprecated from now on."""

    __version__ = 1

    promo_code_id = Identifier(required=True)
    code = String(required=True)
    used_count = Integer(required=True)


@ordering.event(part_of="PromoCode")
class PromoCodeDeleted:
    __version__ = 1

    promo_code_id = Identifier(required=True)
    code = String(required=True)
    deleted_at = DateTime(required=True)
