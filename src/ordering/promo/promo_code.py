"""PromoCode aggregate — administrator-defined discount codes.

A code is one of three kinds: a percent discount, a fixed amount off, or
free shipping. ``used_count`` is a single counter shared by every buyer; once
it reaches ``usage_count`` the code is deprecated and no longer found at
checkout. Codes are never physically deleted.
"""

import re
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Integer, String

from ordering.domain import ordering
from ordering.promo.events import (
    PromoCodeCreated,
    PromoCodeDeleted,
    PromoCodeExhausted,
    PromoCodeRedeemed,
    PromoCodeUpdated,
)

MIN_CODE_LENGTH = 4
_CODE_NOISE = re.compile(r"[`~!@#$%^&*()_|+\-=?;:'\",.<>{}\[\]\\/ ]")

# Sentinel for distinguishing "not provided" from None in partial updates
_UNSET = object()


class PromoCodeType(Enum):
    PERCENT = "percent"
    FIXED_AMOUNT = "fixed_amount"
    FREE_SHIPPING = "free_shipping"


class PromoCodeStatus(Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    FINISHED = "finished"


def normalize_code(code: str | None) -> str:
    """Uppercase ``code`` with punctuation and spaces removed ("summer-10" -> "SUMMER10")."""
    return _CODE_NOISE.sub("", code or "").upper()


def as_utc(value: datetime | None) -> datetime | None:
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=UTC)


@ordering.aggregate
class PromoCode:
    code = String(required=True, max_length=50)
    title = String(max_length=255)
    type = String(required=True, choices=PromoCodeType)
    amount = Float()
    free_shipping = Boolean(default=False)
    min_price = Float(min_value=0.0)
    max_price = Float(min_value=0.0)
    start_date = DateTime()
    end_date = DateTime()
    usage_count = Integer(min_value=1)
    used_count = Integer(default=0, min_value=0)
    deprecated = Boolean(default=False)
    deleted = Boolean(default=False)
    created_at = DateTime()

    @invariant.post
    def code_must_be_long_enough(self):
        if len(self.code or "") < MIN_CODE_LENGTH:
            raise ValidationError({"code": [f"Promo code must have at least {MIN_CODE_LENGTH} characters"]})

    @invariant.post
    def amount_required_for_discount_types(self):
        kind = PromoCodeType(self.type)
        if kind == PromoCodeType.FREE_SHIPPING:
            if self.amount is not None:
                raise ValidationError({"amount": ["Free shipping promo codes have no amount"]})
            return
        if self.amount is None or self.amount < 1:
            raise ValidationError({"amount": ["Amount must be at least 1"]})
        if kind == PromoCodeType.PERCENT and self.amount > 100:
            raise ValidationError({"amount": ["Percent discount cannot exceed 100"]})

    @invariant.post
    def price_range_must_be_ordered(self):
        if self.min_price is not None and self.max_price is not None and self.max_price < self.min_price:
            raise ValidationError({"max_price": ["Maximum price must not be less than minimum price"]})

    @invariant.post
    def validity_window_must_be_ordered(self):
        if self.start_date and self.end_date and as_utc(self.end_date) < as_utc(self.start_date):
            raise ValidationError({"end_date": ["End date must not be before start date"]})

    @invariant.post
    def used_count_within_usage_count(self):
        if self.usage_count is not None and self.used_count > self.usage_count:
            raise ValidationError({"usage_count": ["Usage count cannot be lower than the number of uses"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        code,
        type,
        amount=None,
        title=None,
        free_shipping=False,
        min_price=None,
        max_price=None,
        start_date=None,
        end_date=None,
        usage_count=None,
    ):
        kind = PromoCodeType(type)
        now = datetime.now(UTC)
        promo = cls(
            code=normalize_code(code),
            title=title,
            type=kind.value,
            amount=None if kind == PromoCodeType.FREE_SHIPPING else amount,
            free_shipping=kind == PromoCodeType.FREE_SHIPPING or bool(free_shipping),
            min_price=min_price,
            max_price=max_price,
            start_date=as_utc(start_date),
            end_date=as_utc(end_date),
            usage_count=usage_count,
            used_count=0,
            deprecated=False,
            deleted=False,
            created_at=now,
        )
        promo.raise_(
            PromoCodeCreated(
                promo_code_id=str(promo.id),
                code=promo.code,
                type=promo.type,
                amount=promo.amount,
                usage_count=promo.usage_count,
                created_at=now,
            )
        )
        return promo

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def status_at(self, now: datetime | None = None) -> PromoCodeStatus:
        now = now or datetime.now(UTC)
        if self.deprecated:
            return PromoCodeStatus.FINISHED
        if self.start_date and as_utc(self.start_date) > now:
            return PromoCodeStatus.DRAFT
        if self.end_date and as_utc(self.end_date) < now:
            return PromoCodeStatus.FINISHED
        return PromoCodeStatus.ACTIVE

    def is_redeemable_at(self, now: datetime | None = None) -> bool:
        return not self.deleted and self.status_at(now) == PromoCodeStatus.ACTIVE

    @property
    def has_uses_left(self) -> bool:
        return self.usage_count is None or self.used_count < self.usage_count

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def register_use(self) -> None:
        """Take one use of the code. Refuses to go past ``usage_count``."""
        if self.deleted or self.deprecated or not self.has_uses_left:
            raise ValidationError({"used_count": ["Promo code has no uses left"]})

        self.used_count += 1
        self.raise_(
            PromoCodeRedeemed(
                promo_code_id=str(self.id),
                code=self.code,
                used_count=self.used_count,
                usage_count=self.usage_count,
            )
        )

        if self.usage_count is not None and self.used_count == self.usage_count:
            self.deprecated = True
            self.raise_(PromoCodeExhausted(promo_code_id=str(self.id), code=self.code, used_count=self.used_count))

    def update_terms(
        self,
        code=_UNSET,
        title=_UNSET,
        type=_UNSET,
        amount=_UNSET,
        free_shipping=_UNSET,
        min_price=_UNSET,
        max_price=_UNSET,
        start_date=_UNSET,
        end_date=_UNSET,
        usage_count=_UNSET,
    ):
        """Apply a partial update. Clearing or raising ``usage_count`` re-activates a deprecated code."""
        if self.deleted:
            raise ValidationError({"promo_code": ["Deleted promo codes cannot be updated"]})

        with atomic_change(self):
            if code is not _UNSET:
                self.code = normalize_code(code)
            if title is not _UNSET:
                self.title = title
            if type is not _UNSET:
                self.type = PromoCodeType(type).value
            if amount is not _UNSET:
                self.amount = amount
            if PromoCodeType(self.type) == PromoCodeType.FREE_SHIPPING:
                self.amount = None
                self.free_shipping = True
            elif free_shipping is not _UNSET:
                self.free_shipping = bool(free_shipping)
            if min_price is not _UNSET:
                self.min_price = min_price
            if max_price is not _UNSET:
                self.max_price = max_price
            if start_date is not _UNSET:
                self.start_date = as_utc(start_date)
            if end_date is not _UNSET:
                self.end_date = as_utc(end_date)
            if usage_count is not _UNSET:
                previous = self.usage_count
                self.usage_count = usage_count
                if usage_count is None or (previous is not None and usage_count > previous):
                    self.deprecated = False

        self.raise_(
            PromoCodeUpdated(
                promo_code_id=str(self.id),
                code=self.code,
                deprecated=self.deprecated,
            )
        )

    def soft_delete(self) -> None:
        if self.deleted:
            return
        self.deleted = True
        self.raise_(PromoCodeDeleted(promo_code_id=str(self.id), code=self.code, deleted_at=datetime.now(UTC)))
