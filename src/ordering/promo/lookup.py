"""Promo code lookups against the repository."""

from datetime import datetime

from protean.utils.globals import current_domain

from ordering.promo.promo_code import PromoCode, normalize_code


def find_by_code(code: str) -> PromoCode | None:
    """The non-deleted promo code with this (normalized) code, whatever its status."""
    repo = current_domain.repository_for(PromoCode)
    records = repo._dao.query.filter(code=normalize_code(code), deleted=False).all().items
    return records[0] if records else None


def find_redeemable(code: str, now: datetime | None = None) -> PromoCode | None:
    """The promo code if it can be used right now: not deprecated and inside its validity window."""
    promo = find_by_code(code)
    if promo is None or not promo.is_redeemable_at(now):
        return None
    return promo


def is_code_taken(code: str, exclude_id: str | None = None) -> bool:
    promo = find_by_code(code)
    return promo is not None and str(promo.id) != str(exclude_id)
