"""Promo code listing for the back office."""

from datetime import UTC, datetime

from protean.utils.globals import current_domain

from ordering.promo.promo_code import PromoCode, PromoCodeStatus, PromoCodeType


def _summary(promo: PromoCode, now: datetime) -> dict:
    return {
        "id": str(promo.id),
        "code": promo.code,
        "title": promo.title,
        "type": promo.type,
        "amount": promo.amount,
        "free_shipping": promo.free_shipping,
        "min_price": promo.min_price,
        "max_price": promo.max_price,
        "start_date": promo.start_date.isoformat() if promo.start_date else None,
        "end_date": promo.end_date.isoformat() if promo.end_date else None,
        "usage_count": promo.usage_count,
        "used_count": promo.used_count,
        "status": promo.status_at(now).value,
    }


def list_promo_codes(
    search: str | None = None,
    type: PromoCodeType | None = None,
    status: PromoCodeStatus | None = None,
    page_no: int = 1,
    limit: int = 20,
    now: datetime | None = None,
) -> dict:
    """Non-deleted promo codes, newest first, filtered and paged.

    ``search`` matches code or title case-insensitively; ``status`` is the
    derived draft/active/finished status at ``now``.
    """
    now = now or datetime.now(UTC)
    repo = current_domain.repository_for(PromoCode)
    promos = repo._dao.query.filter(deleted=False).limit(None).all().items

    if search:
        needle = search.strip().lower()
        promos = [p for p in promos if needle in p.code.lower() or needle in (p.title or "").lower()]
    if type is not None:
        promos = [p for p in promos if p.type == type.value]
    if status is not None:
        promos = [p for p in promos if p.status_at(now) == status]

    promos.sort(key=lambda p: p.created_at or now, reverse=True)
    start = (max(page_no, 1) - 1) * limit
    return {
        "items": [_summary(p, now) for p in promos[start : start + limit]],
        "total": len(promos),
        "page_no": page_no,
        "limit": limit,
    }
