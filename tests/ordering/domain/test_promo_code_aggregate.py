"""Tests for the PromoCode aggregate: invariants, status and the shared use counter."""

from datetime import UTC, datetime, timedelta

import pytest
from ordering.promo.events import PromoCodeCreated, PromoCodeExhausted, PromoCodeRedeemed
from ordering.promo.promo_code import PromoCode, PromoCodeStatus, normalize_code
from protean.exceptions import ValidationError

NOW = datetime(2026, 6, 1, 12, 0, tzinfo=UTC)


def _make_promo(**overrides):
    fields = {"code": "SUMMER10", "type": "percent", "amount": 10}
    fields.update(overrides)
    return PromoCode.create(**fields)


class TestNormalizeCode:
    def test_strips_punctuation_and_uppercases(self):
        assert normalize_code(" summer-10! ") == "SUMMER10"

    def test_none(self):
        assert normalize_code(None) == ""


class TestCreatePromoCode:
    def test_create_normalizes_code(self):
        promo = _make_promo(code="summer 10")
        assert promo.code == "SUMMER10"
        assert promo.used_count == 0
        assert promo.deprecated is False

    def test_create_raises_event(self):
        promo = _make_promo()
        assert len(promo._events) == 1
        assert isinstance(promo._events[0], PromoCodeCreated)

    def test_free_shipping_code_has_no_amount(self):
        promo = PromoCode.create(code="FREESHIP", type="free_shipping", amount=300)
        assert promo.amount is None
        assert promo.free_shipping is True

    def test_code_too_short(self):
        with pytest.raises(ValidationError) as exc:
            _make_promo(code="AB")
        assert "code" in exc.value.messages

    def test_discount_requires_amount(self):
        with pytest.raises(ValidationError):
            _make_promo(type="fixed_amount", amount=None)

    def test_percent_cannot_exceed_100(self):
        with pytest.raises(ValidationError):
            _make_promo(amount=150)

    def test_max_price_below_min_price(self):
        with pytest.raises(ValidationError):
            _make_promo(min_price=5000, max_price=1000)

    def test_end_date_before_start_date(self):
        with pytest.raises(ValidationError):
            _make_promo(start_date=NOW, end_date=NOW - timedelta(days=1))


class TestPromoCodeStatus:
    def test_active_inside_window(self):
        promo = _make_promo(start_date=NOW - timedelta(days=1), end_date=NOW + timedelta(days=1))
        assert promo.status_at(NOW) == PromoCodeStatus.ACTIVE
        assert promo.is_redeemable_at(NOW)

    def test_draft_before_start(self):
        promo = _make_promo(start_date=NOW + timedelta(days=1))
        assert promo.status_at(NOW) == PromoCodeStatus.DRAFT
        assert not promo.is_redeemable_at(NOW)

    def test_finished_after_end(self):
        promo = _make_promo(end_date=NOW - timedelta(days=1))
        assert promo.status_at(NOW) == PromoCodeStatus.FINISHED

    def test_deprecated_is_finished(self):
        promo = _make_promo(usage_count=1)
        promo.register_use()
        assert promo.status_at(NOW) == PromoCodeStatus.FINISHED

    def test_deleted_is_not_redeemable(self):
        promo = _make_promo()
        promo.soft_delete()
        assert promo.deleted is True
        assert not promo.is_redeemable_at(NOW)


class TestRegisterUse:
    def test_increments_shared_counter(self):
        promo = _make_promo(usage_count=3)
        promo._events.clear()
        promo.register_use()
        assert promo.used_count == 1
        assert promo.deprecated is False
        assert isinstance(promo._events[0], PromoCodeRedeemed)

    def test_last_use_deprecates(self):
        promo = _make_promo(usage_count=2)
        promo.register_use()
        promo._events.clear()
        promo.register_use()
        assert promo.used_count == promo.usage_count == 2
        assert promo.deprecated is True
        assert isinstance(promo._events[-1], PromoCodeExhausted)

    def test_cannot_go_past_usage_count(self):
        promo = _make_promo(usage_count=1)
        promo.register_use()
        with pytest.raises(ValidationError):
            promo.register_use()
        assert promo.used_count == 1

    def test_unlimited_code_never_deprecates(self):
        promo = _make_promo(usage_count=None)
        for _ in range(5):
            promo.register_use()
        assert promo.used_count == 5
        assert promo.deprecated is False


class TestUpdateTerms:
    def test_partial_update_keeps_other_fields(self):
        promo = _make_promo(min_price=1000)
        promo.update_terms(title="Summer sale")
        assert promo.title == "Summer sale"
        assert promo.min_price == 1000

    def test_raising_usage_count_reactivates(self):
        promo = _make_promo(usage_count=1)
        promo.register_use()
        promo.update_terms(usage_count=5)
        assert promo.deprecated is False
        assert promo.has_uses_left

    def test_clearing_usage_count_reactivates(self):
        promo = _make_promo(usage_count=1)
        promo.register_use()
        promo.update_terms(usage_count=None)
        assert promo.deprecated is False

    def test_usage_count_below_used_count_rejected(self):
        promo = _make_promo(usage_count=3)
        promo.register_use()
        promo.register_use()
        with pytest.raises(ValidationError):
            promo.update_terms(usage_count=1)

    def test_switching_to_free_shipping_clears_amount(self):
        promo = _make_promo()
        promo.update_terms(type="free_shipping")
        assert promo.amount is None
        assert promo.free_shipping is True

    def test_min_and_max_change_together(self):
        promo = _make_promo(min_price=1000, max_price=2000)
        promo.update_terms(min_price=5000, max_price=9000)
        assert (promo.min_price, promo.max_price) == (5000, 9000)

    def test_deleted_code_cannot_be_updated(self):
        promo = _make_promo()
        promo.soft_delete()
        with pytest.raises(ValidationError):
            promo.update_terms(title="x")
