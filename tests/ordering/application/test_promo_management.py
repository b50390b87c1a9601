"""Application tests for promo code administration."""

import json
from datetime import UTC, datetime, timedelta

import pytest
from ordering.promo.listing import list_promo_codes
from ordering.promo.management import (
    CreatePromoCode,
    DeletePromoCodes,
    GeneratePromoCode,
    UpdatePromoCode,
    ValidatePromoCodeAvailability,
)
from ordering.promo.promo_code import PromoCode, PromoCodeStatus, PromoCodeType
from ordering.shared.codes import CODE_ALPHABET
from ordering.shared.messages import Message, translate
from protean import current_domain
from protean.exceptions import ValidationError


def _process(command):
    return current_domain.process(command, asynchronous=False)


def _create(**overrides):
    fields = {"code": "SUMMER10", "type": "percent", "amount": 10, "usage_count": 100}
    fields.update(overrides)
    return _process(CreatePromoCode(**fields))


class TestCreatePromoCode:
    def test_create(self, reload):
        result = _create(code="summer 10")
        assert result.success
        assert result.data["code"] == "SUMMER10"
        promo = reload(PromoCode, result.data["promo_code_id"])
        assert promo.amount == 10
        assert promo.usage_count == 100

    def test_duplicate_code_rejected(self):
        _create()
        result = _create(code="Summer-10")
        assert not result.success
        assert result.message == translate(Message.PROMO_CODE_TAKEN)

    def test_deleted_code_can_be_reused(self):
        first = _create()
        _process(DeletePromoCodes(promo_code_ids=json.dumps([first.data["promo_code_id"]])))
        assert _create().success

    def test_invalid_terms_raise(self):
        with pytest.raises(ValidationError):
            _create(amount=120)


class TestUpdatePromoCode:
    def test_partial_update(self, reload):
        promo_id = _create(min_price=1000).data["promo_code_id"]
        result = _process(UpdatePromoCode(promo_code_id=promo_id, changes=json.dumps({"title": "Summer sale"})))
        assert result.success
        promo = reload(PromoCode, promo_id)
        assert promo.title == "Summer sale"
        assert promo.min_price == 1000

    def test_clearing_a_field(self, reload):
        promo_id = _create(min_price=1000).data["promo_code_id"]
        _process(UpdatePromoCode(promo_code_id=promo_id, changes=json.dumps({"min_price": None})))
        assert reload(PromoCode, promo_id).min_price is None

    def test_dates_parsed(self, reload):
        promo_id = _create().data["promo_code_id"]
        end = datetime(2030, 1, 1, tzinfo=UTC)
        _process(UpdatePromoCode(promo_code_id=promo_id, changes=json.dumps({"end_date": end.isoformat()})))
        assert reload(PromoCode, promo_id).end_date == end

    def test_raising_usage_count_reactivates(self, reload):
        promo_id = _create(usage_count=1).data["promo_code_id"]
        repo = current_domain.repository_for(PromoCode)
        promo = repo.get(promo_id)
        promo.register_use()
        repo.add(promo)

        result = _process(UpdatePromoCode(promo_code_id=promo_id, changes=json.dumps({"usage_count": 10})))
        assert result.data["deprecated"] is False

    def test_rename_to_taken_code(self):
        _create(code="TAKEN01")
        promo_id = _create(code="OTHER01").data["promo_code_id"]
        result = _process(UpdatePromoCode(promo_code_id=promo_id, changes=json.dumps({"code": "taken-01"})))
        assert result.message == translate(Message.PROMO_CODE_TAKEN)

    def test_unknown_field(self):
        promo_id = _create().data["promo_code_id"]
        with pytest.raises(ValidationError):
            _process(UpdatePromoCode(promo_code_id=promo_id, changes=json.dumps({"used_count": 0})))


class TestDeleteAndAvailability:
    def test_soft_delete(self, reload):
        ids = [_create(code=f"CODE000{i}").data["promo_code_id"] for i in range(2)]
        result = _process(DeletePromoCodes(promo_code_ids=json.dumps(ids)))
        assert sorted(result.data["deleted"]) == sorted(ids)
        assert all(reload(PromoCode, promo_id).deleted for promo_id in ids)

    def test_generated_code_is_available(self):
        code = _process(GeneratePromoCode()).data["code"]
        assert len(code) == 8
        assert set(code) <= set(CODE_ALPHABET)

    def test_availability(self):
        promo_id = _create().data["promo_code_id"]

        taken = _process(ValidatePromoCodeAvailability(code="summer10"))
        assert taken.message == translate(Message.PROMO_CODE_TAKEN)

        own = _process(ValidatePromoCodeAvailability(code="summer10", promo_code_id=promo_id))
        assert own.success

        short = _process(ValidatePromoCodeAvailability(code="a-b"))
        assert short.message == translate(Message.PROMO_CODE_TOO_SHORT, min_length=4)

        free = _process(ValidatePromoCodeAvailability(code="winter-20"))
        assert free.success
        assert free.data == {"code": "WINTER20"}


class TestListPromoCodes:
    @pytest.fixture()
    def promos(self, create_promo):
        now = datetime.now(UTC)
        create_promo("ACTIVE01", "percent", amount=5, title="Spring")
        create_promo("FUTURE01", "fixed_amount", amount=100, start_date=now + timedelta(days=3))
        create_promo("EXPIRED1", "free_shipping", end_date=now - timedelta(days=3))
        gone = create_promo("DELETED1", "percent", amount=5)
        gone.soft_delete()
        current_domain.repository_for(PromoCode).add(gone)

    def test_deleted_codes_hidden(self, promos):
        listing = list_promo_codes()
        assert listing["total"] == 3
        assert "DELETED1" not in [item["code"] for item in listing["items"]]

    def test_filter_by_status(self, promos):
        assert [i["code"] for i in list_promo_codes(status=PromoCodeStatus.DRAFT)["items"]] == ["FUTURE01"]
        assert [i["code"] for i in list_promo_codes(status=PromoCodeStatus.FINISHED)["items"]] == ["EXPIRED1"]

    def test_filter_by_type(self, promos):
        items = list_promo_codes(type=PromoCodeType.FIXED_AMOUNT)["items"]
        assert [i["code"] for i in items] == ["FUTURE01"]

    def test_search_code_or_title(self, promos):
        assert [i["code"] for i in list_promo_codes(search="spring")["items"]] == ["ACTIVE01"]
        assert [i["code"] for i in list_promo_codes(search="expired")["items"]] == ["EXPIRED1"]

    def test_paging(self, promos):
        page = list_promo_codes(page_no=2, limit=2)
        assert page["total"] == 3
        assert len(page["items"]) == 1

    def test_counts_every_code(self, create_promo):
        for index in range(105):
            create_promo(f"BULK{index:04d}", "percent", amount=5)

        page = list_promo_codes(page_no=6, limit=20)

        assert page["total"] == 105
        assert len(page["items"]) == 5
