"""Integration tests for the back-office promo code endpoints."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from ordering.api.errors import install_error_handlers
from ordering.api.routes import promo_router
from ordering.shared.messages import Message, translate


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(promo_router)
    install_error_handlers(app)
    return TestClient(app)


def _create(client, **overrides):
    body = {"code": "SUMMER10", "type": "percent", "amount": 10, "usage_count": 100}
    body.update(overrides)
    response = client.post("/promo-codes", json=body)
    assert response.status_code == 201
    return response.json()


class TestCreate:
    def test_create_returns_201(self, client):
        body = _create(client, code="summer-10")
        assert body["success"] is True
        assert body["data"]["code"] == "SUMMER10"

    def test_taken_code(self, client):
        _create(client)
        body = _create(client)
        assert body["success"] is False
        assert body["message"] == translate(Message.PROMO_CODE_TAKEN)

    def test_invalid_terms_return_400(self, client):
        response = client.post("/promo-codes", json={"code": "SUMMER10", "type": "percent", "amount": 150})
        assert response.status_code == 400


class TestUpdateAndDelete:
    def test_partial_update_keeps_other_fields(self, client):
        promo_id = _create(client, min_price=500)["data"]["promo_code_id"]
        response = client.put(f"/promo-codes/{promo_id}", json={"title": "Summer sale"})
        assert response.json()["success"] is True

        listed = client.get("/promo-codes", params={"search": "summer sale"}).json()["data"]["items"]
        assert listed[0]["title"] == "Summer sale"
        assert listed[0]["min_price"] == 500

    def test_clearing_with_null(self, client):
        promo_id = _create(client, min_price=500)["data"]["promo_code_id"]
        client.put(f"/promo-codes/{promo_id}", json={"min_price": None})
        listed = client.get("/promo-codes").json()["data"]["items"]
        assert listed[0]["min_price"] is None

    def test_delete_hides_code(self, client):
        promo_id = _create(client)["data"]["promo_code_id"]
        response = client.post("/promo-codes/delete", json={"promo_code_ids": [promo_id]})
        assert response.json()["data"] == {"deleted": [promo_id]}
        assert client.get("/promo-codes").json()["data"]["total"] == 0

    def test_delete_needs_ids(self, client):
        assert client.post("/promo-codes/delete", json={"promo_code_ids": []}).status_code == 422


class TestListing:
    def test_filters(self, client):
        _create(client, code="PERCENT1")
        _create(client, code="FIXED001", type="fixed_amount", amount=300)
        _create(client, code="FREESHIP", type="free_shipping", amount=None)

        fixed = client.get("/promo-codes", params={"type": "fixed_amount"}).json()["data"]
        assert [item["code"] for item in fixed["items"]] == ["FIXED001"]

        active = client.get("/promo-codes", params={"status": "active"}).json()["data"]
        assert active["total"] == 3

    def test_generate_and_check_availability(self, client):
        code = client.get("/promo-codes/generate").json()["data"]["code"]
        response = client.post("/promo-codes/availability", json={"code": code})
        assert response.json()["success"] is True
        assert response.json()["message"] == translate(Message.PROMO_CODE_AVAILABLE)

    def test_too_short(self, client):
        response = client.post("/promo-codes/availability", json={"code": "ab"}, headers={"language": "3"})
        assert response.json()["success"] is False
        assert response.json()["data"] == {"code": "AB"}
