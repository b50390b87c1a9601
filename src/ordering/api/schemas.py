"""Pydantic request/response schemas for the Ordering API.

These are external contracts (anti-corruption layer) — separate from
internal Protean commands.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class AddressSchema(BaseModel):
    address: str
    house: str | None = None
    apartment: str | None = None
    lat: float | None = Field(default=None, ge=-90, le=90)
    lng: float | None = Field(default=None, ge=-180, le=180)
    contact_name: str | None = None
    contact_phone_number: str | None = None


class CartLineSchema(BaseModel):
    product_id: str
    product_version_id: str | None = None
    count: int = Field(ge=1)


class EnvelopeResponse(BaseModel):
    success: bool
    message: str = ""
    data: Any = None


# ---------------------------------------------------------------------------
# Checkout
# ---------------------------------------------------------------------------
class PreviewCheckoutRequest(BaseModel):
    lines: list[CartLineSchema]
    delivery_type: str = "delivery"
    lat: float | None = Field(default=None, ge=-90, le=90)
    lng: float | None = Field(default=None, ge=-180, le=180)
    customer_id: str | None = None
    guest_email: str | None = None
    bonus: int | None = Field(default=None, ge=0)
    promo_code: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "lines": [{"product_id": "prod-001", "count": 2}],
                    "delivery_type": "delivery",
                    "lat": 40.1792,
                    "lng": 44.4991,
                    "customer_id": "cust-001",
                    "bonus": 100,
                    "promo_code": "SUMMER10",
                }
            ]
        }
    }


class CheckDeliveryFeeRequest(BaseModel):
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)
    price: float = Field(ge=0)


class CheckPromoCodeRequest(BaseModel):
    code: str
    price: float = Field(ge=0)
    delivery_type: str = "delivery"
    lat: float | None = Field(default=None, ge=-90, le=90)
    lng: float | None = Field(default=None, ge=-180, le=180)
    customer_id: str | None = None
    guest_email: str | None = None


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class PlaceOrderRequest(BaseModel):
    lines: list[CartLineSchema]
    payment_type: str = "cash"
    delivery_type: str = "delivery"
    delivery_address: AddressSchema | None = None
    billing_address: AddressSchema | None = None
    delivery_date: datetime | None = None
    customer_id: str | None = None
    guest_email: str | None = None
    guest_code: str | None = None
    guest_name: str | None = None
    guest_phone_number: str | None = None
    company_id: str | None = None
    company_name: str | None = None
    bonus: int | None = Field(default=None, ge=0)
    promo_code: str | None = None
    comment: str | None = None
    os_type: str = "web"

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "lines": [{"product_id": "prod-001", "count": 2}],
                    "payment_type": "cash",
                    "delivery_type": "delivery",
                    "delivery_address": {"address": "1 Abovyan St", "lat": 40.1792, "lng": 44.4991},
                    "customer_id": "cust-001",
                }
            ]
        }
    }


class OrderActorRequest(BaseModel):
    actor_kind: str
    actor_id: str | None = None
    guest_email: str | None = None
    order_code: str | None = None


class CancelOrderRequest(OrderActorRequest):
    reason: str | None = Field(default=None, max_length=500)


class FinishOrderRequest(BaseModel):
    actor_kind: str
    actor_id: str | None = None


class GuestOrderLookupRequest(BaseModel):
    email: str
    code: str


# ---------------------------------------------------------------------------
# Guests and customers
# ---------------------------------------------------------------------------
class SendVerificationCodeRequest(BaseModel):
    email: str


class VerifyGuestEmailRequest(BaseModel):
    email: str
    code: str


class RegisterCustomerRequest(BaseModel):
    email: str
    first_name: str | None = None
    last_name: str | None = None
    phone_number: str | None = None
    role: str = "user"
    points: int = Field(default=0, ge=0)


class CustomerIdResponse(BaseModel):
    customer_id: str


# ---------------------------------------------------------------------------
# Delivery zones
# ---------------------------------------------------------------------------
class AddDeliveryZoneRequest(BaseModel):
    name: str
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)
    price: float = Field(ge=0)
    is_free_from_price: float = Field(ge=0)


class DeliveryZoneIdResponse(BaseModel):
    zone_id: str


# ---------------------------------------------------------------------------
# Promo codes
# ---------------------------------------------------------------------------
class CreatePromoCodeRequest(BaseModel):
    code: str
    type: str
    title: str | None = None
    amount: float | None = None
    free_shipping: bool = False
    min_price: float | None = Field(default=None, ge=0)
    max_price: float | None = Field(default=None, ge=0)
    start_date: datetime | None = None
    end_date: datetime | None = None
    usage_count: int | None = Field(default=None, ge=1)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "code": "SUMMER10",
                    "type": "percent",
                    "amount": 10,
                    "min_price": 5000,
                    "usage_count": 100,
                }
            ]
        }
    }


class UpdatePromoCodeRequest(BaseModel):
    """Partial update: only the fields present in the body are changed."""

    code: str | None = None
    type: str | None = None
    title: str | None = None
    amount: float | None = None
    free_shipping: bool | None = None
    min_price: float | None = Field(default=None, ge=0)
    max_price: float | None = Field(default=None, ge=0)
    start_date: datetime | None = None
    end_date: datetime | None = None
    usage_count: int | None = Field(default=None, ge=1)


class DeletePromoCodesRequest(BaseModel):
    promo_code_ids: list[str] = Field(min_length=1)


class PromoCodeAvailabilityRequest(BaseModel):
    code: str
    promo_code_id: str | None = None
