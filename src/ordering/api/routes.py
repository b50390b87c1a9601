"""FastAPI routes for the Ordering domain — checkout, orders, guests and back office.

Every command handler answers with an ``OperationResult`` envelope; business
rejections come back as HTTP 200 with ``success: false`` and a message in the
language given by the ``language`` header (1=English, 2=Russian, 3=Armenian).
"""

import json

from fastapi import APIRouter, Header, Query
from protean.utils.globals import current_domain

from ordering.api.schemas import (
    AddDeliveryZoneRequest,
    CancelOrderRequest,
    CheckDeliveryFeeRequest,
    CheckPromoCodeRequest,
    CreatePromoCodeRequest,
    CustomerIdResponse,
    DeletePromoCodesRequest,
    DeliveryZoneIdResponse,
    EnvelopeResponse,
    FinishOrderRequest,
    GuestOrderLookupRequest,
    OrderActorRequest,
    PlaceOrderRequest,
    PreviewCheckoutRequest,
    PromoCodeAvailabilityRequest,
    RegisterCustomerRequest,
    SendVerificationCodeRequest,
    UpdatePromoCodeRequest,
    VerifyGuestEmailRequest,
)
from ordering.customer.registration import RegisterCustomer
from ordering.customer.verification import SendVerificationCode, VerifyGuestEmail
from ordering.delivery.check import CheckDeliveryFee
from ordering.delivery.zones import AddDeliveryZone
from ordering.order.creation import PlaceOrder
from ordering.order.lifecycle import CancelOrder, FinishOrder, SetOrderToReview
from ordering.order.queries import get_guest_order_id, list_customer_orders
from ordering.pricing.preview import PreviewCheckout
from ordering.promo.check import CheckPromoCode
from ordering.promo.listing import list_promo_codes
from ordering.promo.management import (
    CreatePromoCode,
    DeletePromoCodes,
    GeneratePromoCode,
    UpdatePromoCode,
    ValidatePromoCodeAvailability,
)
from ordering.promo.promo_code import PromoCodeStatus, PromoCodeType
from ordering.shared.language import Language
from ordering.shared.messages import Message, translate
from ordering.shared.result import OperationResult


def _envelope(result: OperationResult) -> EnvelopeResponse:
    return EnvelopeResponse(**result.to_dict())


def _lines_json(lines) -> str:
    return json.dumps([line.model_dump() for line in lines])


# ---------------------------------------------------------------------------
# Checkout Router
# ---------------------------------------------------------------------------
checkout_router = APIRouter(prefix="/checkout", tags=["checkout"])


@checkout_router.post("/preview", response_model=EnvelopeResponse)
async def preview_checkout(
    body: PreviewCheckoutRequest, language: int = Header(default=1, ge=1, le=3)
) -> EnvelopeResponse:
    command = PreviewCheckout(
        lines=_lines_json(body.lines),
        delivery_type=body.delivery_type,
        lat=body.lat,
        lng=body.lng,
        customer_id=body.customer_id,
        guest_email=body.guest_email,
        bonus=body.bonus,
        promo_code=body.promo_code,
        language=language,
    )
    return _envelope(current_domain.process(command, asynchronous=False))


@checkout_router.post("/delivery-fee", response_model=EnvelopeResponse)
async def check_delivery_fee(
    body: CheckDeliveryFeeRequest, language: int = Header(default=1, ge=1, le=3)
) -> EnvelopeResponse:
    command = CheckDeliveryFee(lat=body.lat, lng=body.lng, price=body.price, language=language)
    return _envelope(current_domain.process(command, asynchronous=False))


@checkout_router.post("/promo-code", response_model=EnvelopeResponse)
async def check_promo_code(
    body: CheckPromoCodeRequest, language: int = Header(default=1, ge=1, le=3)
) -> EnvelopeResponse:
    command = CheckPromoCode(
        code=body.code,
        price=body.price,
        delivery_type=body.delivery_type,
        lat=body.lat,
        lng=body.lng,
        customer_id=body.customer_id,
        guest_email=body.guest_email,
        language=language,
    )
    return _envelope(current_domain.process(command, asynchronous=False))


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=EnvelopeResponse)
async def place_order(body: PlaceOrderRequest, language: int = Header(default=1, ge=1, le=3)) -> EnvelopeResponse:
    command = PlaceOrder(
        lines=_lines_json(body.lines),
        payment_type=body.payment_type,
        delivery_type=body.delivery_type,
        delivery_address=body.delivery_address.model_dump_json() if body.delivery_address else None,
        billing_address=body.billing_address.model_dump_json() if body.billing_address else None,
        delivery_date=body.delivery_date,
        customer_id=body.customer_id,
        guest_email=body.guest_email,
        guest_code=body.guest_code,
        guest_name=body.guest_name,
        guest_phone_number=body.guest_phone_number,
        company_id=body.company_id,
        company_name=body.company_name,
        bonus=body.bonus,
        promo_code=body.promo_code,
        comment=body.comment,
        os_type=body.os_type,
        language=language,
    )
    return _envelope(current_domain.process(command, asynchronous=False))


@order_router.put("/{order_id}/review", response_model=EnvelopeResponse)
async def set_order_to_review(
    order_id: str, body: OrderActorRequest, language: int = Header(default=1, ge=1, le=3)
) -> EnvelopeResponse:
    command = SetOrderToReview(order_id=order_id, **body.model_dump(), language=language)
    return _envelope(current_domain.process(command, asynchronous=False))


@order_router.put("/{order_id}/cancel", response_model=EnvelopeResponse)
async def cancel_order(
    order_id: str, body: CancelOrderRequest, language: int = Header(default=1, ge=1, le=3)
) -> EnvelopeResponse:
    command = CancelOrder(order_id=order_id, **body.model_dump(), language=language)
    return _envelope(current_domain.process(command, asynchronous=False))


@order_router.put("/{order_id}/finish", response_model=EnvelopeResponse)
async def finish_order(
    order_id: str, body: FinishOrderRequest, language: int = Header(default=1, ge=1, le=3)
) -> EnvelopeResponse:
    command = FinishOrder(order_id=order_id, **body.model_dump(), language=language)
    return _envelope(current_domain.process(command, asynchronous=False))


@order_router.post("/lookup", response_model=EnvelopeResponse)
async def lookup_guest_order(
    body: GuestOrderLookupRequest, language: int = Header(default=1, ge=1, le=3)
) -> EnvelopeResponse:
    order_id = get_guest_order_id(body.email, body.code)
    if order_id is None:
        return EnvelopeResponse(success=False, message=translate(Message.ORDER_NOT_FOUND, Language(language)))
    return EnvelopeResponse(success=True, data={"order_id": order_id})


# ---------------------------------------------------------------------------
# Customer Router
# ---------------------------------------------------------------------------
customer_router = APIRouter(prefix="/customers", tags=["customers"])


@customer_router.post("", status_code=201, response_model=CustomerIdResponse)
async def register_customer(body: RegisterCustomerRequest) -> CustomerIdResponse:
    command = RegisterCustomer(**body.model_dump())
    return CustomerIdResponse(customer_id=current_domain.process(command, asynchronous=False))


@customer_router.get("/{customer_id}/orders", response_model=EnvelopeResponse)
async def customer_orders(
    customer_id: str,
    active: bool = Query(default=True),
    page_no: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
) -> EnvelopeResponse:
    return EnvelopeResponse(success=True, data=list_customer_orders(customer_id, active, page_no, limit))


# ---------------------------------------------------------------------------
# Guest Router
# ---------------------------------------------------------------------------
guest_router = APIRouter(prefix="/guests", tags=["guests"])


@guest_router.post("/verification", response_model=EnvelopeResponse)
async def send_verification_code(
    body: SendVerificationCodeRequest, language: int = Header(default=1, ge=1, le=3)
) -> EnvelopeResponse:
    command = SendVerificationCode(email=body.email, language=language)
    return _envelope(current_domain.process(command, asynchronous=False))


@guest_router.post("/verification/confirm", response_model=EnvelopeResponse)
async def verify_guest_email(
    body: VerifyGuestEmailRequest, language: int = Header(default=1, ge=1, le=3)
) -> EnvelopeResponse:
    command = VerifyGuestEmail(email=body.email, code=body.code, language=language)
    return _envelope(current_domain.process(command, asynchronous=False))


# ---------------------------------------------------------------------------
# Delivery Zone Router
# ---------------------------------------------------------------------------
delivery_zone_router = APIRouter(prefix="/delivery-zones", tags=["delivery"])


@delivery_zone_router.post("", status_code=201, response_model=DeliveryZoneIdResponse)
async def add_delivery_zone(body: AddDeliveryZoneRequest) -> DeliveryZoneIdResponse:
    command = AddDeliveryZone(**body.model_dump())
    return DeliveryZoneIdResponse(zone_id=current_domain.process(command, asynchronous=False))


# ---------------------------------------------------------------------------
# Promo Code Router (back office)
# ---------------------------------------------------------------------------
promo_router = APIRouter(prefix="/promo-codes", tags=["promo-codes"])


@promo_router.post("", status_code=201, response_model=EnvelopeResponse)
async def create_promo_code(
    body: CreatePromoCodeRequest, language: int = Header(default=1, ge=1, le=3)
) -> EnvelopeResponse:
    command = CreatePromoCode(**body.model_dump(), language=language)
    return _envelope(current_domain.process(command, asynchronous=False))


@promo_router.get("", response_model=EnvelopeResponse)
async def get_promo_codes(
    search: str | None = None,
    type: str | None = None,
    status: str | None = None,
    page_no: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
) -> EnvelopeResponse:
    listing = list_promo_codes(
        search=search,
        type=PromoCodeType(type) if type else None,
        status=PromoCodeStatus(status) if status else None,
        page_no=page_no,
        limit=limit,
    )
    return EnvelopeResponse(success=True, data=listing)


@promo_router.get("/generate", response_model=EnvelopeResponse)
async def generate_promo_code() -> EnvelopeResponse:
    return _envelope(current_domain.process(GeneratePromoCode(), asynchronous=False))


@promo_router.post("/availability", response_model=EnvelopeResponse)
async def promo_code_availability(
    body: PromoCodeAvailabilityRequest, language: int = Header(default=1, ge=1, le=3)
) -> EnvelopeResponse:
    command = ValidatePromoCodeAvailability(code=body.code, promo_code_id=body.promo_code_id, language=language)
    return _envelope(current_domain.process(command, asynchronous=False))


@promo_router.post("/delete", response_model=EnvelopeResponse)
async def delete_promo_codes(body: DeletePromoCodesRequest) -> EnvelopeResponse:
    command = DeletePromoCodes(promo_code_ids=json.dumps(body.promo_code_ids))
    return _envelope(current_domain.process(command, asynchronous=False))


@promo_router.put("/{promo_code_id}", response_model=EnvelopeResponse)
async def update_promo_code(
    promo_code_id: str, body: UpdatePromoCodeRequest, language: int = Header(default=1, ge=1, le=3)
) -> EnvelopeResponse:
    command = UpdatePromoCode(
        promo_code_id=promo_code_id,
        changes=json.dumps(body.model_dump(exclude_unset=True, mode="json")),
        language=language,
    )
    return _envelope(current_domain.process(command, asynchronous=False))
