"""Promo code administration — commands and handler.

Codes are unique among non-deleted codes after normalization. Updates are
partial: ``UpdatePromoCode.changes`` is a JSON object holding only the fields
to change, so a field can be cleared by sending ``null``.
"""

import json
from datetime import datetime

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.promo.lookup import is_code_taken
from ordering.promo.promo_code import MIN_CODE_LENGTH, PromoCode, PromoCodeType, normalize_code
from ordering.shared.codes import generate_unique_code
from ordering.shared.language import Language
from ordering.shared.messages import Message, translate
from ordering.shared.result import fail, ok

logger = structlog.get_logger(__name__)

_UPDATABLE_FIELDS = {
    "code",
    "title",
    "type",
    "amount",
    "free_shipping",
    "min_price",
    "max_price",
    "start_date",
    "end_date",
    "usage_count",
}
_DATE_FIELDS = {"start_date", "end_date"}


@ordering.command(part_of="PromoCode")
class CreatePromoCode:
    code = String(required=True, max_length=50)
    type = String(required=True, choices=PromoCodeType)
    title = String(max_length=255)
    amount = Float()
    free_shipping = Boolean(default=False)
    min_price = Float(min_value=0.0)
    max_price = Float(min_value=0.0)
    start_date = DateTime()
    end_date = DateTime()
    usage_count = Integer(min_value=1)
    language = Integer(default=1)


@ordering.command(part_of="PromoCode")
class UpdatePromoCode:
    promo_code_id = Identifier(required=True)
    changes = Text(required=True)  # JSON object of fields to change
    language = Integer(default=1)


@ordering.command(part_of="PromoCode")
class DeletePromoCodes:
    promo_code_ids = Text(required=True)  # JSON array of ids


@ordering.command(part_of="PromoCode")
class GeneratePromoCode:
    length = Integer(default=8, min_value=MIN_CODE_LENGTH, max_value=20)


@ordering.command(part_of="PromoCode")
class ValidatePromoCodeAvailability:
    code = String(required=True, max_length=50)
    promo_code_id = Identifier()  # the code being edited, ignored in the check
    language = Integer(default=1)


def _parse_changes(raw: str) -> dict:
    changes = json.loads(raw)
    unknown = set(changes) - _UPDATABLE_FIELDS
    if unknown:
        raise ValidationError({"changes": [f"Unknown fields: {', '.join(sorted(unknown))}"]})
    for field in _DATE_FIELDS & set(changes):
        if isinstance(changes[field], str):
            changes[field] = datetime.fromisoformat(changes[field])
    return changes


@ordering.command_handler(part_of=PromoCode)
class PromoCodeManagementHandler:
    @handle(CreatePromoCode)
    def create_promo_code(self, command):
        language = Language.from_code(command.language)
        if is_code_taken(command.code):
            return fail(translate(Message.PROMO_CODE_TAKEN, language))

        promo = PromoCode.create(
            code=command.code,
            type=command.type,
            amount=command.amount,
            title=command.title,
            free_shipping=command.free_shipping,
            min_price=command.min_price,
            max_price=command.max_price,
            start_date=command.start_date,
            end_date=command.end_date,
            usage_count=command.usage_count,
        )
        current_domain.repository_for(PromoCode).add(promo)
        logger.info("promo_code_created", promo_code_id=str(promo.id), code=promo.code)
        return ok(data={"promo_code_id": str(promo.id), "code": promo.code})

    @handle(UpdatePromoCode)
    def update_promo_code(self, command):
        language = Language.from_code(command.language)
        repo = current_domain.repository_for(PromoCode)
        promo = repo.get(command.promo_code_id)

        changes = _parse_changes(command.changes)
        if "code" in changes and is_code_taken(changes["code"], exclude_id=promo.id):
            return fail(translate(Message.PROMO_CODE_TAKEN, language))

        promo.update_terms(**changes)
        repo.add(promo)
        return ok(data={"promo_code_id": str(promo.id), "code": promo.code, "deprecated": promo.deprecated})

    @handle(DeletePromoCodes)
    def delete_promo_codes(self, command):
        repo = current_domain.repository_for(PromoCode)
        deleted = []
        for promo_code_id in json.loads(command.promo_code_ids):
            promo = repo.get(promo_code_id)
            promo.soft_delete()
            repo.add(promo)
            deleted.append(str(promo.id))
        return ok(data={"deleted": deleted})

    @handle(GeneratePromoCode)
    def generate_promo_code(self, command):
        return ok(data={"code": generate_unique_code(is_code_taken, length=command.length)})

    @handle(ValidatePromoCodeAvailability)
    def validate_promo_code_availability(self, command):
        language = Language.from_code(command.language)
        code = normalize_code(command.code)
        if len(code) < MIN_CODE_LENGTH:
            message = translate(Message.PROMO_CODE_TOO_SHORT, language, min_length=MIN_CODE_LENGTH)
            return fail(message, {"code": code})
        if is_code_taken(code, exclude_id=command.promo_code_id):
            return fail(translate(Message.PROMO_CODE_TAKEN, language), {"code": code})
        return ok(translate(Message.PROMO_CODE_AVAILABLE, language), {"code": code})
