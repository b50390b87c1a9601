"""Guest e-mail verification — commands and handler.

A guest checks out with an e-mail and a 4-digit code mailed to it. Sending a
code is refused for e-mails that belong to a registered customer; those
users sign in instead.
"""

import structlog
from protean import handle
from protean.fields import Integer, String
from protean.utils.globals import current_domain

from ordering.customer.guest import GuestUser
from ordering.customer.lookup import find_customer_by_email, find_guest_by_email
from ordering.domain import ordering
from ordering.notifications import get_mailer
from ordering.notifications.templates import VerificationCodeTemplate
from ordering.shared.language import Language
from ordering.shared.messages import Message, translate
from ordering.shared.result import fail, ok

logger = structlog.get_logger(__name__)


@ordering.command(part_of="GuestUser")
class SendVerificationCode:
    email: String(required=True, max_length=254)
    language: Integer(default=1)


@ordering.command(part_of="GuestUser")
class VerifyGuestEmail:
    email: String(required=True, max_length=254)
    code: String(required=True, max_length=10)
    language: Integer(default=1)


@ordering.command_handler(part_of=GuestUser)
class GuestVerificationHandler:
    @handle(SendVerificationCode)
    def send_verification_code(self, command):
        language = Language.from_code(command.language)

        if find_customer_by_email(command.email) is not None:
            return fail(translate(Message.EMAIL_BELONGS_TO_CUSTOMER, language))

        guest = find_guest_by_email(command.email) or GuestUser.for_email(command.email)
        code = guest.issue_verification_code()
        current_domain.repository_for(GuestUser).add(guest)

        rendered = VerificationCodeTemplate.render({"code": code}, language)
        result = get_mailer().send(guest.email, rendered["subject"], rendered["body"])
        if result.get("status") != "sent":
            logger.warning("verification_email_failed", guest_id=str(guest.id), error=result.get("error"))

        return ok(translate(Message.VERIFICATION_CODE_SENT, language))

    @handle(VerifyGuestEmail)
    def verify_guest_email(self, command):
        language = Language.from_code(command.language)

        guest = find_guest_by_email(command.email)
        if guest is None:
            return fail(translate(Message.WRONG_EMAIL, language))
        if not guest.check_code(command.code):
            return fail(translate(Message.WRONG_CODE, language))

        guest.verify(command.code)
        current_domain.repository_for(GuestUser).add(guest)
        return ok(translate(Message.EMAIL_VERIFIED, language), {"guest_id": str(guest.id)})
