"""GuestUser aggregate — an unregistered buyer identified by a verified e-mail.

A guest proves ownership of the e-mail with a 4-digit code. Only a bcrypt
hash of the code is stored; the plain code leaves the aggregate once, in the
return value of ``issue_verification_code``, so it can be mailed.
"""

import secrets
from datetime import UTC, datetime

import bcrypt
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Integer, String

from ordering.customer.events import GuestEmailVerified, GuestVerificationCodeIssued
from ordering.domain import ordering

VERIFICATION_CODE_DIGITS = 4
BCRYPT_ROUNDS = 12


def hash_code(code: str) -> str:
    return bcrypt.hashpw(code.encode(), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode()


def code_matches(code: str, hashed: str | None) -> bool:
    if not code or not hashed:
        return False
    return bcrypt.checkpw(code.encode(), hashed.encode())


@ordering.aggregate
class GuestUser:
    email: String(required=True, max_length=254)
    verification_code: String(max_length=255)
    verified: Boolean(default=False)
    finished_order_count: Integer(default=0, min_value=0)
    canceled_order_count: Integer(default=0, min_value=0)
    code_issued_at: DateTime()

    @classmethod
    def for_email(cls, email):
        return cls(email=normalize_email(email), verified=False)

    def issue_verification_code(self) -> str:
        """Replace the stored code with a fresh one and return it in plain text."""
        code = "".join(secrets.choice("0123456789") for _ in range(VERIFICATION_CODE_DIGITS))
        now = datetime.now(UTC)

        self.verification_code = hash_code(code)
        self.verified = False
        self.code_issued_at = now

        self.raise_(GuestVerificationCodeIssued(guest_id=str(self.id), email=self.email, issued_at=now))
        return code

    def check_code(self, code) -> bool:
        return code_matches(str(code) if code is not None else "", self.verification_code)

    def verify(self, code) -> None:
        if not self.check_code(code):
            raise ValidationError({"code": ["Verification code does not match"]})
        if self.verified:
            return

        self.verified = True
        self.raise_(GuestEmailVerified(guest_id=str(self.id), email=self.email, verified_at=datetime.now(UTC)))

    def record_order_finished(self) -> None:
        self.finished_order_count += 1

    def record_order_canceled(self) -> None:
        self.canceled_order_count += 1


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()
