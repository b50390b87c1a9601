"""Domain events for the Customer and GuestUser aggregates."""

from protean.fields import DateTime, Identifier, Integer, String

from ordering.domain import ordering


@ordering.event(part_of="Customer")
class CustomerRegistered:
    """A registered customer became known to the ordering context."""

    __version__ = 1

    customer_id: Identifier(required=True)
    email: String(required=True)
    role: String(required=True)
    points: Integer(default=0)
    registered_at: DateTime(required=True)


@ordering.event(part_of="Customer")
class BonusPointsRedeemed:
    """Bonus points were debited to pay part of an order."""

    __version__ = 1

    customer_id: Identifier(required=True)
    amount: Integer(required=True)
    balance: Integer(required=True)


@ordering.event(part_of="Customer")
class BonusPointsCredited:
    """Bonus points were added to a balance (accrual or refund)."""

    __version__ = 1

    customer_id: Identifier(required=True)
    amount: Integer(required=True)
    balance: Integer(required=True)
    reason: String(required=True)


@ordering.event(part_of="GuestUser")
class GuestVerificationCodeIssued:
    """A fresh e-mail verification code was issued to a guest."""

    __version__ = 1

    guest_id: Identifier(required=True)
    email: String(required=True)
    issued_at: DateTime(required=True)


@ordering.event(part_of="GuestUser")
class GuestEmailVerified:
    """A guest confirmed ownership of their e-mail address."""

    __version__ = 1

    guest_id: Identifier(required=True)
    email: String(required=True)
    verified_at: DateTime(required=True)
