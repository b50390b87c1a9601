"""Customer aggregate — a registered user as seen by checkout.

Only the parts of a user that pricing and the order lifecycle touch live
here: the bonus point balance, the order counters and the role. Point
balance changes go through ``redeem_points`` / ``credit_points`` so the
non-negative balance is checked on every write.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Integer, String

from ordering.customer.events import BonusPointsCredited, BonusPointsRedeemed, CustomerRegistered
from ordering.domain import ordering


class UserRole(Enum):
    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    USER = "user"


class PointsCreditReason(Enum):
    ORDER_FINISHED = "order_finished"
    ORDER_CANCELED = "order_canceled"


@ordering.aggregate
class Customer:
    """A registered user who can redeem and accrue bonus points."""

    email: String(required=True, max_length=254)
    first_name: String(max_length=100)
    last_name: String(max_length=100)
    phone_number: String(max_length=20)
    role: String(choices=UserRole, default=UserRole.USER.value)
    points: Integer(default=0, min_value=0)
    order_count: Integer(default=0, min_value=0)
    finished_order_count: Integer(default=0, min_value=0)
    canceled_order_count: Integer(default=0, min_value=0)
    registered_at: DateTime()

    @classmethod
    def register(cls, email, first_name=None, last_name=None, phone_number=None, role=None, points=0):
        now = datetime.now(UTC)
        customer = cls(
            email=email.strip().lower(),
            first_name=first_name,
            last_name=last_name,
            phone_number=phone_number,
            role=role or UserRole.USER.value,
            points=points,
            registered_at=now,
        )
        customer.raise_(
            CustomerRegistered(
                customer_id=str(customer.id),
                email=customer.email,
                role=customer.role,
                points=points,
                registered_at=now,
            )
        )
        return customer

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    @property
    def is_admin(self) -> bool:
        return UserRole(self.role) in (UserRole.ADMIN, UserRole.SUPER_ADMIN)

    # -------------------------------------------------------------------
    # Bonus points
    # -------------------------------------------------------------------
    def redeem_points(self, amount: int) -> None:
        """Debit ``amount`` points. Fails instead of letting the balance go negative."""
        if amount <= 0:
            raise ValidationError({"points": ["Redeemed amount must be positive"]})
        if amount > self.points:
            raise ValidationError({"points": ["Insufficient bonus points"]})

        self.points -= amount
        self.raise_(BonusPointsRedeemed(customer_id=str(self.id), amount=amount, balance=self.points))

    def credit_points(self, amount: int, reason: PointsCreditReason) -> None:
        if amount < 0:
            raise ValidationError({"points": ["Credited amount cannot be negative"]})
        if amount == 0:
            return

        self.points += amount
        self.raise_(
            BonusPointsCredited(
                customer_id=str(self.id),
                amount=amount,
                balance=self.points,
                reason=reason.value,
            )
        )

    # -------------------------------------------------------------------
    # Order counters
    # -------------------------------------------------------------------
    def record_order_placed(self) -> None:
        self.order_count += 1

    def record_order_finished(self) -> None:
        self.finished_order_count += 1

    def record_order_canceled(self) -> None:
        self.canceled_order_count += 1
