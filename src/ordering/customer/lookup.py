"""Repository lookups for customers and guests by e-mail."""

from protean.utils.globals import current_domain

from ordering.customer.customer import Customer
from ordering.customer.guest import GuestUser, normalize_email


def find_customer_by_email(email: str) -> Customer | None:
    records = current_domain.repository_for(Customer)._dao.query.filter(email=normalize_email(email)).all().items
    return records[0] if records else None


def find_guest_by_email(email: str) -> GuestUser | None:
    records = current_domain.repository_for(GuestUser)._dao.query.filter(email=normalize_email(email)).all().items
    return records[0] if records else None
