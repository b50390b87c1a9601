"""Customer registration — command and handler.

Accounts are owned by the identity service; this command mirrors a user into
the ordering context with their current bonus balance and role.
"""

from protean import handle
from protean.fields import Integer, String
from protean.utils.globals import current_domain

from ordering.customer.customer import Customer, UserRole
from ordering.domain import ordering


@ordering.command(part_of="Customer")
class RegisterCustomer:
    email: String(required=True, max_length=254)
    first_name: String(max_length=100)
    last_name: String(max_length=100)
    phone_number: String(max_length=20)
    role: String(choices=UserRole, default=UserRole.USER.value)
    points: Integer(default=0, min_value=0)


@ordering.command_handler(part_of=Customer)
class RegisterCustomerHandler:
    @handle(RegisterCustomer)
    def register_customer(self, command):
        customer = Customer.register(
            email=command.email,
            first_name=command.first_name,
            last_name=command.last_name,
            phone_number=command.phone_number,
            role=command.role,
            points=command.points,
        )
        current_domain.repository_for(Customer).add(customer)
        return str(customer.id)
