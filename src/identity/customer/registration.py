"""Customer registration — command and handler."""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import String
from protean.utils.globals import current_domain

from identity.customer.customer import Customer
from identity.domain import identity

logger = structlog.get_logger(__name__)


@identity.command(part_of="Customer")
class RegisterCustomer:
    """Create a new customer account with profile information."""

    email: String(required=True, max_length=254)
    first_name: String(required=True, max_length=100)
    last_name: String(required=True, max_length=100)


@identity.command_handler(part_of=Customer)
class RegisterCustomerHandler:
    @handle(RegisterCustomer)
    def register_customer(self, command):
        repo = current_domain.repository_for(Customer)
        if repo.exists_by_email(command.email):
            logger.warning("Registration rejected, email already registered", email=command.email)
            raise ValidationError({"email": [f"Email {command.email} is already registered"]})

        customer = Customer.register(
            email=command.email,
            first_name=command.first_name,
            last_name=command.last_name,
        )
        repo.add(customer)
        return str(customer.id)
