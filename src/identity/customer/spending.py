"""Customer spending — command and handler."""

import structlog
from protean import handle
from protean.fields import Float, Identifier, String
from protean.utils.globals import current_domain
from shared.money import DEFAULT_CURRENCY

from identity.customer.customer import Customer
from identity.domain import identity
from identity.shared.money import Money

logger = structlog.get_logger(__name__)


@identity.command(part_of="Customer")
class AddSpending:
    """Add a paid amount to the customer's cumulative spending."""

    customer_id: Identifier(required=True)
    amount: Float(required=True, min_value=0.0)
    currency: String(max_length=3, default=DEFAULT_CURRENCY)


@identity.command_handler(part_of=Customer)
class ManageSpendingHandler:
    @handle(AddSpending)
    def add_spending(self, command):
        repo = current_domain.repository_for(Customer)
        customer = repo.get(command.customer_id)
        previous_level = customer.member_level

        customer.add_spending(Money.of(command.amount, command.currency))
        repo.add(customer)

        logger.info(
            "Spending added",
            customer_id=str(customer.id),
            amount=command.amount,
            total_spending=customer.total_spending.amount,
            member_level=customer.member_level,
            upgraded=customer.member_level != previous_level,
        )
        return customer.member_level
