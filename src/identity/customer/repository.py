"""Repository for the Customer aggregate."""

from identity.customer.customer import Customer
from identity.domain import identity


@identity.repository(part_of=Customer)
class CustomerRepository:
    def find_by_email(self, email) -> Customer | None:
        # The embedded EmailAddress is stored flattened as `email_address`
        customers = self._dao.query.filter(email_address=str(email).strip()).all().items
        return customers[0] if customers else None

    def exists_by_email(self, email) -> bool:
        return self.find_by_email(email) is not None
