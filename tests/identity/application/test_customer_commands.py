"""Application tests for customer registration and spending commands."""

import pytest
from identity.customer.customer import Customer
from identity.customer.membership import MemberLevel
from identity.customer.registration import RegisterCustomer
from identity.customer.spending import AddSpending
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError


def _register(email="jane@example.com"):
    return current_domain.process(
        RegisterCustomer(email=email, first_name="Jane", last_name="Doe"),
        asynchronous=False,
    )


def _add_spending(customer_id, amount):
    return current_domain.process(AddSpending(customer_id=customer_id, amount=amount), asynchronous=False)


class TestRegisterCustomer:
    def test_register_persists(self):
        customer_id = _register()
        customer = current_domain.repository_for(Customer).get(customer_id)
        assert customer.email.address == "jane@example.com"
        assert customer.profile.last_name == "Doe"
        assert customer.member_level == MemberLevel.NORMAL.value

    def test_invalid_email_rejected(self):
        with pytest.raises(ValidationError):
            _register(email="jane@")

    def test_duplicate_email_rejected(self):
        first_id = _register()

        with pytest.raises(ValidationError) as exc_info:
            _register()

        assert "email" in exc_info.value.messages
        repo = current_domain.repository_for(Customer)
        assert repo.exists_by_email("jane@example.com")
        assert str(repo.find_by_email("jane@example.com").id) == first_id

    def test_distinct_emails_accepted(self):
        first_id = _register()
        second_id = _register(email="john@example.com")

        assert first_id != second_id
        assert not current_domain.repository_for(Customer).exists_by_email("nobody@example.com")


class TestAddSpending:
    def test_spending_accumulates(self):
        customer_id = _register()
        _add_spending(customer_id, 9999.99)
        level = _add_spending(customer_id, 0.02)

        customer = current_domain.repository_for(Customer).get(customer_id)
        assert customer.total_spending.amount == 10000.01
        assert customer.member_level == MemberLevel.SILVER.value
        assert level == MemberLevel.SILVER.value

    def test_unknown_customer(self):
        with pytest.raises(ObjectNotFoundError):
            _add_spending("cust-404", 100.0)
