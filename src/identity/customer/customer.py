"""Customer aggregate root with the Profile value object and membership level."""

from datetime import datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, String, ValueObject

from identity.customer.events import CustomerRegistered, LevelUpgraded, SpendingAdded
from identity.customer.membership import MemberLevel, MemberLevelCalculator, level_rank
from identity.domain import identity
from identity.shared.email import EmailAddress
from identity.shared.money import Money


@identity.value_object(part_of="Customer")
class Profile:
    """Personal information associated with a Customer.

    A Profile has no identity of its own; it exists only as part of a Customer.
    """

    first_name: String(required=True, max_length=100)
    last_name: String(required=True, max_length=100)


@identity.aggregate
class Customer:
    """A registered shopper and their spending history.

    The membership level is derived from cumulative spending and is recomputed
    every time spending is added. Spending only ever grows, so the level never
    goes down.
    """

    email: ValueObject(EmailAddress, required=True)
    profile: ValueObject(Profile)
    total_spending: ValueObject(Money)
    member_level: String(choices=MemberLevel, default=MemberLevel.NORMAL.value)
    registered_at: DateTime(default=datetime.now)

    @invariant.post
    def member_level_matches_total_spending(self):
        if self.total_spending is None:
            return
        expected = MemberLevelCalculator().calculate_level(self.total_spending)
        if self.member_level != expected.value:
            raise ValidationError({"member_level": [f"Member level must be {expected.value} for this spending"]})

    @classmethod
    def register(cls, email, first_name, last_name):
        now = datetime.now()
        customer = cls(
            email=EmailAddress(address=email),
            profile=Profile(first_name=first_name, last_name=last_name),
            total_spending=Money.zero(),
            member_level=MemberLevel.NORMAL.value,
            registered_at=now,
        )
        customer.raise_(
            CustomerRegistered(
                customer_id=customer.id,
                email=email,
                first_name=first_name,
                last_name=last_name,
                registered_at=now,
            )
        )
        return customer

    def discount_percentage(self) -> int:
        return MemberLevelCalculator().get_discount_percentage(self.member_level)

    def spending_to_next_level(self) -> Money:
        return MemberLevelCalculator().spending_to_next_level(self.total_spending)

    def add_spending(self, amount):
        """Add to cumulative spending and recompute the level in one step.

        LevelUpgraded is raised only when the level strictly increases.
        """
        spending = amount if isinstance(amount, Money) else Money.of(amount)
        calculator = MemberLevelCalculator()
        previous_level = MemberLevel(self.member_level)
        new_total = self.total_spending.add(spending)
        new_level = calculator.calculate_level(new_total)

        with atomic_change(self):
            self.total_spending = new_total
            self.member_level = new_level.value

        self.raise_(
            SpendingAdded(
                customer_id=self.id,
                amount=spending.amount,
                currency=spending.currency,
                total_spending=new_total.amount,
            )
        )

        if level_rank(new_level) > level_rank(previous_level):
            self.raise_(
                LevelUpgraded(
                    customer_id=self.id,
                    previous_level=previous_level.value,
                    new_level=new_level.value,
                    new_discount_percentage=calculator.get_discount_percentage(new_level),
                    total_spending=new_total.amount,
                )
            )
