"""Money value object for customer spending totals."""

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Float, String
from shared.money import DEFAULT_CURRENCY, VALID_CURRENCIES, round_money, to_decimal

from identity.domain import identity


@identity.value_object
class Money:
    """Value object representing a non-negative monetary amount with currency."""

    amount: Float(required=True, min_value=0.0)
    currency: String(max_length=3, default=DEFAULT_CURRENCY)

    @invariant.post
    def currency_must_be_valid_iso_4217(self):
        if self.currency not in VALID_CURRENCIES:
            raise ValidationError({"currency": [f"Unsupported currency: {self.currency}"]})

    @classmethod
    def of(cls, amount, currency=DEFAULT_CURRENCY):
        value = to_decimal(amount)
        if value < 0:
            raise ValidationError({"amount": ["Amount cannot be negative"]})
        return cls(amount=float(value), currency=currency)

    @classmethod
    def zero(cls, currency=DEFAULT_CURRENCY):
        return cls(amount=0.0, currency=currency)

    def to_decimal(self):
        return to_decimal(self.amount)

    def add(self, other):
        if self.currency != other.currency:
            raise ValidationError({"currency": [f"Currency mismatch: {self.currency} vs {other.currency}"]})
        return Money(amount=round_money(self.to_decimal() + other.to_decimal()), currency=self.currency)
