"""Money value object for cart and order amounts."""

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Float, String
from shared.money import DEFAULT_CURRENCY, VALID_CURRENCIES, round_money, to_decimal

from ordering.domain import ordering


@ordering.value_object
class Money:
    """A non-negative amount with its ISO-4217 currency.

    Operations return new instances. Results are rounded half-up to cents and
    mixing currencies is rejected.
    """

    amount = Float(required=True, min_value=0.0)
    currency = String(max_length=3, default=DEFAULT_CURRENCY)

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

    def _assert_same_currency(self, other):
        if self.currency != other.currency:
            raise ValidationError({"currency": [f"Currency mismatch: {self.currency} vs {other.currency}"]})

    def add(self, other):
        self._assert_same_currency(other)
        return Money(amount=round_money(self.to_decimal() + other.to_decimal()), currency=self.currency)

    def subtract(self, other):
        """Subtract, refusing to go below zero."""
        self._assert_same_currency(other)
        result = self.to_decimal() - other.to_decimal()
        if result < 0:
            raise ValidationError({"amount": ["Resulting amount cannot be negative"]})
        return Money(amount=float(result), currency=self.currency)

    def subtract_floored(self, other):
        """Subtract, clamping the result at zero."""
        self._assert_same_currency(other)
        result = max(self.to_decimal() - other.to_decimal(), to_decimal(0))
        return Money(amount=float(result), currency=self.currency)

    def multiply(self, factor: int):
        if factor < 0:
            raise ValidationError({"amount": ["Multiplier cannot be negative"]})
        return Money(amount=round_money(self.to_decimal() * factor), currency=self.currency)

    def min(self, other):
        self._assert_same_currency(other)
        return self if self.to_decimal() <= other.to_decimal() else other

    def is_greater_than(self, other) -> bool:
        self._assert_same_currency(other)
        return self.to_decimal() > other.to_decimal()

    def is_less_than(self, other) -> bool:
        self._assert_same_currency(other)
        return self.to_decimal() < other.to_decimal()

    def is_zero(self) -> bool:
        return self.to_decimal() == 0
