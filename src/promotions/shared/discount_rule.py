"""DiscountRule value object — the pricing policy shared by coupons and promotions.

A rule is either a percentage of the order total or a fixed amount, with an
optional minimum order. The computed discount never exceeds the order total.
"""

from decimal import Decimal
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Float, String
from shared.money import DEFAULT_CURRENCY, VALID_CURRENCIES, round_money, to_decimal

from promotions.domain import promotions


class DiscountType(Enum):
    PERCENTAGE = "Percentage"
    FIXED_AMOUNT = "Fixed_Amount"


@promotions.value_object
class DiscountRule:
    discount_type = String(required=True, choices=DiscountType)
    value = Float(required=True, min_value=0.0)
    currency = String(max_length=3, default=DEFAULT_CURRENCY)
    minimum_order_amount = Float(min_value=0.0)

    @invariant.post
    def percentage_cannot_exceed_100(self):
        if self.discount_type == DiscountType.PERCENTAGE.value and self.value is not None and self.value > 100:
            raise ValidationError({"value": ["Percentage cannot exceed 100"]})

    @invariant.post
    def currency_must_be_valid_iso_4217(self):
        if self.currency not in VALID_CURRENCIES:
            raise ValidationError({"currency": [f"Unsupported currency: {self.currency}"]})

    # -------------------------------------------------------------------
    # Factories
    # -------------------------------------------------------------------
    @classmethod
    def percentage(cls, percent):
        return cls(discount_type=DiscountType.PERCENTAGE.value, value=percent)

    @classmethod
    def percentage_with_minimum(cls, percent, minimum_order_amount, currency=DEFAULT_CURRENCY):
        return cls(
            discount_type=DiscountType.PERCENTAGE.value,
            value=percent,
            currency=currency,
            minimum_order_amount=minimum_order_amount,
        )

    @classmethod
    def fixed_amount(cls, amount, currency=DEFAULT_CURRENCY):
        return cls(discount_type=DiscountType.FIXED_AMOUNT.value, value=round_money(amount), currency=currency)

    @classmethod
    def fixed_amount_with_minimum(cls, amount, minimum_order_amount, currency=DEFAULT_CURRENCY):
        return cls(
            discount_type=DiscountType.FIXED_AMOUNT.value,
            value=round_money(amount),
            currency=currency,
            minimum_order_amount=minimum_order_amount,
        )

    # -------------------------------------------------------------------
    # Behaviour
    # -------------------------------------------------------------------
    def is_percentage(self) -> bool:
        return self.discount_type == DiscountType.PERCENTAGE.value

    def meets_minimum(self, order_total) -> bool:
        if self.minimum_order_amount is None:
            return True
        return to_decimal(order_total) >= to_decimal(self.minimum_order_amount)

    def calculate_discount(self, order_total) -> float:
        """Discount for an order total, rounded half-up to cents.

        Zero when the minimum order is not met; never more than the total.
        """
        total = to_decimal(order_total)
        if not self.meets_minimum(total):
            return 0.0

        if self.is_percentage():
            return round_money(total * Decimal(str(self.value)) / Decimal(100))

        return float(min(to_decimal(self.value), total))

    def display_text(self) -> str:
        if self.is_percentage():
            text = f"{self.value:g}% off"
        else:
            text = f"{self.currency} {self.value:.2f} off"

        if self.minimum_order_amount is not None:
            text += f" on orders of {self.currency} {self.minimum_order_amount:.2f} or more"
        return text
