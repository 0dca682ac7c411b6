"""Quantity value object for cart lines."""

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Integer

from ordering.domain import ordering

MIN_QUANTITY = 1
MAX_QUANTITY = 99


@ordering.value_object
class Quantity:
    """A line quantity bounded to [1, 99]."""

    value = Integer(required=True)

    @invariant.post
    def value_must_be_within_bounds(self):
        if self.value is not None and not MIN_QUANTITY <= self.value <= MAX_QUANTITY:
            raise ValidationError({"quantity": [f"Quantity must be between {MIN_QUANTITY} and {MAX_QUANTITY}"]})

    @classmethod
    def of(cls, value):
        return cls(value=value)

    def add(self, other):
        return Quantity.of(self.value + other.value)

    def subtract(self, other):
        return Quantity.of(self.value - other.value)
