"""Coupon aggregate (CQRS) — a redeemable code wrapping a DiscountRule.

A coupon can be redeemed while all four checks hold: it is active, it has
not expired, it is not exhausted (max_uses), and the redeeming customer has
not hit max_uses_per_customer. Usage counters only ever grow, and both the
global and per-customer counters move together in ``use()``.

Codes are case-insensitive: they are stored trimmed and upper-cased.
"""

import re
import secrets
from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, HasMany, Identifier, Integer, String, Text, ValueObject

from promotions.coupon.events import CouponCreated, CouponDeactivated, CouponReactivated, CouponUsed
from promotions.domain import promotions
from promotions.shared.dates import as_utc
from promotions.shared.discount_rule import DiscountRule

_CODE_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
_CODE_PATTERN = re.compile(r"^[A-Z0-9]+$")
MIN_CODE_LENGTH = 4
MAX_CODE_LENGTH = 20
DEFAULT_CODE_LENGTH = 8


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@promotions.value_object(part_of="Coupon")
class CouponCode:
    """A normalized coupon code: 4-20 upper-case letters and digits."""

    value = String(required=True, max_length=255)

    @invariant.post
    def code_must_be_well_formed(self):
        if not MIN_CODE_LENGTH <= len(self.value) <= MAX_CODE_LENGTH:
            raise ValidationError(
                {"code": [f"Coupon code must be between {MIN_CODE_LENGTH} and {MAX_CODE_LENGTH} characters"]}
            )
        if not _CODE_PATTERN.match(self.value):
            raise ValidationError({"code": ["Coupon code can only contain letters and numbers"]})

    @classmethod
    def of(cls, raw):
        if raw is None or not str(raw).strip():
            raise ValidationError({"code": ["Coupon code cannot be empty"]})
        return cls(value=str(raw).strip().upper())

    @classmethod
    def generate(cls, length=DEFAULT_CODE_LENGTH):
        if not MIN_CODE_LENGTH <= length <= MAX_CODE_LENGTH:
            raise ValidationError(
                {"code": [f"Code length must be between {MIN_CODE_LENGTH} and {MAX_CODE_LENGTH}"]}
            )
        return cls(value="".join(secrets.choice(_CODE_ALPHABET) for _ in range(length)))

    @classmethod
    def generate_with_prefix(cls, prefix, length=4):
        return cls.of(f"{prefix}{cls.generate(length).value}")


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@promotions.entity(part_of="Coupon")
class CouponUsage:
    """How many times one customer has redeemed the coupon."""

    customer_id = Identifier(required=True)
    use_count = Integer(default=0, min_value=0)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@promotions.aggregate
class Coupon:
    code = String(required=True, max_length=MAX_CODE_LENGTH)
    description = Text()
    discount_rule = ValueObject(DiscountRule, required=True)
    expiry_date = DateTime(required=True)
    max_uses = Integer(min_value=1)  # None means unlimited
    max_uses_per_customer = Integer(min_value=1)
    usage_count = Integer(default=0, min_value=0)
    usages = HasMany(CouponUsage)
    active = Boolean(default=True)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def usage_cannot_exceed_max_uses(self):
        if self.max_uses is not None and (self.usage_count or 0) > self.max_uses:
            raise ValidationError({"max_uses": ["Coupon has reached maximum uses"]})

    @invariant.post
    def customer_usage_cannot_exceed_limit(self):
        if self.max_uses_per_customer is None:
            return
        for usage in self.usages or []:
            if usage.use_count > self.max_uses_per_customer:
                raise ValidationError({"max_uses_per_customer": ["Customer has reached maximum uses for this coupon"]})

    # -------------------------------------------------------------------
    # Factories
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        code,
        description,
        discount_rule,
        expiry_date,
        max_uses=None,
        max_uses_per_customer=None,
    ):
        now = datetime.now(UTC)
        coupon = cls(
            code=CouponCode.of(code).value,
            description=description,
            discount_rule=discount_rule,
            expiry_date=as_utc(expiry_date),
            max_uses=max_uses,
            max_uses_per_customer=max_uses_per_customer,
            usage_count=0,
            active=True,
            created_at=now,
            updated_at=now,
        )
        coupon.raise_(
            CouponCreated(
                coupon_id=str(coupon.id),
                code=coupon.code,
                discount_type=discount_rule.discount_type,
                discount_value=discount_rule.value,
                expiry_date=coupon.expiry_date,
                max_uses=max_uses,
                max_uses_per_customer=max_uses_per_customer,
                created_at=now,
            )
        )
        return coupon

    @classmethod
    def create_single_use(cls, code, description, discount_rule, expiry_date):
        return cls.create(code, description, discount_rule, expiry_date, max_uses=1)

    @classmethod
    def create_unlimited(cls, code, description, discount_rule, expiry_date):
        return cls.create(code, description, discount_rule, expiry_date)

    @classmethod
    def create_with_per_customer_limit(
        cls, code, description, discount_rule, expiry_date, max_uses, max_uses_per_customer
    ):
        return cls.create(
            code,
            description,
            discount_rule,
            expiry_date,
            max_uses=max_uses,
            max_uses_per_customer=max_uses_per_customer,
        )

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def version(self) -> int:
        return self._version

    def _usage_for(self, customer_id):
        return next((u for u in self.usages if str(u.customer_id) == str(customer_id)), None)

    def uses_by(self, customer_id) -> int:
        usage = self._usage_for(customer_id)
        return usage.use_count if usage else 0

    def has_been_used_by(self, customer_id) -> bool:
        return self.uses_by(customer_id) > 0

    def is_expired(self) -> bool:
        return datetime.now(UTC) > as_utc(self.expiry_date)

    def is_exhausted(self) -> bool:
        return self.max_uses is not None and self.usage_count >= self.max_uses

    def is_single_use(self) -> bool:
        return self.max_uses == 1

    def is_valid(self) -> bool:
        """Active and not expired."""
        return self.active and not self.is_expired()

    def can_be_used(self) -> bool:
        return self.is_valid() and not self.is_exhausted()

    def _within_customer_limit(self, customer_id) -> bool:
        return self.max_uses_per_customer is None or self.uses_by(customer_id) < self.max_uses_per_customer

    def can_be_used_by(self, customer_id) -> bool:
        return self.can_be_used() and self._within_customer_limit(customer_id)

    def is_applicable_to(self, order_total) -> bool:
        return self.discount_rule.meets_minimum(order_total)

    def calculate_discount(self, order_total) -> float:
        if not self.is_applicable_to(order_total):
            return 0.0
        return self.discount_rule.calculate_discount(order_total)

    # -------------------------------------------------------------------
    # Redemption
    # -------------------------------------------------------------------
    def use(self, customer_id, order_id=None, discount_amount=0.0):
        """Redeem the coupon for a customer, failing with the first violated check."""
        if not self.active:
            raise ValidationError({"active": ["Coupon is not active"]})
        if self.is_expired():
            raise ValidationError({"expiry_date": ["Coupon has expired"]})
        if self.is_exhausted():
            raise ValidationError({"max_uses": ["Coupon has reached maximum uses"]})
        if not self._within_customer_limit(customer_id):
            raise ValidationError({"max_uses_per_customer": ["Customer has reached maximum uses for this coupon"]})

        now = datetime.now(UTC)
        with atomic_change(self):
            self.usage_count += 1
            usage = self._usage_for(customer_id)
            if usage is None:
                self.add_usages(CouponUsage(customer_id=customer_id, use_count=1))
            else:
                usage.use_count += 1
            self.updated_at = now

        self.raise_(
            CouponUsed(
                coupon_id=str(self.id),
                code=self.code,
                customer_id=str(customer_id),
                order_id=str(order_id) if order_id else None,
                discount_amount=discount_amount,
                usage_count=self.usage_count,
                used_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Activation
    # -------------------------------------------------------------------
    def deactivate(self):
        now = datetime.now(UTC)
        self.active = False
        self.updated_at = now
        self.raise_(CouponDeactivated(coupon_id=str(self.id), code=self.code, deactivated_at=now))

    def reactivate(self):
        now = datetime.now(UTC)
        self.active = True
        self.updated_at = now
        self.raise_(CouponReactivated(coupon_id=str(self.id), code=self.code, reactivated_at=now))
