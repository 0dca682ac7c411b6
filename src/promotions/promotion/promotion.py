"""Promotion aggregate (CQRS) — a code-less discount that applies within a time window.

A promotion is active when the operator has not switched it off and the
current time lies within [start_date, end_date]. It has no usage counters and
applies to any order that meets the rule's minimum.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, String, Text, ValueObject

from promotions.domain import promotions
from promotions.promotion.events import (
    PromotionActivated,
    PromotionCreated,
    PromotionDeactivated,
    PromotionUpdated,
)
from promotions.shared.dates import as_utc
from promotions.shared.discount_rule import DiscountRule


@promotions.aggregate
class Promotion:
    name = String(required=True, max_length=255)
    description = Text()
    discount_rule = ValueObject(DiscountRule, required=True)
    start_date = DateTime(required=True)
    end_date = DateTime(required=True)
    manual_active = Boolean(default=True)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def end_date_cannot_precede_start_date(self):
        if self.start_date and self.end_date and as_utc(self.end_date) < as_utc(self.start_date):
            raise ValidationError({"end_date": ["End date cannot be before start date"]})

    @classmethod
    def create(cls, name, description, discount_rule, start_date, end_date):
        now = datetime.now(UTC)
        promotion = cls(
            name=name,
            description=description,
            discount_rule=discount_rule,
            start_date=as_utc(start_date),
            end_date=as_utc(end_date),
            manual_active=True,
            created_at=now,
            updated_at=now,
        )
        promotion.raise_(
            PromotionCreated(
                promotion_id=str(promotion.id),
                name=name,
                discount_type=discount_rule.discount_type,
                discount_value=discount_rule.value,
                start_date=promotion.start_date,
                end_date=promotion.end_date,
            )
        )
        return promotion

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def has_started(self) -> bool:
        return datetime.now(UTC) >= as_utc(self.start_date)

    def is_expired(self) -> bool:
        return datetime.now(UTC) > as_utc(self.end_date)

    def is_active(self) -> bool:
        if not self.manual_active:
            return False
        return self.has_started() and not self.is_expired()

    def is_applicable_to(self, order_total) -> bool:
        return self.is_active() and self.discount_rule.meets_minimum(order_total)

    def calculate_discount(self, order_total) -> float:
        if not self.is_active():
            return 0.0
        return self.discount_rule.calculate_discount(order_total)

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def activate(self):
        now = datetime.now(UTC)
        self.manual_active = True
        self.updated_at = now
        self.raise_(PromotionActivated(promotion_id=str(self.id), activated_at=now))

    def deactivate(self):
        now = datetime.now(UTC)
        self.manual_active = False
        self.updated_at = now
        self.raise_(PromotionDeactivated(promotion_id=str(self.id), deactivated_at=now))

    def update(self, name, description):
        if not name:
            raise ValidationError({"name": ["Name is required"]})

        self.name = name
        self.description = description
        self.updated_at = datetime.now(UTC)
        self.raise_(
            PromotionUpdated(
                promotion_id=str(self.id),
                name=name,
                description=description,
            )
        )
