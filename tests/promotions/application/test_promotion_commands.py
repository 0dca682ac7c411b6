"""Application tests for promotion scheduling and activation."""

from datetime import UTC, datetime, timedelta

import pytest
from promotions.promotion.management import (
    ActivatePromotion,
    CreatePromotion,
    DeactivatePromotion,
    UpdatePromotion,
)
from promotions.promotion.promotion import Promotion
from promotions.shared.discount_rule import DiscountType
from protean import current_domain
from protean.exceptions import ValidationError


def _create_promotion(name="Autumn Sale", start_offset=timedelta(days=-1), end_offset=timedelta(days=7)):
    now = datetime.now(UTC)
    return current_domain.process(
        CreatePromotion(
            name=name,
            description="10% off everything",
            discount_type=DiscountType.PERCENTAGE.value,
            discount_value=10.0,
            start_date=now + start_offset,
            end_date=now + end_offset,
        ),
        asynchronous=False,
    )


def _repo():
    return current_domain.repository_for(Promotion)


class TestPromotionCommands:
    def test_create_persists(self):
        promotion_id = _create_promotion()
        promotion = _repo().get(promotion_id)
        assert promotion.name == "Autumn Sale"
        assert promotion.is_active()

    def test_end_before_start_rejected(self):
        with pytest.raises(ValidationError):
            _create_promotion(start_offset=timedelta(days=3), end_offset=timedelta(days=1))

    def test_update(self):
        promotion_id = _create_promotion()
        current_domain.process(
            UpdatePromotion(promotion_id=promotion_id, name="Winter Sale", description="Cold deals"),
            asynchronous=False,
        )
        promotion = _repo().get(promotion_id)
        assert promotion.name == "Winter Sale"
        assert promotion.description == "Cold deals"

    def test_deactivate_and_activate(self):
        promotion_id = _create_promotion()
        current_domain.process(DeactivatePromotion(promotion_id=promotion_id), asynchronous=False)
        assert not _repo().get(promotion_id).is_active()

        current_domain.process(ActivatePromotion(promotion_id=promotion_id), asynchronous=False)
        assert _repo().get(promotion_id).is_active()


class TestFindActive:
    def test_only_switched_on_promotions_inside_window(self):
        running = _create_promotion(name="Running")
        _create_promotion(name="Upcoming", start_offset=timedelta(days=1), end_offset=timedelta(days=5))
        _create_promotion(name="Finished", start_offset=timedelta(days=-9), end_offset=timedelta(days=-2))
        switched_off = _create_promotion(name="Switched Off")
        current_domain.process(DeactivatePromotion(promotion_id=switched_off), asynchronous=False)

        assert [str(p.id) for p in _repo().find_active()] == [running]
