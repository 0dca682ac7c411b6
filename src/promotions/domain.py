"""Promotions bounded context — discount rules, redeemable coupons and time-boxed promotions."""

from protean.domain import Domain
from shared.logging import configure_logging, get_logger

configure_logging()

promotions = Domain(name="promotions")

logger = get_logger(__name__)
