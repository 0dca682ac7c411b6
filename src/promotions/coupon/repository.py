"""Repository for the Coupon aggregate."""

from promotions.coupon.coupon import Coupon
from promotions.domain import promotions


@promotions.repository(part_of=Coupon)
class CouponRepository:
    def find_by_code(self, code) -> Coupon | None:
        """Find a coupon by code, ignoring case and surrounding whitespace."""
        coupons = self._dao.query.filter(code=str(code).strip().upper()).all().items
        return coupons[0] if coupons else None

    def exists_by_code(self, code) -> bool:
        return self.find_by_code(code) is not None
