"""Repository for the Promotion aggregate."""

from promotions.domain import promotions
from promotions.promotion.promotion import Promotion


@promotions.repository(part_of=Promotion)
class PromotionRepository:
    def find_active(self) -> list[Promotion]:
        """Promotions that are switched on and currently inside their date window."""
        candidates = self._dao.query.filter(manual_active=True).all().items
        return [p for p in candidates if p.is_active()]
