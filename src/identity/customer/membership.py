"""Membership levels and the calculator that maps spending to a level.

Spending bands are half-open intervals on the customer's cumulative spending:

    NORMAL      [0, 10000)        0% discount
    SILVER      [10000, 30000)    3% discount
    GOLD        [30000, 100000)   5% discount
    PLATINUM    [100000, ...)     10% discount
"""

from decimal import Decimal
from enum import Enum

from shared.money import DEFAULT_CURRENCY, to_decimal

from identity.shared.money import Money


class MemberLevel(Enum):
    """Enumeration of membership levels, lowest first."""

    NORMAL = "Normal"
    SILVER = "Silver"
    GOLD = "Gold"
    PLATINUM = "Platinum"


# (level, lower bound of its spending band, discount percentage), lowest first
_LEVEL_BANDS = [
    (MemberLevel.NORMAL, Decimal("0"), 0),
    (MemberLevel.SILVER, Decimal("10000"), 3),
    (MemberLevel.GOLD, Decimal("30000"), 5),
    (MemberLevel.PLATINUM, Decimal("100000"), 10),
]

_LEVEL_ORDER = [level for level, _, _ in _LEVEL_BANDS]

_BENEFITS = {
    MemberLevel.NORMAL: "Standard member: spend {to_next:,.0f} more to become a Silver member",
    MemberLevel.SILVER: "Silver member: 3% off every order",
    MemberLevel.GOLD: "Gold member: 5% off every order",
    MemberLevel.PLATINUM: "Platinum member: 10% off every order",
}


def level_rank(level) -> int:
    """Position of a level in the NORMAL < SILVER < GOLD < PLATINUM ordering."""
    return _LEVEL_ORDER.index(MemberLevel(level))


def _amount_of(spending):
    if isinstance(spending, Money):
        return spending.to_decimal()
    return to_decimal(spending)


class MemberLevelCalculator:
    """Stateless service mapping cumulative spending to a membership level."""

    def calculate_level(self, total_spending) -> MemberLevel:
        amount = _amount_of(total_spending)
        current = MemberLevel.NORMAL
        for level, lower_bound, _ in _LEVEL_BANDS:
            if amount >= lower_bound:
                current = level
        return current

    def get_discount_percentage(self, level) -> int:
        level = MemberLevel(level)
        return next(pct for lvl, _, pct in _LEVEL_BANDS if lvl == level)

    def spending_to_next_level(self, current_spending) -> Money:
        """Money still needed to reach the next band, zero at PLATINUM."""
        currency = current_spending.currency if isinstance(current_spending, Money) else DEFAULT_CURRENCY
        amount = _amount_of(current_spending)
        rank = level_rank(self.calculate_level(amount))

        if rank == len(_LEVEL_BANDS) - 1:
            return Money.zero(currency)

        next_lower_bound = _LEVEL_BANDS[rank + 1][1]
        return Money.of(next_lower_bound - amount, currency)

    def would_upgrade(self, current_level, new_total) -> bool:
        """True only if ``new_total`` lands in a strictly higher band than ``current_level``."""
        return level_rank(self.calculate_level(new_total)) > level_rank(current_level)

    def get_benefit_description(self, level, spending_to_next=None) -> str:
        """Human-readable perks of ``level``.

        For NORMAL members the text names the amount still needed for SILVER;
        pass ``spending_to_next`` (Money or a number), otherwise the full SILVER
        threshold is quoted.
        """
        level = MemberLevel(level)
        if level is MemberLevel.NORMAL:
            to_next = _LEVEL_BANDS[1][1] if spending_to_next is None else _amount_of(spending_to_next)
            return _BENEFITS[level].format(to_next=to_next)
        return _BENEFITS[level]
