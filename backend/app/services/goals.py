# backend/app/services/goals.py
"""
Goal projection.

Answers "how many months of pure contribution reach the target?" for a
savings goal. The model is deliberately conservative: a flat monthly
contribution with no investment growth, no interest and no inflation.

Usage:
    from app.services.goals import GoalProjector

    projector = GoalProjector()
    months = projector.months_to_target(Decimal("1200"), Decimal("100"))  # 12
    projector.months_to_years_months(months)  # YearsMonths(years=1, remainder_months=0)
"""

import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Literal

from app.services.valuation.types import GoalSpec

# Sentinel returned when a goal can never be reached (no contribution)
UNREACHABLE: Literal["unreachable"] = "unreachable"


@dataclass(frozen=True)
class YearsMonths:
    """A month count split into whole years and leftover months."""

    years: int
    remainder_months: int


@dataclass(frozen=True)
class GoalProjection:
    """
    Projection result for one goal.

    Attributes:
        goal: The goal that was projected
        months: Months to reach the target (math.inf if unreachable)
        years_months: Same duration as years + months, or UNREACHABLE
    """

    goal: GoalSpec
    months: int | float
    years_months: YearsMonths | Literal["unreachable"]

    @property
    def is_reachable(self) -> bool:
        return not math.isinf(self.months)


class GoalProjector:
    """
    Stateless calculator for time-to-target projections.

    Note:
        Targets below zero count as already met (0 months).
        A monthly contribution of zero or less never reaches a positive
        target, which is reported as math.inf / UNREACHABLE rather than
        raised as an error.
    """

    def months_to_target(self, target: Decimal, monthly: Decimal) -> int | float:
        """
        Months of contribution needed to reach `target`.

        Returns:
            Whole number of months (rounded up), or math.inf
        """
        if monthly <= 0:
            return math.inf
        remaining = max(Decimal("0"), target)
        return math.ceil(remaining / monthly)

    def months_to_years_months(
            self,
            months: int | float,
    ) -> YearsMonths | Literal["unreachable"]:
        """Split a month count into years and remaining months."""
        if math.isinf(months):
            return UNREACHABLE
        months = int(months)
        return YearsMonths(years=months // 12, remainder_months=months % 12)

    def project(self, goal: GoalSpec) -> GoalProjection:
        months = self.months_to_target(goal.target, goal.monthly)
        return GoalProjection(
            goal=goal,
            months=months,
            years_months=self.months_to_years_months(months),
        )
