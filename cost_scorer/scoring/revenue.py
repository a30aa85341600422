"""
Revenue reconciliation collaborator.

The engine needs two scalars per period: production revenue (what the
category ratios are measured against) and recommended/settlement revenue
(the interpolation axis for brackets). How those are reconciled from channel
data is business-specific, so the engine accepts any ``RevenueReconciler``
callable. ``reconcile_revenue`` is the default.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from cost_scorer.models.records import SalesRecord


@dataclass(frozen=True)
class RevenueFigures:
    """Reconciled revenue for a set of sales records.

    Attributes:
        production:  Revenue at production price.
        recommended: Revenue at recommended price, net of promotions and
                     channel fees.
    """

    production: float
    recommended: float


RevenueReconciler = Callable[[Sequence[SalesRecord]], RevenueFigures]


def reconcile_revenue(sales: Sequence[SalesRecord]) -> RevenueFigures:
    """Sum production revenue and net recommended revenue over ``sales``.

    Net recommended revenue per record is
    ``recommended_revenue - promotion_discount - platform_fee``, floored at 0.
    Records without a recommended figure contribute their production revenue
    instead.
    """
    production = sum(s.production_revenue for s in sales)
    recommended = sum(
        max(0.0, _gross_recommended(s) - s.promotion_discount - s.platform_fee)
        for s in sales
    )
    return RevenueFigures(production=production, recommended=recommended)


def _gross_recommended(sale: SalesRecord) -> float:
    if sale.recommended_revenue is None:
        return sale.production_revenue
    return sale.recommended_revenue
