"""
Scoring engine: full-period and weekly category scores.

Full period
-----------
1. Filter the sales, purchase, labor and utility streams to
   ``[range_start, range_end]``. Production records are informational and
   never enter the score.
2. Reconcile revenue into production and recommended figures.
3. Normalize to 30 days: ``monthly = round(revenue * 30 / period_days)``,
   where ``period_days`` is the inclusive day count of the window.
4. Resolve the active bracket (threshold or interpolated).
5. Compute the cost basis (inventory delta, tax credit, labor fallback).
6. Prorate each absolute target by ``period_days / 30``.
7. Score the four categories; overall = round(mean of rounded scores).

Returns ``None`` when no brackets are configured or production revenue is 0:
that is "not enough data to score", not an error.

Weekly
------
The bracket resolved for the full period is reused for every week. Each
Monday-anchored week gets its own revenue and cost basis, scored against the
bracket's *ratio* targets only (no absolute targets, no proration). Weeks
without revenue get four zero scores so the series stays dense, including
when the whole window has no revenue.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from cost_scorer.models.bracket import RevenueBracket
from cost_scorer.models.records import (
    InventoryAdjustment,
    LaborEntry,
    OperationalRecords,
    PurchaseRecord,
    SalesRecord,
    UtilityEntry,
)
from cost_scorer.models.result import CategoryScore, CostBasis, ScoringResult, WeeklyScoreResult
from cost_scorer.models.settings import BusinessSettings
from cost_scorer.scoring.attribution import compute_cost_basis
from cost_scorer.scoring.brackets import resolve_active_bracket
from cost_scorer.scoring.calculator import compute_item, overall_score, zero_item
from cost_scorer.scoring.classifier import CostClassifier, KeywordCostClassifier
from cost_scorer.scoring.periods import filter_by_range, group_by_week
from cost_scorer.scoring.revenue import RevenueFigures, RevenueReconciler, reconcile_revenue
from cost_scorer.taxonomy.cost_taxonomy import SCORED_CATEGORIES
from cost_scorer.utils.rounding import round_half_up
from cost_scorer.utils.time_utils import inclusive_day_count, week_key_to_label

logger = logging.getLogger(__name__)

DAYS_PER_MONTH = 30


@dataclass(frozen=True)
class _PeriodContext:
    """Filtered records, revenue and active bracket for one window."""

    sales: list[SalesRecord]
    purchases: list[PurchaseRecord]
    labor: list[LaborEntry]
    utilities: list[UtilityEntry]
    revenue: RevenueFigures
    period_days: int
    monthly_revenue: int
    monthly_recommended_revenue: int
    bracket: Optional[RevenueBracket]


def compute_full_period_score(
    records: OperationalRecords,
    settings: BusinessSettings,
    range_start: str,
    range_end: str,
    range_days: Optional[int] = None,
    inventory_adjustment: Optional[InventoryAdjustment] = None,
    classifier: Optional[CostClassifier] = None,
    revenue_reconciler: Optional[RevenueReconciler] = None,
) -> Optional[ScoringResult]:
    """Score the four cost categories over ``[range_start, range_end]``.

    Args:
        records:              All operational record streams.
        settings:             Immutable settings snapshot (brackets, rates).
        range_start:          Inclusive window start, ``YYYY-MM-DD``.
        range_end:            Inclusive window end, ``YYYY-MM-DD``.
        range_days:           Caller's idea of the window length. The
                              inclusive day count of the window is always
                              used; a disagreeing value is logged.
        inventory_adjustment: Beginning/ending inventory valuations.
        classifier:           Raw/sub rule; defaults to ``KeywordCostClassifier()``.
        revenue_reconciler:   Revenue collaborator; defaults to ``reconcile_revenue``.

    Returns:
        ``ScoringResult``, or ``None`` if no brackets are configured or the
        window has zero production revenue.

    Raises:
        ValueError: If the window is malformed or ``range_days < 1``.
    """
    if range_days is not None and range_days < 1:
        raise ValueError(f"range_days must be >= 1, got {range_days}")

    classifier = classifier or KeywordCostClassifier()
    ctx = _build_context(records, settings, range_start, range_end, revenue_reconciler)

    if range_days is not None and range_days != ctx.period_days:
        logger.warning(
            "range_days=%d disagrees with window %s..%s (%d days); using %d.",
            range_days, range_start, range_end, ctx.period_days, ctx.period_days,
        )

    if ctx.bracket is None:
        logger.info("No revenue brackets configured; skipping scoring.")
        return None
    if ctx.revenue.production == 0:
        logger.info("Zero revenue in %s..%s; skipping scoring.", range_start, range_end)
        return None

    basis = compute_cost_basis(
        ctx.purchases, ctx.labor, ctx.utilities, settings, classifier,
        inventory_adjustment=inventory_adjustment,
    )

    targets = ctx.bracket.targets
    items = tuple(
        compute_item(
            category,
            ctx.revenue.production,
            basis.for_category(category),
            targets.ratio_target(category),
            prorate_target(targets.absolute_target(category), ctx.period_days),
        )
        for category in SCORED_CATEGORIES
    )

    result = ScoringResult(
        active_bracket=ctx.bracket,
        period_revenue=ctx.revenue.production,
        monthly_revenue_estimate=ctx.monthly_revenue,
        recommended_revenue=ctx.revenue.recommended,
        monthly_recommended_revenue=ctx.monthly_recommended_revenue,
        period_days=ctx.period_days,
        overall_score=overall_score(items),
        category_scores=items,
        total_surplus=sum(it.surplus for it in items),
        total_cost=basis.total,
        tax_credit_applied=basis.tax_credit,
        cost_basis=basis,
    )
    logger.info(
        "Scored %s..%s against bracket '%s': overall=%d",
        range_start, range_end, ctx.bracket.label, result.overall_score,
    )
    return result


def compute_weekly_scores(
    records: OperationalRecords,
    settings: BusinessSettings,
    range_start: str,
    range_end: str,
    classifier: Optional[CostClassifier] = None,
    revenue_reconciler: Optional[RevenueReconciler] = None,
) -> list[WeeklyScoreResult]:
    """Score each Monday-anchored week in the window against the period bracket.

    Returns:
        One ``WeeklyScoreResult`` per week present in any filtered record
        stream, in chronological order. Empty only when no brackets are
        configured.
    """
    classifier = classifier or KeywordCostClassifier()
    reconciler = revenue_reconciler or reconcile_revenue
    ctx = _build_context(records, settings, range_start, range_end, reconciler)

    if ctx.bracket is None:
        return []

    sales_weeks = group_by_week(ctx.sales)
    purchase_weeks = group_by_week(ctx.purchases)
    labor_weeks = group_by_week(ctx.labor)
    utility_weeks = group_by_week(ctx.utilities)

    week_keys = sorted(
        set(sales_weeks) | set(purchase_weeks) | set(labor_weeks) | set(utility_weeks)
    )
    # Labor is estimated for every week or for none, decided over the period.
    estimate_labor = len(ctx.labor) == 0

    results: list[WeeklyScoreResult] = []
    for week_key in week_keys:
        revenue = reconciler(sales_weeks.get(week_key, [])).production
        basis = compute_cost_basis(
            purchase_weeks.get(week_key, []),
            labor_weeks.get(week_key, []),
            utility_weeks.get(week_key, []),
            settings,
            classifier,
            estimate_labor=estimate_labor,
        )
        items = _score_week(revenue, basis, ctx.bracket)
        results.append(WeeklyScoreResult(
            week_key=week_key,
            week_label=week_key_to_label(week_key),
            revenue=revenue,
            category_scores=items,
            overall_score=overall_score(items),
        ))

    logger.debug("Computed %d weekly score rows for %s..%s", len(results), range_start, range_end)
    return results


def prorate_target(monthly_target: Optional[float], period_days: int) -> Optional[float]:
    """Scale a 30-day target to ``period_days`` (rounded half-up); ``None`` passes through."""
    if monthly_target is None:
        return None
    return round_half_up(monthly_target * period_days / DAYS_PER_MONTH)


def monthly_equivalent(amount: float, period_days: int) -> int:
    """Normalize a period amount to a 30-day month (rounded half-up)."""
    return round_half_up(amount * DAYS_PER_MONTH / period_days)


# ── Private helpers ────────────────────────────────────────────────────────────

def _build_context(
    records: OperationalRecords,
    settings: BusinessSettings,
    range_start: str,
    range_end: str,
    revenue_reconciler: Optional[RevenueReconciler],
) -> _PeriodContext:
    period_days = inclusive_day_count(range_start, range_end)
    sales = filter_by_range(records.sales, range_start, range_end)
    revenue = (revenue_reconciler or reconcile_revenue)(sales)

    monthly_revenue = monthly_equivalent(revenue.production, period_days)
    monthly_recommended = monthly_equivalent(revenue.recommended, period_days)

    return _PeriodContext(
        sales=sales,
        purchases=filter_by_range(records.purchases, range_start, range_end),
        labor=filter_by_range(records.labor, range_start, range_end),
        utilities=filter_by_range(records.utilities, range_start, range_end),
        revenue=revenue,
        period_days=period_days,
        monthly_revenue=monthly_revenue,
        monthly_recommended_revenue=monthly_recommended,
        bracket=resolve_active_bracket(settings.brackets, monthly_revenue, monthly_recommended),
    )


def _score_week(
    revenue: float,
    basis: CostBasis,
    bracket: RevenueBracket,
) -> tuple[CategoryScore, ...]:
    targets = bracket.targets
    if revenue == 0:
        return tuple(
            zero_item(c, basis.for_category(c), targets.ratio_target(c))
            for c in SCORED_CATEGORIES
        )
    return tuple(
        compute_item(c, revenue, basis.for_category(c), targets.ratio_target(c))
        for c in SCORED_CATEGORIES
    )
