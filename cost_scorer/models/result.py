"""
Scoring output models.

These are plain frozen dataclasses — engine outputs are never re-validated,
only read by the presentation layer and the exporters.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from cost_scorer.models.bracket import RevenueBracket
from cost_scorer.taxonomy.cost_taxonomy import CostCategory, MultiplierKind, ScoreStatus


@dataclass(frozen=True)
class CategoryScore:
    """Score for one cost category.

    Attributes:
        category:          Which cost category this is.
        actual_multiplier: Revenue ÷ cost, rounded to 2 decimals (or the
                           sentinel value, see ``multiplier_kind``).
        multiplier_kind:   Whether ``actual_multiplier`` was measured, capped
                           or undefined.
        target_multiplier: Ratio target used (0.0 when the bracket has none).
        score:             round(actual / target × 100), or a sentinel.
        status:            Band the score falls into.
        actual_cost:       Cost base for the period.
        target_cost:       Absolute (prorated) or ratio-derived target cost.
        surplus:           target_cost − actual_cost; positive = under budget.
    """

    category: CostCategory
    actual_multiplier: float
    multiplier_kind: MultiplierKind
    target_multiplier: float
    score: int
    status: ScoreStatus
    actual_cost: float
    target_cost: float
    surplus: float


@dataclass(frozen=True)
class CostBasis:
    """The four category cost bases for one period, after adjustments.

    Attributes:
        raw_material:        Raw material cost after inventory and tax credit.
        sub_material:        Sub material cost after inventory adjustment.
        labor:               Labor cost (actual or estimated).
        overhead:            Utility cost.
        raw_purchases:       Raw material purchases before adjustments.
        sub_purchases:       Sub material purchases before adjustments.
        tax_credit:          Deemed input-tax deduction taken from raw material.
        labor_estimated:     True when labor came from the ratio fallback.
        inventory_adjusted:  True when an inventory adjustment was applied.
    """

    raw_material: float
    sub_material: float
    labor: float
    overhead: float
    raw_purchases: float
    sub_purchases: float
    tax_credit: int
    labor_estimated: bool
    inventory_adjusted: bool

    @property
    def total(self) -> float:
        return self.raw_material + self.sub_material + self.labor + self.overhead

    def for_category(self, category: CostCategory) -> float:
        return {
            CostCategory.RAW_MATERIAL: self.raw_material,
            CostCategory.SUB_MATERIAL: self.sub_material,
            CostCategory.LABOR:        self.labor,
            CostCategory.OVERHEAD:     self.overhead,
        }[category]


@dataclass(frozen=True)
class ScoringResult:
    """Full-period scoring result.

    Attributes:
        active_bracket:              Configured or interpolated bracket used.
        period_revenue:              Production revenue in the window.
        monthly_revenue_estimate:    Production revenue normalized to 30 days.
        recommended_revenue:         Recommended (settlement) revenue in the window.
        monthly_recommended_revenue: Recommended revenue normalized to 30 days.
        period_days:                 Inclusive day count of the window.
        overall_score:               Rounded mean of the four category scores.
        category_scores:             One entry per category, fixed order.
        total_surplus:               Sum of category surpluses.
        total_cost:                  Sum of category cost bases.
        tax_credit_applied:          Deemed input-tax deduction.
        cost_basis:                  Full cost breakdown.
    """

    active_bracket: RevenueBracket
    period_revenue: float
    monthly_revenue_estimate: int
    recommended_revenue: float
    monthly_recommended_revenue: int
    period_days: int
    overall_score: int
    category_scores: tuple[CategoryScore, ...]
    total_surplus: float
    total_cost: float
    tax_credit_applied: int
    cost_basis: CostBasis

    def score_for(self, category: CostCategory) -> Optional[CategoryScore]:
        for item in self.category_scores:
            if item.category == category:
                return item
        return None


@dataclass(frozen=True)
class WeeklyScoreResult:
    """Scores for one Monday-anchored week, against the full-period bracket.

    Attributes:
        week_key:        Monday of the week, ``YYYY-MM-DD``.
        week_label:      ``"MM/DD~MM/DD"`` display label.
        revenue:         Production revenue in the week.
        category_scores: One entry per category, fixed order.
        overall_score:   Rounded mean of the four category scores.
    """

    week_key: str
    week_label: str
    revenue: float
    category_scores: tuple[CategoryScore, ...]
    overall_score: int

    def score_for(self, category: CostCategory) -> Optional[CategoryScore]:
        for item in self.category_scores:
            if item.category == category:
                return item
        return None
