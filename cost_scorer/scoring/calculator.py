"""
Per-category score computation.

Formula
-------
    actual_multiplier = revenue / cost                      (cost > 0)
                      = Capped(150)                         (cost == 0, revenue > 0)
                      = Undefined (0)                       (cost == 0, revenue == 0)

    score       = round(actual_multiplier / target_multiplier * 100)   (target > 0)
                = 150 if cost == 0 else 0                              (no target)

    target_cost = absolute_target                            (if the bracket has one)
                = round(revenue / target_multiplier)         (target > 0)
                = 0

    surplus     = target_cost - cost        (positive = under budget)

Status bands (fixed, half-open at the lower edge)
-------------------------------------------------
    score >= 110 → excellent
    score >= 100 → good
    score >=  90 → warning
    otherwise    → danger

The 150 cap is the single place where the "cost-free operation" policy
lives. Display clamping, if any, is the presentation layer's job.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from cost_scorer.models.result import CategoryScore
from cost_scorer.taxonomy.cost_taxonomy import CostCategory, MultiplierKind, ScoreStatus
from cost_scorer.utils.rounding import round_half_up, round_half_up_to

CAPPED_MULTIPLIER = 150.0
CAPPED_SCORE = 150

EXCELLENT_THRESHOLD = 110
GOOD_THRESHOLD = 100
WARNING_THRESHOLD = 90


@dataclass(frozen=True)
class Multiplier:
    """An actual revenue ÷ cost multiplier tagged with how it was obtained."""

    kind: MultiplierKind
    value: float

    @classmethod
    def measured(cls, revenue: float, cost: float) -> "Multiplier":
        return cls(MultiplierKind.MEASURED, revenue / cost)

    @classmethod
    def capped(cls) -> "Multiplier":
        return cls(MultiplierKind.CAPPED, CAPPED_MULTIPLIER)

    @classmethod
    def undefined(cls) -> "Multiplier":
        return cls(MultiplierKind.UNDEFINED, 0.0)


def actual_multiplier(revenue: float, cost: float) -> Multiplier:
    """Revenue ÷ cost, with sentinels for zero cost."""
    if cost > 0:
        return Multiplier.measured(revenue, cost)
    if revenue > 0:
        return Multiplier.capped()
    return Multiplier.undefined()


def status_for_score(score: int) -> ScoreStatus:
    """Map a score to its status band."""
    if score >= EXCELLENT_THRESHOLD:
        return ScoreStatus.EXCELLENT
    if score >= GOOD_THRESHOLD:
        return ScoreStatus.GOOD
    if score >= WARNING_THRESHOLD:
        return ScoreStatus.WARNING
    return ScoreStatus.DANGER


def compute_item(
    category: CostCategory,
    revenue: float,
    cost: float,
    target_multiplier: Optional[float],
    absolute_target: Optional[float] = None,
) -> CategoryScore:
    """Score one cost category.

    Args:
        category:          Which category is being scored.
        revenue:           Period revenue.
        cost:              Period cost base for the category.
        target_multiplier: Ratio target; ``None`` is treated as "no target" (0).
        absolute_target:   Already-prorated absolute target cost, if the
                           bracket carries one. Preferred over the ratio-derived
                           target cost.

    Returns:
        A fully populated ``CategoryScore``.
    """
    target = target_multiplier or 0.0
    multiplier = actual_multiplier(revenue, cost)

    if target > 0:
        score = round_half_up(multiplier.value / target * 100)
    else:
        score = CAPPED_SCORE if cost == 0 else 0

    if absolute_target is not None:
        target_cost: float = absolute_target
    elif target > 0:
        target_cost = round_half_up(revenue / target)
    else:
        target_cost = 0

    return CategoryScore(
        category=category,
        actual_multiplier=round_half_up_to(multiplier.value, 2),
        multiplier_kind=multiplier.kind,
        target_multiplier=target,
        score=score,
        status=status_for_score(score),
        actual_cost=cost,
        target_cost=target_cost,
        surplus=target_cost - cost,
    )


def zero_item(category: CostCategory, cost: float, target_multiplier: Optional[float]) -> CategoryScore:
    """A zero score for periods without revenue (keeps weekly series dense)."""
    return CategoryScore(
        category=category,
        actual_multiplier=0.0,
        multiplier_kind=MultiplierKind.UNDEFINED,
        target_multiplier=target_multiplier or 0.0,
        score=0,
        status=ScoreStatus.DANGER,
        actual_cost=cost,
        target_cost=0,
        surplus=-cost,
    )


def overall_score(items: tuple[CategoryScore, ...] | list[CategoryScore]) -> int:
    """Rounded mean of already-rounded category scores (0 for no items)."""
    if not items:
        return 0
    return round_half_up(sum(it.score for it in items) / len(items))
