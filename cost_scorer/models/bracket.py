"""
Revenue bracket models — business-scale tiers with cost targets.

A bracket describes what a business of a given size should achieve. Targets
come in two flavours:

  - **Ratio targets**: dimensionless "revenue ÷ cost" multipliers
    (higher is better). ``None`` means "not defined".
  - **Absolute targets**: monthly currency amounts. When present they are
    preferred over ratio targets, and the ratio targets can be re-derived
    from them with ``derive_multipliers_from_targets()``.

Brackets are owned by business settings and are read-only to the scoring
engine. Interpolated (synthetic) brackets record the labels they were built
from in ``interpolated_from``.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from cost_scorer.taxonomy.cost_taxonomy import CostCategory
from cost_scorer.utils.rounding import round_half_up_to

# Absolute-amount fields, in the order they are interpolated.
ABSOLUTE_TARGET_FIELDS: tuple[str, ...] = (
    "target_recommended_revenue",
    "target_production_revenue",
    "target_raw_material_cost",
    "target_sub_material_cost",
    "target_labor_cost",
    "target_overhead_cost",
)

# Category → (ratio target field, absolute cost target field)
CATEGORY_TARGET_FIELDS: dict[CostCategory, tuple[str, str]] = {
    CostCategory.RAW_MATERIAL: ("revenue_to_raw_material", "target_raw_material_cost"),
    CostCategory.SUB_MATERIAL: ("revenue_to_sub_material", "target_sub_material_cost"),
    CostCategory.LABOR:        ("production_to_labor",     "target_labor_cost"),
    CostCategory.OVERHEAD:     ("revenue_to_expense",      "target_overhead_cost"),
}

MULTIPLIER_DECIMALS = 2


class BracketTargets(BaseModel):
    """Ratio and absolute targets for one bracket.

    Attributes:
        revenue_to_raw_material: Revenue ÷ raw material cost target.
        revenue_to_sub_material: Revenue ÷ sub material cost target.
        production_to_labor: Production revenue ÷ labor cost target.
        revenue_to_expense: Revenue ÷ overhead (utilities) cost target.
        target_recommended_revenue: Monthly revenue at recommended price.
            Also the interpolation marker for the bracket.
        target_production_revenue: Monthly revenue at production price.
        target_raw_material_cost: Monthly raw material cost ceiling.
        target_sub_material_cost: Monthly sub material cost ceiling.
        target_labor_cost: Monthly labor cost ceiling.
        target_overhead_cost: Monthly overhead cost ceiling.
        waste_rate_target: Target waste rate in percent.
    """

    model_config = ConfigDict(frozen=True)

    revenue_to_raw_material: Optional[float] = None
    revenue_to_sub_material: Optional[float] = None
    production_to_labor: Optional[float] = None
    revenue_to_expense: Optional[float] = None

    target_recommended_revenue: Optional[float] = None
    target_production_revenue: Optional[float] = None
    target_raw_material_cost: Optional[float] = None
    target_sub_material_cost: Optional[float] = None
    target_labor_cost: Optional[float] = None
    target_overhead_cost: Optional[float] = None

    waste_rate_target: float = 0.0

    @field_validator(
        "revenue_to_raw_material", "revenue_to_sub_material",
        "production_to_labor", "revenue_to_expense",
        *ABSOLUTE_TARGET_FIELDS,
    )
    @classmethod
    def validate_non_negative(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v < 0:
            raise ValueError("Bracket targets must be non-negative.")
        return v

    def ratio_target(self, category: CostCategory) -> Optional[float]:
        return getattr(self, CATEGORY_TARGET_FIELDS[category][0])

    def absolute_target(self, category: CostCategory) -> Optional[float]:
        return getattr(self, CATEGORY_TARGET_FIELDS[category][1])


class RevenueBracket(BaseModel):
    """A configured business-scale tier.

    Attributes:
        threshold_revenue: Coarse monthly revenue at which the bracket becomes
            eligible. Only used when no bracket carries an absolute
            ``target_recommended_revenue``.
        label: Display label, e.g. ``"16억"``.
        targets: Ratio and absolute targets.
        interpolated_from: ``(lower_label, upper_label)`` for synthetic
            brackets produced by interpolation; ``None`` for configured ones.
    """

    model_config = ConfigDict(frozen=True)

    threshold_revenue: float = 0.0
    label: str
    targets: BracketTargets
    interpolated_from: Optional[tuple[str, str]] = None

    @property
    def ordering_key(self) -> float:
        """Sort key: the recommended-revenue marker if set, else the threshold."""
        marker = self.targets.target_recommended_revenue
        return marker if marker is not None else self.threshold_revenue

    @property
    def is_interpolated(self) -> bool:
        return self.interpolated_from is not None


def derive_multipliers_from_targets(bracket: RevenueBracket) -> RevenueBracket:
    """Return a copy of ``bracket`` with ratio targets recomputed from absolutes.

    Each ratio becomes ``target_production_revenue / target_<category>_cost``
    (rounded half-up to 2 decimals). ``target_recommended_revenue`` is used
    when the production revenue target is absent. A category whose absolute
    cost target is missing or zero gets ``None``.

    With no revenue target at all the bracket is returned unchanged.
    """
    t = bracket.targets
    revenue = (
        t.target_production_revenue
        if t.target_production_revenue is not None
        else t.target_recommended_revenue
    )
    if revenue is None:
        return bracket

    updates: dict[str, Optional[float]] = {}
    for ratio_field, cost_field in CATEGORY_TARGET_FIELDS.values():
        cost = getattr(t, cost_field)
        updates[ratio_field] = (
            round_half_up_to(revenue / cost, MULTIPLIER_DECIMALS)
            if cost is not None and cost > 0
            else None
        )

    return bracket.model_copy(update={"targets": t.model_copy(update=updates)})
