"""
Per-call business settings snapshot.

``BusinessSettings`` bundles everything the scoring engine needs from
configuration: the bracket list and the handful of cost constants. It is
frozen and passed explicitly into every engine call, so concurrent callers
with different settings never share state.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator

from cost_scorer.models.bracket import RevenueBracket


class BusinessSettings(BaseModel):
    """Immutable configuration snapshot for one scoring computation.

    Attributes:
        brackets: Revenue brackets in declaration order. Declaration order is
            the tie-break when two brackets share an ordering key.
        labor_cost_ratio: Labor estimate as a fraction of material cost,
            used only when a period has no labor records.
        deemed_input_tax_rate: Deemed input-tax credit rate applied to raw
            material purchases.
        cost_exclusion_codes: Product codes removed from cost computation.
    """

    model_config = ConfigDict(frozen=True)

    brackets: tuple[RevenueBracket, ...] = ()
    labor_cost_ratio: float = 0.25
    deemed_input_tax_rate: float = 0.0
    cost_exclusion_codes: frozenset[str] = frozenset()

    @field_validator("labor_cost_ratio", "deemed_input_tax_rate")
    @classmethod
    def validate_fraction(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"Rate must be in [0.0, 1.0], got {v}.")
        return v
