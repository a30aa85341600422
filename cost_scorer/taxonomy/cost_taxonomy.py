"""
Cost taxonomy for performance scoring.

Two small vocabularies:
  - ``CostCategory``   — the four scored cost categories, in display order.
  - ``ScoreStatus``    — the band a category score falls into.

``MultiplierKind`` tags how an actual revenue/cost multiplier was obtained,
so sentinel values stay distinguishable from measured ones.

This module has NO imports from any other ``cost_scorer`` package.
"""

from enum import StrEnum


class CostCategory(StrEnum):
    """A scored cost category."""

    RAW_MATERIAL = "raw_material"
    """Ingredients and primary materials consumed in production."""

    SUB_MATERIAL = "sub_material"
    """Packaging and other secondary materials."""

    LABOR = "labor"
    """Direct labor pay."""

    OVERHEAD = "overhead"
    """Utilities: electricity, water and gas."""


# Fixed presentation / averaging order.
SCORED_CATEGORIES: tuple[CostCategory, ...] = (
    CostCategory.RAW_MATERIAL,
    CostCategory.SUB_MATERIAL,
    CostCategory.LABOR,
    CostCategory.OVERHEAD,
)


class ScoreStatus(StrEnum):
    """Performance band for a category score (100 = exactly on target)."""

    EXCELLENT = "excellent"
    GOOD = "good"
    WARNING = "warning"
    DANGER = "danger"


class MultiplierKind(StrEnum):
    """Provenance of an actual revenue ÷ cost multiplier."""

    MEASURED = "measured"
    """cost > 0; value is revenue / cost."""

    CAPPED = "capped"
    """cost == 0 with positive revenue; value is the off-scale cap."""

    UNDEFINED = "undefined"
    """cost == 0 and revenue == 0; value is 0."""
