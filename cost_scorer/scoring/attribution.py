"""
Cost attribution: the four category cost bases for a period.

Steps
-----
1. Remove excluded product codes, classify the rest as raw/sub material and
   sum their tax-exclusive ``supply_amount``.
2. Inventory delta (optional)::

       consumed = beginning_value + period_purchases - ending_value

   applied per material class. Without an adjustment, consumed = purchases.
3. Deemed input-tax credit::

       deduction = round(raw_material_purchases * deemed_input_tax_rate)

   subtracted from the raw material base only. Sub material is never
   credited; this asymmetry is a business rule.
4. Labor: sum of ``total_pay`` when labor entries exist, otherwise
   ``round((raw + sub) * labor_cost_ratio)``. An empty labor list triggers
   the estimate.
5. Overhead: electricity + water + gas. No estimate.

Records passed in must already be filtered to the period.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Optional

from cost_scorer.models.records import (
    InventoryAdjustment,
    LaborEntry,
    PurchaseRecord,
    UtilityEntry,
)
from cost_scorer.models.result import CostBasis
from cost_scorer.models.settings import BusinessSettings
from cost_scorer.scoring.classifier import CostClassifier, partition_purchases
from cost_scorer.utils.rounding import round_half_up

logger = logging.getLogger(__name__)


def compute_cost_basis(
    purchases: Sequence[PurchaseRecord],
    labor: Sequence[LaborEntry],
    utilities: Sequence[UtilityEntry],
    settings: BusinessSettings,
    classifier: CostClassifier,
    inventory_adjustment: Optional[InventoryAdjustment] = None,
    estimate_labor: Optional[bool] = None,
) -> CostBasis:
    """Compute the cost bases for one period.

    Args:
        purchases:            Period purchase records.
        labor:                Period labor entries.
        utilities:            Period utility entries.
        settings:             Labor ratio, tax-credit rate and exclusion codes.
        classifier:           Raw/sub material classification rule.
        inventory_adjustment: Beginning/ending inventory valuations, if known.
        estimate_labor:       Force the labor decision. ``None`` (default)
                              estimates when ``labor`` is empty. Weekly
                              decomposition passes the full-period decision
                              so weeks without entries are not estimated
                              while others are summed.

    Returns:
        ``CostBasis`` for the period.
    """
    raw_items, sub_items = partition_purchases(
        purchases, classifier, settings.cost_exclusion_codes
    )
    raw_purchases = sum(p.supply_amount for p in raw_items)
    sub_purchases = sum(p.supply_amount for p in sub_items)

    if inventory_adjustment is not None:
        raw_consumed = (
            inventory_adjustment.beginning_raw_inventory_value
            + raw_purchases
            - inventory_adjustment.ending_raw_inventory_value
        )
        sub_consumed = (
            inventory_adjustment.beginning_sub_inventory_value
            + sub_purchases
            - inventory_adjustment.ending_sub_inventory_value
        )
    else:
        raw_consumed = raw_purchases
        sub_consumed = sub_purchases

    tax_credit = round_half_up(raw_purchases * settings.deemed_input_tax_rate)
    raw_cost = raw_consumed - tax_credit
    sub_cost = sub_consumed

    if estimate_labor is None:
        estimate_labor = len(labor) == 0
    if estimate_labor:
        labor_cost: float = round_half_up((raw_cost + sub_cost) * settings.labor_cost_ratio)
    else:
        labor_cost = sum(entry.total_pay for entry in labor)

    overhead_cost = sum(u.total_cost for u in utilities)

    basis = CostBasis(
        raw_material=raw_cost,
        sub_material=sub_cost,
        labor=labor_cost,
        overhead=overhead_cost,
        raw_purchases=raw_purchases,
        sub_purchases=sub_purchases,
        tax_credit=tax_credit,
        labor_estimated=estimate_labor,
        inventory_adjusted=inventory_adjustment is not None,
    )
    logger.debug(
        "Cost basis: raw=%s sub=%s labor=%s%s overhead=%s tax_credit=%s",
        basis.raw_material, basis.sub_material, basis.labor,
        " (estimated)" if estimate_labor else "", basis.overhead, tax_credit,
    )
    return basis
