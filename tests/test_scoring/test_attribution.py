"""
Tests for cost_scorer/scoring/attribution.py.

Covers the deemed input-tax credit, inventory delta, labor fallback,
exclusion codes and the overhead sum.
"""

from __future__ import annotations

import pytest

from cost_scorer.models.records import (
    InventoryAdjustment,
    LaborEntry,
    PurchaseRecord,
    UtilityEntry,
)
from cost_scorer.models.settings import BusinessSettings
from cost_scorer.scoring.attribution import compute_cost_basis
from cost_scorer.scoring.classifier import KeywordCostClassifier

_CLASSIFIER = KeywordCostClassifier()


def _make_purchase(code: str, amount: float, name: str = "") -> PurchaseRecord:
    return PurchaseRecord(date="2025-03-04", product_code=code, product_name=name, supply_amount=amount)


def _make_settings(**kwargs) -> BusinessSettings:
    defaults = {"labor_cost_ratio": 0.25, "deemed_input_tax_rate": 0.028}
    defaults.update(kwargs)
    return BusinessSettings(**defaults)


_PURCHASES = [
    _make_purchase("RM-ONION", 15_000_000),
    _make_purchase("RM-BEEF", 10_000_000),
    _make_purchase("ZIP_S_001", 3_000_000),
]


class TestTaxCredit:
    def test_credit_subtracted_from_raw_only(self):
        basis = compute_cost_basis(
            _PURCHASES, [LaborEntry(date="2025-03-07", total_pay=1)], [],
            _make_settings(), _CLASSIFIER,
        )
        assert basis.tax_credit == 700_000
        assert basis.raw_material == pytest.approx(24_300_000)
        assert basis.sub_material == pytest.approx(3_000_000)
        assert basis.raw_purchases == pytest.approx(25_000_000)

    def test_zero_rate_no_credit(self):
        basis = compute_cost_basis(
            _PURCHASES, [], [], _make_settings(deemed_input_tax_rate=0.0), _CLASSIFIER,
        )
        assert basis.tax_credit == 0
        assert basis.raw_material == pytest.approx(25_000_000)


class TestInventoryAdjustment:
    def test_consumption_replaces_purchases(self):
        adj = InventoryAdjustment(
            beginning_raw_inventory_value=5_000_000,
            ending_raw_inventory_value=3_000_000,
            beginning_sub_inventory_value=1_000_000,
            ending_sub_inventory_value=500_000,
        )
        basis = compute_cost_basis(
            _PURCHASES, [], [], _make_settings(), _CLASSIFIER, inventory_adjustment=adj,
        )
        # raw: 5M + 25M - 3M = 27M, minus credit on purchases (700k)
        assert basis.raw_material == pytest.approx(26_300_000)
        assert basis.sub_material == pytest.approx(3_500_000)
        assert basis.inventory_adjusted

    def test_without_adjustment_flag_is_false(self):
        basis = compute_cost_basis(_PURCHASES, [], [], _make_settings(), _CLASSIFIER)
        assert not basis.inventory_adjusted


class TestLabor:
    def test_estimated_when_no_entries(self):
        basis = compute_cost_basis(_PURCHASES, [], [], _make_settings(), _CLASSIFIER)
        # (24.3M + 3M) * 0.25
        assert basis.labor == 6_825_000
        assert basis.labor_estimated

    def test_summed_when_entries_exist(self):
        labor = [
            LaborEntry(date="2025-03-07", total_pay=9_000_000),
            LaborEntry(date="2025-03-12", total_pay=9_000_000),
        ]
        basis = compute_cost_basis(_PURCHASES, labor, [], _make_settings(), _CLASSIFIER)
        assert basis.labor == pytest.approx(18_000_000)
        assert not basis.labor_estimated

    def test_forced_no_estimate_gives_zero(self):
        basis = compute_cost_basis(
            _PURCHASES, [], [], _make_settings(), _CLASSIFIER, estimate_labor=False,
        )
        assert basis.labor == 0
        assert not basis.labor_estimated


class TestExclusionsAndOverhead:
    def test_excluded_codes_are_not_cost(self):
        settings = _make_settings(
            deemed_input_tax_rate=0.0, cost_exclusion_codes=frozenset({"RM-BEEF"}),
        )
        basis = compute_cost_basis(_PURCHASES, [], [], settings, _CLASSIFIER)
        assert basis.raw_material == pytest.approx(15_000_000)

    def test_overhead_sums_utility_components(self):
        utilities = [
            UtilityEntry(date="2025-03-11", elec_cost=2_500_000, water_cost=500_000, gas_cost=1_000_000),
            UtilityEntry(date="2025-03-12", elec_cost=100_000),
        ]
        basis = compute_cost_basis([], [], utilities, _make_settings(), _CLASSIFIER)
        assert basis.overhead == pytest.approx(4_100_000)
        assert basis.total == pytest.approx(4_100_000)
