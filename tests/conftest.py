"""
Shared pytest fixtures for the cost scorer test suite.

Provides:
  - Bracket fixtures: a three-tier interpolation ladder and a single
    ratio-only (threshold) bracket.
  - ``scenario_records``: a 10-day window with known sales, purchases,
    labor and utilities, used by the end-to-end engine tests.
  - Private record factories used by the fixtures above.
"""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from cost_scorer.models.bracket import BracketTargets, RevenueBracket
from cost_scorer.models.records import (
    LaborEntry,
    OperationalRecords,
    PurchaseRecord,
    SalesRecord,
    UtilityEntry,
)
from cost_scorer.models.settings import BusinessSettings

# Window used by the end-to-end scenario: Monday 2025-03-03 .. Wednesday 2025-03-12.
SCENARIO_START = "2025-03-03"
SCENARIO_END = "2025-03-12"


# ── Record factories ──────────────────────────────────────────────────────────

def _daily_sales(start: str, days: int, per_day: float) -> list[SalesRecord]:
    """``days`` consecutive sales records of ``per_day`` production/recommended revenue."""
    first = date.fromisoformat(start)
    return [
        SalesRecord(
            date=(first + timedelta(days=i)).isoformat(),
            production_revenue=per_day,
            recommended_revenue=per_day,
        )
        for i in range(days)
    ]


def _purchase(day: str, code: str, amount: float, name: str = "") -> PurchaseRecord:
    return PurchaseRecord(date=day, product_code=code, product_name=name, supply_amount=amount)


def _utility(day: str, elec: float = 0.0, water: float = 0.0, gas: float = 0.0) -> UtilityEntry:
    return UtilityEntry(date=day, elec_cost=elec, water_cost=water, gas_cost=gas)


def _labor(day: str, pay: float) -> LaborEntry:
    return LaborEntry(date=day, department="production", total_pay=pay)


# ── Bracket fixtures ──────────────────────────────────────────────────────────

@pytest.fixture
def ladder_brackets() -> list[RevenueBracket]:
    """Three brackets with recommended-revenue markers 1e9 < 2e9 < 3e9."""
    return [
        RevenueBracket(
            label="10억",
            threshold_revenue=1_000_000_000,
            targets=BracketTargets(
                revenue_to_raw_material=2.5,
                revenue_to_sub_material=25.0,
                production_to_labor=3.33,
                revenue_to_expense=8.33,
                target_recommended_revenue=1_000_000_000,
                target_production_revenue=500_000_000,
                target_raw_material_cost=200_000_000,
                target_sub_material_cost=20_000_000,
                target_labor_cost=150_000_000,
                target_overhead_cost=60_000_000,
                waste_rate_target=3.0,
            ),
        ),
        RevenueBracket(
            label="20억",
            threshold_revenue=2_000_000_000,
            targets=BracketTargets(
                revenue_to_raw_material=3.33,
                revenue_to_sub_material=33.33,
                production_to_labor=4.0,
                revenue_to_expense=10.0,
                target_recommended_revenue=2_000_000_000,
                target_production_revenue=1_000_000_000,
                target_raw_material_cost=300_000_000,
                target_sub_material_cost=30_000_000,
                target_labor_cost=250_000_000,
                target_overhead_cost=100_000_000,
                waste_rate_target=2.0,
            ),
        ),
        RevenueBracket(
            label="30억",
            threshold_revenue=3_000_000_000,
            targets=BracketTargets(
                revenue_to_raw_material=3.57,
                revenue_to_sub_material=33.33,
                production_to_labor=4.55,
                revenue_to_expense=10.71,
                target_recommended_revenue=3_000_000_000,
                target_production_revenue=1_500_000_000,
                target_raw_material_cost=420_000_000,
                target_sub_material_cost=45_000_000,
                target_labor_cost=330_000_000,
                target_overhead_cost=140_000_000,
                waste_rate_target=1.5,
            ),
        ),
    ]


@pytest.fixture
def ratio_bracket() -> RevenueBracket:
    """A ratio-only bracket (no absolute targets), selected by threshold."""
    return RevenueBracket(
        label="base",
        threshold_revenue=0,
        targets=BracketTargets(
            revenue_to_raw_material=4.0,
            revenue_to_sub_material=33.0,
            production_to_labor=5.5,
            revenue_to_expense=25.0,
            waste_rate_target=2.0,
        ),
    )


@pytest.fixture
def scenario_settings(ratio_bracket: RevenueBracket) -> BusinessSettings:
    return BusinessSettings(
        brackets=(ratio_bracket,),
        labor_cost_ratio=0.25,
        deemed_input_tax_rate=0.028,
    )


@pytest.fixture
def scenario_records() -> OperationalRecords:
    """10 days, revenue 100M, raw 25M, sub 3M, labor 18M, utilities 4M."""
    return OperationalRecords(
        sales=_daily_sales(SCENARIO_START, 10, 10_000_000),
        purchases=[
            _purchase("2025-03-04", "RM-ONION", 15_000_000, "양파"),
            _purchase("2025-03-10", "RM-BEEF", 10_000_000, "소고기"),
            _purchase("2025-03-05", "ZIP_S_001", 3_000_000, "포장 박스"),
        ],
        labor=[
            _labor("2025-03-07", 9_000_000),
            _labor("2025-03-12", 9_000_000),
        ],
        utilities=[
            _utility("2025-03-11", elec=2_500_000, water=500_000, gas=1_000_000),
        ],
    )
