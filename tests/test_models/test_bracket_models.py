"""Tests for revenue bracket models and multiplier derivation."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from cost_scorer.models.bracket import (
    BracketTargets,
    RevenueBracket,
    derive_multipliers_from_targets,
)
from cost_scorer.taxonomy.cost_taxonomy import CostCategory


class TestBracketTargets:
    def test_all_optional(self):
        t = BracketTargets()
        assert t.revenue_to_raw_material is None
        assert t.target_labor_cost is None
        assert t.waste_rate_target == 0.0

    def test_negative_target_raises(self):
        with pytest.raises(ValidationError):
            BracketTargets(target_raw_material_cost=-1)

    def test_category_accessors(self):
        t = BracketTargets(production_to_labor=4.0, target_labor_cost=100.0)
        assert t.ratio_target(CostCategory.LABOR) == 4.0
        assert t.absolute_target(CostCategory.LABOR) == 100.0
        assert t.ratio_target(CostCategory.OVERHEAD) is None


class TestRevenueBracket:
    def test_ordering_key_prefers_marker(self):
        b = RevenueBracket(
            label="x",
            threshold_revenue=5,
            targets=BracketTargets(target_recommended_revenue=10),
        )
        assert b.ordering_key == 10

    def test_ordering_key_falls_back_to_threshold(self):
        b = RevenueBracket(label="x", threshold_revenue=5, targets=BracketTargets())
        assert b.ordering_key == 5
        assert not b.is_interpolated

    def test_label_required(self):
        with pytest.raises(ValidationError):
            RevenueBracket(targets=BracketTargets())  # type: ignore[call-arg]


class TestDeriveMultipliers:
    def test_from_production_revenue(self):
        b = RevenueBracket(
            label="x",
            targets=BracketTargets(
                target_recommended_revenue=2_000,
                target_production_revenue=1_000,
                target_raw_material_cost=300,
                target_sub_material_cost=0,
            ),
        )
        t = derive_multipliers_from_targets(b).targets
        # 1000 / 300 = 3.333...
        assert t.revenue_to_raw_material == pytest.approx(3.33)
        # zero or missing cost target leaves the ratio undefined
        assert t.revenue_to_sub_material is None
        assert t.production_to_labor is None

    def test_falls_back_to_recommended_revenue(self):
        b = RevenueBracket(
            label="x",
            targets=BracketTargets(target_recommended_revenue=900, target_labor_cost=300),
        )
        assert derive_multipliers_from_targets(b).targets.production_to_labor == pytest.approx(3.0)

    def test_without_revenue_target_unchanged(self):
        b = RevenueBracket(
            label="x",
            targets=BracketTargets(revenue_to_raw_material=4.0, target_raw_material_cost=10),
        )
        assert derive_multipliers_from_targets(b) == b

    def test_original_not_mutated(self):
        b = RevenueBracket(
            label="x",
            targets=BracketTargets(
                revenue_to_raw_material=9.9,
                target_production_revenue=100,
                target_raw_material_cost=50,
            ),
        )
        derived = derive_multipliers_from_targets(b)
        assert derived.targets.revenue_to_raw_material == pytest.approx(2.0)
        assert b.targets.revenue_to_raw_material == pytest.approx(9.9)
