"""Tests for cost_scorer/config.py."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from cost_scorer.config import AppConfig, build_classifier, load_config
from cost_scorer.models.records import PurchaseRecord
from cost_scorer.scoring.brackets import find_duplicate_ordering_keys, has_interpolation_markers
from cost_scorer.taxonomy.cost_taxonomy import CostCategory

_ENV_VARS = (
    "COST_SCORER_LOG_LEVEL",
    "COST_SCORER_LABOR_COST_RATIO",
    "COST_SCORER_DEEMED_INPUT_TAX_RATE",
    "COST_SCORER_DEBUG",
)

_MINIMAL_TOML = """
[scoring]
labor_cost_ratio = 0.3
deemed_input_tax_rate = 0.02
cost_exclusion_codes = ["FREIGHT"]

[classifier]
sub_material_code_prefix = "PK-"
sub_material_keywords = ["carton"]

[logging]
level = "debug"

[[brackets]]
label = "small"
threshold_revenue = 0

[brackets.targets]
revenue_to_raw_material = 3.0
"""


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def _write_config(tmp_path: Path, body: str = _MINIMAL_TOML) -> Path:
    path = tmp_path / "config.toml"
    path.write_text(body, encoding="utf-8")
    return path


class TestLoadConfig:
    def test_default_config_loads(self):
        config = load_config()
        assert isinstance(config, AppConfig)
        assert [b.label for b in config.brackets] == ["10억", "16억", "25억"]
        assert has_interpolation_markers(config.brackets)
        assert find_duplicate_ordering_keys(config.brackets) == []

    def test_explicit_path(self, tmp_path):
        config = load_config(_write_config(tmp_path))
        assert config.scoring.labor_cost_ratio == pytest.approx(0.3)
        assert config.scoring.cost_exclusion_codes == ["FREIGHT"]
        assert config.logging.level == "DEBUG"
        assert config.brackets[0].targets.revenue_to_raw_material == pytest.approx(3.0)

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.toml")

    def test_local_toml_overrides(self, tmp_path):
        path = _write_config(tmp_path)
        (tmp_path / "local.toml").write_text(
            "[scoring]\nlabor_cost_ratio = 0.4\n", encoding="utf-8"
        )
        config = load_config(path)
        assert config.scoring.labor_cost_ratio == pytest.approx(0.4)
        # untouched keys in the same table survive the merge
        assert config.scoring.deemed_input_tax_rate == pytest.approx(0.02)

    def test_env_overrides(self, tmp_path, monkeypatch):
        monkeypatch.setenv("COST_SCORER_LOG_LEVEL", "WARNING")
        monkeypatch.setenv("COST_SCORER_DEEMED_INPUT_TAX_RATE", "0.05")
        monkeypatch.setenv("COST_SCORER_DEBUG", "true")
        config = load_config(_write_config(tmp_path))
        assert config.logging.level == "WARNING"
        assert config.scoring.deemed_input_tax_rate == pytest.approx(0.05)
        assert config.debug is True

    def test_invalid_ratio_raises(self, tmp_path):
        path = _write_config(tmp_path, "[scoring]\nlabor_cost_ratio = 2.0\n")
        with pytest.raises(ValidationError):
            load_config(path)

    def test_invalid_log_level_raises(self, tmp_path):
        path = _write_config(tmp_path, '[logging]\nlevel = "LOUD"\n')
        with pytest.raises(ValidationError):
            load_config(path)


class TestDerivedObjects:
    def test_business_settings_snapshot(self, tmp_path):
        settings = load_config(_write_config(tmp_path)).business_settings()
        assert settings.labor_cost_ratio == pytest.approx(0.3)
        assert settings.cost_exclusion_codes == frozenset({"FREIGHT"})
        assert len(settings.brackets) == 1

    def test_build_classifier(self, tmp_path):
        classifier = build_classifier(load_config(_write_config(tmp_path)))
        pk = PurchaseRecord(date="2025-03-03", product_code="PK-1", supply_amount=1)
        raw = PurchaseRecord(date="2025-03-03", product_code="ZIP_S_1", supply_amount=1)
        assert classifier.classify(pk) == CostCategory.SUB_MATERIAL
        assert classifier.classify(raw) == CostCategory.RAW_MATERIAL

    def test_empty_config_uses_defaults(self, tmp_path):
        config = load_config(_write_config(tmp_path, ""))
        assert config.brackets == []
        assert config.scoring.deemed_input_tax_rate == pytest.approx(0.028)
        assert config.classifier.sub_material_code_prefix == "ZIP_S_"
