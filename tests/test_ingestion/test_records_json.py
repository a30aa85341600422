"""Tests for cost_scorer.ingestion.records_json."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from cost_scorer.ingestion.records_json import load_operational_records, parse_operational_records

_DOC = {
    "sales": [
        {"date": "2025-03-03", "production_revenue": 1_200_000, "recommended_revenue": 2_000_000},
        {"date": "2025-03-04", "production_revenue": 900_000},
    ],
    "purchases": [
        {"date": "2025-03-03", "product_code": "RM-001", "product_name": "양파", "supply_amount": 350_000},
    ],
    "labor": [{"date": "2025-03-03", "department": "생산1반", "total_pay": 820_000}],
    "utilities": [{"date": "2025-03-03", "elec_cost": 95_000, "water_cost": 12_000, "gas_cost": 30_000}],
}


def _write(tmp_path: Path, doc) -> Path:
    path = tmp_path / "records.json"
    path.write_text(json.dumps(doc, ensure_ascii=False), encoding="utf-8")
    return path


class TestLoadOperationalRecords:
    def test_valid_file(self, tmp_path):
        records, adjustment = load_operational_records(_write(tmp_path, _DOC))
        assert len(records.sales) == 2
        assert records.purchases[0].product_name == "양파"
        assert records.labor[0].total_pay == pytest.approx(820_000)
        assert records.utilities[0].total_cost == pytest.approx(137_000)
        assert records.production == []
        assert adjustment is None

    def test_inventory_adjustment_parsed(self, tmp_path):
        doc = {**_DOC, "inventory_adjustment": {"beginning_raw_inventory_value": 42_000_000}}
        _, adjustment = load_operational_records(_write(tmp_path, doc))
        assert adjustment is not None
        assert adjustment.beginning_raw_inventory_value == pytest.approx(42_000_000)

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_operational_records(tmp_path / "missing.json")

    def test_invalid_json_raises(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ValueError, match="Invalid JSON"):
            load_operational_records(path)


class TestParseOperationalRecords:
    def test_non_object_document_raises(self):
        with pytest.raises(ValueError, match="JSON object"):
            parse_operational_records([1, 2, 3])

    def test_row_errors_aggregated(self):
        doc = {
            "sales": [{"date": "2025-3-3"}, {"date": "2025-03-04", "production_revenue": -1}],
            "purchases": [{"date": "2025-03-03", "supply_amount": 1}],
        }
        with pytest.raises(ValueError) as exc_info:
            parse_operational_records(doc)
        message = str(exc_info.value)
        assert "3 record(s) failed validation" in message
        assert "sales[0]" in message
        assert "purchases[0]" in message

    def test_error_list_truncated(self):
        doc = {"sales": [{"date": "bad"} for _ in range(12)]}
        with pytest.raises(ValueError, match="and 2 more"):
            parse_operational_records(doc)

    def test_stream_must_be_list(self):
        with pytest.raises(ValueError, match="expected a list"):
            parse_operational_records({"sales": {"date": "2025-03-03"}})

    def test_unknown_keys_warned(self, caplog):
        with caplog.at_level(logging.WARNING, logger="cost_scorer.ingestion.records_json"):
            records, _ = parse_operational_records({"sales": [], "weather": []})
        assert records.sales == []
        assert "weather" in caplog.text

    def test_empty_document(self):
        records, adjustment = parse_operational_records({})
        assert records.sales == [] and records.purchases == []
        assert adjustment is None
