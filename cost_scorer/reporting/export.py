"""
Export helpers for scoring results.

``result_to_dict`` and ``weekly_to_rows`` convert engine outputs into
JSON-safe structures; the ``export_to_*`` helpers write them to disk and
return the written ``Path``.

Weekly CSV rows are flat (one column per category score) so they load
directly in Excel or a BI tool. No currency formatting is applied; amounts
stay raw numbers.
"""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Any, Optional

from cost_scorer.models.result import CategoryScore, ScoringResult, WeeklyScoreResult
from cost_scorer.taxonomy.cost_taxonomy import SCORED_CATEGORIES

# Flat weekly row layout; one score column per category in display order.
WEEKLY_COLUMNS: list[str] = [
    "week_key",
    "week_label",
    "revenue",
    *(f"{category}_score" for category in SCORED_CATEGORIES),
    "overall_score",
]


def category_to_dict(item: CategoryScore) -> dict[str, Any]:
    return {
        "category": str(item.category),
        "actual_multiplier": item.actual_multiplier,
        "multiplier_kind": str(item.multiplier_kind),
        "target_multiplier": item.target_multiplier,
        "score": item.score,
        "status": str(item.status),
        "actual_cost": item.actual_cost,
        "target_cost": item.target_cost,
        "surplus": item.surplus,
    }


def result_to_dict(result: ScoringResult) -> dict[str, Any]:
    """Convert a full-period ``ScoringResult`` into a JSON-safe dict."""
    bracket = result.active_bracket
    basis = result.cost_basis
    return {
        "active_bracket": {
            "label": bracket.label,
            "interpolated": bracket.is_interpolated,
            "threshold_revenue": bracket.threshold_revenue,
            "targets": bracket.targets.model_dump(),
        },
        "period_days": result.period_days,
        "period_revenue": result.period_revenue,
        "monthly_revenue_estimate": result.monthly_revenue_estimate,
        "recommended_revenue": result.recommended_revenue,
        "monthly_recommended_revenue": result.monthly_recommended_revenue,
        "overall_score": result.overall_score,
        "categories": [category_to_dict(it) for it in result.category_scores],
        "total_surplus": result.total_surplus,
        "total_cost": result.total_cost,
        "tax_credit_applied": result.tax_credit_applied,
        "labor_estimated": basis.labor_estimated,
        "inventory_adjusted": basis.inventory_adjusted,
    }


def weekly_to_rows(weeks: list[WeeklyScoreResult]) -> list[dict[str, Any]]:
    """Flatten weekly results to one row per week.

    Keys follow ``WEEKLY_COLUMNS``.
    """
    rows: list[dict[str, Any]] = []
    for week in weeks:
        row: dict[str, Any] = {
            "week_key": week.week_key,
            "week_label": week.week_label,
            "revenue": week.revenue,
        }
        for item in week.category_scores:
            row[f"{item.category}_score"] = item.score
        row["overall_score"] = week.overall_score
        rows.append(row)
    return rows


def export_to_json(data: dict | list, path: Path) -> Path:
    """Write ``data`` to a pretty-printed UTF-8 JSON file (parent dirs created)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(data, indent=2, ensure_ascii=False, default=str),
        encoding="utf-8",
    )
    return path


def export_to_csv(
    rows: list[dict[str, Any]],
    path: Path,
    fieldnames: Optional[list[str]] = None,
) -> Path:
    """Write flat rows (e.g. ``weekly_to_rows()`` output) to a UTF-8 CSV file.

    Args:
        rows:       Row dicts; keys outside ``fieldnames`` are dropped.
        path:       Destination (parent dirs created if missing).
        fieldnames: Column order. Defaults to the first row's keys. When
                    given, an empty ``rows`` still writes the header line;
                    without it an empty ``rows`` writes an empty file.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    columns = fieldnames or (list(rows[0]) if rows else [])
    with path.open("w", newline="", encoding="utf-8") as f:
        if not columns:
            return path
        writer = csv.DictWriter(f, fieldnames=columns, extrasaction="ignore")
        writer.writeheader()
        writer.writerows(rows)
    return path
