"""
JSON import for operational records.

Format — one JSON object with optional list keys::

    {
      "sales":      [{"date": "2025-03-03", "production_revenue": 1200000, ...}],
      "purchases":  [{"date": "2025-03-03", "product_code": "RM-001",
                      "product_name": "양파", "supply_amount": 350000}],
      "labor":      [{"date": "2025-03-03", "department": "생산1반", "total_pay": 820000}],
      "utilities":  [{"date": "2025-03-03", "elec_cost": 95000, "water_cost": 12000,
                      "gas_cost": 30000}],
      "production": [{"date": "2025-03-03", "quantity_total": 4200}],
      "inventory_adjustment": {"beginning_raw_inventory_value": 42000000, ...}
    }

Missing list keys are treated as empty. Unknown top-level keys are ignored
with a warning. Dates must be zero-padded ``YYYY-MM-DD``.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ValidationError

from cost_scorer.models.records import (
    InventoryAdjustment,
    LaborEntry,
    OperationalRecords,
    ProductionRecord,
    PurchaseRecord,
    SalesRecord,
    UtilityEntry,
)

logger = logging.getLogger(__name__)

STREAM_MODELS: dict[str, type[BaseModel]] = {
    "sales":      SalesRecord,
    "purchases":  PurchaseRecord,
    "labor":      LaborEntry,
    "utilities":  UtilityEntry,
    "production": ProductionRecord,
}

_KNOWN_KEYS = frozenset(STREAM_MODELS) | {"inventory_adjustment"}


def load_operational_records(
    path: Path,
) -> tuple[OperationalRecords, Optional[InventoryAdjustment]]:
    """Parse a JSON records file into validated models.

    All rows are validated before anything is returned. If **any** row fails,
    a single :class:`ValueError` is raised listing the first 10 failures.

    Args:
        path: Path to the JSON file (must exist).

    Returns:
        ``(records, inventory_adjustment)``; the adjustment is ``None`` when
        the file has no ``inventory_adjustment`` object.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: If the document is malformed or any row fails validation.
    """
    if not path.exists():
        raise FileNotFoundError(f"Records file not found: {path}")

    with open(path, encoding="utf-8") as f:
        try:
            doc = json.load(f)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON in {path.name}: {exc}") from exc

    return parse_operational_records(doc, source=path.name)


def parse_operational_records(
    doc: Any,
    source: str = "<memory>",
) -> tuple[OperationalRecords, Optional[InventoryAdjustment]]:
    """Validate an already-decoded records document. See ``load_operational_records``."""
    if not isinstance(doc, dict):
        raise ValueError(f"Records document must be a JSON object, got {type(doc).__name__}.")

    unknown = set(doc) - _KNOWN_KEYS
    if unknown:
        logger.warning("Ignoring unknown keys in %s: %s", source, sorted(unknown))

    parsed: dict[str, list[BaseModel]] = {}
    errors: list[tuple[str, str]] = []

    for stream, model in STREAM_MODELS.items():
        rows = doc.get(stream, [])
        if not isinstance(rows, list):
            errors.append((stream, f"expected a list, got {type(rows).__name__}"))
            continue
        parsed[stream] = []
        for i, row in enumerate(rows):
            try:
                parsed[stream].append(model.model_validate(row))
            except ValidationError as exc:
                errors.append((f"{stream}[{i}]", _first_error(exc)))

    adjustment: Optional[InventoryAdjustment] = None
    raw_adj = doc.get("inventory_adjustment")
    if raw_adj is not None:
        try:
            adjustment = InventoryAdjustment.model_validate(raw_adj)
        except ValidationError as exc:
            errors.append(("inventory_adjustment", _first_error(exc)))

    if errors:
        max_shown = 10
        detail = "\n".join(f"  {loc}: {msg}" for loc, msg in errors[:max_shown])
        suffix = f"\n  … and {len(errors) - max_shown} more" if len(errors) > max_shown else ""
        raise ValueError(
            f"{len(errors)} record(s) failed validation in {source}:\n{detail}{suffix}"
        )

    records = OperationalRecords(**parsed)
    logger.info(
        "Loaded %d sales, %d purchases, %d labor, %d utility rows from %s",
        len(records.sales), len(records.purchases), len(records.labor),
        len(records.utilities), source,
    )
    return records, adjustment


def _first_error(exc: ValidationError) -> str:
    err = exc.errors()[0]
    loc = ".".join(str(part) for part in err.get("loc", ()))
    return f"{loc}: {err.get('msg', 'invalid')}" if loc else err.get("msg", "invalid")
