"""
Cost Scorer — CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Validate inputs.
  4. Run the scoring engine.
  5. Report result to stdout (JSON) or to a file.

Install and run::

    pip install -e .
    cost-scorer --help
    cost-scorer validate-config
    cost-scorer score --input data/records.json --start 2025-03-01 --end 2025-03-31
    cost-scorer score --input data/records.json --start 2025-03-01 --end 2025-03-31 --weekly
    cost-scorer score -i data/records.json --start 2025-03-01 --end 2025-03-31 --csv out/weekly.csv
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="cost-scorer",
    help="Business performance scoring for cost categories against revenue brackets.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from cost_scorer.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from cost_scorer.utils.logging import configure_logging
    configure_logging(config.logging, debug=config.debug)


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all brackets.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation. Duplicate bracket
    ordering keys are reported as warnings (first declared bracket wins).
    """
    from cost_scorer.scoring.brackets import find_duplicate_ordering_keys, has_interpolation_markers

    config = _load_config_or_exit(config_path)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Brackets:           {', '.join(b.label for b in config.brackets) or '(none)'}")
    typer.echo(
        "  Bracket strategy:   "
        + ("interpolation" if has_interpolation_markers(config.brackets) else "threshold")
    )
    typer.echo(f"  Labor cost ratio:   {config.scoring.labor_cost_ratio}")
    typer.echo(f"  Deemed tax rate:    {config.scoring.deemed_input_tax_rate}")
    typer.echo(f"  Excluded codes:     {len(config.scoring.cost_exclusion_codes)}")
    typer.echo(f"  Sub-material prefix:{config.classifier.sub_material_code_prefix}")
    typer.echo(f"  Log level:          {config.logging.level}")
    typer.echo(f"  Debug mode:         {config.debug}")

    dupes = find_duplicate_ordering_keys(config.brackets)
    if dupes:
        typer.echo("")
        typer.echo(
            f"[WARN] Duplicate bracket ordering keys: {', '.join(str(k) for k in dupes)} "
            "(first declared bracket wins)."
        )

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str, ensure_ascii=False))

    typer.echo("")
    typer.echo("[OK] Config valid.")


@app.command("score")
def score(
    input_path: str = typer.Option(
        ...,
        "--input",
        "-i",
        help="Path to a JSON records file (sales, purchases, labor, utilities, ...).",
    ),
    start: str = typer.Option(..., "--start", help="Window start, YYYY-MM-DD (inclusive)."),
    end: str = typer.Option(..., "--end", help="Window end, YYYY-MM-DD (inclusive)."),
    weekly: bool = typer.Option(
        False,
        "--weekly",
        help="Also compute Monday-anchored weekly scores.",
    ),
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write JSON to this path instead of stdout.",
    ),
    csv_path: Optional[str] = typer.Option(
        None,
        "--csv",
        help="Also write weekly rows to this CSV file (implies --weekly).",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Score the four cost categories for a date window.

    Prints ``{"full_period": ..., "weekly": [...]}`` as JSON. ``full_period``
    is null when no brackets are configured or the window has no revenue.
    """
    from cost_scorer.config import build_classifier
    from cost_scorer.ingestion.records_json import load_operational_records
    from cost_scorer.reporting.export import (
        WEEKLY_COLUMNS,
        export_to_csv,
        export_to_json,
        result_to_dict,
        weekly_to_rows,
    )
    from cost_scorer.scoring.engine import compute_full_period_score, compute_weekly_scores
    from cost_scorer.utils.time_utils import inclusive_day_count

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    try:
        inclusive_day_count(start, end)
    except ValueError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    try:
        records, adjustment = load_operational_records(Path(input_path))
    except (FileNotFoundError, ValueError) as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    settings = config.business_settings()
    classifier = build_classifier(config)

    result = compute_full_period_score(
        records, settings, start, end,
        inventory_adjustment=adjustment,
        classifier=classifier,
    )
    payload: dict = {"full_period": result_to_dict(result) if result is not None else None}
    if weekly or csv_path:
        weeks = compute_weekly_scores(records, settings, start, end, classifier=classifier)
        payload["weekly"] = weekly_to_rows(weeks)
        if csv_path:
            written_csv = export_to_csv(payload["weekly"], Path(csv_path), fieldnames=WEEKLY_COLUMNS)
            typer.echo(f"[OK] Wrote {written_csv}", err=True)

    if result is None:
        typer.echo("[WARN] Not enough data to score (no brackets or zero revenue).", err=True)

    if output:
        written = export_to_json(payload, Path(output))
        typer.echo(f"[OK] Wrote {written}")
    else:
        typer.echo(json.dumps(payload, indent=2, ensure_ascii=False, default=str))


# ── Entry point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    app()
