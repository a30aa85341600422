"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``      — committed static defaults (incl. brackets)
  2. ``config/local.toml``        — optional local overrides (gitignored)
  3. ``.env``                     — local secrets and env overrides (gitignored)
  4. Environment variables        — ``COST_SCORER_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

The scoring engine never reads configuration itself. Callers turn an
``AppConfig`` into an immutable ``BusinessSettings`` snapshot with
``AppConfig.business_settings()`` and pass it into each engine call.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator

from cost_scorer.models.bracket import RevenueBracket
from cost_scorer.models.settings import BusinessSettings
from cost_scorer.scoring.classifier import (
    DEFAULT_SUB_MATERIAL_CODE_PREFIX,
    DEFAULT_SUB_MATERIAL_KEYWORDS,
    KeywordCostClassifier,
)

# ── Sub-config models ─────────────────────────────────────────────────────────


class ScoringConfig(BaseModel):
    """Cost constants used by the scoring engine."""

    model_config = ConfigDict(frozen=True)

    labor_cost_ratio: float = 0.25
    deemed_input_tax_rate: float = 0.028
    cost_exclusion_codes: list[str] = []

    @field_validator("labor_cost_ratio", "deemed_input_tax_rate")
    @classmethod
    def validate_fraction(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"Rate must be in [0.0, 1.0], got {v}.")
        return v


class ClassifierConfig(BaseModel):
    """Raw vs sub material classification rule parameters."""

    model_config = ConfigDict(frozen=True)

    sub_material_code_prefix: str = DEFAULT_SUB_MATERIAL_CODE_PREFIX
    sub_material_keywords: list[str] = list(DEFAULT_SUB_MATERIAL_KEYWORDS)


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = ""
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration — the single source of truth.

    Constructed by ``load_config()`` which merges TOML + .env + environment.
    """

    model_config = ConfigDict(frozen=True)

    scoring: ScoringConfig = ScoringConfig()
    classifier: ClassifierConfig = ClassifierConfig()
    logging: LoggingConfig = LoggingConfig()
    brackets: list[RevenueBracket] = []
    debug: bool = False

    def business_settings(self) -> BusinessSettings:
        """Build the immutable per-call settings snapshot."""
        return BusinessSettings(
            brackets=tuple(self.brackets),
            labor_cost_ratio=self.scoring.labor_cost_ratio,
            deemed_input_tax_rate=self.scoring.deemed_input_tax_rate,
            cost_exclusion_codes=frozenset(self.scoring.cost_exclusion_codes),
        )


def build_classifier(config: AppConfig) -> KeywordCostClassifier:
    """Build the default classifier from the ``[classifier]`` section."""
    return KeywordCostClassifier(
        code_prefix=config.classifier.sub_material_code_prefix,
        keywords=config.classifier.sub_material_keywords,
    )


# ── Loader ────────────────────────────────────────────────────────────────────

_PROJECT_ROOT = Path(__file__).parent.parent


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (contains pyproject.toml)."""
    candidate = Path(__file__).parent
    for _ in range(5):
        if (candidate / "pyproject.toml").exists():
            return candidate
        candidate = candidate.parent
    return _PROJECT_ROOT


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: Explicit path to a TOML config file. Defaults to
            ``<project_root>/config/default.toml``.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If the config file does not exist.
        pydantic.ValidationError: If merged config values fail validation.
    """
    root = _find_project_root()

    # 1. Load .env file (silently skip if missing)
    load_dotenv(dotenv_path=root / ".env", override=False)

    # 2. Load TOML config
    if config_path is None:
        config_path = root / "config" / "default.toml"

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {config_path}\n"
            "Create config/default.toml or pass --config."
        )

    with open(config_path, "rb") as f:
        raw: dict[str, Any] = tomllib.load(f)

    # Also merge local.toml if present (gitignored local overrides)
    local_config_path = config_path.parent / "local.toml"
    if local_config_path.exists():
        with open(local_config_path, "rb") as f:
            local_raw: dict[str, Any] = tomllib.load(f)
        raw = _deep_merge(raw, local_raw)

    # 3. Apply COST_SCORER_* environment variable overrides
    raw = _apply_env_overrides(raw)

    # 4. Build and validate AppConfig
    return _build_app_config(raw)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base``.

    Lists (including the ``brackets`` array of tables) are replaced, not
    concatenated.
    """
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply COST_SCORER_* env vars to the raw config dict.

    Supported overrides:
      COST_SCORER_LOG_LEVEL              → raw["logging"]["level"]
      COST_SCORER_LABOR_COST_RATIO       → raw["scoring"]["labor_cost_ratio"]
      COST_SCORER_DEEMED_INPUT_TAX_RATE  → raw["scoring"]["deemed_input_tax_rate"]
      COST_SCORER_DEBUG                  → raw["debug"]
    """
    if log_level := os.environ.get("COST_SCORER_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if labor_ratio := os.environ.get("COST_SCORER_LABOR_COST_RATIO"):
        raw.setdefault("scoring", {})["labor_cost_ratio"] = float(labor_ratio)

    if tax_rate := os.environ.get("COST_SCORER_DEEMED_INPUT_TAX_RATE"):
        raw.setdefault("scoring", {})["deemed_input_tax_rate"] = float(tax_rate)

    if debug := os.environ.get("COST_SCORER_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    project = raw.pop("project", {})

    return AppConfig(
        scoring=ScoringConfig(**raw.get("scoring", {})),
        classifier=ClassifierConfig(**raw.get("classifier", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        brackets=[RevenueBracket(**b) for b in raw.get("brackets", [])],
        debug=raw.get("debug", project.get("debug", False)),
    )
