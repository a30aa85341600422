"""
Operational record models — the typed inputs to the scoring engine.

Upstream sources (ERP exports, spreadsheets, database rows) all arrive in
different shapes. They are normalized into these frozen models once, at the
ingestion boundary, so the scoring code only ever sees validated values.

Shared conventions:
  - ``date`` is a zero-padded ISO ``YYYY-MM-DD`` string. Range filtering
    compares these strings lexicographically, which is only correct for
    this exact format, so the validator rejects anything else.
  - Monetary amounts are in the operation's base currency unit and must be
    non-negative.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from cost_scorer.utils.time_utils import parse_iso_date


class _DatedRecord(BaseModel):
    """Base class for records carrying an ISO date string."""

    model_config = ConfigDict(frozen=True)

    date: str

    @field_validator("date")
    @classmethod
    def validate_iso_date(cls, v: str) -> str:
        parse_iso_date(v)
        return v


class SalesRecord(_DatedRecord):
    """One day (or one channel-day) of sales.

    Attributes:
        date: Sales date.
        channel: Sales channel name (own store, marketplace, ...).
        production_revenue: Revenue valued at production (factory) price.
        recommended_revenue: Revenue valued at recommended retail price.
            ``None`` when the source only reports production revenue; the
            default reconciler then uses production revenue in its place.
        promotion_discount: Promotion amount to be removed from recommended revenue.
        platform_fee: Channel fee to be removed from recommended revenue.
    """

    channel: str = "all"
    production_revenue: float = 0.0
    recommended_revenue: Optional[float] = None
    promotion_discount: float = 0.0
    platform_fee: float = 0.0

    @field_validator(
        "production_revenue", "recommended_revenue", "promotion_discount", "platform_fee"
    )
    @classmethod
    def validate_non_negative(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v < 0:
            raise ValueError("Sales amounts must be non-negative.")
        return v


class PurchaseRecord(_DatedRecord):
    """One purchase line.

    Attributes:
        product_code: ERP item code; also used by the classifier and the
            cost exclusion list.
        product_name: Item name; used by the keyword classifier fallback.
        quantity: Purchased quantity.
        supply_amount: Tax-exclusive amount. This is the costed field.
        vat: VAT amount (informational).
    """

    product_code: str
    product_name: str = ""
    quantity: float = 0.0
    supply_amount: float
    vat: float = 0.0

    @field_validator("supply_amount", "vat", "quantity")
    @classmethod
    def validate_non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("Purchase amounts must be non-negative.")
        return v


class LaborEntry(_DatedRecord):
    """One labor time-record (per department per day)."""

    department: str = ""
    headcount: int = 0
    total_hours: float = 0.0
    total_pay: float

    @field_validator("total_pay")
    @classmethod
    def validate_pay(cls, v: float) -> float:
        if v < 0:
            raise ValueError("total_pay must be non-negative.")
        return v


class UtilityEntry(_DatedRecord):
    """One utility reading with its cost components."""

    elec_cost: float = 0.0
    water_cost: float = 0.0
    gas_cost: float = 0.0

    @field_validator("elec_cost", "water_cost", "gas_cost")
    @classmethod
    def validate_cost(cls, v: float) -> float:
        if v < 0:
            raise ValueError("Utility costs must be non-negative.")
        return v

    @property
    def total_cost(self) -> float:
        return self.elec_cost + self.water_cost + self.gas_cost


class ProductionRecord(_DatedRecord):
    """Daily production output.

    Informational only: loaded and bundled with the other streams so callers
    can report on it, but the scoring engine never filters or reads it.
    """

    quantity_total: float = 0.0
    waste_finished_pct: Optional[float] = None


class InventoryAdjustment(BaseModel):
    """Beginning/ending inventory valuations used to turn purchases into consumption.

    ``consumed = beginning + purchases - ending`` per material class.
    """

    model_config = ConfigDict(frozen=True)

    beginning_raw_inventory_value: float = 0.0
    ending_raw_inventory_value: float = 0.0
    beginning_sub_inventory_value: float = 0.0
    ending_sub_inventory_value: float = 0.0


class OperationalRecords(BaseModel):
    """All record streams for one scoring call.

    Sales, purchases, labor and utilities feed the score; ``production`` is
    carried alongside for reporting.
    """

    model_config = ConfigDict(frozen=True)

    sales: list[SalesRecord] = []
    purchases: list[PurchaseRecord] = []
    labor: list[LaborEntry] = []
    utilities: list[UtilityEntry] = []
    production: list[ProductionRecord] = []
