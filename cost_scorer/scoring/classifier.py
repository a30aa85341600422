"""
Raw vs sub material classification of purchase records.

The concrete rule is business-specific, so the engine only depends on the
``CostClassifier`` protocol. ``KeywordCostClassifier`` is the default rule:

  1. Product code starts with the reserved sub-material prefix → sub material.
  2. Product name contains any packaging keyword → sub material.
  3. Everything else → raw material.

Exclusion happens before classification: purchases whose product code is on
the exclusion list never reach the classifier and never count as cost.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from cost_scorer.models.records import PurchaseRecord
from cost_scorer.taxonomy.cost_taxonomy import CostCategory

DEFAULT_SUB_MATERIAL_CODE_PREFIX = "ZIP_S_"

# Packaging, box, vinyl, label, tape, bag, sticker, band, container, cap, lid
DEFAULT_SUB_MATERIAL_KEYWORDS: tuple[str, ...] = (
    "포장", "박스", "비닐", "라벨", "테이프", "봉투", "스티커", "밴드", "용기", "캡", "뚜껑",
)


class CostClassifier(Protocol):
    """Anything that can label a purchase as raw or sub material."""

    def classify(self, purchase: PurchaseRecord) -> CostCategory:
        ...


class KeywordCostClassifier:
    """Code-prefix rule with a product-name keyword fallback."""

    def __init__(
        self,
        code_prefix: str = DEFAULT_SUB_MATERIAL_CODE_PREFIX,
        keywords: Iterable[str] = DEFAULT_SUB_MATERIAL_KEYWORDS,
    ) -> None:
        self.code_prefix = code_prefix
        self.keywords = tuple(keywords)

    def classify(self, purchase: PurchaseRecord) -> CostCategory:
        if self.code_prefix and purchase.product_code.startswith(self.code_prefix):
            return CostCategory.SUB_MATERIAL
        if any(kw in purchase.product_name for kw in self.keywords):
            return CostCategory.SUB_MATERIAL
        return CostCategory.RAW_MATERIAL

    def __repr__(self) -> str:
        return (
            f"KeywordCostClassifier(code_prefix={self.code_prefix!r}, "
            f"keywords={len(self.keywords)})"
        )


def partition_purchases(
    purchases: Iterable[PurchaseRecord],
    classifier: CostClassifier,
    exclusion_codes: frozenset[str] | set[str] = frozenset(),
) -> tuple[list[PurchaseRecord], list[PurchaseRecord]]:
    """Split purchases into ``(raw, sub)`` after removing excluded codes.

    Raises:
        ValueError: If the classifier returns a category other than raw or
            sub material.
    """
    raw: list[PurchaseRecord] = []
    sub: list[PurchaseRecord] = []
    for purchase in purchases:
        if purchase.product_code in exclusion_codes:
            continue
        category = classifier.classify(purchase)
        if category == CostCategory.RAW_MATERIAL:
            raw.append(purchase)
        elif category == CostCategory.SUB_MATERIAL:
            sub.append(purchase)
        else:
            raise ValueError(
                f"Classifier returned {category!r} for {purchase.product_code}; "
                "expected raw_material or sub_material."
            )
    return raw, sub
