"""
Active bracket resolution: threshold selection and linear interpolation.

Two strategies
--------------
1. Threshold selection (legacy)
   Used only when *no* bracket carries ``target_recommended_revenue``.
   Brackets are sorted by ``threshold_revenue``; the last one whose threshold
   is <= the actual monthly revenue wins. If none qualifies, the lowest
   bracket is used.

2. Linear interpolation (preferred)
   Brackets carrying a ``target_recommended_revenue`` marker are sorted by
   it. Below/at the lowest marker → lowest bracket unchanged. Above/at the
   highest → highest bracket unchanged. Otherwise, for the adjacent pair with
   ``lower.marker <= actual < upper.marker``::

       ratio        = (actual - lower.marker) / (upper.marker - lower.marker)
       interpolated = lower + ratio * (upper - lower)

   Absolute amounts are rounded half-up to whole currency units, the waste
   rate to one decimal. Ratio multipliers are then re-derived from the
   interpolated absolutes so both views of the synthetic bracket agree.

Duplicate ordering keys
-----------------------
Two brackets sharing a key make the ordering ambiguous. Resolution is
deterministic: the first declared bracket wins and later duplicates are
dropped (with a warning). ``find_duplicate_ordering_keys()`` exposes the
check for settings validation.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Optional

from cost_scorer.models.bracket import (
    ABSOLUTE_TARGET_FIELDS,
    RevenueBracket,
    derive_multipliers_from_targets,
)
from cost_scorer.utils.rounding import round_half_up, round_half_up_to

logger = logging.getLogger(__name__)


def has_interpolation_markers(brackets: Sequence[RevenueBracket]) -> bool:
    """True if any bracket carries an absolute ``target_recommended_revenue``."""
    return any(b.targets.target_recommended_revenue is not None for b in brackets)


def find_duplicate_ordering_keys(brackets: Sequence[RevenueBracket]) -> list[float]:
    """Return ordering keys shared by more than one bracket, ascending.

    Uses the same key the resolver will use: the recommended-revenue marker
    when interpolation applies, otherwise ``threshold_revenue``.
    """
    use_markers = has_interpolation_markers(brackets)
    seen: set[float] = set()
    dupes: set[float] = set()
    for b in brackets:
        key = _key(b, use_markers)
        if key is None:
            continue
        if key in seen:
            dupes.add(key)
        seen.add(key)
    return sorted(dupes)


def order_brackets(
    brackets: Sequence[RevenueBracket],
    use_markers: bool,
) -> list[RevenueBracket]:
    """Sort ascending by ordering key, dropping later duplicates.

    With ``use_markers`` True, brackets without a recommended-revenue marker
    are left out (they cannot be placed on the interpolation axis).
    """
    unique: list[RevenueBracket] = []
    seen: set[float] = set()
    for b in brackets:
        key = _key(b, use_markers)
        if key is None:
            logger.warning(
                "Bracket '%s' has no target_recommended_revenue; "
                "excluded from interpolation.", b.label,
            )
            continue
        if key in seen:
            logger.warning(
                "Bracket '%s' duplicates ordering key %s; first declared bracket wins.",
                b.label, key,
            )
            continue
        seen.add(key)
        unique.append(b)
    # sorted() is stable; keys are unique at this point anyway.
    return sorted(unique, key=lambda b: _key(b, use_markers))  # type: ignore[arg-type, return-value]


def select_by_threshold(
    brackets: Sequence[RevenueBracket],
    actual_monthly_revenue: float,
) -> RevenueBracket:
    """Legacy selection: highest bracket whose threshold <= actual revenue.

    Raises:
        ValueError: If ``brackets`` is empty.
    """
    ordered = order_brackets(brackets, use_markers=False)
    if not ordered:
        raise ValueError("Cannot select a bracket from an empty list.")

    active = ordered[0]
    for b in ordered:
        if actual_monthly_revenue >= b.threshold_revenue:
            active = b
        else:
            break
    return active


def interpolate_bracket(
    brackets: Sequence[RevenueBracket],
    actual_monthly_recommended_revenue: float,
) -> RevenueBracket:
    """Return the exact or interpolated bracket for a monthly revenue figure.

    Raises:
        ValueError: If no bracket carries a recommended-revenue marker.
    """
    ordered = order_brackets(brackets, use_markers=True)
    if not ordered:
        raise ValueError("No bracket carries target_recommended_revenue.")

    actual = actual_monthly_recommended_revenue
    lowest, highest = ordered[0], ordered[-1]
    if actual <= _marker(lowest):
        return lowest
    if actual >= _marker(highest):
        return highest

    for lower, upper in zip(ordered, ordered[1:]):
        if actual == _marker(lower):
            return lower
        if _marker(lower) < actual < _marker(upper):
            return _interpolate_pair(lower, upper, actual)

    # Unreachable for sorted unique markers with lowest < actual < highest.
    return highest


def resolve_active_bracket(
    brackets: Sequence[RevenueBracket],
    monthly_revenue: float,
    monthly_recommended_revenue: float,
) -> Optional[RevenueBracket]:
    """Pick the strategy and return the active bracket, or ``None`` if none configured.

    Args:
        brackets:                    Configured brackets, declaration order.
        monthly_revenue:             Monthly production revenue (threshold path).
        monthly_recommended_revenue: Monthly recommended revenue (interpolation path).
    """
    if not brackets:
        return None
    if has_interpolation_markers(brackets):
        if monthly_recommended_revenue <= 0 < monthly_revenue:
            logger.warning(
                "Monthly recommended revenue is 0 while production revenue is %s; "
                "interpolation will fall back to the lowest bracket.",
                monthly_revenue,
            )
        active = interpolate_bracket(brackets, monthly_recommended_revenue)
        logger.debug(
            "Interpolated bracket '%s' for monthly recommended revenue %s",
            active.label, monthly_recommended_revenue,
        )
    else:
        active = select_by_threshold(brackets, monthly_revenue)
        logger.debug(
            "Threshold bracket '%s' for monthly revenue %s",
            active.label, monthly_revenue,
        )
    return active


# ── Private helpers ────────────────────────────────────────────────────────────

def _key(bracket: RevenueBracket, use_markers: bool) -> Optional[float]:
    if use_markers:
        return bracket.targets.target_recommended_revenue
    return bracket.threshold_revenue


def _marker(bracket: RevenueBracket) -> float:
    marker = bracket.targets.target_recommended_revenue
    if marker is None:
        raise ValueError(
            f"Bracket '{bracket.label}' has no target_recommended_revenue marker."
        )
    return marker


def _lerp(lo: Optional[float], hi: Optional[float], ratio: float) -> Optional[float]:
    if lo is None or hi is None:
        return None
    return lo + ratio * (hi - lo)


def _interpolate_pair(
    lower: RevenueBracket,
    upper: RevenueBracket,
    actual: float,
) -> RevenueBracket:
    span = _marker(upper) - _marker(lower)
    ratio = (actual - _marker(lower)) / span if span != 0 else 0.0

    updates: dict[str, Optional[float]] = {}
    for field in ABSOLUTE_TARGET_FIELDS:
        value = _lerp(getattr(lower.targets, field), getattr(upper.targets, field), ratio)
        updates[field] = round_half_up(value) if value is not None else None

    waste = _lerp(lower.targets.waste_rate_target, upper.targets.waste_rate_target, ratio)
    updates["waste_rate_target"] = round_half_up_to(waste, 1)  # type: ignore[arg-type]

    threshold = _lerp(lower.threshold_revenue, upper.threshold_revenue, ratio)

    synthetic = RevenueBracket(
        threshold_revenue=round_half_up(threshold),  # type: ignore[arg-type]
        label=f"{lower.label}~{upper.label}",
        targets=lower.targets.model_copy(update=updates),
        interpolated_from=(lower.label, upper.label),
    )
    return derive_multipliers_from_targets(synthetic)
