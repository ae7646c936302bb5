"""Proximity hints: how far a guess is from the target, relative to the range.

Thresholds are percentages of the range size, each inclusive of its upper
bound and checked in ascending order::

    ≤ 5%   → very close
    ≤ 15%  → close
    ≤ 30%  → getting warmer
    else   → way off
"""

from __future__ import annotations

PROXIMITY_VERY_CLOSE = "very close"
PROXIMITY_CLOSE = "close"
PROXIMITY_WARMER = "getting warmer"
PROXIMITY_WAY_OFF = "way off"

PROXIMITY_THRESHOLDS: list[tuple[int, str]] = [
    (5, PROXIMITY_VERY_CLOSE),
    (15, PROXIMITY_CLOSE),
    (30, PROXIMITY_WARMER),
]

_LABELS = {
    PROXIMITY_VERY_CLOSE: "Very close!",
    PROXIMITY_CLOSE: "Close!",
    PROXIMITY_WARMER: "Getting warmer...",
    PROXIMITY_WAY_OFF: "Way off!",
}


def proximity_hint(distance: int, range_size: int) -> str:
    """Return the proximity category for *distance* within a range of *range_size*."""
    if distance < 0:
        raise ValueError(f"distance must be non-negative, got {distance}")
    if range_size <= 0:
        raise ValueError(f"range_size must be positive, got {range_size}")
    # Compared as integers so boundaries like 5/100 are exact.
    for threshold, category in PROXIMITY_THRESHOLDS:
        if distance * 100 <= threshold * range_size:
            return category
    return PROXIMITY_WAY_OFF


def hint_label(category: str) -> str:
    """Player-facing text for a proximity category."""
    return _LABELS[category]
