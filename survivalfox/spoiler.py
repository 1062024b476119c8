"""Spoiler level: a 0-100 slider snapped to four levels."""

from __future__ import annotations

import math

SPOILER_LEVELS: tuple[int, ...] = (0, 33, 66, 100)
DEFAULT_SPOILER_LEVEL = 33

_LABELS: dict[int, str] = {
    0: "Keine Spoiler",
    33: "Wichtige Hinweise",
    66: "Tipps & Tricks",
    100: "Volle Lösung",
}
UNKNOWN_LABEL = "—"


def snap_spoiler_level(value: float) -> int:
    """Clamp to [0, 100] and return the nearest canonical level.

    Levels are scanned in ascending order with a strict comparison, so on an
    exact midpoint the lower level wins: 16.5 → 0, 49.5 → 33, 83 → 66.
    """
    if math.isnan(value):
        return SPOILER_LEVELS[0]
    clamped = max(0.0, min(100.0, value))
    best = SPOILER_LEVELS[0]
    best_dist = math.inf
    for level in SPOILER_LEVELS:
        dist = abs(clamped - level)
        if dist < best_dist:
            best_dist = dist
            best = level
    return best


def spoiler_label(level: int) -> str:
    return _LABELS.get(level, UNKNOWN_LABEL)
