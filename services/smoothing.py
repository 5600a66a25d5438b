"""Moving-average smoothing and summary statistics for metric columns."""

from __future__ import annotations

import math
from typing import Any, Iterable, List, Optional, Sequence

from models.schemas import SummaryStats

DEFAULT_WINDOW = 7
PM_WINDOW = 9
RAW_WINDOW = 1


def is_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def round2(value: float) -> float:
    """Round half up to two decimals."""
    return math.floor(value * 100 + 0.5) / 100


def moving_average(column: Sequence[Optional[float]], window: int = DEFAULT_WINDOW) -> List[Optional[float]]:
    """Trailing mean over the last ``window`` positions, ignoring missing values.

    Each output position is ``None`` when its window holds no number.
    """
    if window <= 1:
        return [float(value) if is_number(value) else None for value in column]

    smoothed: List[Optional[float]] = []
    total = 0.0
    count = 0
    for index, value in enumerate(column):
        if is_number(value):
            total += value
            count += 1
        if index >= window:
            leaving = column[index - window]
            if is_number(leaving):
                total -= leaving
                count -= 1
        smoothed.append(round2(total / count) if count > 0 else None)
    return smoothed


def summarize(column: Iterable[Optional[float]]) -> Optional[SummaryStats]:
    values = [float(value) for value in column if is_number(value)]
    if not values:
        return None
    return SummaryStats(
        min=round2(min(values)),
        max=round2(max(values)),
        avg=round2(sum(values) / len(values)),
        count=len(values),
    )


def has_numeric_data(*columns: Iterable[Optional[float]]) -> bool:
    return any(is_number(value) for column in columns for value in column)


class SmoothingEngine:
    """Applies the configured windows to metric columns."""

    def __init__(self, window: int = DEFAULT_WINDOW, pm_window: int = PM_WINDOW) -> None:
        self.window = window
        self.pm_window = pm_window

    def window_for(self, kind: str) -> int:
        if kind == "pm":
            return self.pm_window
        if kind == "raw":
            return RAW_WINDOW
        return self.window

    def smooth(self, column: Sequence[Optional[float]], window: int) -> List[Optional[float]]:
        return moving_average(column, window)

    def summarize(self, column: Iterable[Optional[float]]) -> Optional[SummaryStats]:
        return summarize(column)
