"""Metric lookup through ordered lists of accepted field names."""

from __future__ import annotations

import math
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from models.records import MetricName, RawRecord

METRIC_ALIASES: Mapping[MetricName, Tuple[str, ...]] = {
    MetricName.temperature: ("temperature", "temp", "t"),
    MetricName.humidity: ("humidity", "hum", "h"),
    MetricName.pressure: ("pressure", "pres", "p"),
    MetricName.pm2_5: ("pm2_5", "pm2.5", "pm25", "pm_2_5", "pm2"),
    MetricName.pm10: ("pm10", "pm_10"),
    MetricName.pm1_0: ("pm1_0", "pm1.0", "pm1"),
    MetricName.co2: ("co2", "co_2", "co2_ppm", "co2ppm"),
    MetricName.voc: (
        "voc",
        "tvoc",
        "tvoc_index",
        "tvocindex",
        "voc_ppb",
        "vocppb",
        "sgp40_raw",
    ),
}

TIMESTAMP_ALIASES: Tuple[str, ...] = ("timestamp", "time", "t", "date", "datetime", "ts")


def extract(record: RawRecord, aliases: Sequence[str]) -> Optional[float]:
    """Return the numeric value of the first alias holding a non-empty value.

    The first populated alias decides the outcome: when its value is not a
    finite number the result is ``None`` and later aliases are not consulted.
    """
    for alias in aliases:
        if alias not in record:
            continue
        value = record[alias]
        if value is None or value == "":
            continue
        return to_number(value)
    return None


def extract_metrics(record: RawRecord) -> Dict[MetricName, Optional[float]]:
    return {metric: extract(record, aliases) for metric, aliases in METRIC_ALIASES.items()}


def aliases_for(metric: MetricName) -> Tuple[str, ...]:
    return METRIC_ALIASES[metric]


def to_number(value: Any) -> Optional[float]:
    """Coerce ``value`` to a finite float, or ``None``."""
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        candidate = value.strip()
        if not candidate:
            # Blank text counts as zero under general numeric parsing.
            return 0.0
        try:
            number = float(candidate)
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None
