"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional


class MetricName(str, Enum):
    """Sensor quantities tracked by the pipeline."""

    temperature = "temperature"
    humidity = "humidity"
    pressure = "pressure"
    pm2_5 = "pm2_5"
    pm10 = "pm10"
    pm1_0 = "pm1_0"
    co2 = "co2"
    voc = "voc"


RawRecord = Mapping[str, Any]


@dataclass(frozen=True, slots=True)
class ResolvedEntry:
    """A record with an absolute timestamp and its resolved metric values."""

    timestamp: datetime
    metrics: Dict[MetricName, Optional[float]] = field(default_factory=dict)

    def value(self, metric: MetricName) -> Optional[float]:
        return self.metrics.get(metric)


SeriesSet = List[ResolvedEntry]
