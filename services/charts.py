"""Chart catalogue: which metrics are drawn together and how they are smoothed."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from models.records import MetricName


@dataclass(frozen=True)
class ChartSpec:
    chart_id: str
    title: str
    y_label: str
    metrics: Tuple[MetricName, ...]
    # "default", "pm" or "raw"; resolved to a window by the smoothing engine.
    window_kind: str = "default"
    summary_metric: MetricName | None = None

    @property
    def primary_metric(self) -> MetricName:
        return self.summary_metric or self.metrics[0]


METRIC_LABELS = {
    MetricName.temperature: "Temperature",
    MetricName.humidity: "Humidity",
    MetricName.pressure: "Pressure",
    MetricName.pm1_0: "PM1.0",
    MetricName.pm2_5: "PM2.5",
    MetricName.pm10: "PM10",
    MetricName.co2: "CO2",
    MetricName.voc: "VOC",
}


CHARTS: Tuple[ChartSpec, ...] = (
    ChartSpec("temperature", "Temperature", "°C", (MetricName.temperature,)),
    ChartSpec("humidity", "Relative humidity", "%", (MetricName.humidity,)),
    ChartSpec("pressure", "Barometric pressure", "hPa", (MetricName.pressure,)),
    ChartSpec(
        "particulate",
        "Particulate matter",
        "µg/m³",
        (MetricName.pm1_0, MetricName.pm2_5, MetricName.pm10),
        window_kind="pm",
        summary_metric=MetricName.pm2_5,
    ),
    ChartSpec("co2", "CO2", "ppm", (MetricName.co2,)),
    ChartSpec("voc", "VOC index", "index", (MetricName.voc,), window_kind="raw"),
)


def metric_label(metric: MetricName) -> str:
    return METRIC_LABELS.get(metric, metric.value)


def smoothed_label(metric: MetricName, window: int) -> str:
    return f"{metric_label(metric)} (MA {window})"
