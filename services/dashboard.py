"""Load orchestration: sources in, chart payloads and summaries out."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple

from models.records import SeriesSet
from models.schemas import ChartResult, Dataset, LoadReport, LoadStatus
from services.charts import CHARTS, ChartSpec, metric_label, smoothed_label
from services.errors import MalformedInput, NoUsableData, NoValidTimestamps, SourceUnavailable
from services.normalizer import detect_shape, normalize
from services.presenter import ChartRenderer, ChartRegistry, Presenter, SummaryDisplay
from services.series import build_series, metric_column
from services.smoothing import SmoothingEngine
from services.timestamps import format_label
from settings import Settings, get_settings
from storage.sources import SourceFetcher

logger = logging.getLogger(__name__)


class DashboardService:
    """Coordinates fetching, normalization, smoothing and presentation."""

    def __init__(
        self,
        fetcher: SourceFetcher,
        presenter: Presenter,
        engine: SmoothingEngine,
        charts: Sequence[ChartSpec] = CHARTS,
    ) -> None:
        self.fetcher = fetcher
        self.presenter = presenter
        self.engine = engine
        self.charts = tuple(charts)

    async def aclose(self) -> None:
        await self.fetcher.aclose()

    async def load(self, sources: Sequence[str]) -> LoadReport:
        """Fetch ``sources`` one after another and present every chart.

        Failing sources are logged and skipped. When nothing usable remains
        the report carries the reason and no chart is rendered.
        """
        sequences, skipped = await self._collect(sources)
        record_count = sum(len(sequence) for sequence in sequences)

        try:
            series = build_series(sequences)
        except (NoUsableData, NoValidTimestamps) as exc:
            status = (
                LoadStatus.no_data if isinstance(exc, NoUsableData) else LoadStatus.no_valid_timestamps
            )
            logger.warning(
                "Nothing to render: %s",
                exc,
                extra={"status": status.value, "record_count": record_count},
            )
            return LoadReport(
                status=status,
                message=str(exc),
                sources=list(sources),
                skipped_sources=skipped,
                record_count=record_count,
            )

        charts = self.render_series(series)
        logger.info(
            "Rendered %d charts",
            len(charts),
            extra={"record_count": record_count, "entry_count": len(series)},
        )
        return LoadReport(
            status=LoadStatus.rendered,
            message=f"Loaded {len(series)} entries from {len(sources) - len(skipped)} source(s).",
            sources=list(sources),
            skipped_sources=skipped,
            record_count=record_count,
            entry_count=len(series),
            charts=charts,
        )

    def render_series(self, series: SeriesSet) -> List[ChartResult]:
        labels = [format_label(entry.timestamp) for entry in series]
        return [self._present_chart(spec, series, labels) for spec in self.charts]

    def _present_chart(self, spec: ChartSpec, series: SeriesSet, labels: List[str]) -> ChartResult:
        window = self.engine.window_for(spec.window_kind)
        logger.debug("Smoothing chart", extra={"chart_id": spec.chart_id, "window": window})
        raw_datasets: List[Dataset] = []
        smoothed_datasets: List[Dataset] = []
        for metric in spec.metrics:
            column = metric_column(series, metric)
            raw_datasets.append(Dataset(label=metric_label(metric), metric=metric.value, values=column))
            smoothed_datasets.append(
                Dataset(
                    label=smoothed_label(metric, window),
                    metric=metric.value,
                    values=self.engine.smooth(column, window),
                    window=window,
                )
            )

        summary = self.engine.summarize(metric_column(series, spec.primary_metric))
        return self.presenter.present(
            labels,
            raw_datasets,
            smoothed_datasets,
            summary,
            spec.chart_id,
            title=spec.title,
            y_label=spec.y_label,
        )

    async def _collect(self, sources: Sequence[str]) -> Tuple[List[List[Any]], List[str]]:
        sequences: List[List[Any]] = []
        skipped: List[str] = []
        for source in sources:
            try:
                payload = await self.fetcher.fetch(source)
            except SourceUnavailable as exc:
                logger.warning(
                    "Skipping source: %s",
                    exc.message,
                    extra={"source": source, "status_code": exc.status_code, "reason": "unavailable"},
                )
                skipped.append(source)
                continue
            except MalformedInput:
                logger.warning(
                    "Skipping source: body is not valid JSON",
                    extra={"source": source, "reason": "malformed"},
                )
                skipped.append(source)
                continue

            records = normalize(payload)
            if not records and payload:
                logger.warning(
                    "Source has no recognizable record list",
                    extra={"source": source, "reason": "unrecognized shape"},
                )
            shape = detect_shape(payload)
            logger.debug(
                "Read source",
                extra={
                    "source": source,
                    "shape": shape.name if shape else None,
                    "record_count": len(records),
                },
            )
            sequences.append(records)
        return sequences, skipped


def build_default_dashboard(
    renderer: ChartRenderer,
    summary_display: SummaryDisplay,
    settings: Optional[Settings] = None,
    registry: Optional[ChartRegistry] = None,
) -> DashboardService:
    """Factory that wires the dashboard from settings."""
    settings = settings or get_settings()
    fetcher = SourceFetcher(base_dir=Path(settings.base_dir), timeout=settings.fetch_timeout)
    engine = SmoothingEngine(window=settings.window, pm_window=settings.pm_window)
    presenter = Presenter(renderer, summary_display, registry)
    return DashboardService(fetcher=fetcher, presenter=presenter, engine=engine)
