"""Hand-off of finished series to the rendering and summary collaborators."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence

from models.schemas import ChartPayload, ChartResult, ChartStatus, Dataset, SummaryStats
from services.errors import ChartRenderError
from services.smoothing import has_numeric_data

logger = logging.getLogger(__name__)

NO_NUMERIC_DATA = "No numeric data"


class ChartRenderer(Protocol):
    def render(self, payload: ChartPayload) -> Any:
        """Draw ``payload`` and return a handle for the drawn chart."""

    def show_empty(self, chart_id: str) -> None:
        """Show the empty state for ``chart_id``."""

    def show_error(self, chart_id: str, message: str) -> None:
        """Show the error state for ``chart_id``."""


class SummaryDisplay(Protocol):
    def show(self, chart_id: str, text: str) -> None:
        """Display the formatted summary line of ``chart_id``."""


def _call_collaborator(chart_id: str, action: str, call: Callable[..., Any], *args: Any) -> bool:
    """Run a display side effect; a failure is logged and reported as ``False``."""
    try:
        call(*args)
    except Exception as exc:  # noqa: BLE001 - display failures stay local to one chart
        logger.warning(
            "Chart %s failed: %s",
            action,
            exc,
            extra={"chart_id": chart_id, "status": "error"},
        )
        return False
    return True


class ChartRegistry:
    """Live chart handles keyed by chart id.

    Handles exposing ``destroy()`` are destroyed when replaced or removed; a
    handle that fails to destroy is dropped from the registry all the same.
    """

    def __init__(self) -> None:
        self._handles: Dict[str, Any] = {}

    def upsert(self, chart_id: str, handle: Any) -> None:
        self.destroy(chart_id)
        self._handles[chart_id] = handle

    def destroy(self, chart_id: str) -> None:
        handle = self._handles.pop(chart_id, None)
        if handle is None:
            return
        destroy = getattr(handle, "destroy", None)
        if callable(destroy):
            _call_collaborator(chart_id, "handle destroy", destroy)

    def get(self, chart_id: str) -> Optional[Any]:
        return self._handles.get(chart_id)

    def __contains__(self, chart_id: object) -> bool:
        return chart_id in self._handles

    def __len__(self) -> int:
        return len(self._handles)


def format_summary(summary: Optional[SummaryStats]) -> str:
    if summary is None:
        return NO_NUMERIC_DATA
    return (
        f"count: {summary.count} | min: {summary.min:.2f} | "
        f"avg: {summary.avg:.2f} | max: {summary.max:.2f}"
    )


class Presenter:
    """Passes chart payloads to the renderer and tracks the resulting handles."""

    def __init__(
        self,
        renderer: ChartRenderer,
        summary_display: SummaryDisplay,
        registry: Optional[ChartRegistry] = None,
    ) -> None:
        self.renderer = renderer
        self.summary_display = summary_display
        self.registry = registry if registry is not None else ChartRegistry()

    def present(
        self,
        labels: Sequence[str],
        raw_datasets: Sequence[Dataset],
        smoothed_datasets: Sequence[Dataset],
        summary: Optional[SummaryStats],
        chart_id: str,
        *,
        title: str = "",
        y_label: str = "",
    ) -> ChartResult:
        columns: List[Sequence[Optional[float]]] = [dataset.values for dataset in raw_datasets]
        columns.extend(dataset.values for dataset in smoothed_datasets)
        if not has_numeric_data(*columns):
            logger.info("Chart has no numeric data", extra={"chart_id": chart_id, "status": "empty"})
            self.registry.destroy(chart_id)
            _call_collaborator(chart_id, "empty state", self.renderer.show_empty, chart_id)
            _call_collaborator(chart_id, "summary display", self.summary_display.show, chart_id, NO_NUMERIC_DATA)
            return ChartResult(
                chart_id=chart_id,
                status=ChartStatus.empty,
                summary_text=NO_NUMERIC_DATA,
            )

        payload = ChartPayload(
            chart_id=chart_id,
            title=title or chart_id,
            y_label=y_label,
            labels=list(labels),
            datasets=list(raw_datasets),
            smoothed=list(smoothed_datasets),
        )
        self.registry.destroy(chart_id)
        try:
            handle = self.render(payload)
        except ChartRenderError as exc:
            logger.warning(
                "Rendering chart failed: %s",
                exc.message,
                extra={"chart_id": chart_id, "status": "error"},
            )
            _call_collaborator(chart_id, "error state", self.renderer.show_error, chart_id, exc.message)
            return ChartResult(
                chart_id=chart_id,
                status=ChartStatus.error,
                summary=summary,
                summary_text=format_summary(summary),
                error=str(exc),
            )

        self.registry.upsert(chart_id, handle)
        text = format_summary(summary)
        _call_collaborator(chart_id, "summary display", self.summary_display.show, chart_id, text)
        return ChartResult(
            chart_id=chart_id,
            status=ChartStatus.rendered,
            summary=summary,
            summary_text=text,
        )

    def render(self, payload: ChartPayload) -> Any:
        """Draw ``payload``; any renderer failure surfaces as ``ChartRenderError``."""
        try:
            return self.renderer.render(payload)
        except ChartRenderError:
            raise
        except Exception as exc:  # noqa: BLE001 - renderer failures stay local to one chart
            raise ChartRenderError(payload.chart_id, str(exc)) from exc
