from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

import typer

from models.schemas import ChartPayload, Dataset, LoadReport, LoadStatus


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, object]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def _last_number(values: List[Optional[float]]) -> Optional[float]:
    for value in reversed(values):
        if value is not None:
            return value
    return None


def _count_numbers(dataset: Dataset) -> int:
    return sum(1 for value in dataset.values if value is not None)


@dataclass
class ConsoleChartHandle:
    chart_id: str
    destroyed: bool = False

    def destroy(self) -> None:
        self.destroyed = True


class ConsoleRenderer:
    """Text rendering of chart payloads; optionally keeps them for JSON export."""

    def __init__(self) -> None:
        self.payloads: Dict[str, ChartPayload] = {}

    def render(self, payload: ChartPayload) -> ConsoleChartHandle:
        self.payloads[payload.chart_id] = payload
        typer.echo()
        echo_heading(f"{payload.title} [{payload.y_label}]")
        if payload.labels:
            typer.echo(f"range: {payload.labels[0]} .. {payload.labels[-1]} ({len(payload.labels)} points)")
        for dataset in [*payload.datasets, *payload.smoothed]:
            latest = _last_number(dataset.values)
            latest_text = "-" if latest is None else f"{latest:.2f}"
            typer.echo(f"  {dataset.label}: latest={latest_text} points={_count_numbers(dataset)}")
        return ConsoleChartHandle(payload.chart_id)

    def show_empty(self, chart_id: str) -> None:
        self.payloads.pop(chart_id, None)
        typer.echo()
        typer.secho(f"{chart_id}: no data", fg=typer.colors.YELLOW)

    def show_error(self, chart_id: str, message: str) -> None:
        self.payloads.pop(chart_id, None)
        typer.secho(f"{chart_id}: failed to render ({message})", fg=typer.colors.RED, err=True)


class ConsoleSummaryDisplay:
    def __init__(self) -> None:
        self.lines: Dict[str, str] = {}

    def show(self, chart_id: str, text: str) -> None:
        self.lines[chart_id] = text
        typer.echo(f"  summary: {text}")


def render_report(report: LoadReport) -> None:
    typer.echo()
    echo_heading("Load Result")
    echo_key_values(
        [
            ("status", report.status.value),
            ("records", report.record_count),
            ("entries", report.entry_count),
        ]
    )
    if report.skipped_sources:
        typer.echo("skipped sources:")
        for source in report.skipped_sources:
            typer.echo(f"  - {source}")
    color = typer.colors.GREEN if report.status is LoadStatus.rendered else typer.colors.RED
    typer.secho(report.message, fg=color, err=report.status is not LoadStatus.rendered)
