from __future__ import annotations

import asyncio
import json
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import typer

from cli.config import CLIConfig, load_config
from cli.render import ConsoleRenderer, ConsoleSummaryDisplay, echo_heading, echo_key_values, render_report
from logging_config import configure_logging
from models.schemas import LoadReport, LoadStatus
from services.dashboard import build_default_dashboard
from services.errors import MalformedInput, SourceUnavailable
from services.fields import METRIC_ALIASES, TIMESTAMP_ALIASES
from services.normalizer import detect_shape, normalize
from settings import get_settings
from storage.sources import SourceFetcher, split_sources


@dataclass
class CLIState:
    config: CLIConfig


app = typer.Typer(
    help="Load sensor-reading JSON, smooth it and summarize each chart.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1)
    return state


@app.callback()
def main(
    ctx: typer.Context,
    base_dir: Optional[Path] = typer.Option(
        None,
        "--base-dir",
        "-d",
        help="Directory relative file sources are resolved against (defaults to SENSOR_BASE_DIR or '.').",
    ),
    window: Optional[int] = typer.Option(
        None,
        "--window",
        "-w",
        help="Moving-average window for most charts.",
    ),
    pm_window: Optional[int] = typer.Option(
        None,
        "--pm-window",
        help="Moving-average window for particulate-matter charts.",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Seconds to wait for each remote source.",
    ),
) -> None:
    """Entry point for the CLI."""
    configure_logging()
    config = load_config(
        base_dir=base_dir,
        window=window,
        pm_window=pm_window,
        fetch_timeout=timeout,
    )
    ctx.obj = CLIState(config=config)


@app.command("load")
def load_command(
    ctx: typer.Context,
    sources: Optional[List[str]] = typer.Argument(
        None,
        help="Files or URLs (comma-separated lists allowed). Defaults to SENSOR_SOURCES.",
    ),
    json_path: Optional[Path] = typer.Option(
        None,
        "--json",
        dir_okay=False,
        writable=True,
        help="Write the load report and chart payloads to this JSON file.",
    ),
) -> None:
    """Load, merge and smooth every source, then print each chart."""
    state = _get_state(ctx)
    resolved = split_sources(sources) if sources else list(state.config.sources)
    if not resolved:
        raise typer.BadParameter("No sources given.")

    renderer = ConsoleRenderer()
    display = ConsoleSummaryDisplay()
    typer.echo(f"Loading {len(resolved)} source(s) ...")
    report = asyncio.run(_run_load(state.config, resolved, renderer, display))
    render_report(report)

    if json_path is not None:
        document = {
            "report": report.model_dump(mode="json"),
            "charts": [payload.model_dump(mode="json") for payload in renderer.payloads.values()],
        }
        json_path.write_text(json.dumps(document, indent=2, ensure_ascii=False))
        typer.echo(f"Wrote {json_path}")

    if report.status is not LoadStatus.rendered:
        raise typer.Exit(code=1)


@app.command("inspect")
def inspect_command(
    ctx: typer.Context,
    source: str = typer.Argument(..., help="File path or URL of one JSON document."),
) -> None:
    """Show how a single source is recognized."""
    state = _get_state(ctx)
    try:
        payload = asyncio.run(_fetch_one(state.config, source))
    except (SourceUnavailable, MalformedInput) as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    shape = detect_shape(payload)
    records = normalize(payload)
    timestamp_keys: Counter[str] = Counter()
    metric_keys: Counter[str] = Counter()
    for record in records:
        if not isinstance(record, dict):
            continue
        timestamp_key = next((alias for alias in TIMESTAMP_ALIASES if alias in record), None)
        if timestamp_key is not None:
            timestamp_keys[timestamp_key] += 1
        for metric, aliases in METRIC_ALIASES.items():
            alias = next((alias for alias in aliases if alias in record), None)
            if alias is not None:
                metric_keys[f"{metric.value} <- {alias}"] += 1

    echo_heading("Source")
    echo_key_values(
        [
            ("source", source),
            ("shape", shape.name if shape else "unrecognized"),
            ("records", len(records)),
        ]
    )
    typer.echo("timestamp keys:")
    for key, count in timestamp_keys.most_common():
        typer.echo(f"  - {key}: {count}")
    typer.echo("metric keys:")
    for key, count in sorted(metric_keys.items()):
        typer.echo(f"  - {key}: {count}")


async def _run_load(
    config: CLIConfig,
    sources: List[str],
    renderer: ConsoleRenderer,
    display: ConsoleSummaryDisplay,
) -> LoadReport:
    settings = config.to_settings(get_settings().log_level)
    dashboard = build_default_dashboard(renderer, display, settings=settings)
    try:
        return await dashboard.load(sources)
    finally:
        await dashboard.aclose()


async def _fetch_one(config: CLIConfig, source: str) -> object:
    async with SourceFetcher(base_dir=config.base_dir, timeout=config.fetch_timeout) as fetcher:
        return await fetcher.fetch(source)
