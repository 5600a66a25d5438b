from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from cli.app import app
from settings import get_settings


@pytest.fixture()
def runner(monkeypatch) -> CliRunner:
    monkeypatch.setattr("cli.app.configure_logging", lambda *args, **kwargs: None)
    get_settings.cache_clear()
    yield CliRunner()
    get_settings.cache_clear()


def _write_readings(tmp_path: Path) -> None:
    (tmp_path / "a.json").write_text(
        json.dumps({"data": [{"timestamp": "2024-01-01T00:00:00Z", "temp": 20.5, "co2": 410}]})
    )
    (tmp_path / "b.json").write_text(
        json.dumps([{"ts": "2024-01-01T00:05:00Z", "temperature": 21.5, "pm2_5": 4}])
    )


def test_load_prints_charts_and_summaries(runner: CliRunner, tmp_path: Path) -> None:
    _write_readings(tmp_path)

    result = runner.invoke(app, ["--base-dir", str(tmp_path), "load", "a.json,b.json"])

    assert result.exit_code == 0, result.output
    assert "Temperature [°C]" in result.output
    assert "summary: count: 2 | min: 20.50 | avg: 21.00 | max: 21.50" in result.output
    assert "humidity: no data" in result.output
    assert "Load Result" in result.output


def test_load_writes_json_document(runner: CliRunner, tmp_path: Path) -> None:
    _write_readings(tmp_path)
    out = tmp_path / "out.json"

    result = runner.invoke(
        app,
        ["--base-dir", str(tmp_path), "--window", "2", "load", "a.json", "b.json", "--json", str(out)],
    )

    assert result.exit_code == 0, result.output
    document = json.loads(out.read_text())
    assert document["report"]["status"] == "rendered"
    assert document["report"]["entry_count"] == 2
    charts = {chart["chart_id"]: chart for chart in document["charts"]}
    assert set(charts) == {"temperature", "particulate", "co2"}
    assert charts["temperature"]["smoothed"][0]["values"] == [20.5, 21.0]
    assert charts["temperature"]["smoothed"][0]["label"] == "Temperature (MA 2)"


def test_load_uses_sources_from_environment(runner: CliRunner, tmp_path: Path, monkeypatch) -> None:
    _write_readings(tmp_path)
    monkeypatch.setenv("SENSOR_SOURCES", "a.json, b.json")
    monkeypatch.setenv("SENSOR_BASE_DIR", str(tmp_path))
    get_settings.cache_clear()

    result = runner.invoke(app, ["load"])

    assert result.exit_code == 0, result.output
    assert "Loading 2 source(s)" in result.output


def test_load_without_usable_data_exits_with_error(runner: CliRunner, tmp_path: Path) -> None:
    (tmp_path / "a.json").write_text(json.dumps([{"temp": 1}]))

    result = runner.invoke(app, ["--base-dir", str(tmp_path), "load", "a.json"])

    assert result.exit_code == 1
    assert "No entries with valid timestamps." in result.output


def test_inspect_reports_shape_and_keys(runner: CliRunner, tmp_path: Path) -> None:
    (tmp_path / "feed.json").write_text(
        json.dumps({"device": "kitchen", "samples": [{"ts": 1, "tvoc": 90}, {"ts": 2, "hum": 40}]})
    )

    result = runner.invoke(app, ["--base-dir", str(tmp_path), "inspect", "feed.json"])

    assert result.exit_code == 0, result.output
    assert "shape: first-array-field" in result.output
    assert "records: 2" in result.output
    assert "  - ts: 2" in result.output
    assert "  - voc <- tvoc: 1" in result.output


def test_inspect_missing_source(runner: CliRunner, tmp_path: Path) -> None:
    result = runner.invoke(app, ["--base-dir", str(tmp_path), "inspect", "nope.json"])

    assert result.exit_code == 1
