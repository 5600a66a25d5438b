"""Pydantic models exchanged with renderers and written as JSON output."""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class ChartStatus(str, Enum):
    """Outcome of presenting one chart."""

    rendered = "rendered"
    empty = "empty"
    error = "error"


class LoadStatus(str, Enum):
    """Outcome of a whole load request."""

    rendered = "rendered"
    no_data = "no_data"
    no_valid_timestamps = "no_valid_timestamps"


class SummaryStats(BaseModel):
    """Aggregate statistics over the numeric values of one metric column."""

    min: float
    max: float
    avg: float
    count: int = Field(..., ge=1)


class Dataset(BaseModel):
    """One labelled value series aligned with the chart labels."""

    label: str
    metric: str
    values: List[Optional[float]] = Field(default_factory=list)
    window: Optional[int] = Field(
        default=None, description="Moving-average window for smoothed datasets."
    )


class ChartPayload(BaseModel):
    """Everything the rendering collaborator needs to draw one chart."""

    chart_id: str
    title: str
    y_label: str
    labels: List[str] = Field(default_factory=list)
    datasets: List[Dataset] = Field(default_factory=list)
    smoothed: List[Dataset] = Field(default_factory=list)


class ChartResult(BaseModel):
    """Per-chart outcome reported back to the caller."""

    chart_id: str
    status: ChartStatus
    summary: Optional[SummaryStats] = None
    summary_text: str = ""
    error: Optional[str] = None


class LoadReport(BaseModel):
    """Full record of one load request."""

    status: LoadStatus
    message: str
    sources: List[str] = Field(default_factory=list)
    skipped_sources: List[str] = Field(default_factory=list)
    record_count: int = Field(default=0, ge=0)
    entry_count: int = Field(default=0, ge=0)
    charts: List[ChartResult] = Field(default_factory=list)
