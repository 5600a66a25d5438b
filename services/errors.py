"""Exception classes for loading and presenting sensor data.

Every error here is recoverable: sources are skipped, empty results become
report statuses and chart failures stay confined to one chart.
"""

from __future__ import annotations

from typing import Optional


class SensorDataError(Exception):
    """Base class for all pipeline errors."""


class SourceUnavailable(SensorDataError):
    """Raised when a source cannot be read or answers with a non-success status."""

    def __init__(
        self,
        source: str,
        message: str,
        status_code: Optional[int] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        super().__init__(f"{source}: {message}")
        self.source = source
        self.message = message
        self.status_code = status_code
        self.original_error = original_error


class MalformedInput(SensorDataError):
    """Raised when a source's body is not valid JSON."""

    def __init__(self, source: str, original_error: Optional[Exception] = None) -> None:
        super().__init__(f"{source}: response is not valid JSON")
        self.source = source
        self.original_error = original_error


class NoUsableData(SensorDataError):
    """Raised when the merged sources contain no records at all."""

    def __init__(self, message: str = "No data found.") -> None:
        super().__init__(message)


class NoValidTimestamps(SensorDataError):
    """Raised when records exist but none has a resolvable timestamp."""

    def __init__(self, message: str = "No entries with valid timestamps.") -> None:
        super().__init__(message)


class ChartRenderError(SensorDataError):
    """Raised by renderers that fail to draw a chart."""

    def __init__(self, chart_id: str, message: str) -> None:
        super().__init__(f"chart {chart_id!r}: {message}")
        self.chart_id = chart_id
        self.message = message
